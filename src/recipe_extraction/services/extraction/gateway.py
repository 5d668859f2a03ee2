"""AI extraction gateway.

Walks an ordered list of provider steps, first success wins:

1. OpenRouter, primary model.
2. OpenRouter, fallback model.
3. Gemini.

Steps whose provider has no API key are never built. Every response goes
through JSON recovery; a step fails if the call raises or recovery finds
nothing, and the next step runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from recipe_extraction.llm.client.gemini import GeminiClient
from recipe_extraction.llm.client.openrouter import OpenRouterClient
from recipe_extraction.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from recipe_extraction.llm.prompts import RecipeExtractionPrompt
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.observability.metrics import PROVIDER_ATTEMPTS_TOTAL
from recipe_extraction.services.extraction.exceptions import JSONRecoveryError
from recipe_extraction.services.extraction.models import (
    ExtractionEnvelope,
    ExtractionFailure,
    ExtractionSuccess,
    FailureKind,
    ProviderAttempt,
)
from recipe_extraction.services.extraction.recovery import recover_recipe_json


if TYPE_CHECKING:
    from recipe_extraction.core.config import Settings
    from recipe_extraction.llm.client.protocol import LLMClientProtocol


logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ProviderStep:
    """A provider client paired with the model to ask."""

    client: LLMClientProtocol
    model: str

    @property
    def provider(self) -> str:
        return self.client.provider


def classify_failure(error: LLMError) -> FailureKind:
    """Map a client exception to an envelope failure kind."""
    match error:
        case LLMRateLimitError():
            return FailureKind.RATE_LIMITED
        case LLMTimeoutError():
            return FailureKind.TIMEOUT
        case LLMEmptyResponseError():
            return FailureKind.EMPTY_RESPONSE
        case LLMConfigurationError():
            return FailureKind.NOT_CONFIGURED
        case _:
            return FailureKind.API_ERROR


class RecipeExtractionGateway:
    """Turn acquired post text into recipe data using AI providers."""

    def __init__(
        self,
        steps: list[ProviderStep],
        prompt: RecipeExtractionPrompt | None = None,
    ) -> None:
        self.steps = steps
        self.prompt = prompt or RecipeExtractionPrompt()

    @classmethod
    def from_settings(cls, settings: Settings) -> RecipeExtractionGateway:
        """Build the provider order from configuration and available keys."""
        llm = settings.llm
        prompt = RecipeExtractionPrompt(
            temperature=llm.temperature, max_tokens=llm.max_tokens
        )
        if not llm.enabled:
            logger.info("AI extraction disabled by configuration")
            return cls([], prompt)

        steps: list[ProviderStep] = []
        if settings.has_openrouter:
            openrouter = OpenRouterClient(
                api_key=settings.OPENROUTER_API_KEY,
                model=llm.openrouter.model,
                base_url=llm.openrouter.url,
                referer=llm.openrouter.referer,
                app_title=llm.openrouter.app_title,
                timeout=llm.openrouter.timeout,
                max_retries=llm.openrouter.max_retries,
                requests_per_minute=llm.openrouter.requests_per_minute,
            )
            steps.append(ProviderStep(openrouter, llm.openrouter.model))
            fallback_model = llm.openrouter.fallback_model
            if fallback_model and fallback_model != llm.openrouter.model:
                steps.append(ProviderStep(openrouter, fallback_model))
        else:
            logger.warning("OPENROUTER_API_KEY not set, skipping OpenRouter")

        if settings.has_gemini:
            gemini = GeminiClient(
                api_key=settings.GOOGLE_API_KEY,
                model=llm.gemini.model,
                base_url=llm.gemini.url,
                timeout=llm.gemini.timeout,
                max_retries=llm.gemini.max_retries,
            )
            steps.append(ProviderStep(gemini, llm.gemini.model))
        else:
            logger.warning("GOOGLE_API_KEY not set, skipping Gemini")

        return cls(steps, prompt)

    @property
    def is_configured(self) -> bool:
        return bool(self.steps)

    @property
    def providers(self) -> list[str]:
        """Configured provider names in call order, without duplicates."""
        return list(dict.fromkeys(step.provider for step in self.steps))

    def _clients(self) -> list[LLMClientProtocol]:
        unique: dict[int, LLMClientProtocol] = {}
        for step in self.steps:
            unique.setdefault(id(step.client), step.client)
        return list(unique.values())

    async def initialize(self) -> None:
        """Initialize every distinct provider client."""
        for client in self._clients():
            await client.initialize()
        logger.info(
            "RecipeExtractionGateway initialized",
            steps=[f"{step.provider}/{step.model}" for step in self.steps],
        )

    async def shutdown(self) -> None:
        """Shut down every distinct provider client."""
        for client in self._clients():
            await client.shutdown()

    async def extract_recipe(self, text: str) -> ExtractionEnvelope:
        """Ask each provider step in turn for recipe JSON.

        Never raises for provider or recovery failures; the returned failure
        envelope lists every attempt.
        """
        prompt_text = self.prompt.format(content=text)
        options = self.prompt.get_options()
        attempts: list[ProviderAttempt] = []

        for step in self.steps:
            try:
                completion = await step.client.generate(
                    prompt_text,
                    model=step.model,
                    system=self.prompt.system_prompt,
                    options=options,
                )
                recovered = recover_recipe_json(completion.raw_response)
            except LLMError as e:
                attempt = ProviderAttempt(
                    provider=step.provider,
                    model=step.model,
                    kind=classify_failure(e),
                    detail=str(e),
                )
            except JSONRecoveryError as e:
                attempt = ProviderAttempt(
                    provider=step.provider,
                    model=step.model,
                    kind=FailureKind.JSON_RECOVERY,
                    detail=str(e),
                )
            else:
                PROVIDER_ATTEMPTS_TOTAL.labels(
                    provider=step.provider, model=step.model, outcome="success"
                ).inc()
                logger.info(
                    "Recipe extracted",
                    provider=step.provider,
                    model=step.model,
                    strategy=recovered.strategy,
                    partial=recovered.partial,
                )
                return ExtractionSuccess(
                    data=recovered.data,
                    provider=step.provider,
                    model=step.model,
                    strategy=recovered.strategy,
                    partial=recovered.partial,
                    attempts=attempts,
                )

            attempts.append(attempt)
            PROVIDER_ATTEMPTS_TOTAL.labels(
                provider=step.provider, model=step.model, outcome=attempt.kind
            ).inc()
            logger.warning(
                "AI provider step failed",
                provider=attempt.provider,
                model=attempt.model,
                kind=attempt.kind,
                error=attempt.detail,
            )

        failure = ExtractionFailure.from_attempts(attempts)
        logger.warning(
            "AI extraction failed", kind=failure.kind, attempts=len(attempts)
        )
        return failure
