"""Recipe extraction pipeline.

URL -> platform -> acquired content (+ thumbnail) -> AI extraction -> recipe.

Only an invalid URL is raised to the caller, and it is raised before any
network call. Every later failure degrades to a fallback and the caller
always gets a recipe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from recipe_extraction.observability.logging import get_logger, log_context
from recipe_extraction.observability.metrics import EXTRACTIONS_TOTAL
from recipe_extraction.services.acquisition.exceptions import AcquisitionError
from recipe_extraction.services.extraction.models import (
    ExtractionEnvelope,
    ExtractionFailure,
    FailureKind,
)


if TYPE_CHECKING:
    from recipe_extraction.schemas.extraction import ExtractionRequest
    from recipe_extraction.schemas.recipe import CanonicalRecipe, ScreenshotCandidate
    from recipe_extraction.services.acquisition.service import (
        ContentAcquisitionService,
    )
    from recipe_extraction.services.assembly.assembler import RecipeAssembler
    from recipe_extraction.services.extraction.gateway import RecipeExtractionGateway
    from recipe_extraction.services.platforms.models import PlatformMatch
    from recipe_extraction.services.platforms.resolver import PlatformResolver
    from recipe_extraction.services.thumbnails.service import ThumbnailResolver


logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Pipeline output: the recipe plus what the API returns alongside it."""

    recipe: CanonicalRecipe
    match: PlatformMatch
    envelope: ExtractionEnvelope
    screenshot_candidates: list[ScreenshotCandidate] = field(default_factory=list)


class RecipeExtractionPipeline:
    """Run one extraction request end to end."""

    def __init__(
        self,
        resolver: PlatformResolver,
        acquirer: ContentAcquisitionService,
        thumbnails: ThumbnailResolver,
        gateway: RecipeExtractionGateway,
        assembler: RecipeAssembler,
    ) -> None:
        self.resolver = resolver
        self.acquirer = acquirer
        self.thumbnails = thumbnails
        self.gateway = gateway
        self.assembler = assembler

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Extract a recipe for ``request.url``.

        Raises:
            InvalidURLError: If the URL is not a supported post URL, or does
                not match the declared platform.
        """
        match = self.resolver.resolve_supported(request.url, request.platform)

        with log_context(platform=match.platform, content_id=match.content_id):
            logger.info(
                "Extraction started",
                url_shape=match.url_shape,
                requester_id=request.requester_id,
            )
            try:
                content = await self.acquirer.acquire_content(
                    match,
                    capture_screenshot_options=request.capture_screenshot_options,
                )
            except AcquisitionError as e:
                logger.warning("Content acquisition failed", error=str(e))
                thumbnail_path = await self.thumbnails.resolve_thumbnail()
                envelope: ExtractionEnvelope = ExtractionFailure(
                    kind=FailureKind.ACQUISITION, detail=str(e)
                )
                source_title = None
                candidates: list[ScreenshotCandidate] = []
            else:
                thumbnail_path = content.thumbnail_local_path
                envelope = await self.gateway.extract_recipe(content.text)
                source_title = content.title
                candidates = content.screenshot_candidates

            recipe = self.assembler.assemble(
                match.source_url,
                match.platform,
                envelope,
                thumbnail_path,
                source_title=source_title,
            )

            EXTRACTIONS_TOTAL.labels(
                platform=match.platform, quality=recipe.quality
            ).inc()
            logger.info(
                "Extraction finished",
                quality=recipe.quality,
                is_synthetic=recipe.is_synthetic,
                ingredients=len(recipe.ingredients),
                instructions=len(recipe.instructions),
            )

        return ExtractionResult(
            recipe=recipe,
            match=match,
            envelope=envelope,
            screenshot_candidates=candidates,
        )
