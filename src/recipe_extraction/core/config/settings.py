"""Application configuration using Pydantic Settings with YAML support.

Configuration is organized by concern:
- ``browser``: headless Chromium used for page scraping and frame capture
- ``acquisition``: oEmbed and transcript lookups
- ``thumbnails``: local image storage and the thumbnail cascade
- ``llm``: primary (OpenRouter) and secondary (Gemini) providers

Secrets (API keys) come from the environment or ``.env`` only.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe Extraction Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/recipe-extraction"
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    metrics: MetricsSettings = MetricsSettings()


class ViewportSettings(BaseModel):
    """Browser viewport dimensions."""

    width: int = 1280
    height: int = 720


class BrowserSettings(BaseModel):
    """Headless browser configuration."""

    headless: bool = True
    launch_args: list[str] = [
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--autoplay-policy=no-user-gesture-required",
    ]
    user_agent: str = DEFAULT_USER_AGENT
    viewport: ViewportSettings = ViewportSettings()
    navigation_timeout: float = 30.0
    selector_timeout: float = 5.0


class AcquisitionSettings(BaseModel):
    """Content acquisition configuration."""

    oembed_url: str = "https://www.youtube.com/oembed"
    oembed_timeout: float = 10.0
    transcript_languages: list[str] = ["en", "en-US", "en-GB"]
    transcript_timeout: float = 20.0
    transcript_max_chars: int = 15000


class ThumbnailSettings(BaseModel):
    """Thumbnail storage and resolution cascade configuration."""

    uploads_root: str = "uploads"
    public_prefix: str = "/uploads"
    default_filename: str = "default-recipe-thumbnail.jpg"
    check_timeout: float = 8.0
    download_timeout: float = 15.0
    capture_enabled: bool = True
    frame_timestamps: list[int] = [15, 30, 45, 60, 90, 120, 180]
    frame_settle_seconds: float = 3.0
    frame_capture_budget: float = 60.0


class OpenRouterSettings(BaseModel):
    """OpenRouter (OpenAI-compatible) provider configuration."""

    url: str = "https://openrouter.ai/api/v1"
    model: str = "google/gemini-2.5-pro-exp-03-25:free"
    fallback_model: str | None = "google/gemini-2.0-flash-exp:free"
    timeout: float = 60.0
    max_retries: int = 1
    requests_per_minute: float = 20.0
    referer: str = "https://reccollection.app"
    app_title: str = "RecCollection Recipe Extraction"


class GeminiSettings(BaseModel):
    """Google Gemini provider configuration."""

    url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-pro"
    timeout: float = 60.0
    max_retries: int = 1


class LLMSettings(BaseModel):
    """LLM configuration settings."""

    enabled: bool = True
    temperature: float = 0.2
    max_tokens: int = 2000
    openrouter: OpenRouterSettings = OpenRouterSettings()
    gemini: GeminiSettings = GeminiSettings()


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Priority (highest to lowest):
    1. Values passed to ``Settings()``
    2. Environment variables
    3. .env file (secrets only)
    4. Environment-specific YAML files (config/environments/{APP_ENV}/)
    5. Base YAML files (config/base/)
    6. Default values in code

    Nested values are overridden with the ``__`` delimiter, for example
    ``THUMBNAILS__UPLOADS_ROOT=/data/uploads``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    logging: LoggingSettings = LoggingSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    browser: BrowserSettings = BrowserSettings()
    acquisition: AcquisitionSettings = AcquisitionSettings()
    thumbnails: ThumbnailSettings = ThumbnailSettings()
    llm: LLMSettings = LLMSettings()

    # Secrets (from .env only - never in YAML)
    OPENROUTER_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def has_openrouter(self) -> bool:
        """Whether the primary provider can be called."""
        return self.llm.enabled and bool(self.OPENROUTER_API_KEY)

    @property
    def has_gemini(self) -> bool:
        """Whether the secondary provider can be called."""
        return self.llm.enabled and bool(self.GOOGLE_API_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_non_production(self) -> bool:
        """Local, test and development expose docs and verbose errors."""
        return self.APP_ENV in ("local", "test", "development")

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
