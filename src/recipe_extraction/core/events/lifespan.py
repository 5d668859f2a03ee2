"""Application lifespan event handlers.

Startup builds the extraction services and stores them on ``app.state``;
shutdown releases them in reverse order. The headless browser is created
here but only launched on first use.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from recipe_extraction.core.config import Settings, get_settings
from recipe_extraction.observability.logging import get_logger, setup_logging
from recipe_extraction.services.acquisition.service import ContentAcquisitionService
from recipe_extraction.services.assembly.assembler import RecipeAssembler
from recipe_extraction.services.browser.manager import BrowserManager
from recipe_extraction.services.extraction.gateway import RecipeExtractionGateway
from recipe_extraction.services.pipeline import RecipeExtractionPipeline
from recipe_extraction.services.platforms.resolver import PlatformResolver
from recipe_extraction.services.thumbnails.service import ThumbnailResolver
from recipe_extraction.services.thumbnails.storage import LocalImageStorage


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    browser = BrowserManager(settings.browser)
    app.state.browser = browser

    # Critical: the placeholder thumbnail must be writable
    storage = LocalImageStorage(
        settings.thumbnails.uploads_root,
        public_prefix=settings.thumbnails.public_prefix,
        default_filename=settings.thumbnails.default_filename,
    )
    thumbnails = ThumbnailResolver(storage, browser)
    await thumbnails.initialize()
    app.state.thumbnail_resolver = thumbnails

    acquirer = ContentAcquisitionService(browser, thumbnails)
    await acquirer.initialize()
    app.state.acquisition_service = acquirer

    gateway = await _init_gateway(settings)
    app.state.extraction_gateway = gateway

    app.state.pipeline = RecipeExtractionPipeline(
        resolver=PlatformResolver(),
        acquirer=acquirer,
        thumbnails=thumbnails,
        gateway=gateway,
        assembler=RecipeAssembler(),
    )

    # Supplied by the host application, if any
    if not hasattr(app.state, "recipe_repository"):
        app.state.recipe_repository = None

    logger.info(
        "Application startup complete",
        providers=gateway.providers,
        persistence=app.state.recipe_repository is not None,
    )


async def _init_gateway(settings: Settings) -> RecipeExtractionGateway:
    """Build the AI gateway; without providers every recipe is synthetic."""
    try:
        gateway = RecipeExtractionGateway.from_settings(settings)
        await gateway.initialize()
    except Exception:
        logger.exception(
            "Failed to initialize AI providers - extraction will use templates"
        )
        return RecipeExtractionGateway([])
    if not gateway.is_configured:
        logger.warning("No AI provider configured - extraction will use templates")
    return gateway


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    for name in ("extraction_gateway", "acquisition_service", "thumbnail_resolver"):
        service = getattr(app.state, name, None)
        if service is not None:
            await service.shutdown()
            logger.debug("Service shutdown", service=name)

    browser = getattr(app.state, "browser", None)
    if browser is not None:
        await browser.shutdown()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    yield
    await _shutdown(app)
