"""FastAPI dependencies for service access.

Services are created during application startup and stored in app.state;
a missing service means startup degraded and the endpoint answers 503.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, Request, status


if TYPE_CHECKING:
    from recipe_extraction.services.browser.manager import BrowserManager
    from recipe_extraction.services.extraction.gateway import RecipeExtractionGateway
    from recipe_extraction.services.persistence.repository import RecipeRepository
    from recipe_extraction.services.pipeline import RecipeExtractionPipeline


async def get_pipeline(request: Request) -> RecipeExtractionPipeline:
    """Get the extraction pipeline from app state.

    Raises:
        HTTPException: 503 if the pipeline is not initialized.
    """
    pipeline: RecipeExtractionPipeline | None = getattr(
        request.app.state, "pipeline", None
    )
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recipe extraction service not available",
        )
    return pipeline


async def get_recipe_repository(request: Request) -> RecipeRepository:
    """Get the persistence collaborator from app state.

    Raises:
        HTTPException: 503 if no repository is configured.
    """
    repository: RecipeRepository | None = getattr(
        request.app.state, "recipe_repository", None
    )
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recipe storage not available",
        )
    return repository


async def get_browser(request: Request) -> BrowserManager | None:
    """Shared browser handle, if startup created one."""
    return getattr(request.app.state, "browser", None)


async def get_extraction_gateway(request: Request) -> RecipeExtractionGateway | None:
    """AI gateway, if startup created one."""
    return getattr(request.app.state, "extraction_gateway", None)
