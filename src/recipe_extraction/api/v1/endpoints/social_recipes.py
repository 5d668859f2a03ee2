"""Social recipe endpoints.

Provides:
- POST /social-recipes/parse to extract a recipe from a post URL for review
- POST /social-recipes/import to store a reviewed recipe (or extract and
  store in one call) through the configured recipe repository
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from recipe_extraction.api.dependencies import get_pipeline, get_recipe_repository
from recipe_extraction.core.exceptions import ServiceUnavailableException
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.schemas.extraction import (
    ExtractionRequest,
    ImportRecipeRequest,
    ImportRecipeResponse,
    ParseRecipeResponse,
)
from recipe_extraction.services.persistence.repository import (
    PersistenceError,
    RecipeRepository,
)
from recipe_extraction.services.pipeline import RecipeExtractionPipeline  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(prefix="/social-recipes", tags=["Social Recipes"])

_INVALID_URL_RESPONSE = {
    "description": "URL is not a supported YouTube, TikTok or Instagram post",
    "content": {
        "application/json": {
            "example": {
                "error": "INVALID_URL",
                "message": "Unsupported social media platform: https://example.com/",
            }
        }
    },
}


@router.post(
    "/parse",
    response_model=ParseRecipeResponse,
    summary="Extract a recipe from a social-media post",
    description=(
        "Resolves the platform, gathers the post text and thumbnail, and asks "
        "the AI providers for a structured recipe. Always returns a recipe; "
        "isSynthetic marks placeholder data the user must edit."
    ),
    responses={
        400: _INVALID_URL_RESPONSE,
        422: {"description": "Request validation error"},
        503: {"description": "Service unavailable"},
    },
)
async def parse_social_recipe(
    request_body: ExtractionRequest,
    pipeline: Annotated[RecipeExtractionPipeline, Depends(get_pipeline)],
) -> ParseRecipeResponse:
    """Extract a recipe without storing it."""
    result = await pipeline.extract(request_body)
    return ParseRecipeResponse(
        recipe=result.recipe,
        screenshot_options=result.screenshot_candidates,
        is_synthetic=result.recipe.is_synthetic,
    )


@router.post(
    "/import",
    response_model=ImportRecipeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Import a social-media recipe",
    description=(
        "Stores the supplied recipe for the requester. Without a recipe the "
        "URL is extracted first."
    ),
    responses={
        400: _INVALID_URL_RESPONSE,
        422: {"description": "Request or recipe validation error"},
        503: {"description": "Recipe storage not available"},
    },
)
async def import_social_recipe(
    request_body: ImportRecipeRequest,
    pipeline: Annotated[RecipeExtractionPipeline, Depends(get_pipeline)],
    repository: Annotated[RecipeRepository, Depends(get_recipe_repository)],
) -> ImportRecipeResponse:
    """Persist a recipe, extracting it first when none is supplied."""
    recipe = request_body.recipe
    if recipe is None:
        assert request_body.url is not None
        result = await pipeline.extract(
            ExtractionRequest(
                url=request_body.url,
                platform=request_body.platform,
                requester_id=request_body.requester_id,
            )
        )
        recipe = result.recipe

    try:
        recipe_id = await repository.save(recipe, request_body.requester_id)
    except PersistenceError as e:
        logger.exception(
            "Failed to store recipe",
            requester_id=request_body.requester_id,
            source_url=recipe.source_url,
        )
        msg = "Recipe could not be stored"
        raise ServiceUnavailableException(msg) from e

    logger.info(
        "Recipe imported",
        recipe_id=recipe_id,
        requester_id=request_body.requester_id,
        source_type=recipe.source_type,
        is_synthetic=recipe.is_synthetic,
    )
    return ImportRecipeResponse(
        recipe_id=recipe_id,
        recipe=recipe,
        is_synthetic=recipe.is_synthetic,
    )
