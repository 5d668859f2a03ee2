"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under the configured ``api.v1_prefix``
(``/api/v1/recipe-extraction`` by default).
"""

from __future__ import annotations

from fastapi import APIRouter

from recipe_extraction.api.v1.endpoints import health, social_recipes


router = APIRouter()

router.include_router(health.router)
router.include_router(social_recipes.router)
