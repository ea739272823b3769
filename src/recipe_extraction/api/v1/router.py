"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1/recipe-extraction/ via the
v1_prefix configuration.
"""

from __future__ import annotations

from fastapi import APIRouter

from recipe_extraction.api.v1.endpoints import extraction, health


router = APIRouter()

router.include_router(health.router)
router.include_router(extraction.router)
