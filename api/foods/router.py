"""
Food search and availability API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from core import settings, usda
from core.errors import ApiError

from . import service

router = APIRouter()


@router.post("/search-foods")
async def search_foods(params: Any = Body(default=None)) -> Any:
    """
    Forward search parameters to USDA FoodData Central and return its answer as-is.
    """
    try:
        return await usda.search_foods(
            params if params is not None else {},
            api_key=settings.usda_api_key(),
            base_url=settings.usda_base_url(),
            timeout_s=settings.usda_timeout_s(),
        )
    except usda.UsdaError as exc:
        raise ApiError(502, str(exc)) from exc


@router.post("/giveas-items")
async def check_foods(body: Any = Body(default=None)) -> dict:
    """
    Report which requested foods exist in the local `foods` table.
    """
    return await service.lookup_foods(body)


@router.get("/giveas-items/jobs/{job_id}")
async def get_lookup_job(job_id: str) -> dict:
    return await service.get_lookup_job(job_id)
