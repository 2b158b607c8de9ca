"""
Nutrient catalog API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from core.errors import ApiError

from . import repository
from .classification import Category

router = APIRouter()


@router.get("/nutrients")
async def list_nutrients(
    category: str | None = Query(default=None, max_length=100),
    include_hidden: bool = False,
) -> dict:
    """
    List the nutrient catalog in display order, optionally for one category.
    """
    if category is not None:
        try:
            category = Category(category).value
        except ValueError:
            allowed = [c.value for c in Category]
            raise ApiError(400, f"Unknown category '{category}'. Allowed: {allowed}")

    try:
        rows = await repository.list_nutrients(category=category, include_hidden=include_hidden)
    except Exception as exc:
        raise ApiError(500, str(exc)) from exc

    return {"success": True, "data": rows, "count": len(rows)}
