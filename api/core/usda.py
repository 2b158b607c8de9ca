"""
USDA FoodData Central HTTP client helpers.

Used endpoint:
- POST /foods/search?api_key=...  -> {"totalHits": ..., "foods": [...], ...}

The request body and the response are passed through untouched.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# Upstream failures are explicit and separable from other runtime errors.
class UsdaError(RuntimeError):
    pass


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise UsdaError("USDA_BASE_URL is empty.")
    return base_url.rstrip("/")


async def search_foods(
    params: Any,
    *,
    api_key: str,
    base_url: str,
    timeout_s: float = 30.0,
) -> Any:
    """
    Forward `params` to the FoodData Central search endpoint and return its JSON.
    """
    base_url = _normalize_base_url(base_url)
    api_key = (api_key or "").strip()
    if not api_key:
        raise UsdaError("USDA_API_KEY is not set.")

    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout_s) as client:
            resp = await client.post(
                "/foods/search",
                params={"api_key": api_key},
                json=params,
            )
    except httpx.HTTPError as exc:
        logger.error("usda_search_failed error=%s", exc)
        raise UsdaError(f"USDA search request failed: {exc}") from exc

    if resp.status_code < 200 or resp.status_code >= 300:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        logger.error("usda_search_failed status=%s", resp.status_code)
        raise UsdaError(f"USDA search request failed: {resp.status_code} {body}")

    try:
        return resp.json()
    except ValueError as exc:
        raise UsdaError("USDA search returned a non-JSON response.") from exc
