"""
Food lookup "service layer".

Request bodies for the availability check come in a small, closed set of
shapes. `normalize_foods_payload` turns any of them into one `FoodsRequest`:

1. a JSON array of items                      [{"name": ...}, ...]
2. an object with a `foods` array             {"foods": [...]}
3. an object with `data` holding 1 or 2       {"data": [...]} / {"data": {"foods": [...]}}
4. an object with `data` as JSON text of 1/2  {"data": "[...]"}

An optional `resumeUrl` (or `resume_url`) may sit next to `foods`/`data`,
or inside `data` when it is an object.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import ValidationError

from core.errors import ApiError

from . import repository
from .schemas import FoodItem, FoodLookupOptions

logger = logging.getLogger(__name__)

FOODS_REQUIRED = "foods array is required"


@dataclass(frozen=True)
class FoodsRequest:
    foods: list[dict[str, Any]]
    resume_url: str | None = None


@dataclass(frozen=True)
class FoodPartition:
    available: list[dict[str, Any]] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def _resume_url_from(container: Any) -> Any:
    if not isinstance(container, dict):
        return None
    if "resumeUrl" in container:
        return container["resumeUrl"]
    return container.get("resume_url")


def _parse_data(data: Any) -> Any:
    if not isinstance(data, str):
        return data
    try:
        return json.loads(data)
    except ValueError as exc:
        raise ApiError(400, "data is not valid JSON") from exc


def normalize_foods_payload(body: Any) -> FoodsRequest:
    """
    Validate a lookup request body and return its foods list and options.
    """
    resume_url = None
    if isinstance(body, list):
        foods = body
    elif isinstance(body, dict):
        resume_url = _resume_url_from(body)
        if "foods" in body:
            foods = body["foods"]
        elif "data" in body:
            data = _parse_data(body["data"])
            if resume_url is None:
                resume_url = _resume_url_from(data)
            foods = data.get("foods") if isinstance(data, dict) else data
        else:
            foods = None
    else:
        foods = None

    if not isinstance(foods, list) or not foods:
        raise ApiError(400, FOODS_REQUIRED)

    items: list[dict[str, Any]] = []
    for index, item in enumerate(foods):
        try:
            FoodItem.model_validate(item)
        except ValidationError as exc:
            raise ApiError(400, f"foods[{index}] must be an object with a non-empty string name") from exc
        items.append(item)

    try:
        options = FoodLookupOptions(resume_url=resume_url)
    except ValidationError as exc:
        raise ApiError(400, "resumeUrl must be a non-empty string") from exc

    return FoodsRequest(foods=items, resume_url=options.resume_url)


def partition(requested: Iterable[dict[str, Any]], existing_names: Iterable[str]) -> FoodPartition:
    """
    Split requested items into stored ("available") and unknown ("missing").

    Names compare case-insensitively. Available items are returned as given;
    missing entries are the requested names in their original casing.
    """
    known = {name.lower() for name in existing_names}
    result = FoodPartition()
    for item in requested:
        name = item["name"]
        if name.lower() in known:
            result.available.append(item)
        else:
            result.missing.append(name)
    return result


async def check_availability(foods: list[dict[str, Any]]) -> FoodPartition:
    # Postgres decides which names match; partition only sees requested spellings.
    names = sorted({item["name"] for item in foods})
    matched = await repository.find_matching_names(names)
    return partition(foods, matched)


async def remember_resume_url(resume_url: str) -> str:
    """
    Store the caller's resume URL under a fresh job id and return the id.
    """
    job_id = uuid.uuid4().hex
    await repository.insert_lookup_job(job_id=job_id, resume_url=resume_url)
    logger.info("food_lookup_job_created job_id=%s", job_id)
    return job_id


async def lookup_foods(body: Any) -> dict:
    """
    Full availability check for one request body, in the response shape.
    """
    request = normalize_foods_payload(body)

    try:
        result = await check_availability(request.foods)
        job_id = await remember_resume_url(request.resume_url) if request.resume_url else None
    except Exception as exc:
        logger.error("food_lookup_failed error=%s", exc)
        raise ApiError(500, str(exc)) from exc

    data: dict[str, Any] = {
        "availableFoods": result.available,
        "missingFoods": result.missing,
    }
    if job_id is not None:
        data["jobId"] = job_id

    return {
        "success": True,
        "message": "All foods are available" if not result.missing else "Some foods are missing",
        "data": data,
    }


async def get_lookup_job(job_id: str) -> dict:
    try:
        row = await repository.get_lookup_job(job_id)
    except Exception as exc:
        raise ApiError(500, str(exc)) from exc

    if row is None:
        raise ApiError(404, "Lookup job not found.")

    return {
        "success": True,
        "data": {
            "jobId": str(row["job_id"]),
            "resumeUrl": str(row["resume_url"]),
            "createdAt": row["created_at"],
        },
    }
