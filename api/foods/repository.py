"""
Food lookup persistence (raw SQL).
"""

from __future__ import annotations

from core import db


async def find_matching_names(names: list[str]) -> list[str]:
    """
    Return those of `names` that exist in `foods`, compared case-insensitively.

    The comparison is done entirely by Postgres `lower()`, and the result
    holds the requested spellings, not the stored ones.
    """
    if not names:
        return []
    rows = await db.fetch_all(
        """
        SELECT requested.name
        FROM unnest($1::text[]) AS requested(name)
        WHERE EXISTS (
          SELECT 1
          FROM foods f
          WHERE lower(f.name) = lower(requested.name)
        )
        """,
        names,
    )
    return [str(row["name"]) for row in rows]


async def insert_lookup_job(*, job_id: str, resume_url: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO food_lookup_jobs (job_id, resume_url)
        VALUES ($1, $2)
        RETURNING job_id, resume_url, created_at
        """,
        job_id,
        resume_url,
    )
    if row is None:
        raise RuntimeError("Failed to insert food lookup job.")
    return row


async def get_lookup_job(job_id: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT job_id, resume_url, created_at
        FROM food_lookup_jobs
        WHERE job_id = $1
        """,
        job_id,
    )
