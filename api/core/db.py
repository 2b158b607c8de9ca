"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. The API opens it on startup and closes
it on shutdown (see `api/main.py`); the nutrient import CLI opens and closes
it around one run.

Connection settings:
- `DATABASE_URL` when set, otherwise DB_HOST / DB_PORT / DB_USER /
  DB_PASSWORD / DB_NAME.
- `DB_SSL` (default on) requests TLS without certificate verification.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from core import settings

DEFAULT_POOL_MAX_SIZE = 10

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL")
    return _sanitize_database_url(url) if url else ""


def connect_kwargs() -> dict[str, Any]:
    """
    Keyword arguments for `asyncpg.create_pool` describing where to connect.
    """
    kwargs: dict[str, Any] = {"ssl": "require" if settings.env_bool("DB_SSL", True) else False}

    url = database_url()
    if url:
        kwargs["dsn"] = url
        return kwargs

    host = settings.env_str("DB_HOST")
    if not host:
        raise RuntimeError("Database is not configured. Set DATABASE_URL or DB_HOST.")

    kwargs.update(
        host=host,
        port=settings.env_int("DB_PORT", 5432),
        user=settings.env_str("DB_USER") or None,
        password=settings.env_str("DB_PASSWORD") or None,
        database=settings.env_str("DB_NAME") or None,
    )
    return kwargs


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    max_size = max(1, settings.env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE))
    _pool = await asyncpg.create_pool(
        min_size=1,
        max_size=max_size,
        command_timeout=settings.env_float("DB_COMMAND_TIMEOUT_S", 30.0),
        **connect_kwargs(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def check_connection() -> bool:
    """
    Acquire and release one connection, logging the outcome.
    """
    try:
        async with pool().acquire():
            pass
    except Exception as exc:
        logger.error("database_connect_failed error=%s", exc)
        return False
    logger.info("database_connected")
    return True


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_value(sql: str, *args: Any) -> Any:
    return await pool().fetchval(sql, *args)


async def execute(sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    await pool().execute(sql, *args)
