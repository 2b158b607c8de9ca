"""
Nutrient catalog persistence (raw SQL).
"""

from __future__ import annotations

from core import db

# Re-imports refresh unit/category/sort_order only; the USDA number and the
# visibility flag keep their first-insert values.
UPSERT_NUTRIENT_SQL = """
    INSERT INTO nutrients (name, unit, category, usda_nutrient_number, is_visible, sort_order)
    VALUES ($1, $2, $3, $4, $5, $6)
    ON CONFLICT (name) DO UPDATE
    SET unit = EXCLUDED.unit,
        category = EXCLUDED.category,
        sort_order = EXCLUDED.sort_order
"""


async def upsert_nutrient(
    *,
    name: str,
    unit: str,
    category: str,
    usda_number: str,
    is_visible: bool,
    sort_order: int,
) -> None:
    await db.execute(
        UPSERT_NUTRIENT_SQL,
        name,
        unit,
        category,
        usda_number,
        is_visible,
        sort_order,
    )


async def list_nutrients(*, category: str | None = None, include_hidden: bool = False) -> list[dict]:
    """
    Catalog rows in display order (sort_order, then name as tiebreak).
    """
    return await db.fetch_all(
        """
        SELECT name, unit, category, usda_nutrient_number, is_visible, sort_order
        FROM nutrients
        WHERE ($1::text IS NULL OR category = $1)
          AND ($2::boolean OR is_visible = true)
        ORDER BY sort_order ASC, name ASC
        """,
        category,
        include_hidden,
    )
