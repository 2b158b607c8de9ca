"""
Nutrient CSV import.

Reads `nutrient.csv` (columns: id, name, unit_name, rank), derives category
and sort order per row, and upserts one row at a time into `nutrients`.

The batch is best-effort: a row that fails to persist is logged and counted,
and the remaining rows are still imported.

Run it with:
    nutrients-import --csv path/to/nutrient.csv
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from core import db, settings

from . import repository
from .classification import Category, assign_sort_order, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NutrientRecord:
    id: str
    name: str
    unit_name: str | None = None
    rank: str | int | float | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, object]) -> NutrientRecord | None:
        """
        Build a record from one CSV row, or None when `id` or `name` is missing.
        """
        record_id = str(row.get("id") or "").strip()
        name = row.get("name")
        if not record_id or not isinstance(name, str) or not name.strip():
            return None

        unit_name = row.get("unit_name")
        return cls(
            id=record_id,
            name=name,
            unit_name=unit_name if isinstance(unit_name, str) else None,
            rank=row.get("rank"),  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class NutrientEntity:
    name: str
    unit: str
    category: Category
    usda_number: str
    is_visible: bool
    sort_order: int


@dataclass(frozen=True)
class ImportSummary:
    succeeded: int
    total_considered: int
    skipped: int = 0
    failed: int = 0


def build_entity(record: NutrientRecord) -> NutrientEntity:
    name = record.name.strip()
    return NutrientEntity(
        name=name,
        unit=(record.unit_name or "").lower(),
        category=classify(name),
        usda_number=record.id,
        is_visible=True,
        sort_order=assign_sort_order(name, record.rank),
    )


def read_nutrient_rows(path: str | Path) -> list[dict[str, str]]:
    """
    Read the whole CSV into memory. Header row names the columns.
    """
    # utf-8-sig tolerates the BOM spreadsheet exports tend to add.
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return list(csv.DictReader(f))


async def import_all(rows: Iterable[Mapping[str, object]]) -> ImportSummary:
    """
    Upsert every well-formed row, strictly one after another.
    """
    succeeded = skipped = failed = total = 0

    for row in rows:
        total += 1
        record = NutrientRecord.from_row(row)
        if record is None:
            skipped += 1
            continue

        try:
            entity = build_entity(record)
            await repository.upsert_nutrient(
                name=entity.name,
                unit=entity.unit,
                category=entity.category.value,
                usda_number=entity.usda_number,
                is_visible=entity.is_visible,
                sort_order=entity.sort_order,
            )
        except Exception as exc:
            failed += 1
            logger.exception("nutrient_upsert_failed name=%r error=%s", record.name, exc)
            continue

        succeeded += 1

    return ImportSummary(succeeded=succeeded, total_considered=total, skipped=skipped, failed=failed)


async def run_import(csv_path: str | Path) -> ImportSummary:
    rows = read_nutrient_rows(csv_path)

    await db.init_pool()
    try:
        summary = await import_all(rows)
    finally:
        await db.close_pool()

    logger.info(
        "Imported / updated %s nutrients (rows=%s skipped=%s failed=%s)",
        summary.succeeded,
        summary.total_considered,
        summary.skipped,
        summary.failed,
    )
    return summary


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import nutrient.csv into the nutrients table.")
    parser.add_argument(
        "--csv",
        dest="csv_path",
        default=None,
        help="Path to the nutrient CSV (default: $NUTRIENT_CSV or ./nutrient.csv).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    settings.load_env()
    logging.basicConfig(
        level=settings.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    args = _parse_args(argv)
    csv_path = args.csv_path or settings.nutrient_csv_path()

    try:
        asyncio.run(run_import(csv_path))
    except Exception:
        logger.exception("nutrient_import_crashed csv=%s", csv_path)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
