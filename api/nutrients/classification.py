"""
Nutrient categorization and display ranking.

Both functions are pure. Categories come from an ordered rule list evaluated
first-match-wins: the substring rules must run before the exact-name rules,
so `CATEGORY_RULES` order is part of the contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Callable


class Category(str, Enum):
    ENERGY = "Energy"
    VITAMINS = "Vitamins"
    FATTY_ACIDS = "Fatty Acids"
    LIPIDS = "Lipids"
    MACRONUTRIENTS = "Macronutrients"
    CARBOHYDRATES = "Carbohydrates"
    MINERALS = "Minerals"
    AMINO_ACIDS = "Amino Acids"
    OTHER = "Other"


MACRONUTRIENTS = frozenset({"Protein", "Total lipid (fat)", "Carbohydrate, by difference"})

MINERALS = frozenset(
    {
        "Calcium",
        "Iron",
        "Magnesium",
        "Phosphorus",
        "Potassium",
        "Sodium",
        "Zinc",
        "Copper",
        "Manganese",
        "Selenium",
    }
)

AMINO_ACIDS = frozenset(
    {
        "Tryptophan",
        "Threonine",
        "Isoleucine",
        "Leucine",
        "Lysine",
        "Methionine",
        "Phenylalanine",
        "Tyrosine",
        "Valine",
        "Histidine",
        "Alanine",
        "Arginine",
        "Aspartic acid",
        "Glutamic acid",
        "Glycine",
        "Proline",
        "Serine",
        "Cystine",
    }
)

# Headline nutrients always sort first, whatever rank the source gives them.
HEADLINE_SORT_ORDER = {
    "Energy": 1,
    "Protein": 2,
    "Total lipid (fat)": 3,
    "Carbohydrate, by difference": 4,
}

MAX_SORT_ORDER = 9999
# Floor of the Postgres `integer` column.
MIN_SORT_ORDER = -(2**31)
UNRANKED_SORT_ORDER = 999


@dataclass(frozen=True)
class CategoryRule:
    label: Category
    matches: Callable[[str], bool]


def _contains(*needles: str) -> Callable[[str], bool]:
    def check(name: str) -> bool:
        lowered = name.lower()
        return any(needle in lowered for needle in needles)

    return check


def _one_of(names: frozenset[str]) -> Callable[[str], bool]:
    # Exact and case-sensitive.
    return lambda name: name in names


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(Category.ENERGY, _contains("energy")),
    CategoryRule(Category.VITAMINS, _contains("vitamin")),
    CategoryRule(Category.FATTY_ACIDS, _contains("fatty acid")),
    CategoryRule(Category.LIPIDS, _contains("cholesterol")),
    CategoryRule(Category.MACRONUTRIENTS, _one_of(MACRONUTRIENTS)),
    CategoryRule(Category.CARBOHYDRATES, _contains("sugar", "fiber", "starch")),
    CategoryRule(Category.MINERALS, _one_of(MINERALS)),
    CategoryRule(Category.AMINO_ACIDS, _one_of(AMINO_ACIDS)),
)


def classify(name: str | None) -> Category:
    """
    Map a nutrient name to its category. Never fails; unknown names are `Other`.
    """
    name = name or ""
    for rule in CATEGORY_RULES:
        if rule.matches(name):
            return rule.label
    return Category.OTHER


def _parse_rank(rank_hint: object) -> int | None:
    if rank_hint is None or isinstance(rank_hint, bool):
        return None

    if isinstance(rank_hint, (int, float)):
        value = Decimal(rank_hint)
    elif isinstance(rank_hint, str):
        raw = rank_hint.strip()
        if not raw:
            return None
        try:
            value = Decimal(raw)
        except InvalidOperation:
            return None
    else:
        return None

    if not value.is_finite():
        return None
    # Clamp before int(): a huge exponent would otherwise expand digit by digit.
    value = max(min(value, Decimal(MAX_SORT_ORDER)), Decimal(MIN_SORT_ORDER))
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def assign_sort_order(name: str, rank_hint: str | int | float | None = None) -> int:
    """
    Display sort order for a nutrient (lower sorts first).

    Headline nutrients get fixed slots 1-4. Everything else uses the numeric
    rank hint capped at 9999, or 999 when the hint is missing or not a number.
    """
    if name in HEADLINE_SORT_ORDER:
        return HEADLINE_SORT_ORDER[name]

    rank = _parse_rank(rank_hint)
    if rank is None:
        return UNRANKED_SORT_ORDER
    return min(rank, MAX_SORT_ORDER)
