"""Decoding of stored preference values into domain types.

Stored values are plain JSON scalars; anything unreadable falls back to
the documented default instead of failing the caller.
"""

from __future__ import annotations

from typing import Any

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.settings import UNLIMITED, MaxNumResults
from torrentsearch.domain.entities.sorting import SortCriteria, SortOrder


def decode_bool(value: Any, default: bool = False) -> bool:
    return value if isinstance(value, bool) else default


def decode_category(value: Any) -> Category:
    if not isinstance(value, str):
        return Category.ALL
    try:
        return Category.parse(value)
    except ValueError:
        return Category.ALL


def encode_category(category: Category) -> str:
    return category.name


def decode_sort_criteria(value: Any) -> SortCriteria:
    try:
        return SortCriteria(value)
    except ValueError:
        return SortCriteria.SEEDERS


def decode_sort_order(value: Any) -> SortOrder:
    try:
        return SortOrder(value)
    except ValueError:
        return SortOrder.DESCENDING


def decode_max_num_results(value: Any) -> MaxNumResults:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return MaxNumResults(value)
    return UNLIMITED
