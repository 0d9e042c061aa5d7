"""User preference values and the read-only settings views built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.sorting import SortCriteria, SortOrder

if TYPE_CHECKING:
    from torrentsearch.domain.providers.base import SafetyStatus

# Preference store keys (one value per key).
ENABLED_PROVIDERS_KEY = "enabled_providers"
ENABLE_NSFW_MODE_KEY = "enable_nsfw_mode"
HIDE_ZERO_SEEDERS_KEY = "hide_results_with_zero_seeders"
DEFAULT_CATEGORY_KEY = "default_category"
SORT_CRITERIA_KEY = "sort_criteria"
SORT_ORDER_KEY = "sort_order"
MAX_NUM_RESULTS_KEY = "max_num_results"


@dataclass(frozen=True)
class MaxNumResults:
    """Cap on the number of results shown; ``n=None`` means unlimited."""

    n: int | None = None

    def __post_init__(self) -> None:
        if self.n is not None and self.n <= 0:
            raise ValueError("max results must be a positive integer")

    @property
    def is_unlimited(self) -> bool:
        return self.n is None


UNLIMITED = MaxNumResults()


@dataclass(frozen=True)
class SearchProviderView:
    id: str
    name: str
    url: str
    specialized_category: Category
    safety_status: SafetyStatus
    enabled: bool


@dataclass(frozen=True)
class GeneralSettings:
    default_category: Category = Category.ALL
    enable_nsfw_mode: bool = False


@dataclass(frozen=True)
class SearchSettings:
    hide_results_with_zero_seeders: bool = False
    search_providers: list[SearchProviderView] = field(default_factory=list)
    total_search_providers: int = 0
    enabled_search_providers: int = 0
    max_num_results: MaxNumResults = UNLIMITED


@dataclass(frozen=True)
class SortSettings:
    criteria: SortCriteria = SortCriteria.SEEDERS
    order: SortOrder = SortOrder.DESCENDING
