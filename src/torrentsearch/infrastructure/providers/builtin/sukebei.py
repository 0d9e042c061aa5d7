"""Sukebei, the adult mirror of Nyaa."""

from __future__ import annotations

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.providers.base import ProviderInfo
from torrentsearch.infrastructure.providers.builtin.nyaa import Nyaa


class Sukebei(Nyaa):
    INFO = ProviderInfo(
        id="sukebei",
        name="Sukebei",
        url="https://sukebei.nyaa.si",
        specialized_category=Category.PORN,
        enabled_by_default=False,
    )

    _category_filter = "0_0"

    def map_category(self, category_id: str) -> Category | None:
        return Category.PORN
