"""Domain models and protocols for search providers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Protocol

from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.torrent import Torrent

ProviderId = str

TORZNAB_ID_PREFIX = "torznab-"


@dataclass(frozen=True)
class Safe:
    def is_unsafe(self) -> bool:
        return False


@dataclass(frozen=True)
class Unsafe:
    reason: str

    def is_unsafe(self) -> bool:
        return True


SafetyStatus = Safe | Unsafe

SAFE = Safe()


@dataclass(frozen=True)
class ProviderInfo:
    """Static description of one provider."""

    id: ProviderId
    name: str
    url: str
    specialized_category: Category = Category.ALL
    safety_status: SafetyStatus = SAFE
    enabled_by_default: bool = True


def new_torznab_id() -> ProviderId:
    """Generate an id for a user-added provider.

    The prefix keeps dynamic ids disjoint from built-in ids.
    """
    return f"{TORZNAB_ID_PREFIX}{uuid.uuid4().hex}"


@dataclass(frozen=True)
class TorznabConfig:
    """User-supplied configuration for a Torznab-compatible indexer."""

    id: ProviderId
    name: str
    url: str
    api_key: str | None = None
    category: Category = Category.ALL
    unsafe_reason: str | None = None
    # Torznab numeric category id -> local category
    category_map: dict[int, Category] = field(default_factory=dict)

    def normalized(self) -> TorznabConfig:
        api_key = self.api_key.strip() if self.api_key else None
        return replace(
            self,
            name=self.name.strip(),
            url=self.url.strip().rstrip("/"),
            api_key=api_key or None,
        )

    def to_info(self) -> ProviderInfo:
        safety: SafetyStatus = (
            Unsafe(self.unsafe_reason) if self.unsafe_reason else SAFE
        )
        return ProviderInfo(
            id=self.id,
            name=self.name,
            url=self.url,
            specialized_category=self.category,
            safety_status=safety,
            enabled_by_default=False,
        )


class SearchProviderProtocol(Protocol):
    """
    Protocol every provider satisfies (built-in or Torznab).

    - has an ``info: ProviderInfo`` attribute
    - implements: async def search(query, category) -> list[Torrent]
    - raises ProviderError when the lookup cannot be completed;
      zero results is an empty list
    """

    info: ProviderInfo

    async def search(self, query: str, category: Category) -> list[Torrent]: ...
