from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SortCriteria(Enum):
    DEFAULT = "default"  # keep merge order
    NAME = "name"
    SIZE = "size"
    SEEDERS = "seeders"
    PEERS = "peers"
    UPLOAD_DATE = "upload_date"


class SortOrder(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class SortOptions:
    criteria: SortCriteria = SortCriteria.SEEDERS
    order: SortOrder = SortOrder.DESCENDING
