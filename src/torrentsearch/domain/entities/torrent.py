"""Torrent search result entity and content locators."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from urllib.parse import parse_qs, quote, urlsplit

from torrentsearch.domain.entities.category import Category

# Public trackers appended when a magnet URI is built from a bare info-hash.
DEFAULT_TRACKERS: tuple[str, ...] = (
    "udp://tracker.opentrackr.org:1337/announce",
    "udp://open.stealth.si:80/announce",
    "udp://tracker.torrent.eu.org:451/announce",
    "udp://exodus.desync.com:6969/announce",
    "udp://tracker.openbittorrent.com:6969/announce",
)

_HEX_HASH_RE = re.compile(r"^[0-9a-fA-F]{40}$")
_BASE32_HASH_RE = re.compile(r"^[A-Za-z2-7]{32}$")
_SIZE_RE = re.compile(r"([\d.,]+)\s*([KMGTP]?)I?B\b")

_SIZE_MULTIPLIERS = {
    "": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
}


def parse_size_to_bytes(size_str: str) -> int:
    """Parse a display size to bytes.

    Supports formats:
        - "1234" (raw bytes)
        - "4.5 GB" / "4.5 GiB"
        - "500 MB"
        - "1,2 TB"

    Unparseable input yields 0.
    """
    if not size_str:
        return 0

    text = size_str.strip()
    if text.isdigit():
        return int(text)

    match = _SIZE_RE.search(text.upper())
    if not match:
        return 0

    try:
        value = float(match.group(1).replace(",", "."))
    except ValueError:
        return 0
    return int(value * _SIZE_MULTIPLIERS[match.group(2)])


def normalize_info_hash(raw: str | None) -> str | None:
    """Normalize a v1 info-hash to lower-case hex.

    Accepts 40-char hex or 32-char base32. Returns ``None`` for anything
    else.
    """
    if not raw:
        return None
    value = raw.strip()
    if _HEX_HASH_RE.match(value):
        return value.lower()
    if _BASE32_HASH_RE.match(value):
        try:
            return base64.b32decode(value.upper()).hex()
        except (binascii.Error, ValueError):
            return None
    return None


@dataclass(frozen=True)
class InfoHash:
    """Content locator holding only the torrent info-hash."""

    hash: str

    def info_hash(self) -> str | None:
        return normalize_info_hash(self.hash)

    def magnet_uri(self, name: str) -> str:
        magnet = f"magnet:?xt=urn:btih:{self.hash}&dn={quote(name)}"
        for tracker in DEFAULT_TRACKERS:
            magnet += f"&tr={quote(tracker, safe='/:')}"
        return magnet


@dataclass(frozen=True)
class MagnetUri:
    """Content locator holding a full magnet URI."""

    uri: str

    def info_hash(self) -> str | None:
        """Extract the ``urn:btih:`` hash from the magnet URI, if present."""
        query = urlsplit(self.uri).query
        for xt in parse_qs(query).get("xt", []):
            if xt.lower().startswith("urn:btih:"):
                return normalize_info_hash(xt[len("urn:btih:") :])
        return None

    def magnet_uri(self, name: str) -> str:
        return self.uri


ContentLocator = InfoHash | MagnetUri


@dataclass(frozen=True)
class Torrent:
    """A single search result produced by one provider."""

    name: str
    size: str
    seeders: int
    peers: int
    provider_id: str
    provider_name: str
    upload_date: str
    category: Category | None
    description_page_url: str
    locator: ContentLocator
    bookmarked: bool = False
    id: int = 0

    def __post_init__(self) -> None:
        if self.seeders < 0:
            raise ValueError("seeders must be >= 0")
        if self.peers < 0:
            raise ValueError("peers must be >= 0")

    def info_hash(self) -> str | None:
        """Comparable info-hash (lower-case hex) or ``None``."""
        return self.locator.info_hash()

    def magnet_uri(self) -> str:
        return self.locator.magnet_uri(self.name)

    def size_in_bytes(self) -> int:
        return parse_size_to_bytes(self.size)
