"""Type conversion utilities."""

from __future__ import annotations


def to_int(raw: str | int | None, default: int = 0) -> int:
    """Convert a count scraped from a page or API to a non-negative int.

    Handles various formats:
        - None → default
        - int → int (negative → default)
        - "123" → 123
        - "1,234" → 1234
        - "1 234" → 1234
        - "" / "-" / "N/A" → default
    """
    if raw is None:
        return default

    if isinstance(raw, bool):
        return default

    if isinstance(raw, int):
        return raw if raw >= 0 else default

    if isinstance(raw, str):
        # Remove separators, keep digits only
        txt = "".join(ch for ch in raw if ch.isdigit())
        if not txt:
            return default
        return int(txt)

    return default
