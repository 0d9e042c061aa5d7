"""Parsing and display formatting utilities for provider payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")

DISPLAY_DATE_FORMAT = "%d %b %Y"


def format_size(num_bytes: int | str | None) -> str:
    """Render a byte count as a display size ("1.46 GB").

    Args:
        num_bytes: Raw byte count (int or digit string).

    Returns:
        Display string, or "0 B" for missing/invalid input.
    """
    try:
        value = float(num_bytes or 0)
    except (TypeError, ValueError):
        return "0 B"

    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{int(value)} B"
    return f"{value:.2f} {_UNITS[unit]}"


def format_timestamp(ts: int | str | None) -> str:
    """Render a unix timestamp (seconds) as a display date; "" if invalid."""
    try:
        seconds = int(ts)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return ""
    if seconds <= 0:
        return ""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime(
        DISPLAY_DATE_FORMAT
    )


def format_rfc822(value: str | None) -> str:
    """Render an RSS ``pubDate`` as a display date.

    Unparseable input is returned unchanged (stripped).
    """
    if not value:
        return ""
    try:
        dt = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError):
        return value.strip()
    return dt.strftime(DISPLAY_DATE_FORMAT)


def format_iso(value: str | None) -> str:
    """Render an ISO-8601 date/datetime as a display date.

    Unparseable input is returned unchanged (stripped).
    """
    if not value:
        return ""
    text = value.strip().replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return value.strip()
    return dt.strftime(DISPLAY_DATE_FORMAT)
