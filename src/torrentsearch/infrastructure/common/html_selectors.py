"""CSS-selector-based HTML extraction with fallback chains.

Every extraction function accepts a primary selector and optional
*fallback_selectors*; the first selector that yields at least one match
wins, so table scrapers survive minor layout changes.
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain."""
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_text(
    element: Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Extract stripped text from the first matching child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        return element.get_text(" ", strip=True) or default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text(" ", strip=True)
            if text:
                return text
    return default


def extract_attr(
    element: Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
    base_url: str = "",
) -> str:
    """Extract an attribute from the first matching child element.

    With ``selector=""`` the attribute is read from *element* itself.
    Relative URLs are resolved against *base_url* when given.
    """
    candidates = [element] if selector == "" else []
    for sel in (selector, *fallback_selectors) if selector else ():
        match = element.select_one(sel)
        if match:
            candidates.append(match)

    for tag in candidates:
        val = tag.get(attr)
        if val:
            text = str(val)
            return urljoin(base_url, text) if base_url else text
    return default


def cell_texts(row: Tag) -> list[str]:
    """Return the stripped text of every ``<td>`` in a table row."""
    return [td.get_text(" ", strip=True) for td in row.find_all("td")]
