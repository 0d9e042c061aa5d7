"""RSS feed helpers shared by feed-based adapters and Torznab."""

from __future__ import annotations

from dataclasses import dataclass, field
from xml.etree import ElementTree


@dataclass
class RssItem:
    """One ``<item>`` flattened to plain strings.

    ``extras`` maps the local name of every other child element
    (``nyaa:seeders`` → ``seeders``, ``info_hash``) to its text; ``attrs`` collects
    ``<torznab:attr name=.. value=..>`` style pairs.
    """

    title: str = ""
    link: str = ""
    guid: str = ""
    comments: str = ""
    pub_date: str = ""
    description: str = ""
    size: str = ""
    enclosure_url: str = ""
    enclosure_length: str = ""
    extras: dict[str, str] = field(default_factory=dict)
    attrs: dict[str, list[str]] = field(default_factory=dict)

    def attr(self, name: str) -> str:
        values = self.attrs.get(name)
        return values[0] if values else ""


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def parse_items(root: ElementTree.Element) -> list[RssItem]:
    """Flatten every ``channel/item`` of an RSS document."""
    items: list[RssItem] = []
    for node in root.iter("item"):
        item = RssItem()
        for child in node:
            text = (child.text or "").strip()
            tag = child.tag
            if tag == "title":
                item.title = text
            elif tag == "link":
                item.link = text
            elif tag == "guid":
                item.guid = text
            elif tag == "comments":
                item.comments = text
            elif tag == "pubDate":
                item.pub_date = text
            elif tag == "description":
                item.description = text
            elif tag == "size":
                item.size = text
            elif tag == "enclosure":
                item.enclosure_url = child.get("url", "")
                item.enclosure_length = child.get("length", "")
            elif _local(tag) == "attr":
                name = child.get("name")
                if name:
                    item.attrs.setdefault(name, []).append(child.get("value", ""))
            else:
                item.extras[_local(tag)] = text
        items.append(item)
    return items
