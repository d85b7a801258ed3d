"""
Minimal DOM query interface used by the locator and the row extractor.

Both components are written against `DocumentQuery` only. `SoupNode` is the
BeautifulSoup-backed implementation returned by `parse_document`.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from bs4 import BeautifulSoup, Tag


class DocumentQuery(Protocol):
    def select_one(self, selector: str) -> Optional["DocumentQuery"]:
        ...

    def select(self, selector: str) -> List["DocumentQuery"]:
        ...

    def text(self, separator: str = "") -> str:
        ...

    def attr(self, name: str) -> Optional[str]:
        ...

    def has_class(self, name: str) -> bool:
        ...


class SoupNode:
    """Wrap a BeautifulSoup tag behind the `DocumentQuery` methods."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    def select_one(self, selector: str) -> Optional["SoupNode"]:
        found = self._tag.select_one(selector)
        return SoupNode(found) if found is not None else None

    def select(self, selector: str) -> List["SoupNode"]:
        return [SoupNode(found) for found in self._tag.select(selector)]

    def text(self, separator: str = "") -> str:
        return self._tag.get_text(separator)

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        # bs4 keeps multi-valued attributes such as class as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def has_class(self, name: str) -> bool:
        return name in (self._tag.get("class") or [])

    def __repr__(self) -> str:
        return f"SoupNode(<{self._tag.name}>)"


def parse_document(markup: str) -> SoupNode:
    """Parse raw markup into a queryable document."""
    return SoupNode(BeautifulSoup(markup or "", "html.parser"))
