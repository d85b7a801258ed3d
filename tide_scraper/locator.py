"""
Find the regions of a tide page that carry data.

Absence is never an error here: every region may come back empty and the
assembler decides what that means.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .document import DocumentQuery
from .selectors import PageSelectors, get_default_page

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_MONTH_YEAR_RE = re.compile(r"\b([A-Za-zÀ-ÿ]+)\s+de\s+(\d{4})\b")


@dataclass
class LocatedRegions:
    header: Optional[str] = None
    table: Optional[DocumentQuery] = None
    rows: List[DocumentQuery] = field(default_factory=list)
    strategy: Optional[str] = None
    context_text: Optional[str] = None
    month_year_text: Optional[str] = None


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text or None


def _first_text(document: DocumentQuery, selectors: Iterable[str]) -> Optional[str]:
    for selector in selectors:
        element = document.select_one(selector)
        if element is None:
            continue
        text = _clean(element.text(" "))
        if text:
            return text
    return None


def find_month_year(text: Optional[str]) -> Optional[str]:
    """Return the first "<month> de <year>" phrase in `text`."""
    if not text:
        return None
    match = _MONTH_YEAR_RE.search(text)
    if not match:
        return None
    return f"{match.group(1).lower()} de {match.group(2)}"


def locate_table(document: DocumentQuery, page: PageSelectors):
    """
    Walk the strategy chain and return (table, rows, strategy_name).

    A table that exists but yields no rows is remembered so callers can still
    see it, while the chain moves on to the next strategy.
    """
    first_table: Optional[DocumentQuery] = None
    first_strategy: Optional[str] = None
    for strategy in page.strategies:
        table = document.select_one(strategy.table)
        if table is None:
            logger.debug("Strategy %s: no table for %s", strategy.name, strategy.table)
            continue
        rows = table.select(strategy.rows)
        if rows:
            logger.debug("Strategy %s (%s) matched %s rows", strategy.name, strategy.kind, len(rows))
            return table, rows, strategy.name
        logger.debug("Strategy %s found a table without rows, trying next", strategy.name)
        if first_table is None:
            first_table, first_strategy = table, strategy.name
    return first_table, [], first_strategy


def locate(document: DocumentQuery, page: Optional[PageSelectors] = None) -> LocatedRegions:
    page = page or get_default_page()

    header = _first_text(document, page.header)
    table, rows, strategy = locate_table(document, page)
    context_text = _first_text(document, page.context)

    month_year_text = None
    for selector in page.month_year:
        for element in document.select(selector):
            month_year_text = find_month_year(element.text(" "))
            if month_year_text:
                break
        if month_year_text:
            break
    if month_year_text is None:
        month_year_text = find_month_year(header)

    return LocatedRegions(
        header=header,
        table=table,
        rows=rows,
        strategy=strategy,
        context_text=context_text,
        month_year_text=month_year_text,
    )
