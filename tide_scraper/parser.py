"""
Utilities for parsing tide table rows into normalized Python objects.

The functions here focus on:
    - Validating the structure of a day row before trusting its cells.
    - Normalizing tide heights (comma decimals, unit suffixes, placeholders).
    - Pulling clock times out of loosely formatted cells.

Rows or fields that fail validation are dropped rather than surfaced half
parsed: a day is either returned whole or not at all, and a tide slot either
holds a valid `TideEvent` or is empty.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from .document import DocumentQuery
from .models import CLOCK_TIME_RE, DailyTideInfo, TideEvent
from .selectors import RowLayout, get_default_page

logger = logging.getLogger(__name__)

NULL_TOKENS = {"", "-", "—", "--", "——", "null", "NULL", "NaN", "n/d"}

_WHITESPACE_RE = re.compile(r"\s+")
_CLOCK_TOKEN_RE = re.compile(r"(?<!\d)(\d{1,2}:\d{2})(?!\d)")
_HEIGHT_TOKEN_RE = re.compile(r"^\s*(-?\d+(?:[.,]\d+)?)")
_DAY_RE = re.compile(r"^\s*(\d{1,2})\b")


def collapse_whitespace(value: Optional[str]) -> str:
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def is_clock_time(value: str) -> bool:
    return bool(CLOCK_TIME_RE.match(value))


def extract_clock_times(value: str) -> List[str]:
    """Return every HH:MM token in `value`, in order of appearance."""
    return _CLOCK_TOKEN_RE.findall(value or "")


def parse_height(value: Optional[str]) -> Optional[str]:
    """
    Normalize a height such as "3,2 m" into "3.2".

    Returns None for placeholders, text without a leading number, and
    negative values.
    """
    raw = collapse_whitespace(value)
    if raw in NULL_TOKENS:
        return None
    match = _HEIGHT_TOKEN_RE.match(raw)
    if not match:
        return None
    number = match.group(1).replace(",", ".")
    if number.startswith("-"):
        return None
    return number


def parse_day_of_month(value: Optional[str]) -> Optional[int]:
    match = _DAY_RE.match(value or "")
    if not match:
        return None
    day = int(match.group(1))
    if not 1 <= day <= 31:
        return None
    return day


def parse_tide_event(time_text: Optional[str], height_text: Optional[str]) -> Optional[TideEvent]:
    """Build a `TideEvent` when both tokens are valid, otherwise None."""
    time_value = collapse_whitespace(time_text)
    if not time_value or not is_clock_time(time_value):
        return None
    height = parse_height(height_text)
    if height is None:
        return None
    return TideEvent(time=time_value, height=height)


def _sub_text(cell: DocumentQuery, selector: Optional[str]) -> Optional[str]:
    if not selector:
        return None
    element = cell.select_one(selector)
    if element is None:
        return None
    return element.text(" ")


def _cell_text(cell: DocumentQuery, selector: Optional[str]) -> str:
    """Text of the sub-element when present, else of the whole cell."""
    text = _sub_text(cell, selector)
    if text is None:
        text = cell.text(" ")
    return collapse_whitespace(text)


def split_tide_cell(cell: DocumentQuery, layout: RowLayout) -> Tuple[Optional[str], Optional[str]]:
    """
    Return the (time, height) tokens of a tide cell.

    Two encodings are supported: separate time/height sub-elements, or a
    single text blob where a line break separates the time from the height.
    """
    time_text = _sub_text(cell, layout.tide_time)
    height_text = _sub_text(cell, layout.tide_height)
    if time_text is not None and height_text is not None:
        return time_text, height_text

    segments = [segment.strip() for segment in cell.text("\n").splitlines()]
    segments = [segment for segment in segments if segment]
    if len(segments) < 2:
        return (segments[0] if segments else None), None
    return segments[0], segments[1]


def _moon_phase(cell: DocumentQuery) -> Optional[str]:
    image = cell.select_one("img")
    if image is not None:
        label = collapse_whitespace(image.attr("title") or image.attr("alt"))
        if label:
            return label
    return collapse_whitespace(cell.text(" ")) or None


def _cell_at(cells: Sequence[DocumentQuery], index: Optional[int]) -> Optional[DocumentQuery]:
    if index is None or index >= len(cells):
        return None
    return cells[index]


def extract_row(row: DocumentQuery, layout: Optional[RowLayout] = None) -> Optional[DailyTideInfo]:
    """
    Convert one table row into a `DailyTideInfo`.

    Returns None when the row is a continuation row, has too few cells, or
    carries no usable day-of-month. Individual fields that fail validation are
    left empty without rejecting the day.
    """
    layout = layout or get_default_page().row_layout

    if any(row.has_class(marker) for marker in layout.skip_row_classes):
        return None

    cells = row.select("td")
    if len(cells) < layout.min_cells:
        logger.debug("Skipping row with %s cells (need %s)", len(cells), layout.min_cells)
        return None

    day_cell = cells[layout.day_cell]
    day_of_month = parse_day_of_month(_cell_text(day_cell, layout.day_number))
    if day_of_month is None:
        logger.debug("Skipping row without a day number: %r", collapse_whitespace(day_cell.text(" "))[:40])
        return None

    weekday_cell = _cell_at(cells, layout.weekday_cell)
    day_of_week = _cell_text(weekday_cell, layout.weekday) if weekday_cell is not None else ""

    sun_cell = _cell_at(cells, layout.sun_cell)
    sun_times = extract_clock_times(sun_cell.text(" ")) if sun_cell is not None else []
    sunrise = sun_times[0] if len(sun_times) > 0 else None
    sunset = sun_times[1] if len(sun_times) > 1 else None

    tides: List[Optional[TideEvent]] = []
    for index in layout.tide_cells:
        cell = _cell_at(cells, index)
        if cell is None:
            tides.append(None)
            continue
        time_text, height_text = split_tide_cell(cell, layout)
        tides.append(parse_tide_event(time_text, height_text))
    tides.extend([None] * (4 - len(tides)))

    coefficient_cell = _cell_at(cells, layout.coefficient_cell)
    coefficient = collapse_whitespace(coefficient_cell.text(" ")) if coefficient_cell is not None else ""

    moon_cell = _cell_at(cells, layout.moon_cell)
    moon_phase = _moon_phase(moon_cell) if moon_cell is not None else None

    return DailyTideInfo(
        day_of_month=day_of_month,
        day_of_week=day_of_week,
        sunrise_time=sunrise,
        sunset_time=sunset,
        tide1=tides[0],
        tide2=tides[1],
        tide3=tides[2],
        tide4=tides[3],
        coefficient=coefficient or None,
        moon_phase=moon_phase,
    )
