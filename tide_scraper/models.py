"""
Typed results produced by the scraper.

Every model is frozen so a parsed page can be handed to callers without
defensive copies. Python attribute names are snake_case; the camelCase
aliases are used when the models are serialized for the HTTP surface.
"""

from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

CLOCK_TIME_RE = re.compile(r"^\d{1,2}:\d{2}$")
HEIGHT_RE = re.compile(r"^\d+(?:\.\d+)?$")


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class TideEvent(_FrozenModel):
    """A single high or low tide."""

    time: str = Field(..., description="Local clock time, HH:MM.")
    height: str = Field(..., description="Height in meters, dot decimal separator.")

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not CLOCK_TIME_RE.match(value):
            raise ValueError(f"not a clock time: {value!r}")
        return value

    @field_validator("height")
    @classmethod
    def _check_height(cls, value: str) -> str:
        if not HEIGHT_RE.match(value):
            raise ValueError(f"not a non-negative decimal: {value!r}")
        return value


class DailyTideInfo(_FrozenModel):
    """
    One calendar day of the tide table.

    Days with fewer than four tides leave the trailing slots empty; an empty
    slot means "no event", not a parse error.
    """

    day_of_month: int = Field(..., ge=1, le=31)
    day_of_week: str
    sunrise_time: Optional[str] = None
    sunset_time: Optional[str] = None
    tide1: Optional[TideEvent] = None
    tide2: Optional[TideEvent] = None
    tide3: Optional[TideEvent] = None
    tide4: Optional[TideEvent] = None
    coefficient: Optional[str] = None
    moon_phase: Optional[str] = None

    @field_validator("sunrise_time", "sunset_time")
    @classmethod
    def _check_sun_time(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not CLOCK_TIME_RE.match(value):
            raise ValueError(f"not a clock time: {value!r}")
        return value

    @property
    def tides(self) -> List[TideEvent]:
        """Present tide events in slot order."""
        return [tide for tide in (self.tide1, self.tide2, self.tide3, self.tide4) if tide is not None]


class ScrapedPageData(_FrozenModel):
    daily_tides: List[DailyTideInfo] = Field(default_factory=list)
    page_context_text: Optional[str] = None
    location_header: Optional[str] = None
    month_year_text: Optional[str] = None


class StateInfo(_FrozenModel):
    """A Brazilian state as offered to the location picker."""

    name: str
    slug: str
    api_slug: Optional[str] = Field(
        default=None,
        description="Slug used in the request path when it differs from the display slug.",
    )

    @property
    def request_slug(self) -> str:
        return self.api_slug or self.slug


class CityInfo(_FrozenModel):
    name: str
    slug: str
