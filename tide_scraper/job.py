"""
High-level orchestration for a single scrape call.

A call validates the location, fetches the page, locates the table, extracts
the day rows and assembles the result:

    Requesting -> Fetched -> Located -> Extracted -> Assembled

There is no retry and no backward transition. Fetch failures and unexpected
parse errors are raised; a page without usable rows is a successful, empty
result.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from playwright.async_api import APIRequestContext
from pydantic import BaseModel, Field

from .document import parse_document
from .errors import CriticalParseError, FetchError, InvalidInputError
from .fetcher import FetchConfig, fetch_markup
from .locator import LocatedRegions, locate
from .models import CityInfo, DailyTideInfo, ScrapedPageData
from .observability import ScrapeObserver
from .parser import collapse_whitespace, extract_row
from .selectors import PageSelectors, RowLayout, get_default_page
from .slugs import normalize_to_slug, request_slug_for

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SETTINGS_PATH = PROJECT_ROOT / "config" / "settings.yaml"
DEFAULT_BASE_URL = "https://tabuademares.com"


class FetchSettings(BaseModel):
    user_agent: Optional[str] = None
    accept_language: Optional[str] = None
    timeout_ms: int = Field(0, ge=0)


class ScraperSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    log_level: str = "INFO"
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    state_slug_overrides: Dict[str, str] = Field(default_factory=dict)

    def fetch_config(self) -> FetchConfig:
        config = FetchConfig(timeout_ms=self.fetch.timeout_ms)
        if self.fetch.user_agent:
            config.user_agent = self.fetch.user_agent
        if self.fetch.accept_language:
            config.accept_language = self.fetch.accept_language
        return config


def load_settings(settings_path: Path) -> Dict[str, object]:
    with settings_path.open("r", encoding="utf-8") as handle:
        return (yaml.safe_load(handle) or {}).get("default") or {}


def get_settings(settings_path: Optional[Path] = None) -> ScraperSettings:
    """Load and validate settings, falling back to defaults when the file is missing."""
    path = settings_path or SETTINGS_PATH
    if not path.exists():
        logger.debug("Settings file %s not found, using defaults", path)
        return ScraperSettings()
    return ScraperSettings(**load_settings(path))


_default_settings: Optional[ScraperSettings] = None


def default_settings() -> ScraperSettings:
    """Project settings, read from disk on first use only."""
    global _default_settings
    if _default_settings is None:
        _default_settings = get_settings()
    return _default_settings


def build_state_url(base_url: str, state_slug: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    return f"{base_url.rstrip('/')}/br/{request_slug_for(state_slug, overrides)}"


def build_tide_url(
    base_url: str,
    state_slug: str,
    city_slug: str,
    overrides: Optional[Mapping[str, str]] = None,
) -> str:
    return f"{build_state_url(base_url, state_slug, overrides)}/{city_slug}"


def extract_rows(located: LocatedRegions, layout: Optional[RowLayout] = None) -> List[DailyTideInfo]:
    """Run the row extractor over the located rows, dropping rejected ones."""
    layout = layout or get_default_page().row_layout
    days: List[DailyTideInfo] = []
    for row in located.rows:
        day = extract_row(row, layout)
        if day is not None:
            days.append(day)
    return days


def assemble(located: LocatedRegions, rows: List[DailyTideInfo]) -> ScrapedPageData:
    return ScrapedPageData(
        daily_tides=list(rows),
        page_context_text=located.context_text,
        location_header=located.header,
        month_year_text=located.month_year_text,
    )


def _require(value: Optional[str], label: str) -> str:
    slug = normalize_to_slug(value)
    if not slug:
        raise InvalidInputError(f"{label} identifier is required")
    return slug


async def scrape_tides(
    state_slug: str,
    city_slug: str,
    settings: Optional[ScraperSettings] = None,
    observer: Optional[ScrapeObserver] = None,
    context: Optional[APIRequestContext] = None,
    page: Optional[PageSelectors] = None,
) -> ScrapedPageData:
    """
    Scrape the monthly tide table for one location.

    Raises
    ------
    InvalidInputError
        Empty state or city, before any network activity.
    FetchError
        Transport failure or non-2xx response.
    CriticalParseError
        Unexpected exception while traversing the markup.
    """
    settings = settings or default_settings()
    observer = observer or ScrapeObserver()
    page = page or get_default_page()

    try:
        state = _require(state_slug, "state")
        city = _require(city_slug, "city")
    except InvalidInputError:
        observer.record("requesting", state_slug or "", city_slug, "rejected", reason="empty identifier")
        raise

    url = build_tide_url(settings.base_url, state, city, settings.state_slug_overrides)
    observer.record("requesting", state, city, "started", url=url)
    try:
        markup = await fetch_markup(url, settings.fetch_config(), context)
    except FetchError as exc:
        observer.record("fetched", state, city, "failed", url=url, status=exc.status)
        raise
    observer.record("fetched", state, city, "ok", size=len(markup))

    try:
        located = locate(parse_document(markup), page)
        observer.record(
            "located",
            state,
            city,
            "ok" if located.table is not None else "not_found",
            strategy=located.strategy,
            rows_seen=len(located.rows),
        )
        days = extract_rows(located, page.row_layout)
    except Exception as exc:
        observer.record("extracted", state, city, "failed", error=type(exc).__name__)
        raise CriticalParseError(f"Unexpected error while parsing {url}: {exc}") from exc
    observer.record("extracted", state, city, "ok", rows_seen=len(located.rows), rows_kept=len(days))

    result = assemble(located, days)
    observer.record("assembled", state, city, "ok" if result.daily_tides else "empty", days=len(result.daily_tides))
    return result


def parse_city_links(markup: str, request_slug: str, page: Optional[PageSelectors] = None) -> List[CityInfo]:
    """Collect the city links of a state page, de-duplicated and sorted by name."""
    page = page or get_default_page()
    path_re = re.compile(rf"^(?:https?://[^/]+)?/br/{re.escape(request_slug)}/([a-z0-9-]+)/?$")
    cities: Dict[str, CityInfo] = {}
    for link in parse_document(markup).select(page.city_links):
        match = path_re.match((link.attr("href") or "").strip())
        if not match:
            continue
        slug = match.group(1)
        name = collapse_whitespace(link.text(" "))
        if slug in cities or not name:
            continue
        cities[slug] = CityInfo(name=name, slug=slug)
    return sorted(cities.values(), key=lambda city: city.name)


async def scrape_cities(
    state_slug: str,
    settings: Optional[ScraperSettings] = None,
    observer: Optional[ScrapeObserver] = None,
    context: Optional[APIRequestContext] = None,
    page: Optional[PageSelectors] = None,
) -> List[CityInfo]:
    """List the cities the source site publishes for a state."""
    settings = settings or default_settings()
    observer = observer or ScrapeObserver()

    try:
        state = _require(state_slug, "state")
    except InvalidInputError:
        observer.record("requesting", state_slug or "", None, "rejected", reason="empty identifier")
        raise

    url = build_state_url(settings.base_url, state, settings.state_slug_overrides)
    observer.record("requesting", state, None, "started", url=url)
    try:
        markup = await fetch_markup(url, settings.fetch_config(), context)
    except FetchError as exc:
        observer.record("fetched", state, None, "failed", url=url, status=exc.status)
        raise
    observer.record("fetched", state, None, "ok", size=len(markup))

    try:
        cities = parse_city_links(markup, request_slug_for(state, settings.state_slug_overrides), page)
    except Exception as exc:
        observer.record("extracted", state, None, "failed", error=type(exc).__name__)
        raise CriticalParseError(f"Unexpected error while parsing {url}: {exc}") from exc
    observer.record("extracted", state, None, "ok" if cities else "empty", cities=len(cities))
    return cities
