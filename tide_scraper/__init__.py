"""
Tide table scraper package.

The modules expose:
    - slugs: Slug normalization and the Brazilian state registry.
    - selectors: Page selectors and the table strategy chain.
    - document: DOM query interface over BeautifulSoup.
    - fetcher: Playwright helpers for single-attempt page retrieval.
    - locator: Region lookup (header, table, commentary, month label).
    - parser: Utilities to normalize table rows into typed days.
    - job: End-to-end scrape calls orchestrating the above pieces.
"""

from .errors import CriticalParseError, FetchError, InvalidInputError, ScrapeError
from .job import scrape_cities, scrape_tides
from .models import CityInfo, DailyTideInfo, ScrapedPageData, StateInfo, TideEvent
from .slugs import list_states, normalize_to_slug

__all__ = [
    "CityInfo",
    "CriticalParseError",
    "DailyTideInfo",
    "FetchError",
    "InvalidInputError",
    "ScrapeError",
    "ScrapedPageData",
    "StateInfo",
    "TideEvent",
    "list_states",
    "normalize_to_slug",
    "scrape_cities",
    "scrape_tides",
]
