from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, HTTPException

from tide_scraper.errors import CriticalParseError, FetchError, InvalidInputError
from tide_scraper.job import default_settings, scrape_cities, scrape_tides
from tide_scraper.models import CityInfo, ScrapedPageData, StateInfo
from tide_scraper.observability import setup_logging
from tide_scraper.slugs import list_states

logger = logging.getLogger(__name__)

SETTINGS = default_settings()
setup_logging(SETTINGS.log_level)

app = FastAPI(title="Tábua de Marés")

UNAVAILABLE_DETAIL = "Tide service unavailable, try again later."


@app.get("/api/states", response_model=List[StateInfo])
async def states() -> List[StateInfo]:
    return list_states(SETTINGS.state_slug_overrides)


@app.get("/api/states/{state_slug}/cities", response_model=List[CityInfo])
async def cities(state_slug: str) -> List[CityInfo]:
    try:
        return await scrape_cities(state_slug, settings=SETTINGS)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (FetchError, CriticalParseError) as exc:
        logger.error("Error fetching cities for state %s: %s", state_slug, exc)
        raise HTTPException(status_code=502, detail=UNAVAILABLE_DETAIL) from exc


@app.get("/api/tides/{state_slug}/{city_slug}", response_model=ScrapedPageData)
async def tides(state_slug: str, city_slug: str) -> ScrapedPageData:
    """
    Scrape the tide table for a location.

    An empty `dailyTides` list means the page had no data for the location;
    502 means the page could not be fetched or parsed.
    """
    try:
        data = await scrape_tides(state_slug, city_slug, settings=SETTINGS)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (FetchError, CriticalParseError) as exc:
        logger.error("Error fetching tide data for %s, %s: %s", city_slug, state_slug, exc)
        raise HTTPException(status_code=502, detail=UNAVAILABLE_DETAIL) from exc

    logger.info("Returning %s tide days for %s, %s", len(data.daily_tides), city_slug, state_slug)
    return data
