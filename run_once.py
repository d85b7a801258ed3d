"""Entry point for performing a single tide scrape."""

import argparse
import asyncio
import json
import logging
import sys

from tide_scraper.errors import CriticalParseError, FetchError, InvalidInputError
from tide_scraper.job import get_settings, scrape_tides
from tide_scraper.models import ScrapedPageData
from tide_scraper.observability import setup_logging


def _format_tide(tide) -> str:
    if tide is None:
        return "-"
    return f"{tide.time} {tide.height}m"


def _print_table(data: ScrapedPageData) -> None:
    if data.location_header:
        print(data.location_header)
    if data.month_year_text:
        print(data.month_year_text)
    if not data.daily_tides:
        print("No tide data found for this location.")
        return

    for day in data.daily_tides:
        sun = f"{day.sunrise_time or '-'}/{day.sunset_time or '-'}"
        tides = " | ".join(_format_tide(tide) for tide in (day.tide1, day.tide2, day.tide3, day.tide4))
        print(f"{day.day_of_month:>2} {day.day_of_week:<4} {sun:<11} {tides}  {day.coefficient or ''}")

    if data.page_context_text:
        print()
        print(data.page_context_text)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Scrape the monthly tide table for a location.")
    parser.add_argument("state", help="State name or slug, e.g. 'para' or 'Pará'.")
    parser.add_argument("city", help="City name or slug, e.g. 'ananindeua'.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        data = asyncio.run(scrape_tides(args.state, args.city, settings=settings))
    except InvalidInputError as exc:
        logging.error("Invalid location: %s", exc)
        return 2
    except FetchError as exc:
        logging.error("Fetch failed (status=%s): %s", exc.status, exc)
        logging.info("The tide service is unavailable, try again later.")
        return 1
    except CriticalParseError as exc:
        logging.error("Could not parse the tide page: %s", exc)
        return 1

    if args.json:
        print(json.dumps(data.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    else:
        _print_table(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
