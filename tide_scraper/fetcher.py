"""
Playwright utilities used to retrieve tide pages.

Pages are fetched with Playwright's API request context: the tide tables are
server-rendered, so no browser has to be launched. Each call makes exactly
one attempt and bypasses HTTP caches.
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

from bs4 import UnicodeDammit
from playwright.async_api import APIRequestContext, Error as PlaywrightError, async_playwright

from .errors import FetchError

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

_CHARSET_RE = re.compile(r"charset=\s*\"?([\w.:-]+)", re.IGNORECASE)


@dataclass
class FetchConfig:
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    accept_language: str = "pt-BR,pt;q=0.9,en;q=0.7"
    # 0 disables Playwright's own timeout; callers wrap the call when they need one
    timeout_ms: int = 0


def _request_headers(config: FetchConfig) -> Dict[str, str]:
    headers = dict(NO_CACHE_HEADERS)
    headers["Accept"] = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    headers["Accept-Language"] = config.accept_language
    return headers


def _declared_charset(headers: Dict[str, str]) -> Optional[str]:
    match = _CHARSET_RE.search(headers.get("content-type", ""))
    return match.group(1) if match else None


def decode_markup(body: bytes, charset: Optional[str] = None) -> Optional[str]:
    """
    Decode a response body into text.

    The declared charset is tried first; otherwise the meta charset or
    detection decides. Returns None when no encoding fits.
    """
    known = [charset] if charset else []
    return UnicodeDammit(body, known_definite_encodings=known, is_html=True).unicode_markup


@asynccontextmanager
async def request_context(config: Optional[FetchConfig] = None) -> AsyncIterator[APIRequestContext]:
    """
    Context manager yielding a Playwright request context.

    Closes all resources automatically, even if an exception bubbles up.
    """
    config = config or FetchConfig()
    playwright = await async_playwright().start()
    context: Optional[APIRequestContext] = None
    try:
        context = await playwright.request.new_context(
            user_agent=config.user_agent,
            extra_http_headers=_request_headers(config),
        )
        yield context
    finally:
        if context is not None:
            await context.dispose()
        await playwright.stop()


async def _get(context: APIRequestContext, url: str, config: FetchConfig) -> str:
    try:
        response = await context.get(url, headers=_request_headers(config), timeout=config.timeout_ms)
    except PlaywrightError as exc:
        raise FetchError(f"Request to {url} failed: {exc}", url) from exc

    try:
        if not response.ok:
            raise FetchError(f"HTTP {response.status} for {url}", url, status=response.status)
        try:
            body = await response.body()
        except PlaywrightError as exc:
            raise FetchError(f"Reading body of {url} failed: {exc}", url, status=response.status) from exc
        charset = _declared_charset(response.headers)
        markup = decode_markup(body, charset)
        if markup is None:
            raise FetchError(f"Could not decode body of {url} (charset {charset})", url, status=response.status)
        return markup
    finally:
        await response.dispose()


async def fetch_markup(
    url: str,
    config: Optional[FetchConfig] = None,
    context: Optional[APIRequestContext] = None,
) -> str:
    """
    Fetch the raw markup at `url`.

    A caller-owned `context` is used as is and left open; otherwise a
    short-lived one is created for this request.

    Raises
    ------
    FetchError
        On transport failure, a non-2xx status, an undecodable body, or when
        Playwright cannot be started.
    """
    config = config or FetchConfig()
    logger.debug("GET %s", url)
    if context is not None:
        return await _get(context, url, config)
    try:
        async with request_context(config) as owned:
            return await _get(owned, url, config)
    except PlaywrightError as exc:
        raise FetchError(f"Could not open a request context for {url}: {exc}", url) from exc
