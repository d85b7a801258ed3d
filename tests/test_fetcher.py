"""
Tests for single-attempt page retrieval
"""
import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from conftest import FakeRequestContext, FakeResponse
from tide_scraper import fetcher
from tide_scraper.errors import FetchError
from tide_scraper.fetcher import FetchConfig, fetch_markup

URL = "https://tabuademares.com/br/para/ananindeua"


class TestFetchMarkup:
    """Test fetch_markup function"""

    def test_returns_body_on_success(self):
        """Test a 200 response returns its markup"""
        context = FakeRequestContext({URL: "<html>ok</html>"})
        assert asyncio.run(fetch_markup(URL, context=context)) == "<html>ok</html>"
        assert context.responses[0].disposed

    def test_http_404_raises_fetch_error(self):
        """Test non-2xx status surfaces as FetchError with status and URL"""
        context = FakeRequestContext()
        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL, context=context))
        assert excinfo.value.status == 404
        assert excinfo.value.url == URL
        assert context.responses[0].disposed

    def test_http_500_raises_fetch_error(self):
        """Test server errors are not retried"""
        context = FakeRequestContext({URL: FakeResponse(503, "busy")})
        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL, context=context))
        assert excinfo.value.status == 503
        assert len(context.requests) == 1

    def test_transport_failure_raises_fetch_error(self):
        """Test transport errors carry the URL and no status"""
        context = FakeRequestContext(error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL, context=context))
        assert excinfo.value.status is None
        assert excinfo.value.url == URL
        assert isinstance(excinfo.value.__cause__, PlaywrightError)

    def test_request_bypasses_caches(self):
        """Test no-cache headers and the configured language are sent"""
        context = FakeRequestContext({URL: "<html></html>"})
        asyncio.run(fetch_markup(URL, FetchConfig(accept_language="pt-BR"), context=context))
        headers = context.requests[0]["headers"]
        assert headers["Cache-Control"] == "no-cache"
        assert headers["Pragma"] == "no-cache"
        assert headers["Accept-Language"] == "pt-BR"

    def test_no_timeout_by_default(self):
        """Test the fetcher imposes no timeout unless configured"""
        context = FakeRequestContext({URL: "<html></html>"})
        asyncio.run(fetch_markup(URL, context=context))
        assert context.requests[0]["timeout"] == 0

        asyncio.run(fetch_markup(URL, FetchConfig(timeout_ms=5000), context=context))
        assert context.requests[1]["timeout"] == 5000

    def test_declared_charset_is_honoured(self):
        """Test a latin-1 page decodes with the Content-Type charset"""
        body = "<html><body><h1>Tábua de marés de Belém</h1></body></html>".encode("latin-1")
        response = FakeResponse(200, body, content_type="text/html; charset=iso-8859-1")
        context = FakeRequestContext({URL: response})
        markup = asyncio.run(fetch_markup(URL, context=context))
        assert "Tábua de marés de Belém" in markup
        assert response.disposed

    def test_meta_charset_without_header(self):
        """Test the meta charset decides when the header declares none"""
        body = (
            '<html><head><meta charset="iso-8859-1"></head>'
            "<body><h1>Marés de São Luís</h1></body></html>"
        ).encode("latin-1")
        context = FakeRequestContext({URL: FakeResponse(200, body, content_type="text/html")})
        assert "Marés de São Luís" in asyncio.run(fetch_markup(URL, context=context))

    def test_undecodable_body_raises_fetch_error(self, monkeypatch):
        """Test a body no encoding fits is a FetchError with the status"""
        monkeypatch.setattr(fetcher, "decode_markup", lambda body, charset=None: None)
        context = FakeRequestContext({URL: "<html></html>"})
        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL, context=context))
        assert excinfo.value.status == 200
        assert context.responses[0].disposed


class FakeRequestFactory:
    def __init__(self, context, error=None):
        self.context = context
        self.error = error
        self.options = None

    async def new_context(self, **options):
        self.options = options
        if self.error is not None:
            raise self.error
        return self.context


class FakePlaywright:
    def __init__(self, context, error=None):
        self.request = FakeRequestFactory(context, error)
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakePlaywrightManager:
    def __init__(self, playwright=None, error=None):
        self.playwright = playwright
        self.error = error

    async def start(self):
        if self.error is not None:
            raise self.error
        return self.playwright


class TestOwnedRequestContext:
    """Test the per-call request context used when none is injected"""

    def _install(self, monkeypatch, playwright=None, error=None):
        manager = FakePlaywrightManager(playwright, error)
        monkeypatch.setattr(fetcher, "async_playwright", lambda: manager)
        return manager

    def test_disposed_after_success(self, monkeypatch):
        """Test the context and Playwright are closed after a 200"""
        context = FakeRequestContext({URL: "<html>ok</html>"})
        playwright = FakePlaywright(context)
        self._install(monkeypatch, playwright)

        assert asyncio.run(fetch_markup(URL, FetchConfig(user_agent="tide-tests"))) == "<html>ok</html>"
        assert context.disposed
        assert playwright.stopped
        assert playwright.request.options["user_agent"] == "tide-tests"
        assert playwright.request.options["extra_http_headers"]["Cache-Control"] == "no-cache"

    def test_disposed_after_http_error(self, monkeypatch):
        """Test resources are released when the status is not 2xx"""
        context = FakeRequestContext({URL: FakeResponse(500, "down")})
        playwright = FakePlaywright(context)
        self._install(monkeypatch, playwright)

        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL))
        assert excinfo.value.status == 500
        assert context.disposed
        assert playwright.stopped

    def test_new_context_failure_is_fetch_error(self, monkeypatch):
        """Test a failure opening the context surfaces as FetchError"""
        playwright = FakePlaywright(FakeRequestContext(), error=PlaywrightError("context refused"))
        self._install(monkeypatch, playwright)

        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL))
        assert excinfo.value.url == URL
        assert excinfo.value.status is None
        assert playwright.stopped

    def test_start_failure_is_fetch_error(self, monkeypatch):
        """Test a Playwright driver that cannot start surfaces as FetchError"""
        self._install(monkeypatch, error=PlaywrightError("driver missing"))

        with pytest.raises(FetchError) as excinfo:
            asyncio.run(fetch_markup(URL))
        assert excinfo.value.url == URL
        assert isinstance(excinfo.value.__cause__, PlaywrightError)
