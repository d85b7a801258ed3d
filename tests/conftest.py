"""
Pytest fixtures for testing
"""
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tide_scraper.job import ScraperSettings  # noqa: E402

BASE_URL = "https://tabuademares.com"

HEADER = "Tábua de marés de Ananindeua"
CONTEXT = "As marés em Ananindeua são semidiurnas, com duas preamares e duas baixa-mares por dia."


def _marked_tide_cell(tide):
    if tide is None:
        return '<td class="tabla_mareas_marea"></td>'
    time, height = tide
    return (
        '<td class="tabla_mareas_marea">'
        f'<span class="tabla_mareas_marea_hora">{time}</span>'
        f'<span class="tabla_mareas_marea_altura">{height}</span>'
        "</td>"
    )


def _plain_tide_cell(tide):
    if tide is None:
        return "<td></td>"
    time, height = tide
    return f"<td>{time}<br>{height}</td>"


def _padded(tides):
    tides = list(tides)
    return tides + [None] * (4 - len(tides))


def marked_row(day, weekday, sun, tides, coefficient="", moon=None, row_class="tabla_mareas_fila", tide_count=4):
    """Build a row in the current template, tagged with tabla_mareas classes."""
    sun_text = "<br>".join(sun)
    tide_cells = "".join(_marked_tide_cell(tide) for tide in _padded(tides)[:tide_count])
    moon_cell = f'<td class="tabla_mareas_luna"><img alt="{moon}" title="{moon}"></td>' if moon else ""
    return (
        f'<tr class="{row_class}">'
        f'<td class="tabla_mareas_dia"><span class="tabla_mareas_dia_numero">{day}</span></td>'
        f'<td><span class="tabla_mareas_dia_semana">{weekday}</span></td>'
        f'<td class="tabla_mareas_salida_puesta_sol">{sun_text}</td>'
        f"{tide_cells}"
        f'<td class="tabla_mareas_coeficiente">{coefficient}</td>'
        f"{moon_cell}"
        "</tr>"
    )


def plain_row(day, weekday, sun, tides, coefficient="", tide_count=4):
    """Build a row of the older template: bare cells, line-break separated tides."""
    sun_text = "<br>".join(sun)
    tide_cells = "".join(_plain_tide_cell(tide) for tide in _padded(tides)[:tide_count])
    return f"<tr><td>{day}</td><td>{weekday}</td><td>{sun_text}</td>{tide_cells}<td>{coefficient}</td></tr>"


def marked_page(rows, header=HEADER, month="Março de 2026", context=CONTEXT):
    return (
        "<html><head><title>Tábua de marés</title></head><body>"
        f"<h1>{header}</h1>"
        '<div id="tabla_mareas_fondo2">'
        '<table id="tabla_mareas" class="tabla_mareas">'
        f'<caption class="tabla_mareas_mes_ano">{month}</caption>'
        "<thead><tr><th>Dia</th><th>Sol</th><th>Marés</th><th>Coeficiente</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table></div>"
        f'<div id="texto_mareas"><p>{context}</p></div>'
        "</body></html>"
    )


def plain_page(rows, header=HEADER, month="Março de 2026"):
    return (
        "<html><body>"
        f"<h1>{header}</h1>"
        f"<h2>{month}</h2>"
        "<table>"
        "<tr><th>Dia</th><th>Sol</th><th>Marés</th><th>Coeficiente</th></tr>"
        f"{''.join(rows)}"
        "</table>"
        "</body></html>"
    )


SAMPLE_DAYS = [
    (1, "Dom", ("06:02", "18:14"), [("01:15", "3,2 m"), ("07:30", "0,4 m"), ("13:45", "3,0 m"), ("20:00", "0,6 m")], "95 alto"),
    (2, "Seg", ("06:02", "18:14"), [("02:01", "3,1 m"), ("08:12", "0,5 m"), ("14:29", "2,9 m"), ("20:44", "0,7 m")], "90 alto"),
    (3, "Ter", ("06:03", "18:13"), [("02:46", "2,9 m"), ("08:55", "0,6 m"), ("15:12", "2,8 m"), ("21:30", "0,8 m")], "82 alto"),
]


class FakeResponse:
    """Stand-in for Playwright's APIResponse."""

    def __init__(self, status=200, body="", content_type="text/html; charset=utf-8"):
        self.status = status
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        self.headers = {"content-type": content_type} if content_type else {}
        self.disposed = False

    @property
    def ok(self):
        return 200 <= self.status <= 299

    async def body(self):
        return self._body

    async def dispose(self):
        self.disposed = True


class FakeRequestContext:
    """Stand-in for Playwright's APIRequestContext, keyed by URL."""

    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.requests = []
        self.responses = []
        self.disposed = False

    async def get(self, url, headers=None, timeout=None):
        self.requests.append({"url": url, "headers": headers or {}, "timeout": timeout})
        if self.error is not None:
            raise self.error
        page = self.pages.get(url)
        if isinstance(page, FakeResponse):
            response = page
        elif page is None:
            response = FakeResponse(404, "<html><body>Not found</body></html>")
        else:
            response = FakeResponse(200, page)
        self.responses.append(response)
        return response

    async def dispose(self):
        self.disposed = True


@pytest.fixture
def settings():
    return ScraperSettings(base_url=BASE_URL)


@pytest.fixture
def sample_marked_page():
    rows = [marked_row(*day, moon="Lua cheia" if day[0] == 1 else None) for day in SAMPLE_DAYS]
    return marked_page(rows)


@pytest.fixture
def sample_plain_page():
    return plain_page([plain_row(*day) for day in SAMPLE_DAYS])
