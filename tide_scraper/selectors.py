"""
Selectors configuration for the tide table pages.

Pydantic models are used so that any missing or malformed selector simply
raises a validation error, making it easier to spot typos early. The source
site has changed its template several times, so the table is described by an
ordered list of strategies rather than a single selector.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

StrategyKind = Literal["class_based", "positional_fallback"]


class TableStrategy(BaseModel):
    """
    One way of finding the tide table and its day rows.

    Strategies are tried in order; the first whose table yields at least one
    row wins.
    """

    name: str = Field(..., description="Label used in logs.")
    kind: StrategyKind = Field("class_based", description="'class_based' or 'positional_fallback'.")
    table: str = Field(..., description="CSS selector for the table element.")
    rows: str = Field("tr", description="Selector, relative to the table, returning each day row.")

    @field_validator("table", "rows", mode="before")
    @classmethod
    def _strip_strings(cls, value: str) -> str:
        """Normalize accidental whitespace in selector definitions."""
        if isinstance(value, str):
            return value.strip()
        return value


class RowLayout(BaseModel):
    """
    Cell positions and sub-element selectors inside a day row.

    Indices refer to the row's `td` cells. Sub-element selectors are tried
    first; when they match nothing the whole cell text is used.
    """

    min_cells: int = Field(8, description="Rows with fewer cells are rejected.")
    skip_row_classes: List[str] = Field(
        default_factory=list,
        description="Row classes marking continuation rows that repeat a day's layout.",
    )
    day_cell: int = 0
    day_number: Optional[str] = Field(None, description="Sub-element holding the day number.")
    weekday_cell: int = 1
    weekday: Optional[str] = Field(None, description="Sub-element holding the weekday label.")
    sun_cell: int = 2
    tide_cells: List[int] = Field(default_factory=lambda: [3, 4, 5, 6])
    tide_time: Optional[str] = Field(None, description="Sub-element holding a tide's time.")
    tide_height: Optional[str] = Field(None, description="Sub-element holding a tide's height.")
    coefficient_cell: Optional[int] = 7
    moon_cell: Optional[int] = 8

    @field_validator("tide_cells")
    @classmethod
    def _at_most_four(cls, value: List[int]) -> List[int]:
        if len(value) > 4:
            raise ValueError("a day row holds at most four tide events")
        return value


class PageSelectors(BaseModel):
    """
    Top-level selectors for a tide table page.

    Attributes
    ----------
    header:
        Selectors for the page title, first match wins.
    context:
        Selectors for the free-text commentary block.
    month_year:
        Selectors whose text may carry the "<month> de <year>" label.
    strategies:
        Ordered `TableStrategy` chain.
    row_layout:
        `RowLayout` describing the cells of a day row.
    city_links:
        Selector for city links on a state page.
    """

    header: List[str] = Field(default_factory=lambda: ["h1"])
    context: List[str] = Field(default_factory=list)
    month_year: List[str] = Field(default_factory=list)
    strategies: List[TableStrategy] = Field(default_factory=list)
    row_layout: RowLayout = Field(default_factory=RowLayout)
    city_links: str = Field("a[href]", description="Links to city pages on a state page.")


def get_default_page() -> PageSelectors:
    """
    Construct the selector set tuned for tabuademares.com monthly tables.

    The current template marks the table with `tabla_mareas` classes; older
    pages (and some location types) only ship a bare table inside the
    `#tabla_mareas_fondo2` container. You should only need to adjust these
    values if the site layout changes.
    """
    return PageSelectors(
        header=["h1", "#titulo_pagina"],
        context=[
            "#texto_mareas",
            "div.texto_mareas",
            "#tabla_mareas_fondo2 + p",
            "div.tabla_mareas_texto",
        ],
        month_year=[
            "#tabla_mareas_mes_ano",
            ".tabla_mareas_mes_ano",
            "table caption",
            "h2",
        ],
        strategies=[
            TableStrategy(
                name="marked-table",
                kind="class_based",
                table="table#tabla_mareas, table.tabla_mareas",
                rows="tr.tabla_mareas_fila",
            ),
            TableStrategy(
                name="first-table",
                kind="positional_fallback",
                table="table",
                rows="tr",
            ),
        ],
        row_layout=RowLayout(
            min_cells=8,
            # continuation lines repeat the day layout for lunar/secondary info
            skip_row_classes=["tabla_mareas_fila_fondo2", "tabla_mareas_fila_secundaria"],
            day_cell=0,
            day_number=".tabla_mareas_dia_numero",
            weekday_cell=1,
            weekday=".tabla_mareas_dia_semana",
            sun_cell=2,
            tide_cells=[3, 4, 5, 6],
            tide_time=".tabla_mareas_marea_hora",
            tide_height=".tabla_mareas_marea_altura",
            coefficient_cell=7,
            moon_cell=8,
        ),
        city_links="a[href]",
    )
