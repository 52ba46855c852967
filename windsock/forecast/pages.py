"""Page data for the generated site.

Each page kind carries only the fields its page needs; ``Page`` is a
discriminated union over them. A ``Site`` bundles every page with the alias
mapping and is fully serializable without any renderer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from windsock.forecast.models import (
    ClimbGrid,
    GenerationContext,
    Navigation,
    ScoredCondition,
    clock,
    direction,
    full_time,
    weather_string,
)
from windsock.forecast.navigation import climb_navigation, grid_navigation
from windsock.forecast.scoring import HistoricalLookup, historical_for
from windsock.forecast.slugs import CURRENT_SLUG, resolve_aliases


@dataclass(frozen=True)
class SiteOptions:
    title: str = "Windsock - Bay Area"
    absolute_url: str = ""
    historical_default: bool = False


class NavigationLinks(BaseModel):
    up: str = ""
    down: str = ""
    left: str = ""
    right: str = ""

    @classmethod
    def of(cls, nav: Navigation) -> NavigationLinks:
        return cls(up=nav.up, down=nav.down, left=nav.left, right=nav.right)


class CellView(BaseModel):
    slug: str
    day_time: str
    full_time: str
    baseline: str
    historical: str
    baseline_rank: int
    historical_rank: int
    weather: str

    @classmethod
    def of(cls, grid: ClimbGrid, cell: ScoredCondition) -> CellView:
        return cls(
            slug=CURRENT_SLUG if grid.is_current(cell) else cell.day_time_slug(),
            day_time=cell.day_time(),
            full_time=cell.full_time(),
            baseline=cell.score(False),
            historical=cell.score(True),
            baseline_rank=cell.rank(False),
            historical_rank=cell.rank(True),
            weather=cell.weather(),
        )


def _view(grid: ClimbGrid, cell: ScoredCondition | None) -> CellView | None:
    return None if cell is None else CellView.of(grid, cell)


class ClimbSummary(BaseModel):
    slug: str
    name: str
    direction: str
    current: CellView | None = None
    best_baseline: CellView | None = None
    best_historical: CellView | None = None


class ClimbCell(BaseModel):
    slug: str
    name: str
    direction: str
    cell: CellView


class RootPage(BaseModel):
    kind: Literal["root"] = "root"
    canonical_path: str = ""
    title: str
    climbs: list[ClimbSummary]


class DayTimePage(BaseModel):
    kind: Literal["day_time"] = "day_time"
    slug: str
    canonical_path: str
    title: str
    local_time: datetime
    day_time: str
    historical_weather: str | None = None
    conditions: list[ClimbCell] = Field(default_factory=list)
    navigation: NavigationLinks = Field(default_factory=NavigationLinks)


class ClimbRow(BaseModel):
    time: str = ""
    full_time: str = ""
    historical_weather: str | None = None
    cells: list[CellView | None]


class ClimbPage(BaseModel):
    kind: Literal["climb"] = "climb"
    slug: str
    name: str
    canonical_path: str
    title: str
    direction: str
    days: list[str]
    short_days: list[str]
    rows: list[ClimbRow]
    navigation: NavigationLinks = Field(default_factory=NavigationLinks)


Page = Annotated[RootPage | DayTimePage | ClimbPage, Field(discriminator="kind")]


class ClimbFailure(BaseModel):
    climb: str
    error: str


class Site(BaseModel):
    generation_time: datetime
    absolute_url: str = ""
    historical_default: bool = False
    hidden: int = 0
    pages: list[Page] = Field(default_factory=list)
    aliases: dict[str, str] = Field(default_factory=dict)
    failures: list[ClimbFailure] = Field(default_factory=list)

    def page(self, canonical_path: str) -> RootPage | DayTimePage | ClimbPage | None:
        for p in self.pages:
            if p.canonical_path == canonical_path:
                return p
        return None


def _historical_weather(
    lookup: HistoricalLookup | None, grid: ClimbGrid, cell: ScoredCondition, ctx: GenerationContext
) -> str | None:
    past = historical_for(lookup, grid.climb, cell.conditions, ctx)
    return None if past is None else weather_string(past)


def build_root_page(grids: Sequence[ClimbGrid], hidden: int, options: SiteOptions) -> RootPage:
    climbs = []
    for grid in grids[:hidden]:
        climbs.append(
            ClimbSummary(
                slug=grid.slug,
                name=grid.climb.name,
                direction=direction(grid.climb.segment.average_direction),
                current=_view(grid, grid.current),
                best_baseline=_view(grid, grid.best_baseline),
                best_historical=_view(grid, grid.best_historical),
            )
        )
    return RootPage(title=options.title, climbs=climbs)


def build_day_time_pages(
    grids: Sequence[ClimbGrid],
    hidden: int,
    ctx: GenerationContext,
    options: SiteOptions,
    lookup: HistoricalLookup | None = None,
) -> list[DayTimePage]:
    """One page per distinct day-time across the visible climbs.

    A page's navigation comes from the first climb that contributed to it. The
    current snapshot gets a standalone ``current`` page even when it falls
    outside the hour window.
    """
    pages: dict[str, DayTimePage] = {}

    def page_for(slug: str, grid: ClimbGrid, cell: ScoredCondition, nav: Navigation) -> DayTimePage:
        existing = pages.get(slug)
        if existing is None:
            existing = DayTimePage(
                slug=slug,
                canonical_path=f"{slug}/",
                title=f"{options.title} - {cell.day_time()}",
                local_time=cell.local_time,
                day_time=cell.day_time(),
                historical_weather=_historical_weather(lookup, grid, cell, ctx),
                navigation=NavigationLinks.of(nav),
            )
            pages[slug] = existing
        return existing

    def add(page: DayTimePage, grid: ClimbGrid, cell: ScoredCondition) -> None:
        page.conditions.append(
            ClimbCell(
                slug=grid.slug,
                name=grid.climb.name,
                direction=direction(grid.climb.segment.average_direction),
                cell=CellView.of(grid, cell),
            )
        )

    for grid in grids[:hidden]:
        placed = False
        for j, day in enumerate(grid.days):
            for k, cell in enumerate(day.conditions):
                if cell is None:
                    continue
                current = grid.is_current(cell)
                placed = placed or current
                slug = CURRENT_SLUG if current else cell.day_time_slug()
                add(page_for(slug, grid, cell, grid_navigation(grid, j, k)), grid, cell)
        if grid.current is not None and not placed:
            add(page_for(CURRENT_SLUG, grid, grid.current, Navigation()), grid, grid.current)

    return list(pages.values())


def build_climb_page(
    grid: ClimbGrid,
    nav: Navigation,
    ctx: GenerationContext,
    options: SiteOptions,
    lookup: HistoricalLookup | None = None,
) -> ClimbPage:
    days = [d.day for d in grid.days]
    hours = len(grid.days[0].conditions) if grid.days else 0
    rows = []
    for i in range(hours):
        row = ClimbRow(cells=[])
        for day in grid.days:
            cell = day.conditions[i]
            if cell is not None and not row.time:
                row.time = clock(cell.local_time)
                row.full_time = full_time(cell.local_time)
                row.historical_weather = _historical_weather(lookup, grid, cell, ctx)
            row.cells.append(_view(grid, cell))
        rows.append(row)

    return ClimbPage(
        slug=grid.slug,
        name=grid.climb.name,
        canonical_path=f"{grid.slug}/",
        title=f"{options.title} - {grid.climb.name}",
        direction=direction(grid.climb.segment.average_direction),
        days=days,
        short_days=[d.short_day for d in grid.days],
        rows=rows,
        navigation=NavigationLinks.of(nav),
    )


def assemble_site(
    grids: Sequence[ClimbGrid],
    hidden: int,
    ctx: GenerationContext,
    options: SiteOptions,
    lookup: HistoricalLookup | None = None,
    failures: Sequence[ClimbFailure] = (),
) -> Site:
    """Link every grid and collect all pages plus the alias mapping.

    Args:
        grids: Successfully built grids in input order
        hidden: Number of leading grids that are visible
        ctx: Generation context
        options: Site-wide presentation options
        lookup: Historical averages shown alongside rows and day-times
        failures: Climbs excluded from the site

    Returns:
        Site ready to hand to a writer
    """
    slugs = [g.slug for g in grids]

    pages: list[RootPage | DayTimePage | ClimbPage] = [build_root_page(grids, hidden, options)]
    pages.extend(build_day_time_pages(grids, hidden, ctx, options, lookup))
    for k, grid in enumerate(grids):
        nav = climb_navigation(slugs, k, hidden)
        pages.append(build_climb_page(grid, nav, ctx, options, lookup))

    return Site(
        generation_time=ctx.now,
        absolute_url=options.absolute_url,
        historical_default=options.historical_default,
        hidden=hidden,
        pages=pages,
        aliases=resolve_aliases([g.climb for g in grids]),
        failures=list(failures),
    )
