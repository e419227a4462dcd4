"""Commit scatter plot: date on x, time of day on y, radius by lines edited.

The pure parts (scales, projection, selection membership) are plain
functions; ``ScatterPlot`` wires them to a chart surface and the tooltip,
selection-count and breakdown targets.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from locviz.breakdown import BreakdownRenderer
from locviz.config import ChartConfig
from locviz.models import Commit, Point, SelectionRegion
from locviz.scales import LinearScale, SqrtScale, TimeScale, extent
from locviz.surface import GRID_STROKE, ChartSurface, HTMLPanel, TooltipPanel, full_date

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24
Y_TICKS = 12


@dataclass
class PlotScales:
    x: TimeScale
    y: LinearScale
    r: SqrtScale


def build_scales(commits: Sequence[Commit], chart: ChartConfig) -> PlotScales | None:
    """Scales for the current commit set, or None when it is empty.

    The x domain follows the commits' timestamp extent (niced); y is the
    fixed 0-24 hour range with midnight at the bottom.
    """
    time_extent = extent(c.datetime for c in commits)
    lines_extent = extent(c.total_lines for c in commits)
    if time_extent is None or lines_extent is None:
        return None

    area = chart.usable_area
    x = TimeScale(time_extent, (area.left, area.right)).nice(chart.x_ticks)
    y = LinearScale((0, HOURS_IN_DAY), (area.bottom, area.top))
    r = SqrtScale(lines_extent, (chart.radius_min, chart.radius_max))
    return PlotScales(x=x, y=y, r=r)


def project(commit: Commit, scales: PlotScales) -> Point:
    return Point(x=scales.x(commit.datetime), y=scales.y(commit.hour_frac))


def is_commit_selected(region: SelectionRegion | None, commit: Commit, scales: PlotScales | None) -> bool:
    if region is None or scales is None:
        return False
    p = project(commit, scales)
    return region.contains(p.x, p.y)


def select_commits(
    region: SelectionRegion | None,
    commits: Sequence[Commit],
    scales: PlotScales | None,
) -> list[Commit]:
    """Commits whose projected point falls inside the region. No region selects nothing."""
    if region is None or scales is None:
        return []
    return [c for c in commits if is_commit_selected(region, c, scales)]


def draw_order(commits: Sequence[Commit]) -> list[Commit]:
    """Largest commits first so small marks are drawn on top."""
    return sorted(commits, key=lambda c: -c.total_lines)


def selection_count_text(count: int) -> str:
    return f"{count or 'No'} commit{'' if count == 1 else 's'} selected"


def hour_label(hour: float) -> str:
    return f"{int(hour) % HOURS_IN_DAY:02d}:00"


class ScatterPlot:
    """Draws commits and handles hover and brush events against one surface."""

    def __init__(
        self,
        chart: ChartConfig,
        surface: ChartSurface | None,
        breakdown: BreakdownRenderer,
        tooltip: TooltipPanel | None = None,
        selection_count: HTMLPanel | None = None,
    ) -> None:
        self.chart = chart
        self.surface = surface
        self.breakdown = breakdown
        self.tooltip = tooltip
        self.selection_count = selection_count
        self.commits: list[Commit] = []
        self.scales: PlotScales | None = None
        self.region: SelectionRegion | None = None
        self.selected: list[Commit] = []

    def render(self, commits: Sequence[Commit], region: SelectionRegion | None = None) -> None:
        """Redraw axes and marks for a new commit set, then re-apply the brush."""
        self.commits = list(commits)
        self.scales = build_scales(self.commits, self.chart)
        if self.surface is None:
            logger.debug("Scatter plot target unavailable; skipping draw")
        else:
            self.surface.clear()
            if self.scales is not None:
                self._draw_axes(self.surface, self.scales)
                self._draw_marks(self.surface, self.scales)
        self.brush(region)

    def _draw_axes(self, surface: ChartSurface, scales: PlotScales) -> None:
        area = self.chart.usable_area

        for hour in scales.y.ticks(Y_TICKS):
            y = scales.y(hour)
            surface.line(area.left, y, area.right, y, layer="gridlines", stroke=GRID_STROKE)
            surface.text(area.left - 4, y, hour_label(hour), anchor="end")
        surface.line(area.left, area.top, area.left, area.bottom)

        fmt = scales.x.tick_format(self.chart.x_ticks)
        for tick in scales.x.ticks(self.chart.x_ticks):
            x = scales.x(tick)
            surface.line(x, area.bottom, x, area.bottom + 6)
            surface.text(x, area.bottom + 16, tick.strftime(fmt))
        surface.line(area.left, area.bottom, area.right, area.bottom)

    def _draw_marks(self, surface: ChartSurface, scales: PlotScales) -> None:
        for commit in draw_order(self.commits):
            p = project(commit, scales)
            surface.circle(
                commit.id, p.x, p.y, scales.r(commit.total_lines),
                opacity=self.chart.base_opacity,
                href=commit.url,
                title=f"{commit.id} · {full_date(commit)} · {commit.total_lines} lines",
            )

    def find(self, commit_id: str) -> Commit | None:
        for commit in self.commits:
            if commit.id == commit_id:
                return commit
        return None

    def hover(self, commit_id: str, pointer: Point) -> None:
        commit = self.find(commit_id)
        if commit is None:
            logger.debug("Hover on unknown commit %s ignored", commit_id)
            return
        if self.surface is not None:
            self.surface.set_opacity(commit_id, self.chart.hover_opacity)
        if self.tooltip is not None:
            self.tooltip.show(commit, pointer)

    def leave(self) -> None:
        if self.surface is not None:
            self.surface.set_opacity(None, self.chart.base_opacity)
        if self.tooltip is not None:
            self.tooltip.hide()

    def brush(self, region: SelectionRegion | None) -> list[Commit]:
        """Select commits under the region and refresh the count and breakdown.

        An empty selection shows the breakdown of every plotted commit.
        """
        self.region = region
        self.selected = select_commits(region, self.commits, self.scales)

        if self.surface is not None:
            self.surface.set_selected({c.id for c in self.selected})
            if region is None:
                self.surface.clear_brush()
            else:
                self.surface.set_brush(region.x0, region.y0, region.x1, region.y1)

        if self.selection_count is not None:
            self.selection_count.set_html(selection_count_text(len(self.selected)))

        self.breakdown.render(self.selected or self.commits)
        return self.selected
