"""Explicit visualization context and the controller that re-renders from it."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from locviz.aggregator import process_commits
from locviz.breakdown import BreakdownRenderer
from locviz.config import Config
from locviz.loader import load_log
from locviz.models import Commit, FilteredView, LineRecord, Point, SelectionRegion
from locviz.scales import OrdinalColors
from locviz.scatter import ScatterPlot
from locviz.stats import render_stats, summarize
from locviz.surface import ChartSurface, Panels
from locviz.time_filter import TimeFilter


@dataclass
class VizContext:
    """State shared by every renderer, built once per page view."""
    config: Config
    lines: tuple[LineRecord, ...]
    commits: tuple[Commit, ...]
    time_filter: TimeFilter
    colors: OrdinalColors = field(default_factory=OrdinalColors)
    region: SelectionRegion | None = None

    @classmethod
    def from_records(cls, records: Sequence[LineRecord], config: Config) -> "VizContext":
        commits = process_commits(records, config.repo_url)
        return cls(
            config=config,
            lines=tuple(records),
            commits=tuple(commits),
            time_filter=TimeFilter(commits, config.slider),
        )

    @classmethod
    def load(cls, config: Config) -> "VizContext":
        """Read the configured log. Load errors propagate; nothing is rendered."""
        records = load_log(config.resolved_data_path, timeout=config.fetch_timeout)
        return cls.from_records(records, config)

    @property
    def view(self) -> FilteredView:
        return self.time_filter.view


class CommitExplorer:
    """Routes slider, scroll, hover and brush events through full re-renders."""

    def __init__(
        self,
        context: VizContext,
        surface: ChartSurface | None,
        panels: Panels | None = None,
    ) -> None:
        self.context = context
        self.panels = panels or Panels()
        self.breakdown = BreakdownRenderer(
            context.colors, self.panels.files, self.panels.languages,
        )
        self.scatter = ScatterPlot(
            context.config.chart,
            surface,
            self.breakdown,
            tooltip=self.panels.tooltip,
            selection_count=self.panels.selection_count,
        )

    def initial_render(self) -> None:
        if self.panels.stats is not None:
            stats = summarize(self.context.lines, self.context.commits)
            self.panels.stats.set_html(render_stats(stats))
        self._render_view()

    def set_progress(self, progress: float) -> FilteredView:
        """Slider/scroller entry point: recompute the view and redraw everything."""
        self.context.time_filter.set_progress(progress)
        self._render_view()
        return self.context.view

    def _render_view(self) -> None:
        view = self.context.view
        self.scatter.render(view.commits, self.context.region)
        if self.panels.slider_label is not None:
            self.panels.slider_label.set_html(self.context.time_filter.cutoff_label())

    def brush(self, region: SelectionRegion | None) -> list[Commit]:
        self.context.region = region
        return self.scatter.brush(region)

    def hover(self, commit_id: str, pointer: Point) -> None:
        self.scatter.hover(commit_id, pointer)

    def leave(self) -> None:
        self.scatter.leave()
