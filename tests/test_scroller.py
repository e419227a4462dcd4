"""Tests for the narrative scroller and the explorer it drives."""

import logging

from locviz.explorer import CommitExplorer, VizContext
from locviz.models import SelectionRegion
from locviz.scatter import project
from locviz.scroller import ListStepNotifier, NarrativeScroller, build_steps
from locviz.surface import SVGSurface
from locviz.time_filter import ANY_TIME


def make_explorer(context):
    chart = context.config.chart
    explorer = CommitExplorer(context, SVGSurface(chart.width, chart.height))
    explorer.initial_render()
    return explorer


class TestBuildSteps:
    def test_one_step_per_commit(self, sample_commits):
        steps = build_steps(sample_commits)
        assert [s.commit_id for s in steps] == ["a1", "b2"]
        assert [s.index for s in steps] == [0, 1]

    def test_first_commit_wording(self, sample_commits):
        steps = build_steps(sample_commits)
        assert "my first commit" in steps[0].text
        assert "another commit" not in steps[0].text
        assert "another commit" in steps[1].text

    def test_counts(self, sample_commits):
        step = build_steps(sample_commits)[0]
        assert "edited 3 lines across 1 file." in step.text
        assert "Wednesday, January 1, 2025 at 10:00 AM" in step.text
        assert sample_commits[0].url in step.text

    def test_empty(self):
        assert build_steps([]) == []


class TestNarrativeScroller:
    def test_step_enter_filters_to_commit(self, sample_context):
        explorer = make_explorer(sample_context)
        scroller = NarrativeScroller(explorer)
        scroller.on_step_enter(0)
        assert [c.id for c in sample_context.view.commits] == ["a1"]
        assert explorer.panels.slider_label.html != ANY_TIME
        assert list(explorer.scatter.surface.marks) == ["a1"]

    def test_last_step_shows_everything(self, sample_context):
        explorer = make_explorer(sample_context)
        scroller = NarrativeScroller(explorer)
        scroller.on_step_enter(0)
        scroller.on_step_enter(1)
        assert len(sample_context.view.commits) == 2
        assert explorer.panels.slider_label.html == ANY_TIME

    def test_matches_slider_path(self, sample_context):
        explorer = make_explorer(sample_context)
        NarrativeScroller(explorer).on_step_enter(0)
        via_scroll = sample_context.view
        explorer.set_progress(0)
        assert sample_context.view == via_scroll

    def test_out_of_range_ignored(self, sample_context, caplog):
        explorer = make_explorer(sample_context)
        scroller = NarrativeScroller(explorer)
        with caplog.at_level(logging.WARNING, logger="locviz.scroller"):
            scroller.on_step_enter(7)
        assert len(sample_context.view.commits) == 2
        assert "Ignoring step 7" in caplog.text

    def test_bound_notifier(self, sample_context):
        explorer = make_explorer(sample_context)
        scroller = NarrativeScroller(explorer)
        notifier = ListStepNotifier()
        scroller.bind(notifier)
        notifier.replay([1, 0])
        assert [c.id for c in sample_context.view.commits] == ["a1"]


class TestCommitExplorer:
    def test_initial_render(self, sample_context):
        explorer = make_explorer(sample_context)
        assert "Total commits" in explorer.panels.stats.html
        assert explorer.panels.slider_label.html == ANY_TIME
        assert "js" in explorer.panels.languages.html

    def test_brush_survives_progress_change(self, sample_context):
        explorer = make_explorer(sample_context)
        region = SelectionRegion.from_corners((0, 0), (1000, 600))
        assert len(explorer.brush(region)) == 2
        explorer.set_progress(0)
        assert [c.id for c in explorer.scatter.selected] == ["a1"]
        assert explorer.panels.selection_count.html == "1 commit selected"

    def test_breakdown_tracks_filtered_view(self, sample_context):
        explorer = make_explorer(sample_context)
        explorer.set_progress(50)
        assert "3 lines (100.0%)" in explorer.panels.languages.html
        assert "py" not in explorer.panels.languages.html

    def test_hover_through_explorer(self, sample_context):
        explorer = make_explorer(sample_context)
        p = project(sample_context.commits[0], explorer.scatter.scales)
        explorer.hover("a1", p)
        assert not explorer.panels.tooltip.hidden
        explorer.leave()
        assert explorer.panels.tooltip.hidden

    def test_empty_log(self, config):
        context = VizContext.from_records([], config)
        explorer = make_explorer(context)
        explorer.set_progress(30)
        assert context.view.is_empty
        assert explorer.panels.languages.html == ""
        assert explorer.scatter.surface.marks == {}
