"""Tests for the file and language breakdown."""

import datetime as dt

from conftest import REPO_URL
from locviz.aggregator import process_commits
from locviz.breakdown import BreakdownRenderer, file_breakdown, language_breakdown
from locviz.scales import OrdinalColors
from locviz.surface import HTMLPanel


class TestFileBreakdown:
    def test_sorted_by_line_count(self, sample_commits):
        files = file_breakdown(sample_commits)
        assert [(f.name, f.total_lines) for f in files] == [("x.js", 3), ("y.py", 2)]

    def test_type_tallies_within_file(self, make_records):
        when = dt.datetime(2025, 3, 1, 9)
        records = make_records("a", when, 3, file="index.html", type="html") + make_records(
            "b", when + dt.timedelta(hours=1), 2, file="index.html", type="css",
        )
        files = file_breakdown(process_commits(records, REPO_URL))
        assert len(files) == 1
        assert files[0].type_counts == (("html", 3), ("css", 2))
        assert files[0].line_types == ("html", "html", "html", "css", "css")

    def test_ties_keep_first_seen_order(self, make_records):
        when = dt.datetime(2025, 3, 1, 9)
        records = make_records("a", when, 2, file="b.py") + make_records("a", when, 2, file="a.py")
        files = file_breakdown(process_commits(records, REPO_URL))
        assert [f.name for f in files] == ["b.py", "a.py"]

    def test_empty(self):
        assert file_breakdown([]) == []


class TestLanguageBreakdown:
    def test_single_language_subset(self, sample_commits):
        shares = language_breakdown(sample_commits[:1])
        assert len(shares) == 1
        assert shares[0].language == "js"
        assert shares[0].lines == 3
        assert shares[0].percent_label == "100.0%"

    def test_percentages(self, sample_commits):
        shares = {s.language: s for s in language_breakdown(sample_commits)}
        assert shares["js"].percent_label == "60.0%"
        assert shares["py"].percent_label == "40.0%"
        assert sum(s.proportion for s in shares.values()) == 1.0

    def test_one_decimal_place(self, make_records):
        when = dt.datetime(2025, 3, 1, 9)
        records = make_records("a", when, 1, type="js") + make_records("a", when, 2, type="py")
        shares = {s.language: s for s in language_breakdown(process_commits(records, REPO_URL))}
        assert shares["js"].percent_label == "33.3%"
        assert shares["py"].percent_label == "66.7%"


class TestBreakdownRenderer:
    def test_renders_panels(self, sample_commits):
        files, langs = HTMLPanel("files"), HTMLPanel("language-breakdown")
        BreakdownRenderer(OrdinalColors(), files, langs).render(sample_commits)
        assert "<code>x.js</code>" in files.html
        assert files.html.index("x.js") < files.html.index("y.py")
        assert files.html.count('class="loc"') == 5
        assert "3 lines (60.0%)" in langs.html

    def test_empty_clears_panels(self, sample_commits):
        files, langs = HTMLPanel("files"), HTMLPanel("language-breakdown")
        renderer = BreakdownRenderer(OrdinalColors(), files, langs)
        renderer.render(sample_commits)
        renderer.render([])
        assert files.html == ""
        assert langs.html == ""

    def test_language_colour_stable_across_renders(self, sample_commits):
        colors = OrdinalColors()
        langs = HTMLPanel("language-breakdown")
        renderer = BreakdownRenderer(colors, None, langs)
        renderer.render(sample_commits[1:])
        py_colour = colors("py")
        renderer.render(sample_commits)
        assert colors("py") == py_colour
        assert f"--color: {py_colour}" in langs.html

    def test_missing_targets_do_not_fail(self, sample_commits):
        renderer = BreakdownRenderer(OrdinalColors())
        renderer.render(sample_commits)
        assert len(renderer.files) == 2
