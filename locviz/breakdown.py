"""File and language breakdown for a set of commits."""

import html
import logging
from collections import Counter
from collections.abc import Sequence

from locviz.models import Commit, FileSummary, LanguageShare, LineRecord
from locviz.scales import OrdinalColors
from locviz.surface import HTMLPanel

logger = logging.getLogger(__name__)


def _flatten(commits: Sequence[Commit]) -> list[LineRecord]:
    return [line for commit in commits for line in commit.lines]


def file_breakdown(commits: Sequence[Commit]) -> list[FileSummary]:
    """One summary per touched file, most-edited first (ties keep first-seen order)."""
    by_file: dict[str, list[LineRecord]] = {}
    for line in _flatten(commits):
        by_file.setdefault(line.file, []).append(line)

    summaries = [
        FileSummary(
            name=name,
            total_lines=len(lines),
            type_counts=tuple(Counter(line.type for line in lines).items()),
            line_types=tuple(line.type for line in lines),
        )
        for name, lines in by_file.items()
    ]
    summaries.sort(key=lambda f: -f.total_lines)
    return summaries


def language_breakdown(commits: Sequence[Commit]) -> list[LanguageShare]:
    """Lines per language across the whole subset, in first-seen order."""
    lines = _flatten(commits)
    if not lines:
        return []
    counts = Counter(line.type for line in lines)
    return [
        LanguageShare(language=lang, lines=n, proportion=n / len(lines))
        for lang, n in counts.items()
    ]


def render_files(files: Sequence[FileSummary], colors: OrdinalColors) -> str:
    blocks = []
    for f in files:
        units = "".join(
            f'<div class="loc" style="--color: {colors(t)}"></div>' for t in f.line_types
        )
        blocks.append(
            "<div>\n"
            f"  <dt><code>{html.escape(f.name)}</code><small>{f.total_lines} lines</small></dt>\n"
            f"  <dd>{units}</dd>\n"
            "</div>"
        )
    return "\n".join(blocks)


def render_languages(shares: Sequence[LanguageShare], colors: OrdinalColors) -> str:
    return "\n".join(
        f'<dt style="--color: {colors(s.language)}">{html.escape(s.language)}</dt>'
        f"<dd>{s.lines} lines ({s.percent_label})</dd>"
        for s in shares
    )


class BreakdownRenderer:
    """Writes the per-file and per-language panels.

    The colour scale is shared for the whole session so a language keeps
    its colour across re-renders.
    """

    def __init__(
        self,
        colors: OrdinalColors,
        files_panel: HTMLPanel | None = None,
        languages_panel: HTMLPanel | None = None,
    ) -> None:
        self.colors = colors
        self.files_panel = files_panel
        self.languages_panel = languages_panel
        self.files: list[FileSummary] = []
        self.languages: list[LanguageShare] = []

    def render(self, commits: Sequence[Commit]) -> None:
        self.files = file_breakdown(commits)
        self.languages = language_breakdown(commits)

        for panel, content in (
            (self.files_panel, render_files(self.files, self.colors)),
            (self.languages_panel, render_languages(self.languages, self.colors)),
        ):
            if panel is None:
                logger.debug("Breakdown target unavailable; skipping")
                continue
            if not commits:
                panel.clear()
            else:
                panel.set_html(content)
