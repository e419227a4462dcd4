"""Scroll-driven narrative: one text step per commit, each moving the time filter."""

import html
import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from locviz.explorer import CommitExplorer
from locviz.models import Commit, NarrativeStep
from locviz.time_filter import format_cutoff

logger = logging.getLogger(__name__)

StepCallback = Callable[[int], None]


def step_text(index: int, commit: Commit) -> str:
    when = f"{commit.datetime.strftime('%A')}, {format_cutoff(commit.datetime)}"
    made = "my first commit" if index == 0 else "another commit"
    n_files = len(commit.files)
    return (
        f'On {when}, I made <a href="{html.escape(commit.url)}" target="_blank">{made}</a>. '
        f"I edited {commit.total_lines} lines across {n_files} file{'s' if n_files != 1 else ''}."
    )


def build_steps(commits: Sequence[Commit]) -> list[NarrativeStep]:
    """One step per commit, in the commits' chronological order."""
    return [
        NarrativeStep(index=i, commit_id=c.id, text=step_text(i, c))
        for i, c in enumerate(commits)
    ]


class StepNotifier(Protocol):
    """Delivers "step entered view" events as step indices."""

    def subscribe(self, callback: StepCallback) -> None: ...


class ListStepNotifier:
    """In-process notifier that replays a sequence of step-enter events."""

    def __init__(self) -> None:
        self._callbacks: list[StepCallback] = []

    def subscribe(self, callback: StepCallback) -> None:
        self._callbacks.append(callback)

    def enter(self, index: int) -> None:
        for callback in self._callbacks:
            callback(index)

    def replay(self, indices: Sequence[int]) -> None:
        for index in indices:
            self.enter(index)


class NarrativeScroller:
    def __init__(self, explorer: CommitExplorer) -> None:
        self.explorer = explorer
        self.commits = explorer.context.commits
        self.steps = build_steps(self.commits)

    def bind(self, notifier: StepNotifier) -> None:
        notifier.subscribe(self.on_step_enter)

    def on_step_enter(self, index: int) -> None:
        """Move the time filter to the step's commit and re-render."""
        if not 0 <= index < len(self.commits):
            logger.warning("Ignoring step %d; narrative has %d steps", index, len(self.commits))
            return
        commit = self.commits[index]
        progress = self.explorer.context.time_filter.progress_for(commit)
        self.explorer.set_progress(progress)
