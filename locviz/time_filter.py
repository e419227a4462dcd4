"""Map slider/scroll progress to a cutoff instant and the commits visible at it."""

import datetime as dt
import logging
from collections.abc import Sequence

from locviz.config import SliderConfig
from locviz.models import Commit, FilteredView
from locviz.scales import TimeScale

logger = logging.getLogger(__name__)

ANY_TIME = "any time"
SNAP_TOLERANCE = dt.timedelta(milliseconds=1)


def format_cutoff(cutoff: dt.datetime) -> str:
    """Long date plus short time, e.g. 'March 4, 2025 at 9:05 PM'."""
    hour = cutoff.hour % 12 or 12
    return (
        f"{cutoff.strftime('%B')} {cutoff.day}, {cutoff.year} "
        f"at {hour}:{cutoff.minute:02d} {'AM' if cutoff.hour < 12 else 'PM'}"
    )


class TimeFilter:
    """Holds progress and recomputes the filtered view from scratch on every change.

    The progress -> instant scale spans the full commit set's timestamp
    extent and is built once. Commits must already be sorted by timestamp.
    """

    def __init__(self, commits: Sequence[Commit], slider: SliderConfig | None = None) -> None:
        self.commits = tuple(commits)
        self.slider = slider or SliderConfig()
        self.time_scale: TimeScale | None = None
        if self.commits:
            self.time_scale = TimeScale(
                (self.commits[0].datetime, self.commits[-1].datetime),
                (self.slider.minimum, self.slider.maximum),
            )
        self.progress = self.slider.maximum
        self._view = self._compute()

    @property
    def view(self) -> FilteredView:
        return self._view

    @property
    def cutoff(self) -> dt.datetime | None:
        return self._view.cutoff

    def clamp(self, progress: float) -> float:
        return min(max(progress, self.slider.minimum), self.slider.maximum)

    def set_progress(self, progress: float) -> FilteredView:
        self.progress = self.clamp(progress)
        self._view = self._compute()
        logger.debug(
            "Progress %.2f -> cutoff %s (%d commits)",
            self.progress, self._view.cutoff, len(self._view.commits),
        )
        return self._view

    def _compute(self) -> FilteredView:
        if self.time_scale is None:
            return FilteredView()
        if self.progress >= self.slider.maximum:
            cutoff = self.commits[-1].datetime
        elif self.progress <= self.slider.minimum:
            cutoff = self.commits[0].datetime
        else:
            cutoff = self._snap(self.time_scale.invert(self.progress))
        visible = [c for c in self.commits if c.datetime <= cutoff]
        return FilteredView.from_commits(visible, cutoff)

    def _snap(self, cutoff: dt.datetime) -> dt.datetime:
        """Absorb float round-trip error so a commit's own progress includes it."""
        for commit in self.commits:
            if abs(commit.datetime - cutoff) < SNAP_TOLERANCE:
                return max(cutoff, commit.datetime)
        return cutoff

    def progress_for(self, commit: Commit) -> float:
        """Progress value whose cutoff lands on the commit's timestamp."""
        if self.time_scale is None:
            return self.slider.maximum
        if commit.datetime >= self.commits[-1].datetime:
            return self.slider.maximum
        if commit.datetime <= self.commits[0].datetime:
            return self.slider.minimum
        return self.clamp(self.time_scale(commit.datetime))

    def cutoff_label(self) -> str:
        if self._view.cutoff is None or self.progress >= self.slider.maximum:
            return ANY_TIME
        return format_cutoff(self._view.cutoff)
