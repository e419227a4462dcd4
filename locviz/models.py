"""Pydantic models for locviz."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"

    @property
    def css_value(self) -> str:
        """Value for the CSS ``color-scheme`` property on the page root."""
        if self is ThemePreference.AUTO:
            return "light dark"
        return self.value


# --- Log models (what comes out of loc.csv) ---


class LineRecord(BaseModel):
    """One edited source line from the commit log."""
    model_config = ConfigDict(frozen=True)

    commit: str
    author: str
    file: str
    line: int = Field(ge=1)
    depth: int = Field(ge=0)
    length: int = Field(ge=0)
    date: dt.datetime  # local midnight at the row's UTC offset
    time: dt.time
    timezone: str
    datetime: dt.datetime
    type: str


class Commit(BaseModel):
    """All line records sharing one commit id, with derived stats."""
    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    author: str
    date: dt.datetime
    time: dt.time
    timezone: str
    datetime: dt.datetime
    lines: tuple[LineRecord, ...] = ()

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    @property
    def hour_frac(self) -> float:
        """Time of day in the commit's own offset, as hours in [0, 24)."""
        return self.datetime.hour + self.datetime.minute / 60

    @property
    def files(self) -> list[str]:
        """Distinct file paths touched, in first-seen order."""
        return list(dict.fromkeys(line.file for line in self.lines))


# --- Derived views (recomputed, never stored) ---


class FilteredView(BaseModel):
    """Commits at or before the cutoff, plus their flattened line records."""
    model_config = ConfigDict(frozen=True)

    cutoff: dt.datetime | None = None
    commits: tuple[Commit, ...] = ()
    lines: tuple[LineRecord, ...] = ()

    @classmethod
    def from_commits(cls, commits: list[Commit], cutoff: dt.datetime | None) -> "FilteredView":
        return cls(
            cutoff=cutoff,
            commits=tuple(commits),
            lines=tuple(line for c in commits for line in c.lines),
        )

    @property
    def is_empty(self) -> bool:
        return not self.commits


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class SelectionRegion(BaseModel):
    """Rectangular brush region in plot pixel space, corners normalised."""
    model_config = ConfigDict(frozen=True)

    x0: float
    y0: float
    x1: float
    y1: float

    @model_validator(mode="before")
    @classmethod
    def _normalise_corners(cls, data: Any) -> Any:
        if isinstance(data, dict) and {"x0", "y0", "x1", "y1"} <= data.keys():
            data = dict(data)
            data["x0"], data["x1"] = sorted((data["x0"], data["x1"]))
            data["y0"], data["y1"] = sorted((data["y0"], data["y1"]))
        return data

    @classmethod
    def from_corners(
        cls, corner_a: tuple[float, float], corner_b: tuple[float, float],
    ) -> "SelectionRegion":
        return cls(x0=corner_a[0], y0=corner_a[1], x1=corner_b[0], y1=corner_b[1])

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


# --- Breakdown / stats output models ---


class FileSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    total_lines: int
    type_counts: tuple[tuple[str, int], ...]
    line_types: tuple[str, ...]  # one entry per line, for unit rendering


class LanguageShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    lines: int
    proportion: float

    @property
    def percent_label(self) -> str:
        return f"{self.proportion * 100:.1f}%"


class LongestFile(BaseModel):
    name: str
    lines: int


class CommitStats(BaseModel):
    total_loc: int = 0
    total_commits: int = 0
    total_files: int = 0
    longest_file: LongestFile | None = None
    average_file_length: float = 0.0
    max_depth: int = 0
    busiest_period: str | None = None


class NarrativeStep(BaseModel):
    """One scroll-synchronised text block, bound to one commit."""
    model_config = ConfigDict(frozen=True)

    index: int
    commit_id: str
    text: str
