"""Exceptions raised while loading and rendering the commit log."""


class LocvizError(Exception):
    """Base class for locviz errors."""


class LogFetchError(LocvizError):
    """The commit log could not be read."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not load commit log from {source}: {reason}")
        self.source = source
        self.reason = reason


class LogParseError(LocvizError):
    """A required field of the commit log could not be parsed.

    Rows are numbered from 1, not counting the header.
    """

    def __init__(self, row: int, column: str, value: str | None, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Row {row}: bad {column!r} value {value!r}{detail}")
        self.row = row
        self.column = column
        self.value = value


class RenderTargetUnavailable(LocvizError):
    """A renderer was asked to draw into a target that does not exist."""
