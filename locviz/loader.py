"""Load the line-level commit log (loc.csv) into LineRecords."""

import csv
import datetime as dt
import io
import logging
from pathlib import Path

import httpx
from pydantic import ValidationError

from locviz.errors import LogFetchError, LogParseError
from locviz.models import LineRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "commit", "author", "file", "line", "depth", "length",
    "date", "time", "timezone", "type", "datetime",
)
INT_COLUMNS = ("line", "depth", "length")


def read_log_source(source: str | Path, timeout: float = 30.0) -> str:
    """Return the raw text of the log from a local path or an http(s) URL."""
    source_str = str(source)
    if source_str.startswith(("http://", "https://")):
        try:
            resp = httpx.get(source_str, timeout=timeout, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Fetching %s failed with HTTP %d", source_str, e.response.status_code)
            raise LogFetchError(source_str, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Fetching %s failed: %s", source_str, e)
            raise LogFetchError(source_str, str(e)) from e
        return resp.text

    try:
        return Path(source_str).read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Reading %s failed: %s", source_str, e)
        raise LogFetchError(source_str, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        logger.error("Reading %s failed: %s", source_str, e)
        raise LogFetchError(source_str, "not valid UTF-8") from e


def _parse_offset(value: str, row: int) -> dt.timezone:
    try:
        parsed = dt.datetime.fromisoformat(f"2000-01-01T00:00{value}")
    except ValueError as e:
        raise LogParseError(row, "timezone", value, str(e)) from e
    if parsed.tzinfo is None:
        raise LogParseError(row, "timezone", value, "no UTC offset")
    return dt.timezone(parsed.utcoffset())  # type: ignore[arg-type]


def _parse_row(raw: dict[str, str], row: int) -> LineRecord:
    for col in REQUIRED_COLUMNS:
        if raw.get(col) is None:
            raise LogParseError(row, col, None, "missing column")

    ints: dict[str, int] = {}
    for col in INT_COLUMNS:
        try:
            ints[col] = int(raw[col].strip())
        except ValueError as e:
            raise LogParseError(row, col, raw[col], "not an integer") from e

    timezone = raw["timezone"].strip()
    offset = _parse_offset(timezone, row)

    try:
        date = dt.datetime.fromisoformat(raw["date"].strip()).replace(tzinfo=offset)
    except ValueError as e:
        raise LogParseError(row, "date", raw["date"], str(e)) from e
    # Only the calendar day counts; any time component becomes local midnight.
    date = date.replace(hour=0, minute=0, second=0, microsecond=0)

    try:
        time = dt.time.fromisoformat(raw["time"].strip())
    except ValueError as e:
        raise LogParseError(row, "time", raw["time"], str(e)) from e

    try:
        timestamp = dt.datetime.fromisoformat(raw["datetime"].strip())
    except ValueError as e:
        raise LogParseError(row, "datetime", raw["datetime"], str(e)) from e
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=offset)
    else:
        # Wall-clock fields follow the row's own timezone column.
        timestamp = timestamp.astimezone(offset)

    try:
        return LineRecord(
            commit=raw["commit"],
            author=raw["author"],
            file=raw["file"],
            date=date,
            time=time.replace(tzinfo=None),
            timezone=timezone,
            datetime=timestamp,
            type=raw["type"],
            **ints,
        )
    except ValidationError as e:
        err = e.errors()[0]
        column = str(err["loc"][0]) if err["loc"] else "?"
        raise LogParseError(row, column, raw.get(column), err["msg"]) from e


def parse_log(text: str) -> list[LineRecord]:
    """Parse CSV text into LineRecords, in row order.

    Any bad row rejects the whole log; no record is silently dropped.
    """
    reader = csv.DictReader(io.StringIO(text))
    try:
        fieldnames = reader.fieldnames
    except csv.Error as e:
        raise LogParseError(0, "?", None, str(e)) from e
    if fieldnames is None:
        return []

    missing = [c for c in REQUIRED_COLUMNS if c not in fieldnames]
    if missing:
        raise LogParseError(0, missing[0], None, "missing column in header")

    records: list[LineRecord] = []
    try:
        for row, raw in enumerate(reader, start=1):
            records.append(_parse_row(raw, row))
    except csv.Error as e:
        raise LogParseError(reader.line_num - 1, "?", None, str(e)) from e
    return records


def load_log(source: str | Path, timeout: float = 30.0) -> list[LineRecord]:
    """Fetch and parse the commit log."""
    text = read_log_source(source, timeout=timeout)
    try:
        records = parse_log(text)
    except LogParseError:
        logger.error("Rejecting commit log from %s", source, exc_info=True)
        raise
    logger.info("Loaded %d line records from %s", len(records), source)
    return records
