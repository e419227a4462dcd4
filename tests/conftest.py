"""Shared test fixtures for locviz tests."""

import datetime as dt

import pytest

from locviz.aggregator import process_commits
from locviz.config import Config
from locviz.explorer import VizContext
from locviz.loader import parse_log
from locviz.models import LineRecord

REPO_URL = "https://github.com/example/site/commit/"
EST = dt.timezone(dt.timedelta(hours=-5))

HEADER = "commit,author,file,line,depth,length,date,time,timezone,type,datetime"

# b2 rows come first so the aggregator has to sort
SAMPLE_CSV = "\n".join([
    HEADER,
    "b2,alice,y.py,1,1,20,2025-01-03,15:30:00,-05:00,py,2025-01-03T15:30:00-05:00",
    "b2,alice,y.py,2,0,12,2025-01-03,15:30:00,-05:00,py,2025-01-03T15:30:00-05:00",
    "a1,alice,x.js,1,0,10,2025-01-01,10:00:00,-05:00,js,2025-01-01T10:00:00-05:00",
    "a1,alice,x.js,2,0,14,2025-01-01,10:00:00,-05:00,js,2025-01-01T10:00:00-05:00",
    "a1,alice,x.js,3,1,8,2025-01-01,10:00:00,-05:00,js,2025-01-01T10:00:00-05:00",
]) + "\n"


@pytest.fixture()
def config():
    return Config(repo_url=REPO_URL)


@pytest.fixture()
def sample_csv(tmp_path):
    """loc.csv with commit a1 (3 js lines) before commit b2 (2 py lines)."""
    path = tmp_path / "loc.csv"
    path.write_text(SAMPLE_CSV)
    return path


@pytest.fixture()
def sample_records():
    return parse_log(SAMPLE_CSV)


@pytest.fixture()
def sample_commits(sample_records):
    return process_commits(sample_records, REPO_URL)


@pytest.fixture()
def sample_context(sample_records, config):
    return VizContext.from_records(sample_records, config)


@pytest.fixture()
def make_records():
    """Factory: n LineRecords for one commit at a given EST wall-clock time."""

    def _make(
        commit: str,
        when: dt.datetime,
        n: int,
        file: str = "main.py",
        type: str = "py",
        author: str = "alice",
    ) -> list[LineRecord]:
        when = when.replace(tzinfo=EST) if when.tzinfo is None else when
        return [
            LineRecord(
                commit=commit,
                author=author,
                file=file,
                line=i + 1,
                depth=0,
                length=10,
                date=when.replace(hour=0, minute=0, second=0, microsecond=0),
                time=when.time(),
                timezone="-05:00",
                datetime=when,
                type=type,
            )
            for i in range(n)
        ]

    return _make
