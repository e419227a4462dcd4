"""Group line records into commits, sorted chronologically."""

import logging
from collections.abc import Iterable

from locviz.models import Commit, LineRecord

logger = logging.getLogger(__name__)

HEADER_FIELDS = ("author", "date", "time", "timezone", "datetime")


def commit_url(repo_url: str, commit_id: str) -> str:
    if not repo_url.endswith("/"):
        repo_url += "/"
    return repo_url + commit_id


def _warn_on_disagreement(commit_id: str, first: LineRecord, lines: list[LineRecord]) -> None:
    """Log header fields that differ from the first record. First one wins."""
    for record in lines[1:]:
        for name in HEADER_FIELDS:
            if getattr(record, name) != getattr(first, name):
                logger.warning(
                    "Commit %s: line %s:%d disagrees on %s (%r != %r); keeping first",
                    commit_id, record.file, record.line, name,
                    getattr(record, name), getattr(first, name),
                )


def process_commits(records: Iterable[LineRecord], repo_url: str) -> list[Commit]:
    """Group records by commit id and return commits sorted by timestamp.

    Header fields (author, date, time, timezone, datetime) come from the first
    record seen for each commit. The sort is stable, so commits with equal
    timestamps keep first-seen order.
    """
    groups: dict[str, list[LineRecord]] = {}
    for record in records:
        groups.setdefault(record.commit, []).append(record)

    commits: list[Commit] = []
    for commit_id, lines in groups.items():
        first = lines[0]
        _warn_on_disagreement(commit_id, first, lines)
        commits.append(Commit(
            id=commit_id,
            url=commit_url(repo_url, commit_id),
            author=first.author,
            date=first.date,
            time=first.time,
            timezone=first.timezone,
            datetime=first.datetime,
            lines=tuple(lines),
        ))

    commits.sort(key=lambda c: c.datetime)
    logger.debug("Aggregated %d commits", len(commits))
    return commits
