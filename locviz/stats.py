"""Summary statistics shown above the scatter plot."""

import html
from collections import Counter
from collections.abc import Sequence

from locviz.models import Commit, CommitStats, LineRecord, LongestFile


def period_of_day(hour: int) -> str:
    if hour < 6:
        return "Night"
    if hour < 12:
        return "Morning"
    if hour < 18:
        return "Afternoon"
    return "Evening"


def summarize(lines: Sequence[LineRecord], commits: Sequence[Commit]) -> CommitStats:
    if not lines:
        return CommitStats(total_commits=len(commits))

    file_lengths = Counter(line.file for line in lines)
    # Counter keeps insertion order, so max() keeps the first file on ties
    longest_name = max(file_lengths, key=lambda name: file_lengths[name])
    periods = Counter(period_of_day(line.datetime.hour) for line in lines)

    return CommitStats(
        total_loc=len(lines),
        total_commits=len(commits),
        total_files=len(file_lengths),
        longest_file=LongestFile(name=longest_name, lines=file_lengths[longest_name]),
        average_file_length=sum(file_lengths.values()) / len(file_lengths),
        max_depth=max(line.depth for line in lines),
        busiest_period=max(periods, key=lambda p: periods[p]),
    )


def render_stats(stats: CommitStats) -> str:
    """Render stats as a ``<dl class="stats">`` fragment."""
    rows = [
        ('Total <abbr title="Lines of code">LOC</abbr>', str(stats.total_loc)),
        ("Total commits", str(stats.total_commits)),
        ("Files", str(stats.total_files)),
    ]
    if stats.longest_file is not None:
        rows.append((
            "Longest file",
            f'{stats.longest_file.lines} <small>({html.escape(stats.longest_file.name)})</small>',
        ))
    rows.append(("Average file length", f"{stats.average_file_length:.1f}"))
    rows.append(("Max depth", str(stats.max_depth)))
    if stats.busiest_period is not None:
        rows.append(("Time of day most work is done", stats.busiest_period))

    body = "\n".join(f"  <dt>{dt}</dt><dd>{dd}</dd>" for dt, dd in rows)
    return f'<dl class="stats">\n{body}\n</dl>'
