"""Scale objects mapping data values to pixel space and back.

Modelled on d3's linear, sqrt, time and ordinal scales. Only what the
scatter plot and the time filter need is implemented.
"""

import bisect
import datetime as dt
import math
from collections.abc import Hashable, Iterable
from typing import TypeVar

T = TypeVar("T")

TABLEAU10 = [
    "#4e79a7", "#f28e2b", "#e15759", "#76b7b2", "#59a14f",
    "#edc948", "#b07aa1", "#ff9da7", "#9c755f", "#bab0ac",
]

# Thresholds between tick step factors 1, 2, 5, 10
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def extent(values: Iterable[T]) -> tuple[T, T] | None:
    """Return (min, max) of values, or None when empty."""
    items = list(values)
    if not items:
        return None
    return min(items), max(items)  # type: ignore[type-var]


def tick_step(start: float, stop: float, count: int) -> float:
    raw = abs(stop - start) / max(count, 1)
    if raw == 0:
        return 0.0
    power = math.floor(math.log10(raw))
    error = raw / 10 ** power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    return factor * 10 ** power


def _interpolate(t: float, r0: float, r1: float) -> float:
    return r0 + t * (r1 - r0)


class LinearScale:
    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return (r0 + r1) / 2
        return _interpolate((value - d0) / (d1 - d0), r0, r1)

    def invert(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return d0
        return _interpolate((value - r0) / (r1 - r0), d0, d1)

    def ticks(self, count: int = 10) -> list[float]:
        lo, hi = sorted(self.domain)
        step = tick_step(lo, hi, count)
        if step == 0:
            return [lo]
        first = math.ceil(lo / step - 1e-9)
        last = math.floor(hi / step + 1e-9)
        return [round(i * step, 10) for i in range(first, last + 1)]


class SqrtScale(LinearScale):
    """Area-proportional scale: radius grows with the square root of value."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]) -> None:
        super().__init__(domain, range_)
        self._sqrt_domain = (_sqrt(self.domain[0]), _sqrt(self.domain[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self._sqrt_domain
        r0, r1 = self.range
        if d0 == d1:
            return (r0 + r1) / 2
        return _interpolate((_sqrt(value) - d0) / (d1 - d0), r0, r1)

    def invert(self, value: float) -> float:
        d0, d1 = self._sqrt_domain
        r0, r1 = self.range
        if r0 == r1:
            return self.domain[0]
        root = _interpolate((value - r0) / (r1 - r0), d0, d1)
        return math.copysign(root * root, root)


def _sqrt(value: float) -> float:
    return math.copysign(math.sqrt(abs(value)), value)


# --- Time scale ---

_SECOND = 1
_MINUTE = 60
_HOUR = 3600
_DAY = 86400
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY

# (unit, step, approximate duration in seconds), ascending
TIME_INTERVALS: list[tuple[str, int, int]] = [
    ("second", 1, _SECOND),
    ("second", 5, 5 * _SECOND),
    ("second", 15, 15 * _SECOND),
    ("second", 30, 30 * _SECOND),
    ("minute", 1, _MINUTE),
    ("minute", 5, 5 * _MINUTE),
    ("minute", 15, 15 * _MINUTE),
    ("minute", 30, 30 * _MINUTE),
    ("hour", 1, _HOUR),
    ("hour", 3, 3 * _HOUR),
    ("hour", 6, 6 * _HOUR),
    ("hour", 12, 12 * _HOUR),
    ("day", 1, _DAY),
    ("day", 2, 2 * _DAY),
    ("week", 1, _WEEK),
    ("month", 1, _MONTH),
    ("month", 3, 3 * _MONTH),
    ("year", 1, _YEAR),
]
_DURATIONS = [d for _, _, d in TIME_INTERVALS]

TICK_FORMATS = {
    "second": ":%S",
    "minute": "%I:%M",
    "hour": "%I %p",
    "day": "%a %d",
    "week": "%b %d",
    "month": "%B",
    "year": "%Y",
}


def _floor_time(value: dt.datetime, unit: str, step: int) -> dt.datetime:
    if unit == "second":
        return value.replace(second=value.second - value.second % step, microsecond=0)
    if unit == "minute":
        return value.replace(minute=value.minute - value.minute % step, second=0, microsecond=0)
    if unit == "hour":
        return value.replace(hour=value.hour - value.hour % step, minute=0, second=0, microsecond=0)
    midnight = value.replace(hour=0, minute=0, second=0, microsecond=0)
    if unit == "day":
        return midnight - dt.timedelta(days=(value.day - 1) % step)
    if unit == "week":
        # weeks start on Sunday
        return midnight - dt.timedelta(days=(value.weekday() + 1) % 7)
    if unit == "month":
        return midnight.replace(day=1, month=value.month - (value.month - 1) % step)
    return midnight.replace(month=1, day=1, year=value.year - value.year % step)


def _offset_time(value: dt.datetime, unit: str, step: int) -> dt.datetime:
    if unit in ("second", "minute", "hour", "day", "week"):
        seconds = {"second": _SECOND, "minute": _MINUTE, "hour": _HOUR, "day": _DAY, "week": _WEEK}[unit]
        return value + dt.timedelta(seconds=seconds * step)
    if unit == "month":
        months = value.year * 12 + value.month - 1 + step
        return value.replace(year=months // 12, month=months % 12 + 1)
    return value.replace(year=value.year + step)


class TimeScale:
    """Maps aware datetimes onto a numeric range."""

    def __init__(self, domain: tuple[dt.datetime, dt.datetime], range_: tuple[float, float]) -> None:
        self.tz = domain[0].tzinfo or dt.timezone.utc
        self.domain = (domain[0].astimezone(self.tz), domain[1].astimezone(self.tz))
        self.range = (float(range_[0]), float(range_[1]))

    def _linear(self) -> LinearScale:
        return LinearScale((self.domain[0].timestamp(), self.domain[1].timestamp()), self.range)

    def __call__(self, value: dt.datetime) -> float:
        return self._linear()(value.timestamp())

    def invert(self, value: float) -> dt.datetime:
        return dt.datetime.fromtimestamp(self._linear().invert(value), tz=self.tz)

    def tick_interval(self, count: int = 10) -> tuple[str, int]:
        span = abs(self.domain[1].timestamp() - self.domain[0].timestamp())
        target = span / max(count, 1)
        i = bisect.bisect_right(_DURATIONS, target)
        if i == len(TIME_INTERVALS):
            years = max(1, round(tick_step(self.domain[0].year, self.domain[1].year, count)))
            return "year", years
        if i == 0:
            return "second", 1
        lower, upper = TIME_INTERVALS[i - 1], TIME_INTERVALS[i]
        chosen = lower if target / lower[2] < upper[2] / target else upper
        return chosen[0], chosen[1]

    def nice(self, count: int = 10) -> "TimeScale":
        """Extend the domain outward to whole tick intervals."""
        d0, d1 = self.domain
        if d0 == d1:
            return self
        unit, step = self.tick_interval(count)
        start = _floor_time(d0, unit, step)
        end = _floor_time(d1, unit, step)
        if end < d1:
            end = _offset_time(end, unit, step)
        self.domain = (start, end)
        return self

    def ticks(self, count: int = 10) -> list[dt.datetime]:
        d0, d1 = self.domain
        if d0 == d1:
            return [d0]
        unit, step = self.tick_interval(count)
        current = _floor_time(d0, unit, step)
        if current < d0:
            current = _offset_time(current, unit, step)
        result: list[dt.datetime] = []
        while current <= d1 and len(result) < 1000:
            result.append(current)
            current = _offset_time(current, unit, step)
        return result

    def tick_format(self, count: int = 10) -> str:
        unit, _ = self.tick_interval(count)
        return TICK_FORMATS[unit]


# --- Ordinal colours ---


class OrdinalColors:
    """Assigns palette colours to keys in first-seen order; a key's colour never changes."""

    def __init__(self, palette: list[str] | None = None) -> None:
        self.palette = list(palette or TABLEAU10)
        self._assigned: dict[Hashable, str] = {}

    def __call__(self, key: Hashable) -> str:
        if key not in self._assigned:
            self._assigned[key] = self.palette[len(self._assigned) % len(self.palette)]
        return self._assigned[key]

    @property
    def domain(self) -> list[Hashable]:
        return list(self._assigned)
