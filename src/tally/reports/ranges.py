"""Time range resolution for report commands.

Shorthands ("today", "week", "all") and ``--from``/``--to`` strings are turned
into concrete half-open ``[start, end)`` bounds here, before anything reaches
the report engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Tried in order; the first match wins.
DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d %H")
DATE_FORMATS = ("%Y-%m-%d",)
TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%H")

TODAY = "today"
WEEK = "week"
ALL = "all"


@dataclass(frozen=True)
class TimeRange:
    """Half-open interval ``[start, end)``; ``None`` leaves a side unbounded."""

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.end < self.start:
            raise ValueError(
                f"range end {self.end.isoformat()} is before start "
                f"{self.start.isoformat()}"
            )

    @classmethod
    def everything(cls) -> TimeRange:
        return cls()

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, moment: datetime) -> bool:
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment >= self.end:
            return False
        return True


class ParsedMoment(NamedTuple):
    value: datetime
    date_only: bool


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_range(day: date, tz: tzinfo) -> TimeRange:
    return TimeRange(start_of_day(day, tz), start_of_day(day + timedelta(days=1), tz))


def today(now: datetime, tz: tzinfo) -> TimeRange:
    return day_range(now.astimezone(tz).date(), tz)


def this_week(now: datetime, tz: tzinfo) -> TimeRange:
    """Monday 00:00 up to the following Monday 00:00, local time."""
    local_day = now.astimezone(tz).date()
    monday = local_day - timedelta(days=local_day.weekday())
    return TimeRange(
        start_of_day(monday, tz), start_of_day(monday + timedelta(days=7), tz)
    )


def parse_moment(text: str, now: datetime, tz: tzinfo) -> ParsedMoment:
    """Parse a user supplied point in time.

    Accepts ``YYYY-mm-dd[ HH[:MM[:SS]]]`` and ``HH[:MM[:SS]]`` (today), then
    falls back to dateparser for anything else ("yesterday 17:00", ...).

    Raises:
        ValueError: If the text cannot be interpreted.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty time value")

    for fmt in DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return ParsedMoment(parsed.replace(tzinfo=tz), date_only=False)

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return ParsedMoment(start_of_day(parsed.date(), tz), date_only=True)

    local_today = now.astimezone(tz).date()
    for fmt in TIME_FORMATS:
        try:
            parsed_time = datetime.strptime(text, fmt).time()
        except ValueError:
            continue
        return ParsedMoment(
            datetime.combine(local_today, parsed_time, tzinfo=tz), date_only=False
        )

    return ParsedMoment(_parse_natural(text, now, tz), date_only=False)


def resolve_range(
    selector: str | None,
    *,
    now: datetime,
    tz: tzinfo,
    start: str | None = None,
    end: str | None = None,
) -> tuple[TimeRange, str | None]:
    """Resolve a report selector plus optional bounds.

    ``selector`` is ``today`` (default), ``week``, ``all`` or a description
    substring. Returns the range and the description filter, if any.
    """
    selector = (selector or "").strip()
    if selector == WEEK:
        return this_week(now, tz), None
    if selector == ALL:
        return TimeRange.everything(), None

    description = selector if selector and selector != TODAY else None

    if start is None:
        lower = today(now, tz).start
        lower_day = now.astimezone(tz).date()
    else:
        parsed = parse_moment(start, now, tz)
        lower = parsed.value
        lower_day = parsed.value.astimezone(tz).date()

    if end is None:
        upper = day_range(lower_day, tz).end
    else:
        parsed = parse_moment(end, now, tz)
        # A bare date is inclusive of that whole day.
        upper = day_range(parsed.value.date(), tz).end if parsed.date_only else parsed.value

    time_range = TimeRange(lower, upper)
    logger.debug(
        "range_resolved",
        extra={
            "range.start": lower.isoformat() if lower else None,
            "range.end": upper.isoformat() if upper else None,
        },
    )
    return time_range, description


def _parse_natural(text: str, now: datetime, tz: tzinfo) -> datetime:
    import dateparser

    settings: dict = {
        "TIMEZONE": getattr(tz, "key", "UTC"),
        "RETURN_AS_TIMEZONE_AWARE": True,
        "PREFER_DATES_FROM": "past",
        "RELATIVE_BASE": now.astimezone(tz).replace(tzinfo=None),
    }
    parsed = dateparser.parse(text, settings=settings)
    if parsed is None:
        raise ValueError(f"Could not parse time: {text}")
    return parsed.astimezone(tz)
