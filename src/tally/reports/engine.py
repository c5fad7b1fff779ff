"""Read-only aggregation over entry sequences.

The engine never mutates entries. ``now`` is sampled once at construction so
every open entry in one report is measured against the same instant.
"""

from __future__ import annotations

import logging
from builtins import list as builtin_list
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import TYPE_CHECKING, Any

from tally.entries.types import Entry
from tally.reports.ranges import TimeRange

if TYPE_CHECKING:
    from tally.entries.store import EntryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayTotal:
    day: date
    total: timedelta


@dataclass(frozen=True)
class Summary:
    """Per-day totals in chronological order plus the grand total."""

    days: builtin_list[DayTotal]
    total: timedelta

    @property
    def is_empty(self) -> bool:
        return not self.days


@dataclass(frozen=True)
class EntryRow:
    """An entry with its presentation-ready duration."""

    entry: Entry
    duration: timedelta

    @property
    def is_open(self) -> bool:
        return self.entry.is_open


class ReportEngine:
    """Computes totals, listings and exports for a sequence of entries."""

    def __init__(
        self,
        entries: Sequence[Entry],
        *,
        now: datetime | None = None,
        tz: tzinfo = UTC,
    ) -> None:
        self._entries = list(entries)
        self._now = now or datetime.now(UTC)
        self._tz = tz

    @classmethod
    def from_store(
        cls,
        store: EntryStore,
        *,
        now: datetime | None = None,
        tz: tzinfo = UTC,
    ) -> ReportEngine:
        return cls(store.list(), now=now, tz=tz)

    @property
    def now(self) -> datetime:
        return self._now

    def select(
        self,
        time_range: TimeRange | None = None,
        description: str | None = None,
    ) -> builtin_list[Entry]:
        """Entries whose start lies in ``time_range``, in stored order.

        Inclusion is tested on ``start`` only; entries are never clipped to
        the range.
        """
        if time_range is None or time_range.is_unbounded:
            selected = list(self._entries)
        else:
            selected = [e for e in self._entries if time_range.contains(e.start)]
        if description:
            selected = [e for e in selected if description in e.description]
        return selected

    def show(
        self,
        time_range: TimeRange | None = None,
        description: str | None = None,
    ) -> Summary:
        """Sum durations per local calendar day of each entry's start.

        Sessions crossing midnight count entirely towards their start day.
        """
        per_day: dict[date, timedelta] = {}
        for entry in self.select(time_range, description):
            day = entry.start.astimezone(self._tz).date()
            per_day[day] = per_day.get(day, timedelta(0)) + entry.duration(self._now)

        days = [DayTotal(day, per_day[day]) for day in sorted(per_day)]
        total = sum((d.total for d in days), timedelta(0))
        logger.debug(
            "report_summarized",
            extra={"report.days": len(days), "report.total_s": total.total_seconds()},
        )
        return Summary(days=days, total=total)

    def list(
        self,
        time_range: TimeRange | None = None,
        description: str | None = None,
    ) -> builtin_list[EntryRow]:
        return [
            EntryRow(entry=e, duration=e.duration(self._now))
            for e in self.select(time_range, description)
        ]

    def export(
        self,
        time_range: TimeRange | None = None,
        description: str | None = None,
    ) -> builtin_list[dict[str, Any]]:
        """Full-precision records, one per entry.

        Open entries keep ``end: None``. The records load back through
        ``EntryStore.from_records``.
        """
        records = []
        for entry in self.select(time_range, description):
            record = entry.to_dict()
            record["duration_seconds"] = (
                entry.duration(self._now).total_seconds() if entry.end else None
            )
            records.append(record)
        return records

    def readable_lines(
        self,
        time_range: TimeRange | None = None,
        description: str | None = None,
    ) -> builtin_list[str]:
        """Human readable start/stop lines. Not meant to be imported."""
        lines = []
        for entry in self.select(time_range, description):
            lines.append(_readable("Start", entry.start, entry.description, self._tz))
            if entry.end is not None:
                lines.append(_readable("Stop", entry.end, None, self._tz))
        return lines

    def remaining(self, goals: Sequence[tuple[TimeRange, timedelta]]) -> timedelta:
        """Smallest time left until any of the (range, goal) pairs is met.

        The result is negative once the goal has been exceeded.
        """
        if not goals:
            raise ValueError("at least one goal is required")
        return min(goal - self.show(time_range).total for time_range, goal in goals)


def _readable(
    prefix: str, moment: datetime, description: str | None, tz: tzinfo
) -> str:
    label = f' "{description}"' if description else ""
    local = moment.astimezone(tz)
    return f"{prefix}{label} at {local:%Y.%m.%d-%H:%M:%S}"
