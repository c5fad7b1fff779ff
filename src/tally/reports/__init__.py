"""Report engine public API.

Public API:
- ReportEngine: Read-only totals, listings and exports
- resolve_range / parse_moment: Selector and time parsing for the CLI
- format_duration: Template rendering of durations

Types:
- TimeRange, Summary, DayTotal, EntryRow
"""

from tally.reports.durations import DEFAULT_FORMAT, format_duration, split_duration
from tally.reports.engine import DayTotal, EntryRow, ReportEngine, Summary
from tally.reports.ranges import (
    TimeRange,
    day_range,
    parse_moment,
    resolve_range,
    this_week,
    today,
)

__all__ = [
    "DEFAULT_FORMAT",
    "DayTotal",
    "EntryRow",
    "ReportEngine",
    "Summary",
    "TimeRange",
    "day_range",
    "format_duration",
    "parse_moment",
    "resolve_range",
    "split_duration",
    "this_week",
    "today",
]
