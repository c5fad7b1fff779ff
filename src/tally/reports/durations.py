"""Duration splitting and template formatting."""

from __future__ import annotations

from datetime import timedelta

DEFAULT_FORMAT = "{hh}:{mm}:{ss}"


def split_duration(duration: timedelta) -> tuple[int, int, int]:
    """Split into (hours, minutes, seconds); the sign applies to all parts."""
    total = int(duration.total_seconds())
    sign = -1 if total < 0 else 1
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    return sign * hours, sign * minutes, sign * seconds


def format_duration(
    duration: timedelta,
    template: str = DEFAULT_FORMAT,
    *,
    include_seconds: bool = True,
) -> str:
    """Render ``duration`` through a placeholder template.

    Placeholders: ``{hh} {mm} {ss}`` (zero padded) and ``{h} {m} {s}``.
    Without seconds the seconds part is truncated to zero. Negative
    durations get a single leading ``-``.
    """
    hours, minutes, seconds = (abs(part) for part in split_duration(duration))
    if not include_seconds:
        seconds = 0
    negative = duration < timedelta(0) and (hours or minutes or seconds)

    rendered = (
        template.replace("{hh}", f"{hours:02}")
        .replace("{mm}", f"{minutes:02}")
        .replace("{ss}", f"{seconds:02}")
        .replace("{h}", str(hours))
        .replace("{m}", str(minutes))
        .replace("{s}", str(seconds))
    )
    return f"-{rendered}" if negative else rendered
