"""Entry types for the time-tracking ledger."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any


@dataclass
class Entry:
    """A single logged work session.

    ``end`` is ``None`` while the session is running.
    """

    description: str
    start: datetime
    end: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    def duration(self, now: datetime) -> timedelta:
        """Elapsed time, measured against ``now`` while the entry is open."""
        end = self.end if self.end is not None else now
        return end - self.start

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
        }

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        """Build an entry from a stored record.

        Raises:
            ValueError: If a field is missing or has the wrong shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        if "start" not in data:
            raise ValueError("missing field 'start'")

        description = data.get("description", "")
        if not isinstance(description, str):
            raise ValueError("field 'description' must be a string")

        start = parse_timestamp(data["start"], "start")
        raw_end = data.get("end")
        end = parse_timestamp(raw_end, "end") if raw_end is not None else None
        if end is not None and end < start:
            raise ValueError(
                f"end {end.isoformat()} is before start {start.isoformat()}"
            )
        return cls(description=description, start=start, end=end)


def parse_timestamp(value: Any, field_name: str) -> datetime:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if not isinstance(value, str):
        raise ValueError(f"field '{field_name}' must be an ISO 8601 string")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"malformed timestamp in '{field_name}': {value!r}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
