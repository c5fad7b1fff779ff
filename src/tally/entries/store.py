"""Entry store: session state machine and JSONL persistence.

The store is an ordered list of entries. It is ``Tracking`` when the last
entry is open and ``Idle`` otherwise; there is no separate state flag.

Persistence is one JSONL file, rewritten atomically via tempfile + fsync +
``Path.replace()`` so a crash leaves either the old or the new content.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from builtins import list as builtin_list
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from tally.entries.errors import (
    AlreadyTracking,
    CorruptStore,
    IOFailure,
    NothingToContinue,
    NotTracking,
)
from tally.entries.types import Entry

logger = logging.getLogger(__name__)


class EntryStore:
    """Ordered, append-only sequence of entries with start/stop rules."""

    def __init__(self, entries: Iterable[Entry] | None = None) -> None:
        self._entries: list[Entry] = list(entries or [])
        _validate(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def last(self) -> Entry | None:
        return self._entries[-1] if self._entries else None

    @property
    def active(self) -> Entry | None:
        """The open entry, if a session is running."""
        last = self.last
        return last if last is not None and last.is_open else None

    @property
    def is_tracking(self) -> bool:
        return self.active is not None

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def start(self, description: str = "", now: datetime | None = None) -> Entry:
        """Open a new session.

        Raises:
            AlreadyTracking: If a session is already running.
        """
        now = _resolve_now(now)
        active = self.active
        if active is not None:
            raise AlreadyTracking(active.description)
        self._check_not_before_latest(now)

        entry = Entry(description=description, start=now)
        self._entries.append(entry)
        logger.debug("entry_started", extra={"entry.start": now.isoformat()})
        return entry

    def stop(self, now: datetime | None = None) -> Entry:
        """Close the running session and return it.

        Raises:
            NotTracking: If no session is running.
        """
        now = _resolve_now(now)
        active = self.active
        if active is None:
            raise NotTracking()
        if now < active.start:
            raise ValueError(
                f"stop time {now.isoformat()} is before the session start "
                f"{active.start.isoformat()}"
            )

        active.end = now
        logger.debug(
            "entry_stopped",
            extra={"entry.duration_s": active.duration(now).total_seconds()},
        )
        return active

    def continue_last(self, now: datetime | None = None) -> Entry:
        """Start a new session with the most recent entry's description.

        Raises:
            NothingToContinue: If the store has no entries.
            AlreadyTracking: If a session is already running.
        """
        last = self.last
        if last is None:
            raise NothingToContinue()
        if last.is_open:
            raise AlreadyTracking(last.description)
        return self.start(last.description, now)

    def switch(self, description: str = "", now: datetime | None = None) -> Entry:
        """Close any running session and start a new one at the same instant.

        Raises:
            AlreadyTracking: If the running session has the same description.
        """
        now = _resolve_now(now)
        active = self.active
        if active is None:
            return self.start(description, now)
        if active.description == description:
            raise AlreadyTracking(description)

        self.stop(now)
        return self.start(description, now)

    def list(self) -> builtin_list[Entry]:
        """Return a copy of the full ordered sequence."""
        return [
            Entry(description=e.description, start=e.start, end=e.end)
            for e in self._entries
        ]

    # ------------------------------------------------------------------
    # Record conversion
    # ------------------------------------------------------------------

    def to_records(self) -> builtin_list[dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> EntryStore:
        """Build a store from plain dicts, validating every invariant.

        Raises:
            CorruptStore: If a record or the sequence as a whole is invalid.
        """
        entries: list[Entry] = []
        for index, record in enumerate(records, 1):
            try:
                entries.append(Entry.from_dict(record))
            except ValueError as e:
                raise CorruptStore(str(e), line_no=index) from None
        return cls(entries)

    def _check_not_before_latest(self, now: datetime) -> None:
        last = self.last
        if last is None:
            return
        latest = last.end or last.start
        if now < latest:
            raise ValueError(
                f"start time {now.isoformat()} is before the latest entry "
                f"({latest.isoformat()})"
            )


# ----------------------------------------------------------------------
# Persistence
# ----------------------------------------------------------------------


def load(path: Path) -> EntryStore:
    """Load the store from a JSONL file. A missing file is an empty store.

    Raises:
        CorruptStore: If a line cannot be parsed or invariants are violated.
        IOFailure: If the file cannot be read.
    """
    if not path.exists():
        logger.debug("store_missing", extra={"file.path": str(path)})
        return EntryStore()

    try:
        with path.open("rb") as f:
            lines = list(f)
    except OSError as e:
        raise IOFailure("read", path, e) from e

    entries: list[Entry] = []
    for line_no, raw in enumerate(lines, 1):
        if not raw.strip():
            continue
        try:
            entries.append(Entry.from_dict(json.loads(raw.decode("utf-8"))))
        except ValueError as e:
            # UnicodeDecodeError and json.JSONDecodeError are ValueErrors too
            logger.warning(
                "corrupt_jsonl_line",
                extra={"file.line_no": line_no, "file.path": str(path)},
            )
            raise CorruptStore(str(e), line_no=line_no) from None

    store = EntryStore(entries)
    logger.debug(
        "store_loaded", extra={"file.path": str(path), "entry_count": len(store)}
    )
    return store


def persist(store: EntryStore, path: Path) -> None:
    """Write the store to ``path`` atomically.

    Raises:
        IOFailure: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp"
        )
    except OSError as e:
        raise IOFailure("write", path, e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for entry in store.list():
                f.write(entry.to_json_line())
                f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        Path(tmp).replace(path)
    except OSError as e:
        _discard(Path(tmp))
        raise IOFailure("write", path, e) from e
    except BaseException:
        _discard(Path(tmp))
        raise

    logger.debug(
        "store_persisted", extra={"file.path": str(path), "entry_count": len(store)}
    )


def _discard(tmp: Path) -> None:
    try:
        tmp.unlink()
    except OSError:
        pass


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        raise ValueError("timestamps must be timezone-aware")
    return now


def _validate(entries: list[Entry]) -> None:
    """Check ordering and single-open-entry invariants."""
    previous_start: datetime | None = None
    for index, entry in enumerate(entries, 1):
        if entry.end is not None and entry.end < entry.start:
            raise CorruptStore("end is before start", line_no=index)
        if previous_start is not None and entry.start < previous_start:
            raise CorruptStore("entries are out of chronological order", line_no=index)
        if entry.is_open and index != len(entries):
            raise CorruptStore(
                "only the last entry may be open; found more than one open entry"
                if any(e.is_open for e in entries[index:])
                else "open entry is not the last entry",
                line_no=index,
            )
        previous_start = entry.start
