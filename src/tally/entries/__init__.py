"""Entry store public API.

Public API:
- EntryStore: Session state machine over the ordered entries
- load / persist: JSONL persistence

Types:
- Entry

Errors:
- TallyError, AlreadyTracking, NotTracking, NothingToContinue,
  CorruptStore, IOFailure
"""

from tally.entries.errors import (
    AlreadyTracking,
    CorruptStore,
    IOFailure,
    NothingToContinue,
    NotTracking,
    TallyError,
)
from tally.entries.store import EntryStore, load, persist
from tally.entries.types import Entry

__all__ = [
    "AlreadyTracking",
    "CorruptStore",
    "Entry",
    "EntryStore",
    "IOFailure",
    "NotTracking",
    "NothingToContinue",
    "TallyError",
    "load",
    "persist",
]
