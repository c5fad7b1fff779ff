"""Typed failures raised by entry store operations."""

from __future__ import annotations


class TallyError(Exception):
    """Base class for all tally failures surfaced to the user."""


class AlreadyTracking(TallyError):
    """A session is already running."""

    def __init__(self, description: str = "") -> None:
        if description:
            message = f'Time tracking for "{description}" is already running'
        else:
            message = "Time tracking is already running"
        super().__init__(message)
        self.description = description


class NotTracking(TallyError):
    """No session is running."""

    def __init__(self) -> None:
        super().__init__("Time tracking is already stopped")


class NothingToContinue(TallyError):
    """Continue was requested on an empty store."""

    def __init__(self) -> None:
        super().__init__(
            "Time tracking couldn't be continued, because there are no entries. "
            "Use the start command instead"
        )


class CorruptStore(TallyError):
    """Persisted entries failed structural or invariant validation."""

    def __init__(self, message: str, *, line_no: int | None = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(f"Corrupt entry store: {message}")
        self.line_no = line_no


class IOFailure(TallyError):
    """The underlying storage could not be read or written."""

    def __init__(self, action: str, path: object, cause: OSError) -> None:
        super().__init__(f"Could not {action} {path}: {cause.strerror or cause}")
        self.path = path
