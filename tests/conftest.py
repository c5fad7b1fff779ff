"""Shared test fixtures and factories."""

import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tally.config.paths import DATA_FILE_ENV_VAR, ENV_VAR, get_tally_home
from tally.entries import Entry, EntryStore
from tally.logging import LEVEL_ENV_VAR

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def tally_home(tmp_path: Path, monkeypatch) -> Iterator[Path]:
    """Point TALLY_HOME at a temp dir and pin the timezone to UTC."""
    home = tmp_path / "tally-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv(DATA_FILE_ENV_VAR, raising=False)
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.setenv("TZ", "UTC")
    get_tally_home.cache_clear()
    yield home
    get_tally_home.cache_clear()


@pytest.fixture
def cli_runner() -> CliRunner:
    """CLI runner with colors disabled."""
    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "entries.jsonl"


# =============================================================================
# Entry Factories
# =============================================================================


def at(day: int, hour: int, minute: int = 0, second: int = 0) -> datetime:
    """A UTC instant in March 2024 (the 4th is a Monday)."""
    return datetime(2024, 3, day, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def sample_entries() -> list[Entry]:
    """Two closed sessions on Monday and one on Tuesday."""
    return [
        Entry("write report", at(4, 9), at(4, 10, 30)),
        Entry("review", at(4, 11), at(4, 11, 15)),
        Entry("write report", at(5, 8), at(5, 9)),
    ]


@pytest.fixture
def sample_store(sample_entries: list[Entry]) -> EntryStore:
    return EntryStore(sample_entries)


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    """Undo configure_logging() so handlers don't leak between tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
