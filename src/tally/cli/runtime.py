"""Shared runtime helpers for CLI command handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import typer

from tally.cli.console import error
from tally.config import ConfigError, TallyConfig, get_default_config, load_config
from tally.config.paths import expand_path
from tally.entries import EntryStore, TallyError, load, persist
from tally.reports import ReportEngine

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Runtime:
    """Resolved settings for one command invocation."""

    config: TallyConfig
    data_file: Path
    now: datetime

    @property
    def tz(self) -> ZoneInfo:
        return self.config.tzinfo

    def load_store(self) -> EntryStore:
        return load(self.data_file)

    def save_store(self, store: EntryStore) -> None:
        persist(store, self.data_file)

    def engine(self, store: EntryStore | None = None) -> ReportEngine:
        store = store if store is not None else self.load_store()
        return ReportEngine.from_store(store, now=self.now, tz=self.tz)


def bootstrap_runtime(
    *,
    config_path: Path | None = None,
    data_file: Path | None = None,
) -> Runtime:
    """Load config (or defaults) and pick the data file for this invocation."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        if config_path is not None:
            raise
        config = get_default_config()

    resolved = expand_path(data_file) if data_file else config.data_file
    logger.debug("runtime_bootstrapped", extra={"file.path": str(resolved)})
    # The clock is read once so every step of a command agrees on "now".
    return Runtime(config=config, data_file=resolved, now=datetime.now(UTC))


@dataclass(slots=True)
class CliOptions:
    """Global options collected by the root callback."""

    config_path: Path | None = None
    data_file: Path | None = None
    runtime: Runtime | None = None


def get_runtime(ctx: typer.Context) -> Runtime:
    """Build (once) the runtime for the global options of this invocation."""
    options = ctx.find_root().obj
    if not isinstance(options, CliOptions):
        options = CliOptions()
    if options.runtime is None:
        with handle_errors():
            options.runtime = bootstrap_runtime(
                config_path=options.config_path, data_file=options.data_file
            )
    return options.runtime


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report typed failures as a red message and exit status 1."""
    try:
        yield
    except (TallyError, ConfigError, ValueError, FileNotFoundError) as e:
        logger.debug("command_failed", exc_info=True)
        error(str(e))
        raise typer.Exit(1) from None
