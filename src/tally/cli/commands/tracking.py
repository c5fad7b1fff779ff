"""Session commands: start, stop, continue, status."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

import typer

from tally.cli.console import console, dim, success
from tally.cli.runtime import Runtime, get_runtime, handle_errors
from tally.entries import Entry
from tally.reports import format_duration, parse_moment

AT_HELP = (
    'When the event happened: "HH:MM[:SS]" or "YYYY-mm-dd HH:MM[:SS]" '
    "[default: now]"
)


def register(app: typer.Typer) -> None:
    """Register session commands."""

    @app.command()
    def start(
        ctx: typer.Context,
        description: Annotated[
            str, typer.Argument(help="What you are working on")
        ] = "",
        at: Annotated[str | None, typer.Option("--at", "-a", help=AT_HELP)] = None,
    ) -> None:
        """Start time tracking."""
        runtime = get_runtime(ctx)
        with handle_errors():
            moment = _event_time(runtime, at)
            description = description.strip()
            store = runtime.load_store()
            if runtime.config.auto_insert_stop and at is None:
                entry = store.switch(description, moment)
            else:
                entry = store.start(description, moment)
            runtime.save_store(store)
        success(f"Started {_label(entry)}at {_clock(runtime, entry.start)}")

    @app.command()
    def stop(
        ctx: typer.Context,
        at: Annotated[str | None, typer.Option("--at", "-a", help=AT_HELP)] = None,
    ) -> None:
        """Stop time tracking."""
        runtime = get_runtime(ctx)
        with handle_errors():
            moment = _event_time(runtime, at)
            store = runtime.load_store()
            entry = store.stop(moment)
            runtime.save_store(store)
        elapsed = format_duration(entry.duration(moment))
        success(f"Stopped {_label(entry)}after {elapsed}")

    @app.command(name="continue")
    def continue_(ctx: typer.Context) -> None:
        """Continue time tracking with the last description."""
        runtime = get_runtime(ctx)
        with handle_errors():
            store = runtime.load_store()
            entry = store.continue_last(runtime.now)
            runtime.save_store(store)
        success(f"Continued {_label(entry)}at {_clock(runtime, entry.start)}")

    @app.command()
    def status(ctx: typer.Context) -> None:
        """Show the latest entry. Exits 0 while tracking, 1 otherwise."""
        runtime = get_runtime(ctx)
        with handle_errors():
            store = runtime.load_store()

        last = store.last
        if last is None:
            dim("No entries found")
            raise typer.Exit(1)

        console.print(f"Active: {last.is_open}", highlight=False)
        if last.description:
            console.print(f"Description: {last.description}", highlight=False)
        if last.end is not None:
            console.print(f"End Time: {_clock(runtime, last.end)}", highlight=False)
            raise typer.Exit(1)

        console.print(f"Start Time: {_clock(runtime, last.start)}", highlight=False)
        elapsed = format_duration(last.duration(runtime.now))
        console.print(f"Elapsed: {elapsed}", highlight=False)


def _event_time(runtime: Runtime, at: str | None) -> datetime:
    if at is None:
        return runtime.now
    return parse_moment(at, runtime.now, runtime.tz).value.astimezone(UTC)


def _label(entry: Entry) -> str:
    return f'"{entry.description}" ' if entry.description else ""


def _clock(runtime: Runtime, moment: datetime) -> str:
    return f"{moment.astimezone(runtime.tz):%H:%M:%S}"
