"""Report commands: list, show."""

from __future__ import annotations

from typing import Annotated

import typer

from tally.cli.console import console, create_table, dim, error, warning
from tally.cli.runtime import Runtime, get_runtime, handle_errors
from tally.reports import format_duration, resolve_range, this_week, today
from tally.reports.ranges import TODAY, WEEK

SELECTOR_HELP = 'Filter: "today" (default), "week", "all" or part of a description'
FROM_HELP = (
    'Show entries starting at or after this time: "YYYY-mm-dd[ HH:MM[:SS]]" '
    'or "HH:MM[:SS]" [default: today 00:00]'
)
TO_HELP = (
    "Show entries starting before this time; a bare date includes the whole "
    "day [default: end of the --from day]"
)

Selector = Annotated[str | None, typer.Argument(help=SELECTOR_HELP)]
FromOption = Annotated[str | None, typer.Option("--from", "-f", help=FROM_HELP)]
ToOption = Annotated[str | None, typer.Option("--to", "-t", help=TO_HELP)]


def register(app: typer.Typer) -> None:
    """Register report commands."""

    @app.command("list")
    def list_cmd(
        ctx: typer.Context,
        selector: Selector = None,
        start: FromOption = None,
        end: ToOption = None,
    ) -> None:
        """List entries."""
        runtime = get_runtime(ctx)
        with handle_errors():
            time_range, description = resolve_range(
                selector, now=runtime.now, tz=runtime.tz, start=start, end=end
            )
            rows = runtime.engine().list(time_range, description)

        if not rows:
            warning("No entries found")
            return

        table = create_table(
            "Entries",
            [
                ("Start", "dim"),
                ("End", "dim"),
                ("Duration", {"justify": "right"}),
                ("Description", ""),
            ],
        )
        for row in rows:
            entry = row.entry
            end_label = (
                "[cyan]running[/cyan]"
                if row.is_open
                else f"{entry.end.astimezone(runtime.tz):%Y-%m-%d %H:%M:%S}"
            )
            table.add_row(
                f"{entry.start.astimezone(runtime.tz):%Y-%m-%d %H:%M:%S}",
                end_label,
                format_duration(row.duration),
                entry.description or "[dim]-[/dim]",
            )

        console.print(table)
        noun = "entry" if len(rows) == 1 else "entries"
        console.print(f"\n[dim]Total: {len(rows)} {noun}[/dim]")

    @app.command()
    def show(
        ctx: typer.Context,
        selector: Selector = None,
        start: FromOption = None,
        end: ToOption = None,
        plain: Annotated[
            bool, typer.Option("--plain", "-p", help="Print only the time")
        ] = False,
        remaining: Annotated[
            bool,
            typer.Option(
                "--remaining", "-r", help="Show time left until the goals are met"
            ),
        ] = False,
        include_seconds: Annotated[
            bool | None,
            typer.Option(
                "--include-seconds/--no-seconds",
                "-s/-S",
                help="Include seconds in the output",
            ),
        ] = None,
        fmt: Annotated[
            str | None,
            typer.Option(
                "--format",
                help='Time template using {hh} {mm} {ss} {h} {m} {s} [default: "{hh}:{mm}:{ss}"]',
            ),
        ] = None,
    ) -> None:
        """Show work time for a time span."""
        show_summary(
            get_runtime(ctx),
            selector=selector,
            start=start,
            end=end,
            plain=plain,
            remaining=remaining,
            include_seconds=include_seconds,
            fmt=fmt,
        )


def show_summary(
    runtime: Runtime,
    *,
    selector: str | None = None,
    start: str | None = None,
    end: str | None = None,
    plain: bool = False,
    remaining: bool = False,
    include_seconds: bool | None = None,
    fmt: str | None = None,
) -> None:
    """Print the work time summary; also the default command."""
    display = runtime.config.display
    template = fmt or display.format
    seconds = display.include_seconds if include_seconds is None else include_seconds

    with handle_errors():
        engine = runtime.engine()
        if remaining:
            if selector not in (None, TODAY, WEEK) or start or end:
                error(
                    'Remaining only works without --from/--to and with no filter or "week"'
                )
                raise typer.Exit(1)
            goals = runtime.config.time_goal
            week_goal = (this_week(engine.now, runtime.tz), goals.weekly.duration)
            if selector == WEEK:
                left = engine.remaining([week_goal])
            else:
                day_goal = (today(engine.now, runtime.tz), goals.daily.duration)
                left = engine.remaining([day_goal, week_goal])
            text = format_duration(left, template, include_seconds=seconds)
            typer.echo(text if plain else f"Remaining Work Time: {text}")
            return

        time_range, description = resolve_range(
            selector, now=engine.now, tz=runtime.tz, start=start, end=end
        )
        summary = engine.show(time_range, description)

    total = format_duration(summary.total, template, include_seconds=seconds)
    if plain:
        typer.echo(total)
        return

    if summary.is_empty:
        dim("No entries found")
    elif len(summary.days) > 1:
        table = create_table(
            "Work Time per Day",
            [("Day", "dim"), ("Time", {"justify": "right"})],
        )
        for day in summary.days:
            table.add_row(
                f"{day.day:%Y-%m-%d %a}",
                format_duration(day.total, template, include_seconds=seconds),
            )
        console.print(table)

    typer.echo(f"Work Time: {total}")
