"""Data file commands: export, import, path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from tally.cli.commands.report import FromOption, Selector, ToOption
from tally.cli.console import confirm_or_cancel, success
from tally.cli.runtime import get_runtime, handle_errors
from tally.entries import CorruptStore, EntryStore, IOFailure
from tally.reports import TimeRange, resolve_range


def register(app: typer.Typer) -> None:
    """Register data file commands."""

    @app.command()
    def export(
        ctx: typer.Context,
        path: Annotated[
            Path, typer.Argument(help='Where to write the export ("-" for stdout)')
        ],
        selector: Selector = None,
        start: FromOption = None,
        end: ToOption = None,
        readable: Annotated[
            bool,
            typer.Option(
                "--readable",
                "-r",
                help="Human readable lines; this format cannot be imported",
            ),
        ] = False,
        pretty: Annotated[
            bool, typer.Option("--pretty", "-p", help="Pretty print JSON")
        ] = False,
    ) -> None:
        """Export entries (all of them unless a filter is given)."""
        runtime = get_runtime(ctx)
        with handle_errors():
            if selector is None and start is None and end is None:
                time_range, description = TimeRange.everything(), None
            else:
                time_range, description = resolve_range(
                    selector, now=runtime.now, tz=runtime.tz, start=start, end=end
                )
            engine = runtime.engine()
            if readable:
                lines = engine.readable_lines(time_range, description)
                content = "\n".join(lines) + ("\n" if lines else "")
            else:
                records = engine.export(time_range, description)
                content = json.dumps(
                    records, ensure_ascii=False, indent=2 if pretty else None
                )
                content += "\n"

            if str(path) == "-":
                typer.echo(content, nl=False)
                return
            target = path.expanduser()
            try:
                target.write_text(content, encoding="utf-8")
            except OSError as e:
                raise IOFailure("write", target, e) from e
        success(f"Exported to {target}")

    @app.command("import")
    def import_cmd(
        ctx: typer.Context,
        path: Annotated[Path, typer.Argument(help="JSON export to import")],
        force: Annotated[
            bool, typer.Option("--force", help="Replace existing entries without asking")
        ] = False,
    ) -> None:
        """Replace all entries with the contents of a JSON export."""
        runtime = get_runtime(ctx)
        with handle_errors():
            source = path.expanduser()
            try:
                raw = source.read_text(encoding="utf-8")
            except OSError as e:
                raise IOFailure("read", source, e) from e
            try:
                records = json.loads(raw)
            except json.JSONDecodeError as e:
                raise CorruptStore(f"{source} is not valid JSON: {e}") from None
            if not isinstance(records, list):
                raise CorruptStore(f"{source} must contain a JSON array of entries")
            imported = EntryStore.from_records(records)

            existing = runtime.load_store()
            if len(existing) and not confirm_or_cancel(
                f"Replace {len(existing)} existing entries?", force
            ):
                raise typer.Exit(1)
            runtime.save_store(imported)
        success(f"Imported {len(imported)} entries from {source}")

    @app.command()
    def path(ctx: typer.Context) -> None:
        """Show the path to the data file."""
        typer.echo(str(get_runtime(ctx).data_file))
