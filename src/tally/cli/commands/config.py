"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import typer

from tally.cli.console import console, error, success
from tally.cli.runtime import CliOptions


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        ctx: typer.Context,
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate, paths"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: --config or $TALLY_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            typer.echo(ctx.get_help())
            raise typer.Exit(0)

        from rich.syntax import Syntax
        from rich.table import Table

        from tally.config import ConfigError, load_config
        from tally.config.paths import get_all_paths, get_config_path

        options = ctx.find_root().obj
        if path is None and isinstance(options, CliOptions):
            path = options.config_path
        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                console.print("Defaults are in effect until one is created")
                raise typer.Exit(1)

            content = expanded_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            try:
                config_obj = load_config(expanded_path)
            except ConfigError as e:
                error(f"Configuration validation failed:\n{e}")
                raise typer.Exit(1) from None

            table = Table(title="Configuration Summary")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Data file", str(config_obj.data_file))
            table.add_row("Timezone", config_obj.timezone)
            table.add_row("Auto insert stop", str(config_obj.auto_insert_stop))
            daily = config_obj.time_goal.daily
            weekly = config_obj.time_goal.weekly
            table.add_row("Daily goal", f"{daily.hours}h {daily.minutes:02}m")
            table.add_row("Weekly goal", f"{weekly.hours}h {weekly.minutes:02}m")
            table.add_row("Format", config_obj.display.format)
            console.print(table)
            success("Configuration is valid")

        elif action == "paths":
            table = Table(title="Tally Paths")
            table.add_column("Name", style="cyan")
            table.add_column("Path")
            for name, value in get_all_paths().items():
                table.add_row(name, str(value))
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            raise typer.Exit(1)
