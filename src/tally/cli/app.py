"""Main CLI application."""

from pathlib import Path
from typing import Annotated

import typer

from tally.cli.commands import config, data, report, tracking
from tally.cli.runtime import CliOptions, get_runtime

app = typer.Typer(
    name="tally",
    help="Tally - personal time tracking. Runs 'show' when no command is given.",
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    data_file: Annotated[
        Path | None,
        typer.Option(
            "--data-file",
            "-d",
            help="Which data file to use [default: $TALLY_HOME/entries.jsonl]",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    log_to_file: Annotated[
        bool,
        typer.Option("--log-file", help="Also write logs to $TALLY_HOME/logs"),
    ] = False,
) -> None:
    from tally.logging import configure_logging

    configure_logging(
        level="DEBUG" if verbose else None,
        use_rich=True,
        log_to_file=log_to_file,
    )
    ctx.obj = CliOptions(config_path=config_path, data_file=data_file)

    if ctx.invoked_subcommand is None:
        report.show_summary(get_runtime(ctx))


tracking.register(app)
report.register(app)
data.register(app)
config.register(app)


if __name__ == "__main__":
    app()
