"""CLI command modules."""

from tally.cli.commands import config, data, report, tracking

__all__ = [
    "config",
    "data",
    "report",
    "tracking",
]
