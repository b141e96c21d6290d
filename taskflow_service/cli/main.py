"""Main CLI entry point for taskflow-service management commands."""

from __future__ import annotations

import click

from taskflow_service import __version__
from taskflow_service.cli.commands import analytics, config, database, server
from taskflow_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="taskflow-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Taskflow Service CLI - management commands.

    \b
    Command Groups:
      server     Run the API server
      db         Database migrations and connectivity
      analytics  Task analytics reports
      config     Configuration inspection

    \b
    Quick Start:
      taskflow-service db upgrade
      taskflow-service server run --reload
      taskflow-service analytics report <user-id>
    """
    ctx.ensure_object(dict)


cli.add_command(server.server)
cli.add_command(database.db)
cli.add_command(analytics.analytics)
cli.add_command(config.config)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
