"""Database management commands.

Migrations run through Alembic's command API against ``alembic.ini`` at the
project root:

    taskflow-service db upgrade
    taskflow-service db downgrade -1
    taskflow-service db current
    taskflow-service db check
"""

from __future__ import annotations

from pathlib import Path
import sys

import click

from taskflow_service.cli.utils import coro, error, info, success
from taskflow_service.core.settings import get_db_settings

DEFAULT_ALEMBIC_INI = Path(__file__).resolve().parents[3] / "alembic.ini"


def get_alembic_config(ini_path: Path | None = None):
    """Build an Alembic ``Config`` pointing at this project's migrations."""
    from alembic.config import Config

    path = ini_path or DEFAULT_ALEMBIC_INI
    config = Config(str(path))
    config.set_main_option("script_location", str(path.parent / "alembic"))
    return config


@click.group(name="db")
@click.option(
    "--config",
    "ini_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to alembic.ini",
)
@click.pass_context
def db(ctx: click.Context, ini_path: Path | None) -> None:
    """Database migrations and connectivity."""
    ctx.ensure_object(dict)
    ctx.obj["alembic_ini"] = ini_path


@db.command()
@click.argument("revision", default="head")
@click.pass_context
def upgrade(ctx: click.Context, revision: str) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    from alembic import command

    info(f"Upgrading database to {revision}...")
    command.upgrade(get_alembic_config(ctx.obj.get("alembic_ini")), revision)
    success(f"Database upgraded to {revision}")


@db.command()
@click.argument("revision")
@click.pass_context
def downgrade(ctx: click.Context, revision: str) -> None:
    """Downgrade the schema to REVISION (e.g. -1 or base)."""
    from alembic import command

    info(f"Downgrading database to {revision}...")
    command.downgrade(get_alembic_config(ctx.obj.get("alembic_ini")), revision)
    success(f"Database downgraded to {revision}")


@db.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show the current revision."""
    from alembic import command

    command.current(get_alembic_config(ctx.obj.get("alembic_ini")), verbose=False)


@db.command()
@coro
async def check() -> None:
    """Verify that the database answers a trivial query."""
    from taskflow_service.infra.database.session import check_database, close_database

    settings = get_db_settings()
    target = f"{settings.host}:{settings.port}/{settings.name}" if settings.is_configured else "SQLite fallback"
    info(f"Connecting to: {target}")

    try:
        ok = await check_database()
    finally:
        await close_database()

    if not ok:
        error("Database is not reachable")
        sys.exit(1)
    success("Database connected successfully")
