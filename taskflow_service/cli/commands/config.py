"""Configuration commands."""

from __future__ import annotations

import json
import re
from typing import Any

import click

from taskflow_service.core.settings import get_settings

_URL_CREDENTIALS = re.compile(r"(?P<scheme>[a-z0-9+.-]+://)(?P<user>[^:/@]*):(?P<password>[^@/]*)@", re.IGNORECASE)


def mask_secrets(value: Any) -> Any:
    """Recursively hide passwords embedded in connection URLs."""
    if isinstance(value, dict):
        return {key: mask_secrets(item) for key, item in value.items()}
    if isinstance(value, list):
        return [mask_secrets(item) for item in value]
    if isinstance(value, str):
        return _URL_CREDENTIALS.sub(r"\g<scheme>\g<user>:***@", value)
    return value


@click.group(name="config")
def config() -> None:
    """Configuration management."""


@config.command()
@click.option("--section", type=click.Choice(["app", "db", "redis", "auth", "logging", "analytics"]), default=None)
def show(section: str | None) -> None:
    """Print the effective settings as JSON with secrets masked."""
    settings = get_settings()
    sections = {
        "app": settings.app,
        "db": settings.db,
        "redis": settings.redis,
        "auth": settings.auth,
        "logging": settings.logging,
        "analytics": settings.analytics,
    }
    if section:
        sections = {section: sections[section]}

    # SecretStr fields already dump as "**********"
    payload = {name: mask_secrets(model.model_dump(mode="json")) for name, model in sections.items()}
    click.echo(json.dumps(payload, indent=2, sort_keys=True))
