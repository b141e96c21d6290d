"""Coloured output helpers for CLI commands."""

from __future__ import annotations

import click


def success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    click.secho(f"⚠ {message}", fg="yellow", err=True)


def info(message: str) -> None:
    # stderr keeps stdout clean for JSON output
    click.secho(f"ℹ {message}", fg="blue", err=True)


def header(message: str) -> None:
    click.secho(f"\n{message}", fg="cyan", bold=True)
