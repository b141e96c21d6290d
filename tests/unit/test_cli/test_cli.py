"""Tests for the taskflow-service CLI."""

from __future__ import annotations

import json

from click.testing import CliRunner
import pytest

from taskflow_service.cli.commands.config import mask_secrets
from taskflow_service.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_help_lists_command_groups(runner):
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for group in ("server", "db", "analytics", "config"):
        assert group in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "taskflow-service" in result.output


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("postgresql+psycopg://app:s3cret@db:5432/tasks", "postgresql+psycopg://app:***@db:5432/tasks"),
        ("redis://:hunter2@cache:6379/0", "redis://:***@cache:6379/0"),
        ("https://auth.example.com", "https://auth.example.com"),
        (5432, 5432),
    ],
)
def test_mask_secrets(value, expected):
    assert mask_secrets(value) == expected


def test_mask_secrets_recurses():
    assert mask_secrets({"urls": ["redis://u:p@h/0"]}) == {"urls": ["redis://u:***@h/0"]}


def test_config_show_masks_passwords(monkeypatch, runner):
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://app:s3cret@db:5432/tasks")

    result = runner.invoke(cli, ["config", "show", "--section", "db"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert set(payload) == {"db"}
    assert payload["db"]["host"] == "db"
    assert "s3cret" not in result.output


def test_analytics_report_rejects_bad_now(runner):
    result = runner.invoke(
        cli,
        ["analytics", "report", "6f1c2a7e-3b4d-4c5e-8f90-a1b2c3d4e5f6", "--now", "yesterday"],
    )

    assert result.exit_code == 2
    assert "--now" in result.output


def test_analytics_report_rejects_bad_user_id(runner):
    result = runner.invoke(cli, ["analytics", "report", "not-a-uuid", "--now", "2026-10-19T12:00:00Z"])

    assert result.exit_code == 1
    assert "Invalid user ID format" in result.output
