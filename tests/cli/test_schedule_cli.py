"""Tests for ``safety-spine schedule`` and the root app."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from safety_spine import __version__
from safety_spine.cli.app import app
from safety_spine.cli.utils import make_context

runner = CliRunner()

CREATE_ARGS = [
    "schedule",
    "create",
    "Dallas daily",
    "--frequency",
    "daily",
    "--time",
    "06:00",
    "-r",
    "ops@example.com",
    "-r",
    "safety@example.com",
    "--location",
    "Dallas",
    "--json",
]


@pytest.fixture()
def cli_ctx(sched_ctx, conn):
    with patch("safety_spine.cli.schedule.make_context", return_value=(sched_ctx, conn)):
        yield sched_ctx


def _create() -> dict:
    result = runner.invoke(app, CREATE_ARGS)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestRootApp:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "schedule" in result.output


class TestMakeContext:
    def test_opens_database_without_scheduler(self, tmp_path):
        db = tmp_path / "spine.db"
        ctx, conn = make_context(str(db))
        try:
            assert ctx.scheduler is None
            assert ctx.caller == "cli"
            assert db.exists()
        finally:
            conn.close()

    def test_with_scheduler_is_not_started(self, tmp_path):
        ctx, conn = make_context(str(tmp_path / "spine.db"), with_scheduler=True)
        try:
            assert ctx.scheduler is not None
            assert ctx.scheduler.is_running is False
        finally:
            conn.close()


class TestScheduleCommands:
    def test_create(self, cli_ctx):
        created = _create()

        assert created["id"].startswith("SCH-")
        assert created["recipients"] == ["ops@example.com", "safety@example.com"]
        assert created["cron"] == "0 6 * * *"

    def test_create_invalid_exits_1(self, cli_ctx):
        result = runner.invoke(
            app, ["schedule", "create", "bad", "-f", "weekly", "-t", "25:00", "-r", "a@b.c"]
        )
        assert result.exit_code == 1

    def test_list_and_show(self, cli_ctx):
        created = _create()

        listed = runner.invoke(app, ["schedule", "list", "--json"])
        assert listed.exit_code == 0
        body = json.loads(listed.stdout)
        assert body["total"] == 1
        assert body["items"][0]["id"] == created["id"]

        shown = runner.invoke(app, ["schedule", "show", created["id"]])
        assert shown.exit_code == 0
        assert "Dallas daily" in shown.stdout

    def test_show_missing_exits_1(self, cli_ctx):
        result = runner.invoke(app, ["schedule", "show", "SCH-00000000"])
        assert result.exit_code == 1

    def test_update_clear_location(self, cli_ctx):
        created = _create()

        result = runner.invoke(
            app, ["schedule", "update", created["id"], "--clear-location", "--inactive", "--json"]
        )

        assert result.exit_code == 0, result.output
        updated = json.loads(result.stdout)
        assert updated["location_filter"] is None
        assert updated["is_active"] is False
        assert not cli_ctx.scheduler.is_registered(created["id"])

    def test_delete_requires_confirmation(self, cli_ctx):
        created = _create()

        aborted = runner.invoke(app, ["schedule", "delete", created["id"]], input="n\n")
        assert aborted.exit_code != 0

        deleted = runner.invoke(app, ["schedule", "delete", created["id"], "--yes"])
        assert deleted.exit_code == 0
        assert runner.invoke(app, ["schedule", "show", created["id"]]).exit_code == 1

    def test_run_and_history(self, cli_ctx, add_inspection, transport):
        add_inspection({"brakes": "Fail"})
        created = _create()

        run = runner.invoke(app, ["schedule", "run", created["id"], "--json"])
        assert run.exit_code == 0, run.output
        assert json.loads(run.stdout)["last_run_status"] == "success"
        assert len(transport.sent) == 1

        runs = runner.invoke(app, ["schedule", "runs", created["id"], "--json"])
        history = json.loads(runs.stdout)
        assert history["total"] == 1
        assert history["items"][0]["trigger"] == "manual"
