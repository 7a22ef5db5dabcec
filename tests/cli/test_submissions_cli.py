"""Tests for ``safety-spine submissions``."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from safety_spine.cli.app import app

runner = CliRunner()


@pytest.fixture()
def cli_ctx(ctx, conn):
    with patch("safety_spine.cli.submissions.make_context", return_value=(ctx, conn)):
        yield ctx


class TestSubmissionCommands:
    def test_add_inline_payload(self, cli_ctx):
        result = runner.invoke(
            app,
            [
                "submissions",
                "add",
                "forklift-inspection",
                "--payload",
                '{"forkliftId": "FL-07", "inspection": {"horn": "Pass"}}',
                "--location",
                "Houston",
                "--at",
                "2026-10-19T08:15:00",
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        recorded = json.loads(result.stdout)
        assert recorded["location"] == "Houston"
        assert recorded["payload"]["forkliftId"] == "FL-07"

    def test_add_from_file(self, cli_ctx, tmp_path):
        payload = tmp_path / "form.json"
        payload.write_text(json.dumps({"forkliftId": "FL-09"}), encoding="utf-8")

        result = runner.invoke(
            app, ["submissions", "add", "forklift-inspection", "--payload-file", str(payload), "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["payload"] == {"forkliftId": "FL-09"}

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
    def test_bad_payload_exits_1(self, cli_ctx, payload):
        result = runner.invoke(app, ["submissions", "add", "forklift-inspection", "--payload", payload])
        assert result.exit_code == 1

    def test_list_filters_by_form_type(self, cli_ctx):
        runner.invoke(app, ["submissions", "add", "forklift-inspection", "--payload", "{}"])
        runner.invoke(app, ["submissions", "add", "incident-report", "--payload", "{}"])

        result = runner.invoke(
            app, ["submissions", "list", "--form-type", "incident-report", "--json"]
        )

        assert result.exit_code == 0
        body = json.loads(result.stdout)
        assert body["total"] == 1
        assert body["items"][0]["form_type"] == "incident-report"
