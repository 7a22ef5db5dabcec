"""Tests for ``safety-spine report render``."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from safety_spine.cli.app import app

runner = CliRunner()


@pytest.fixture()
def cli_ctx(ctx, conn):
    with patch("safety_spine.cli.report.make_context", return_value=(ctx, conn)):
        yield ctx


class TestRenderCommand:
    def test_writes_both_formats(self, cli_ctx, add_inspection, tmp_path):
        add_inspection({"brakes": "Fail", "horn": "Pass"})
        out = tmp_path / "reports"

        result = runner.invoke(
            app,
            ["report", "render", "--start", "2026-10-18", "--end", "2026-10-19", "--out-dir", str(out)],
        )

        assert result.exit_code == 0, result.output
        names = sorted(p.name for p in out.iterdir())
        assert len(names) == 2
        assert all("_2026-10-18_to_2026-10-19." in n for n in names)
        assert {n.rsplit(".", 1)[1] for n in names} == {"pdf", "xlsx"}

    def test_workbook_only(self, cli_ctx, tmp_path):
        result = runner.invoke(
            app,
            [
                "report", "render",
                "--start", "2026-10-01",
                "--end", "2026-10-07",
                "--format", "workbook",
                "--out-dir", str(tmp_path),
            ],
        )

        assert result.exit_code == 0, result.output
        written = list(tmp_path.glob("*.xlsx"))
        assert len(written) == 1
        assert written[0].read_bytes().startswith(b"PK")

    def test_reversed_range_exits_1(self, cli_ctx, tmp_path):
        result = runner.invoke(
            app,
            ["report", "render", "--start", "2026-10-19", "--end", "2026-10-01", "-o", str(tmp_path)],
        )
        assert result.exit_code == 1
        assert not list(tmp_path.iterdir())

    def test_unknown_format_exits_1(self, cli_ctx, tmp_path):
        result = runner.invoke(
            app,
            [
                "report", "render",
                "--start", "2026-10-01",
                "--end", "2026-10-02",
                "--format", "html",
                "-o", str(tmp_path),
            ],
        )
        assert result.exit_code == 1
