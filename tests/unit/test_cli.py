"""Unit tests for the linecomplete CLI."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from linecomplete import cli

runner = CliRunner()


@pytest.fixture
def line_file(tmp_path, complete_line, make_snapshot):
    """Write a line + snapshot payload and return its path."""

    def _write(snapshot=..., line=None):
        payload = {
            "line": (line or complete_line).model_dump(),
            "snapshot": (
                make_snapshot().model_dump(by_alias=True) if snapshot is ... else snapshot
            ),
        }
        path = tmp_path / "line.json"
        path.write_text(json.dumps(payload))
        return path

    return _write


class TestCheckFile:
    def test_complete_line_json(self, line_file):
        result = runner.invoke(cli.app, ["check-file", str(line_file()), "--json"])

        assert result.exit_code == 0
        body = json.loads(result.stdout)
        assert body["line_id"] == "line-1"
        assert body["percentage"] == 100
        assert body["is_complete"] is True
        assert body["gaps"] == []

    def test_null_snapshot_is_a_failed_load(self, line_file):
        result = runner.invoke(cli.app, ["check-file", str(line_file(snapshot=None)), "--json"])

        assert result.exit_code == 0
        body = json.loads(result.stdout)
        assert body["percentage"] == 0
        assert body["gaps"] == [
            {"category": "Data", "items": ["Unable to load line configuration"]}
        ]

    def test_classification_option(self, line_file, make_snapshot):
        iot_only = make_snapshot(cameras=[], iot_devices=[{"id": "iot-1"}])
        path = line_file(snapshot=iot_only.model_dump(by_alias=True))

        both = runner.invoke(cli.app, ["check-file", str(path), "--json"])
        vision = runner.invoke(cli.app, ["check-file", str(path), "-c", "vision", "--json"])

        assert json.loads(both.stdout)["is_complete"] is True
        assert json.loads(vision.stdout)["is_complete"] is False

    def test_table_output(self, line_file, make_snapshot):
        path = line_file(snapshot=make_snapshot(titles=("RLE",)).model_dump(by_alias=True))

        result = runner.invoke(cli.app, ["check-file", str(path)])

        assert result.exit_code == 0
        assert "OP title must be assigned to a position" in result.stdout

    def test_invalid_file_exits_2(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(cli.app, ["check-file", str(path)])

        assert result.exit_code == 2

    def test_missing_line_key_exits_2(self, tmp_path):
        path = tmp_path / "no-line.json"
        path.write_text(json.dumps({"snapshot": None}))

        result = runner.invoke(cli.app, ["check-file", str(path)])

        assert result.exit_code == 2


class TestGate:
    def test_gate_passes(self, monkeypatch, test_project_id):
        monkeypatch.setattr(cli, "check_all_lines_complete", AsyncMock(return_value=True))

        result = runner.invoke(cli.app, ["gate", test_project_id])

        assert result.exit_code == 0

    def test_gate_fails(self, monkeypatch, test_project_id):
        gate = AsyncMock(return_value=False)
        monkeypatch.setattr(cli, "check_all_lines_complete", gate)

        result = runner.invoke(cli.app, ["gate", test_project_id])

        assert result.exit_code == 1
        gate.assert_awaited_once_with(test_project_id)
