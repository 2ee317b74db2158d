"""Tests for the cldf-mcp CLI."""

import json
import sys

from typer.testing import CliRunner

from cldf_mcp.cli import app
import cldf_mcp.server  # noqa: F401

runner = CliRunner()


def test_tools_lists_all():
    result = runner.invoke(app, ["tools"])
    assert result.exit_code == 0
    assert "11 CLDF tools" in result.output


def test_call_static_schema_component():
    result = runner.invoke(
        app, ["call", "cldf_schema_info", "--args", '{"component": "commonMistakes"}']
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert "wrongIdTypes" in payload


def test_call_unknown_tool_exits_nonzero():
    result = runner.invoke(app, ["call", "cldf_nope"])
    assert result.exit_code == 1
    assert "Error: Unknown tool: cldf_nope" in result.output


def test_call_rejects_bad_json():
    result = runner.invoke(app, ["call", "cldf_validate", "--args", "{oops"])
    assert result.exit_code == 2


def test_call_rejects_non_object_args():
    result = runner.invoke(app, ["call", "cldf_validate", "--args", "[1, 2]"])
    assert result.exit_code == 2


def test_check_with_working_program(monkeypatch):
    monkeypatch.setenv("CLDF_CLI", sys.executable)
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 0
    assert "cldf available" in result.output


def test_check_with_missing_program(monkeypatch):
    monkeypatch.setenv("CLDF_CLI", "definitely-not-a-real-cldf-binary-xyz")
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 1


def test_serve_disabled_exits_cleanly(monkeypatch):
    monkeypatch.setenv("CLDF_MCP_ENABLED", "false")
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 0


def test_call_with_stats():
    result = runner.invoke(
        app, ["call", "cldf_schema_info", "--args", '{"component": "exampleData"}', "--stats"]
    )
    assert result.exit_code == 0
    assert "Call timing" in result.output
