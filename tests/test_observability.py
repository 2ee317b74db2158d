"""Tests for logging setup and call statistics."""

import json
import logging

import pytest

from cldf_mcp.config import ObservabilityConfig
from cldf_mcp.observability import (
    CallStatsRegistry,
    JsonLogFormatter,
    ObservabilityContext,
    new_correlation_id,
    setup_logging,
)


@pytest.fixture
def scratch_logger():
    logger = logging.getLogger("cldf_mcp.test_obs")
    yield logger
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _record(msg: str = "done", **extra) -> logging.LogRecord:
    record = logging.LogRecord("cldf_mcp.server", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_correlation_ids_are_short_and_unique():
    ids = {new_correlation_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(len(i) == 8 for i in ids)


def test_json_formatter_copies_known_extras():
    record = _record(
        correlation_id="abcd1234",
        tool="cldf_query",
        command="query",
        exit_code=0,
        duration_ms=12.5,
        status="ok",
        unrelated="dropped",
    )

    data = json.loads(JsonLogFormatter().format(record))

    assert data["level"] == "info"
    assert data["logger"] == "cldf_mcp.server"
    assert data["msg"] == "done"
    assert data["cid"] == "abcd1234"
    assert data["tool"] == "cldf_query"
    assert data["command"] == "query"
    assert data["exit_code"] == 0
    assert data["duration_ms"] == 12.5
    assert "unrelated" not in data
    assert data["ts"].endswith("Z")


def test_json_formatter_skips_none_and_hidden_cid():
    record = _record(correlation_id="abcd1234", error=None)
    data = json.loads(JsonLogFormatter(include_correlation_id=False).format(record))
    assert "cid" not in data
    assert "error" not in data


def test_setup_logging_json(scratch_logger):
    config = ObservabilityConfig(enabled=True, log_format="json", log_level="debug")
    logger = setup_logging(config, scratch_logger.name)

    assert logger is scratch_logger
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JsonLogFormatter)


def test_setup_logging_replaces_handlers(scratch_logger):
    config = ObservabilityConfig(enabled=True)
    setup_logging(config, scratch_logger.name)
    setup_logging(config, scratch_logger.name)
    assert len(scratch_logger.handlers) == 1
    assert not isinstance(scratch_logger.handlers[0].formatter, JsonLogFormatter)


def test_registry_tallies_tools_and_commands():
    stats = CallStatsRegistry()
    stats.record_tool("cldf_validate_data", 10.0, True)
    stats.record_tool("cldf_validate_data", 30.0, False)
    stats.record_command("create", 8.0, 0)
    stats.record_command("validate", 4.0, 1)
    stats.record_command("validate", 2.0, None)

    snap = stats.snapshot()

    assert snap["tool_calls"] == 2
    assert snap["tool_failures"] == 1
    assert snap["tools"]["cldf_validate_data"] == {
        "count": 2,
        "failures": 1,
        "avg_ms": 20.0,
        "max_ms": 30.0,
    }
    assert snap["commands"]["create"]["failures"] == 0
    assert snap["commands"]["validate"] == {
        "count": 2,
        "failures": 2,
        "avg_ms": 3.0,
        "max_ms": 4.0,
    }

    stats.reset()
    assert stats.snapshot()["tools"] == {}


def test_context_requires_both_flags():
    assert not ObservabilityContext(ObservabilityConfig(enabled=True)).enabled
    assert not ObservabilityContext(ObservabilityConfig(metrics_enabled=True)).enabled
    assert ObservabilityContext(ObservabilityConfig(enabled=True, metrics_enabled=True)).enabled


def test_context_disabled_records_nothing():
    obs = ObservabilityContext(ObservabilityConfig())
    obs.record_tool("cldf_query", 1.0, True)
    obs.record_command("query", 1.0, 0)
    assert obs.snapshot()["tool_calls"] == 0
    assert obs.snapshot()["commands"] == {}
