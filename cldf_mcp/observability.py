"""Logging and in-memory call statistics for the CLDF MCP server.

Two tallies are kept while metrics are on:
- tools: one row per MCP tool name (calls, failures, wall time)
- commands: one row per cldf subcommand that actually ran (runs, non-zero
  or missing exit codes, time spent in the subprocess)

One tool call can run several subcommands; cldf_validate_data runs
``create`` and then ``validate``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
import json
import logging
import sys
from threading import Lock
from typing import Any
import uuid

from cldf_mcp.config import ObservabilityConfig

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# LogRecord attribute -> JSON key, for values passed through ``extra=``
_EXTRA_KEYS = {
    "correlation_id": "cid",
    "tool": "tool",
    "command": "command",
    "exit_code": "exit_code",
    "duration_ms": "duration_ms",
    "status": "status",
    "error": "error",
}


def new_correlation_id() -> str:
    """Eight hex chars; enough to follow one tool call through the log."""
    return uuid.uuid4().hex[:8]


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, include_correlation_id: bool = True):
        super().__init__()
        self.extra_keys = {
            attr: key
            for attr, key in _EXTRA_KEYS.items()
            if include_correlation_id or attr != "correlation_id"
        }

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc)
        entry: dict[str, Any] = {
            "ts": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for attr, key in self.extra_keys.items():
            value = getattr(record, attr, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


@dataclass
class CallStats:
    count: int = 0
    failures: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def add(self, duration_ms: float, failed: bool) -> None:
        self.count += 1
        self.failures += int(failed)
        self.total_ms += duration_ms
        self.max_ms = max(self.max_ms, duration_ms)

    def as_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "failures": self.failures,
            "avg_ms": round(self.total_ms / self.count, 2) if self.count else 0.0,
            "max_ms": round(self.max_ms, 2),
        }


class CallStatsRegistry:
    """Per-tool and per-subcommand tallies, safe to update from any thread."""

    def __init__(self):
        self._lock = Lock()
        self._tools: dict[str, CallStats] = defaultdict(CallStats)
        self._commands: dict[str, CallStats] = defaultdict(CallStats)

    def record_tool(self, tool: str, duration_ms: float, ok: bool) -> None:
        with self._lock:
            self._tools[tool].add(duration_ms, failed=not ok)

    def record_command(self, command: str, duration_ms: float, returncode: int | None) -> None:
        # None: never started or killed on timeout
        with self._lock:
            self._commands[command].add(duration_ms, failed=returncode != 0)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "tool_calls": sum(s.count for s in self._tools.values()),
                "tool_failures": sum(s.failures for s in self._tools.values()),
                "tools": {name: s.as_dict() for name, s in sorted(self._tools.items())},
                "commands": {name: s.as_dict() for name, s in sorted(self._commands.items())},
            }

    def reset(self) -> None:
        with self._lock:
            self._tools.clear()
            self._commands.clear()


class ObservabilityContext:
    """
    Correlation ids plus optional stats for one server instance.

    ``record_command`` has the executor observer signature, so it can be
    handed straight to CommandExecutor(observer=...).
    """

    def __init__(self, config: ObservabilityConfig):
        self.config = config
        self.enabled = config.enabled and config.metrics_enabled
        self.stats = CallStatsRegistry()

    def correlation_id(self) -> str:
        return new_correlation_id()

    def record_tool(self, tool: str, duration_ms: float, ok: bool) -> None:
        if self.enabled:
            self.stats.record_tool(tool, duration_ms, ok)

    def record_command(self, command: str, duration_ms: float, returncode: int | None) -> None:
        if self.enabled:
            self.stats.record_command(command, duration_ms, returncode)

    def snapshot(self) -> dict[str, Any]:
        return self.stats.snapshot()


def setup_logging(config: ObservabilityConfig, logger_name: str = "cldf_mcp") -> logging.Logger:
    """Send ``logger_name`` to exactly one stderr handler (stdout is the MCP stream)."""
    logger = logging.getLogger(logger_name)

    handler = logging.StreamHandler(sys.stderr)
    if config.log_format == "json":
        handler.setFormatter(JsonLogFormatter(config.include_correlation_id))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.handlers[:] = [handler]
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    logger.propagate = False
    return logger
