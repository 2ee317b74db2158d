"""MCP configuration loader - reads from cldf-mcp.toml with ENV overrides."""  # noqa: I001

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import cast

from cldf_mcp import __version__

_TRUTHY = ("1", "true", "yes")
_LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class ServerConfig:
    """Server identity and transport settings."""

    name: str = "cldf-tools"
    version: str = __version__
    transport: str = "stdio"
    log_level: str = "info"

    def validate(self) -> None:
        if self.transport != "stdio":
            raise ValueError(f"Invalid transport: {self.transport}")
        if self.log_level.lower() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")


@dataclass
class CldfCliConfig:
    """How to reach the cldf program."""

    cli_path: str = "cldf"
    exec_timeout: float | None = None  # seconds; None = wait indefinitely
    temp_dir: str | None = None

    def validate(self) -> None:
        if not self.cli_path:
            raise ValueError("cli_path must not be empty")
        if self.exec_timeout is not None and self.exec_timeout <= 0:
            raise ValueError("exec_timeout must be positive")
        if self.temp_dir is not None:
            path = Path(self.temp_dir)
            if path.exists() and not path.is_dir():
                raise ValueError(f"temp_dir '{self.temp_dir}' exists but is not a directory")


@dataclass
class ObservabilityConfig:
    """Logging format and in-memory metrics."""

    enabled: bool = False
    log_format: str = "text"  # "json" | "text"
    log_level: str = "info"
    include_correlation_id: bool = True
    metrics_enabled: bool = False

    def validate(self) -> None:
        if self.log_format not in ("json", "text"):
            raise ValueError(f"Invalid log_format: {self.log_format}")


@dataclass
class CldfMcpConfig:
    """Root configuration."""

    enabled: bool = True
    config_version: str = "v1"
    server: ServerConfig = field(default_factory=ServerConfig)
    cldf: CldfCliConfig = field(default_factory=CldfCliConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def validate(self) -> None:
        self.server.validate()
        self.cldf.validate()
        self.observability.validate()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in _TRUTHY


def _apply_env_overrides(cfg: CldfMcpConfig) -> CldfMcpConfig:
    """Apply environment variable overrides. ENV beats TOML."""
    # CLDF_CLI - location of the cldf program
    if os.getenv("CLDF_CLI"):
        cfg.cldf.cli_path = os.getenv("CLDF_CLI", cfg.cldf.cli_path)

    if os.getenv("CLDF_MCP_ENABLED"):
        cfg.enabled = _env_flag("CLDF_MCP_ENABLED")

    # DEBUG=true / NODE_ENV=development turn on verbose logging
    if _env_flag("DEBUG") or os.getenv("NODE_ENV") == "development":
        cfg.server.log_level = "debug"
        cfg.observability.log_level = "debug"

    if os.getenv("CLDF_MCP_LOG_LEVEL"):
        cfg.server.log_level = os.getenv("CLDF_MCP_LOG_LEVEL", cfg.server.log_level)
        cfg.observability.log_level = cfg.server.log_level

    if os.getenv("CLDF_MCP_EXEC_TIMEOUT"):
        try:
            cfg.cldf.exec_timeout = float(os.getenv("CLDF_MCP_EXEC_TIMEOUT", ""))
        except ValueError:
            raise ValueError("CLDF_MCP_EXEC_TIMEOUT must be a number of seconds") from None

    if os.getenv("CLDF_MCP_TEMP_DIR"):
        cfg.cldf.temp_dir = os.getenv("CLDF_MCP_TEMP_DIR")

    # Observability overrides
    if os.getenv("CLDF_MCP_OBS_ENABLED"):
        cfg.observability.enabled = _env_flag("CLDF_MCP_OBS_ENABLED")
    if os.getenv("CLDF_MCP_OBS_LOG_FORMAT"):
        cfg.observability.log_format = os.getenv(
            "CLDF_MCP_OBS_LOG_FORMAT", cfg.observability.log_format
        )

    return cfg


def load_config(config_path: str | Path | None = None) -> CldfMcpConfig:
    """
    Load config from cldf-mcp.toml with ENV overrides.

    Precedence: ENV → TOML → defaults

    Args:
        config_path: Path to cldf-mcp.toml. If None, searches:
            1. CLDF_MCP_CONFIG env var
            2. ./cldf-mcp.toml

    Returns:
        CldfMcpConfig dataclass with merged settings.
    """
    if config_path is None:
        if os.getenv("CLDF_MCP_CONFIG"):
            config_path = Path(cast(str, os.getenv("CLDF_MCP_CONFIG")))
        else:
            config_path = Path("cldf-mcp.toml")
    else:
        config_path = Path(config_path)

    cfg = CldfMcpConfig()

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        mcp_data = data.get("mcp", {})

        # Top-level
        cfg.enabled = mcp_data.get("enabled", cfg.enabled)
        cfg.config_version = mcp_data.get("config_version", cfg.config_version)

        # Server
        srv = mcp_data.get("server", {})
        cfg.server.name = srv.get("name", cfg.server.name)
        cfg.server.transport = srv.get("transport", cfg.server.transport)
        cfg.server.log_level = srv.get("log_level", cfg.server.log_level)

        # cldf program
        cli = mcp_data.get("cldf", {})
        cfg.cldf.cli_path = cli.get("cli_path", cfg.cldf.cli_path)
        timeout = cli.get("exec_timeout", cfg.cldf.exec_timeout)
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError):
                raise ValueError(
                    f"exec_timeout must be a number of seconds, got {timeout!r}"
                ) from None
        cfg.cldf.exec_timeout = timeout
        cfg.cldf.temp_dir = cli.get("temp_dir", cfg.cldf.temp_dir)

        # Observability
        obs = mcp_data.get("observability", {})
        cfg.observability.enabled = obs.get("enabled", cfg.observability.enabled)
        cfg.observability.log_format = obs.get("log_format", cfg.observability.log_format)
        cfg.observability.log_level = obs.get("log_level", cfg.observability.log_level)
        cfg.observability.include_correlation_id = obs.get(
            "include_correlation_id", cfg.observability.include_correlation_id
        )
        cfg.observability.metrics_enabled = obs.get(
            "metrics_enabled", cfg.observability.metrics_enabled
        )

    # Apply ENV overrides (highest precedence)
    cfg = _apply_env_overrides(cfg)

    cfg.validate()

    return cfg
