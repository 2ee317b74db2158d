#!/usr/bin/env python3
"""
CLDF MCP Server - Model Context Protocol interface for the cldf CLI.

Supports stdio transport for Claude Desktop and other MCP clients.
Run with: python -m cldf_mcp

Tools:
- cldf_schema_info, cldf_validate_data: schema help and dry-run validation
- cldf_create, cldf_validate, cldf_merge, cldf_convert: archive lifecycle
- cldf_query, cldf_extract, cldf_search_by_clid: reading archive data
- cldf_query_media, cldf_extract_media: media metadata and files
"""  # noqa: I001

from __future__ import annotations

import asyncio
import logging
import os
import sys
import time
from typing import Any

from cldf_mcp.config import CldfMcpConfig, load_config
from cldf_mcp.executor import CommandExecutor
from cldf_mcp.handlers import CldfToolHandlers, ToolResult
from cldf_mcp.observability import TEXT_FORMAT, ObservabilityContext, setup_logging
from cldf_mcp.prompts import BOOTSTRAP_PROMPT
from cldf_mcp.tempfiles import TempFileManager
from cldf_mcp.tool_defs import TOOLS
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

# Configure logging to stderr (stdout carries the MCP stream)
logging.basicConfig(
    level=logging.INFO,
    format=TEXT_FORMAT,
    stream=sys.stderr,
)
logger = logging.getLogger("cldf_mcp.server")


class CldfMcpServer:
    """CLDF MCP Server implementation."""

    def __init__(self, config: CldfMcpConfig, handlers: CldfToolHandlers | None = None):
        self.config = config
        self.server = Server(
            config.server.name,
            version=config.server.version,
            instructions=BOOTSTRAP_PROMPT,
        )
        self.obs = ObservabilityContext(config.observability)

        self.tools: list[Tool] = list(TOOLS)
        self.handlers = handlers or CldfToolHandlers(
            executor=CommandExecutor(
                timeout=config.cldf.exec_timeout, observer=self.obs.record_command
            ),
            temp_files=TempFileManager(config.cldf.temp_dir),
            cli_path=config.cldf.cli_path,
        )

        self._register_handlers()
        logger.info(f"CLDF CLI path: {self.handlers.cli_path}")
        logger.info(f"Registered {len(self.tools)} tools")

    def _register_handlers(self):
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            logger.debug("Received ListTools request")
            return self.tools

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> list[TextContent]:
            return await self.call_tool(name, arguments)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Run one tool call. Errors come back as an ``Error: ...`` text block."""
        cid = self.obs.correlation_id()
        started = time.monotonic()
        success = True
        error_msg = None

        logger.info(f"call_tool: {name}", extra={"correlation_id": cid, "tool": name})
        logger.debug(f"Arguments: {arguments}", extra={"correlation_id": cid, "tool": name})

        try:
            result = await self.handlers.dispatch(name, arguments or {})
            for note in result.diagnostics:
                logger.debug(note, extra={"correlation_id": cid, "tool": name})
        except Exception as e:
            success = False
            error_msg = str(e)
            logger.exception(
                f"Tool {name} failed: {e}", extra={"correlation_id": cid, "tool": name}
            )
            result = ToolResult.text(f"Error: {e}")

        duration_ms = (time.monotonic() - started) * 1000
        self.obs.record_tool(name, duration_ms, success)

        logger.info(
            f"call_tool done: {name}",
            extra={
                "correlation_id": cid,
                "tool": name,
                "duration_ms": duration_ms,
                "status": "ok" if success else "error",
                "error": error_msg,
            },
        )

        return result.content

    async def run(self):
        """Run the server with stdio transport."""
        logger.info("Starting CLDF MCP server (stdio transport)")
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def configure_logging(config: CldfMcpConfig) -> logging.Logger:
    """Apply the configured log level/format and return the server logger."""
    global logger  # noqa: PLW0603
    if config.observability.enabled:
        setup_logging(config.observability, "cldf_mcp")
    else:
        log_level = getattr(logging, config.server.log_level.upper(), logging.INFO)
        logging.getLogger().setLevel(log_level)
        logging.getLogger("cldf_mcp").setLevel(log_level)
    logger = logging.getLogger("cldf_mcp.server")
    return logger


def main():
    """Entry point for CLDF MCP server."""
    import argparse

    parser = argparse.ArgumentParser(description="CLDF MCP Server")
    parser.add_argument(
        "--config",
        "-c",
        help="Path to cldf-mcp.toml config file",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override log level",
    )
    args = parser.parse_args()

    config = load_config(args.config)

    if args.log_level:
        config.server.log_level = args.log_level
        config.observability.log_level = args.log_level

    configure_logging(config)

    logger.info("CLDF MCP Server - Starting up")
    logger.info(f"CLDF CLI: {config.cldf.cli_path}")
    logger.info(f"Log level: {config.server.log_level}")
    logger.info(f"Process ID: {os.getpid()}")
    logger.info(
        f"Observability: enabled={config.observability.enabled}, "
        f"log_format={config.observability.log_format}"
    )

    if not config.enabled:
        logger.warning("MCP server disabled in config, exiting")
        sys.exit(0)

    server = CldfMcpServer(config)
    try:
        asyncio.run(server.run())
    except Exception:
        logger.exception("Failed to start CLDF MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
