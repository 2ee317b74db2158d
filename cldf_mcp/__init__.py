"""CLDF MCP Server - exposes the cldf command-line tool as MCP tools."""

__version__ = "1.0.0"
