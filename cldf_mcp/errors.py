"""
CLDF tool error types.

Custom exceptions with MCP-friendly error codes.
"""

from __future__ import annotations


class CldfToolError(Exception):
    """Base error for CLDF tool operations."""

    code: str = "CLDF_ERROR"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class UnknownToolError(CldfToolError):
    """Tool name is not one of the registered tools."""

    code = "UNKNOWN_TOOL"

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidArgumentError(CldfToolError):
    """Invalid argument provided (raised before any subprocess runs)."""

    code = "INVALID_ARGUMENT"


class CommandExecutionError(CldfToolError):
    """The cldf program could not be run, or died without output."""

    code = "EXECUTION_FAILED"


class CommandFailedError(CldfToolError):
    """The cldf program reported an error on stderr."""

    code = "COMMAND_FAILED"


class ArchiveValidationError(CldfToolError):
    """Archive creation rejected the submitted data."""

    code = "VALIDATION_FAILED"


class SchemaInfoError(CldfToolError):
    """Schema information could not be retrieved."""

    code = "SCHEMA_INFO_FAILED"


class MediaQueryError(CldfToolError):
    """Media information could not be queried."""

    code = "MEDIA_QUERY_FAILED"
