"""
Tool handlers for the CLDF MCP server.

Each handler turns one tool call into one or more cldf invocations and
shapes the output into a ToolResult. Handlers raise CldfToolError subclasses
for hard failures; the server turns those into ``Error: ...`` text blocks.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
import time
from typing import Any

from mcp.types import TextContent

from cldf_mcp.clid import EntityType, classify_fields
from cldf_mcp.command import DEFAULT_CLI, build_args
from cldf_mcp.errors import (
    ArchiveValidationError,
    CldfToolError,
    CommandExecutionError,
    CommandFailedError,
    InvalidArgumentError,
    MediaQueryError,
    SchemaInfoError,
    UnknownToolError,
)
from cldf_mcp.executor import CommandExecutor, ExecResult
from cldf_mcp.schema_examples import AI_HINTS, CREATE_VALIDATION_GUIDANCE, STATIC_COMPONENTS
from cldf_mcp.tempfiles import TempFileManager

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MARKER = "validation failed"
MEDIA_PREFIX = "media/"


@dataclass
class ToolResult:
    """Uniform tool response plus non-fatal diagnostics (cleanup, secondary calls)."""

    content: list[TextContent]
    diagnostics: list[str] = field(default_factory=list)

    @classmethod
    def text(cls, text: str, diagnostics: Sequence[str] = ()) -> ToolResult:
        return cls(
            content=[TextContent(type="text", text=text)],
            diagnostics=list(diagnostics),
        )

    @classmethod
    def json(cls, payload: Any, diagnostics: Sequence[str] = ()) -> ToolResult:
        return cls.text(json.dumps(payload, indent=2), diagnostics)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


Handler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


def _require(args: dict[str, Any], key: str) -> Any:
    value = args.get(key)
    if value is None or value == "":
        raise InvalidArgumentError(f"{key} required")
    return value


def _data_section(parsed: Any) -> dict[str, Any]:
    """The ``data`` object of a cldf JSON envelope, or {}."""
    if isinstance(parsed, dict) and isinstance(parsed.get("data"), dict):
        return parsed["data"]
    return {}


class CldfToolHandlers:
    """Dispatches tool calls to the cldf program."""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        temp_files: TempFileManager | None = None,
        cli_path: str = DEFAULT_CLI,
    ):
        self.executor = executor or CommandExecutor()
        self.temp_files = temp_files or TempFileManager()
        self.cli_path = cli_path
        self.handlers: dict[str, Handler] = {
            "cldf_schema_info": self.handle_schema_info,
            "cldf_validate_data": self.handle_validate_data,
            "cldf_create": self.handle_create,
            "cldf_validate": self.handle_validate,
            "cldf_query": self.handle_query,
            "cldf_merge": self.handle_merge,
            "cldf_convert": self.handle_convert,
            "cldf_extract": self.handle_extract,
            "cldf_query_media": self.handle_query_media,
            "cldf_extract_media": self.handle_extract_media,
            "cldf_search_by_clid": self.handle_search_by_clid,
        }

    async def dispatch(self, name: str, args: dict[str, Any] | None) -> ToolResult:
        """Run the handler registered for name."""
        handler = self.handlers.get(name)
        if handler is None:
            raise UnknownToolError(name)

        logger.info(f"Handling tool: {name}")
        started = time.monotonic()
        try:
            result = await handler(dict(args or {}))
        except Exception:
            duration = (time.monotonic() - started) * 1000
            logger.error(f"Tool {name} failed after {duration:.0f}ms")
            raise

        duration = (time.monotonic() - started) * 1000
        logger.info(f"Tool {name} completed in {duration:.0f}ms")
        return result

    # -- helpers -----------------------------------------------------------

    def _argv(
        self,
        base: str,
        flags: dict[str, Any] | None = None,
        positional: Sequence[str] = (),
    ) -> list[str]:
        return build_args(base, flags, positional=positional, cli_path=self.cli_path)

    async def _run_checked(self, argv: list[str]) -> ExecResult:
        """Run argv; stderr with no stdout is a failure."""
        result = await self.executor.run(argv)
        if result.stderr and not result.stdout:
            raise CommandFailedError(result.stderr.strip())
        return result

    @staticmethod
    def _json_or_raw(stdout: str) -> ToolResult:
        try:
            return ToolResult.json(json.loads(stdout))
        except json.JSONDecodeError:
            return ToolResult.text(stdout)

    # -- handlers ----------------------------------------------------------

    async def handle_schema_info(self, args: dict[str, Any]) -> ToolResult:
        component = args.get("component") or "all"

        static = STATIC_COMPONENTS.get(component)
        if static is not None:
            return ToolResult.json(static)

        argv = self._argv("schema", {"component": component, "json": "json"})
        try:
            result = await self._run_checked(argv)
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise SchemaInfoError(
                "Failed to retrieve schema information: "
                "Failed to parse schema information from CLDF tool"
            ) from e
        except CldfToolError as e:
            raise SchemaInfoError(f"Failed to retrieve schema information: {e}") from e

        if isinstance(data, dict) and data.get("success") and data.get("data"):
            data = data["data"]

        if component == "all" and isinstance(data, dict):
            data["_aiHints"] = dict(AI_HINTS)

        return ToolResult.json(data)

    async def handle_validate_data(self, args: dict[str, Any]) -> ToolResult:
        data = args.get("data")
        if not isinstance(data, dict):
            raise InvalidArgumentError("Data must be a valid JSON object")

        async with self.temp_files.scoped() as scope:
            data_file = await scope.create_text(json.dumps(data), "cldf-validate")
            archive = scope.temp_path("cldf-validate", ".cldf")
            outcome = await self._create_and_validate(data_file, archive)

        return ToolResult.json(outcome, scope.diagnostics)

    async def _create_and_validate(self, data_file: Path, archive: Path) -> dict[str, Any]:
        """Build a throwaway archive from data_file, then validate it."""
        create_argv = self._argv(
            "create",
            {
                "template": "basic",
                "output": str(archive),
                "from-json": str(data_file),
                "json": "json",
            },
        )
        validate_argv = self._argv("validate", {"json": "json"}, positional=[str(archive)])

        try:
            created = await self.executor.run(create_argv)

            if VALIDATION_FAILED_MARKER in created.stderr:
                return {
                    "valid": False,
                    "source": "create_validation",
                    "errors": [created.stderr],
                    "message": "Data validation failed during CLDF archive creation",
                    "suggestion": "Use cldf_schema_info to understand the expected structure",
                }
            if created.returncode != 0:
                raise CommandExecutionError(
                    created.stderr.strip()
                    or created.stdout.strip()
                    or f"create exited with code {created.returncode}"
                )

            validated = await self.executor.run(validate_argv)
        except CommandExecutionError as e:
            return {
                "valid": False,
                "source": "binary_validation",
                "errors": [str(e)],
                "message": "Data validation failed",
                "suggestion": "Check data structure against CLDF schema using cldf_schema_info",
            }

        stdout = validated.stdout
        if not stdout:
            return {
                "valid": True,
                "source": "binary_validation",
                "message": "Archive created and validated successfully",
            }
        try:
            parsed = json.loads(stdout)
        except json.JSONDecodeError:
            parsed = None
        if not isinstance(parsed, dict):
            return {"valid": True, "source": "binary_validation", "message": stdout}
        parsed["source"] = "binary_validation"
        return parsed

    async def handle_create(self, args: dict[str, Any]) -> ToolResult:
        template = _require(args, "template")
        output_path = _require(args, "outputPath")
        data = args.get("data")

        logger.debug(f"Creating CLDF archive: template={template}, output={output_path}")
        flags: dict[str, Any] = {"template": template, "output": output_path, "json": "json"}

        async with self.temp_files.scoped() as scope:
            if data is not None:
                logger.debug("Creating archive with custom data")
                data_file = await scope.create_text(json.dumps(data), "cldf-data")
                flags["from-json"] = str(data_file)
            result = await self.executor.run(self._argv("create", flags))

        stderr = result.stderr.strip()
        if VALIDATION_FAILED_MARKER in stderr:
            logger.warning("CLDF validation failed during creation")
            raise ArchiveValidationError(CREATE_VALIDATION_GUIDANCE.format(errors=stderr).strip())
        if stderr:
            raise CommandFailedError(stderr)
        if result.returncode != 0:
            # --json mode reports failures on stdout
            raise CommandFailedError(
                result.stdout.strip() or f"create exited with code {result.returncode}"
            )

        return ToolResult.text(
            result.stdout or f"CLDF archive created successfully at {output_path}",
            scope.diagnostics,
        )

    async def handle_validate(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        flags = {"json": "json", "strict": bool(args.get("strict", False))}
        result = await self._run_checked(self._argv("validate", flags, positional=[file_path]))
        return self._json_or_raw(result.stdout)

    async def handle_query(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        flags = {
            "select": _require(args, "dataType"),
            "json": "json",
            "clid": args.get("clid") or None,
            "filter": args.get("filter") or None,
        }
        result = await self._run_checked(self._argv("query", flags, positional=[file_path]))
        return self._json_or_raw(result.stdout)

    async def handle_merge(self, args: dict[str, Any]) -> ToolResult:
        files = args.get("files")
        if not isinstance(files, list) or not files:
            raise InvalidArgumentError("files must be a non-empty list of archive paths")
        output_path = _require(args, "outputPath")
        flags = {
            "output": output_path,
            "strategy": args.get("strategy") or "merge",
            "json": "json",
        }
        result = await self._run_checked(
            self._argv("merge", flags, positional=[str(f) for f in files])
        )
        return ToolResult.text(result.stdout or f"Archives merged successfully to {output_path}")

    async def handle_convert(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        output_path = _require(args, "outputPath")
        flags = {"format": _require(args, "format"), "output": output_path, "json": "json"}
        result = await self._run_checked(self._argv("convert", flags, positional=[file_path]))
        return ToolResult.text(result.stdout or f"Archive converted successfully to {output_path}")

    async def handle_extract(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        flags = {
            "type": _require(args, "dataType"),
            "json": "json",
            "output": args.get("outputDir") or None,
        }
        result = await self._run_checked(self._argv("extract", flags, positional=[file_path]))
        return self._json_or_raw(result.stdout)

    async def handle_query_media(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        include_embedded = args.get("includeEmbedded", True)
        media_type = args.get("mediaType") or "all"

        argv = self._argv("query", {"select": "all", "json": "json"}, positional=[file_path])
        result = await self._run_checked(argv)
        try:
            parsed = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse media query result: {e}")
            raise MediaQueryError("Failed to query media information") from e

        metadata = [m for m in _data_section(parsed).get("media") or [] if isinstance(m, dict)]
        if media_type != "all":
            wanted = "PHOTO" if media_type == "photo" else "VIDEO"
            metadata = [m for m in metadata if m.get("type") == wanted]

        embedded_count = sum(1 for m in metadata if m.get("embedded"))
        stats = {
            "total": len(metadata),
            "photos": sum(1 for m in metadata if m.get("type") == "PHOTO"),
            "videos": sum(1 for m in metadata if m.get("type") == "VIDEO"),
            "embedded": embedded_count,
            "external": len(metadata) - embedded_count,
        }

        diagnostics: list[str] = []
        embedded_files: list[str] = []
        if include_embedded and embedded_count > 0:
            try:
                embedded_files = await self._list_embedded_media(file_path)
            except (CldfToolError, ValueError) as e:
                logger.warning(f"Failed to get embedded media file info: {e}")
                diagnostics.append(f"Failed to get embedded media file info: {e}")

        payload = {"metadata": metadata, "embedded": embedded_files, "stats": stats}
        return ToolResult.json(payload, diagnostics)

    async def _list_embedded_media(self, file_path: str) -> list[str]:
        argv = self._argv("extract", {"files": "media", "json": "json"}, positional=[file_path])
        result = await self.executor.run(argv)
        if not result.stdout:
            return []
        parsed = json.loads(result.stdout)
        files = parsed.get("files") if isinstance(parsed, dict) else None
        return [f for f in files or [] if isinstance(f, str) and f.startswith(MEDIA_PREFIX)]

    async def handle_extract_media(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        output_dir = _require(args, "outputDir")
        preserve = args.get("preserveStructure", True)

        flags = {
            "output": output_dir,
            "files": "media",
            "no-preserve-structure": not preserve,
        }
        result = await self._run_checked(self._argv("extract", flags, positional=[file_path]))

        try:
            parsed = json.loads(result.stdout)
        except json.JSONDecodeError:
            return ToolResult.text(result.stdout or "Media extraction completed")

        files = parsed.get("files") if isinstance(parsed, dict) else None
        media_files = [
            f for f in files or [] if isinstance(f, str) and f.startswith(MEDIA_PREFIX)
        ]
        return ToolResult.json(
            {
                "success": True,
                "message": f"Extracted {len(media_files)} media files",
                "outputDirectory": output_dir,
                "files": media_files,
            }
        )

    async def handle_search_by_clid(self, args: dict[str, Any]) -> ToolResult:
        file_path = _require(args, "filePath")
        clid = _require(args, "clid")

        argv = self._argv(
            "query", {"select": "all", "clid": clid, "json": "json"}, positional=[file_path]
        )
        result = await self._run_checked(argv)

        try:
            parsed = json.loads(result.stdout)
        except json.JSONDecodeError:
            return ToolResult.text(result.stdout or f"Error searching for CLID: {clid}")

        results = _data_section(parsed).get("results")
        found = results[0] if isinstance(results, list) and results else None
        if not found:
            return ToolResult.json(
                {"found": False, "clid": clid, "message": f"No entity found with CLID: {clid}"}
            )

        item_type = classify_fields(found) if isinstance(found, dict) else EntityType.UNKNOWN

        return ToolResult.json(
            {"found": True, "type": item_type.value, "clid": clid, "data": found}
        )
