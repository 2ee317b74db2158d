"""
Short-lived temp files used to hand data to the cldf program.

Every file created here belongs to a single tool call. Deletion is
best-effort: failures are logged and reported back as diagnostics, never
raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import tempfile
import time
import uuid

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "cldf"


def _unique_name(prefix: str, suffix: str) -> str:
    """prefix-<ms timestamp>-<random>.suffix"""
    ts = int(time.time() * 1000)
    rand = uuid.uuid4().hex[:8]
    return f"{prefix}-{ts}-{rand}{suffix}"


@dataclass
class TempScope:
    """Paths owned by one tool call, released together on scope exit."""

    manager: TempFileManager
    paths: list[Path] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    async def create_text(self, content: str, prefix: str = DEFAULT_PREFIX) -> Path:
        path = self.manager.temp_path(prefix, ".json")
        # Register before writing so a failed write is still cleaned up
        self.paths.append(path)
        await self.manager.write_text(path, content)
        return path

    def temp_path(self, prefix: str = DEFAULT_PREFIX, suffix: str = ".json") -> Path:
        path = self.manager.temp_path(prefix, suffix)
        self.paths.append(path)
        return path

    async def release(self) -> None:
        for path in self.paths:
            problem = await self.manager.delete(path)
            if problem:
                self.diagnostics.append(problem)
        self.paths.clear()


class TempFileManager:
    """Creates and deletes temp files under a single directory."""

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory) if directory else Path(tempfile.gettempdir())

    def temp_path(self, prefix: str = DEFAULT_PREFIX, suffix: str = ".json") -> Path:
        """Derive a unique temp path without creating the file."""
        return self.directory / _unique_name(prefix, suffix)

    async def write_text(self, path: Path, content: str) -> None:
        logger.debug(f"Creating temp file: {path}")
        await asyncio.to_thread(path.write_text, content, encoding="utf-8")

    async def create_text(self, content: str, prefix: str = DEFAULT_PREFIX) -> Path:
        """Write content to a new temp .json file and return its path."""
        path = self.temp_path(prefix, ".json")
        await self.write_text(path, content)
        return path

    async def delete(self, path: str | Path) -> str | None:
        """
        Remove a temp file.

        Returns None on success, otherwise a short diagnostic. Never raises.
        """
        try:
            await asyncio.to_thread(os.unlink, path)
        except FileNotFoundError:
            # Derived paths the program never wrote to
            return None
        except OSError as e:
            logger.debug(f"Failed to delete temp file {path}: {e}")
            return f"Failed to delete temp file {path}: {e}"
        logger.debug(f"Deleted temp file: {path}")
        return None

    @asynccontextmanager
    async def scoped(self) -> AsyncIterator[TempScope]:
        """
        Usage:
            async with temp_files.scoped() as scope:
                data_file = await scope.create_text(payload, "cldf-data")
                ...
            # every path on scope is gone here, even if the body raised
        """
        scope = TempScope(manager=self)
        try:
            yield scope
        finally:
            await scope.release()
