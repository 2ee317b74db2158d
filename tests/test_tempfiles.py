"""Tests for temp file lifecycle."""

from pathlib import Path
import re

import pytest

from cldf_mcp.tempfiles import TempFileManager


def test_temp_path_naming(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    path = manager.temp_path("cldf-validate", ".cldf")
    assert path.parent == temp_dir
    assert re.fullmatch(r"cldf-validate-\d+-[0-9a-f]{8}\.cldf", path.name)
    assert not path.exists()


def test_temp_paths_are_unique_within_same_millisecond(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    names = {manager.temp_path("cldf-data").name for _ in range(200)}
    assert len(names) == 200


def test_default_directory_is_system_temp():
    import tempfile

    assert TempFileManager().directory == Path(tempfile.gettempdir())


@pytest.mark.asyncio
async def test_create_text_writes_json_file(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    path = await manager.create_text('{"a": 1}', "cldf-data")
    assert path.suffix == ".json"
    assert path.read_text(encoding="utf-8") == '{"a": 1}'


@pytest.mark.asyncio
async def test_delete_missing_file_is_silent(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    assert await manager.delete(temp_dir / "never-written.cldf") is None


@pytest.mark.asyncio
async def test_delete_failure_returns_diagnostic(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    blocker = temp_dir / "a-directory"
    blocker.mkdir()
    problem = await manager.delete(blocker)
    assert problem is not None
    assert "Failed to delete temp file" in problem
    assert blocker.exists()


@pytest.mark.asyncio
async def test_scope_removes_files_on_normal_exit(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    async with manager.scoped() as scope:
        data_file = await scope.create_text("{}", "cldf-data")
        archive = scope.temp_path("cldf-data", ".cldf")
        archive.write_bytes(b"PK")
        assert data_file.exists() and archive.exists()

    assert not data_file.exists()
    assert not archive.exists()
    assert scope.diagnostics == []
    assert list(temp_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_scope_removes_files_when_body_raises(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    with pytest.raises(RuntimeError):
        async with manager.scoped() as scope:
            data_file = await scope.create_text("{}")
            raise RuntimeError("boom")
    assert not data_file.exists()


@pytest.mark.asyncio
async def test_scope_collects_delete_failures(temp_dir: Path):
    manager = TempFileManager(temp_dir)
    async with manager.scoped() as scope:
        ok_file = await scope.create_text("{}")
        stubborn = scope.temp_path("stubborn", "")
        stubborn.mkdir()

    assert not ok_file.exists()
    assert len(scope.diagnostics) == 1
    assert str(stubborn) in scope.diagnostics[0]


@pytest.mark.asyncio
async def test_failed_write_is_still_cleaned_up(temp_dir: Path, monkeypatch):
    manager = TempFileManager(temp_dir)

    async def half_write(path, content):
        path.write_text(content[:1], encoding="utf-8")
        raise OSError("disk full")

    monkeypatch.setattr(manager, "write_text", half_write)

    with pytest.raises(OSError, match="disk full"):
        async with manager.scoped() as scope:
            await scope.create_text('{"big": true}')

    assert list(temp_dir.iterdir()) == []
