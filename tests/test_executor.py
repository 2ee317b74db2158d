"""Tests for CommandExecutor against real subprocesses."""

import sys

import pytest

from cldf_mcp.errors import CommandExecutionError
from cldf_mcp.executor import CommandExecutor


def _py(code: str) -> list[str]:
    return [sys.executable, "-c", code]


@pytest.mark.asyncio
async def test_captures_stdout_and_stderr():
    result = await CommandExecutor().run(
        _py("import sys; print('out'); print('err', file=sys.stderr)")
    )
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"
    assert result.returncode == 0
    assert result.duration_ms >= 0


@pytest.mark.asyncio
async def test_arguments_are_not_shell_interpreted():
    tricky = 'a "quoted" value; echo nope $(whoami)'
    result = await CommandExecutor().run(_py("import sys; print(sys.argv[1])") + [tricky])
    assert result.stdout.rstrip("\r\n") == tricky


@pytest.mark.asyncio
async def test_nonzero_exit_with_output_is_returned():
    result = await CommandExecutor().run(
        _py("import sys; sys.stderr.write('validation failed: bad'); sys.exit(3)")
    )
    assert result.returncode == 3
    assert "validation failed" in result.stderr


@pytest.mark.asyncio
async def test_nonzero_exit_without_output_raises():
    with pytest.raises(CommandExecutionError, match="exit code 2") as exc_info:
        await CommandExecutor().run(_py("import sys; sys.exit(2)"))
    assert exc_info.value.code == "EXECUTION_FAILED"


@pytest.mark.asyncio
async def test_missing_program_raises():
    with pytest.raises(CommandExecutionError, match="Command failed"):
        await CommandExecutor().run(["definitely-not-a-real-cldf-binary-xyz", "schema"])


@pytest.mark.asyncio
async def test_timeout_kills_process():
    executor = CommandExecutor(timeout=0.2)
    with pytest.raises(CommandExecutionError, match="timed out"):
        await executor.run(_py("import time; time.sleep(10)"))


@pytest.mark.asyncio
async def test_invalid_utf8_is_replaced():
    result = await CommandExecutor().run(
        _py("import sys; sys.stdout.buffer.write(b'ok\\xff')")
    )
    assert result.stdout.startswith("ok")
    assert "\ufffd" in result.stdout


@pytest.mark.asyncio
async def test_observer_sees_every_run():
    seen = []
    executor = CommandExecutor(observer=lambda *row: seen.append(row))
    impatient = CommandExecutor(timeout=0.2, observer=executor.observer)

    await executor.run(_py("print('ok')"))
    with pytest.raises(CommandExecutionError):
        await executor.run(["definitely-not-a-real-cldf-binary-xyz", "merge"])
    with pytest.raises(CommandExecutionError):
        await impatient.run(_py("import time; time.sleep(10)"))

    assert [(command, code) for command, _, code in seen] == [
        ("-c", 0),
        ("merge", None),
        ("-c", None),
    ]
    assert all(ms >= 0 for _, ms, _ in seen)
