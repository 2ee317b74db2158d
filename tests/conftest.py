from collections.abc import Sequence
from pathlib import Path

import pytest

from cldf_mcp.executor import ExecResult
from cldf_mcp.handlers import CldfToolHandlers
from cldf_mcp.tempfiles import TempFileManager

_CONFIG_ENV = (
    "CLDF_CLI",
    "CLDF_MCP_CONFIG",
    "CLDF_MCP_ENABLED",
    "CLDF_MCP_LOG_LEVEL",
    "CLDF_MCP_EXEC_TIMEOUT",
    "CLDF_MCP_TEMP_DIR",
    "CLDF_MCP_OBS_ENABLED",
    "CLDF_MCP_OBS_LOG_FORMAT",
    "DEBUG",
    "NODE_ENV",
)


@pytest.fixture(autouse=True)
def hermetic_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Autouse: each test runs in its own tmp cwd with no config env leaking in.
    """
    monkeypatch.chdir(tmp_path)
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class FakeExecutor:
    """Stands in for CommandExecutor: records argv, replays queued results.

    A queued item may be an ExecResult, an exception (raised), or a callable
    taking argv and returning an ExecResult.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self.responses: list = []

    def queue(self, *responses) -> "FakeExecutor":
        self.responses.extend(responses)
        return self

    async def run(self, argv: Sequence[str]) -> ExecResult:
        self.calls.append(list(argv))
        if not self.responses:
            return ExecResult(stdout="", stderr="")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(list(argv))
        return response


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "cldf-tmp"
    path.mkdir()
    return path


@pytest.fixture
def handlers(fake_executor: FakeExecutor, temp_dir: Path) -> CldfToolHandlers:
    return CldfToolHandlers(
        executor=fake_executor,
        temp_files=TempFileManager(temp_dir),
        cli_path="cldf",
    )
