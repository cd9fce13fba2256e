import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import cairo_compile_server.services.dispatcher as dispatcher_module
import cairo_compile_server.services.locks as locks_module
from cairo_compile_server.config import Settings, ToolchainMode
from cairo_compile_server.models import ProcessOutcome
from cairo_compile_server.services.dispatcher import CompileDispatcher
from cairo_compile_server.services.locks import PathLocks
from cairo_compile_server.main import app


class FakeRunner:
    """Stand-in for ProcessRunner that records calls instead of spawning tools.

    By default every run exits with `exit_code` and the scripted streams.
    Set `handler` to a callable(executable, args, working_dir) returning a
    ProcessOutcome to react to the actual arguments, and `error` to make
    every run raise.
    """

    def __init__(self):
        self.calls = []
        self.exit_code = 0
        self.stdout = b""
        self.stderr = b""
        self.error = None
        self.handler = None
        self.delay = 0.0
        self.active = 0
        self.max_active = 0

    async def run(self, executable, args, working_dir, timeout=None):
        self.calls.append(
            {
                "executable": executable,
                "args": list(args),
                "working_dir": Path(working_dir),
                "timeout": timeout,
            }
        )
        if self.error is not None:
            raise self.error

        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.handler is not None:
                return self.handler(executable, list(args), Path(working_dir))
            return ProcessOutcome(exit_code=self.exit_code, stdout=self.stdout, stderr=self.stderr)
        finally:
            self.active -= 1


def write_output_artifact(content: str, exit_code: int = 0, stderr: bytes = b""):
    """Handler that writes `content` to the destination argument like starknet-compile does."""

    def handler(executable, args, working_dir):
        Path(args[1]).write_text(content, encoding="utf-8")
        return ProcessOutcome(exit_code=exit_code, stderr=stderr)

    return handler


@pytest.fixture
def test_settings(tmp_path):
    """Settings with every root inside tmp_path and prebuilt-binary tool mode."""
    roots = {name: tmp_path / name for name in ("upload", "sierra", "casm", "cairo")}
    for root in roots.values():
        root.mkdir()

    return Settings(
        project_root=roots["upload"],
        sierra_root=roots["sierra"],
        casm_root=roots["casm"],
        cairo_dir=roots["cairo"],
        toolchain_mode=ToolchainMode.binary,
        compile_timeout=10.0,
        max_upload_bytes=1024,
    )


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def artifact_writer():
    return write_output_artifact


@pytest.fixture
def dispatcher(test_settings, fake_runner):
    """Dispatcher wired to the fake runner and installed as the global instance."""
    dispatcher_module.reset_dispatcher()
    locks_module._locks = None

    d = CompileDispatcher(test_settings, runner=fake_runner, locks=PathLocks())
    dispatcher_module._dispatcher = d

    yield d

    dispatcher_module.reset_dispatcher()
    locks_module._locks = None


@pytest.fixture
def client(dispatcher):
    """Test client backed by the fake-runner dispatcher."""
    with TestClient(app) as c:
        yield c
