import os
from dataclasses import replace

import pytest

from simbridge.adapter import CommandAdapter
from simbridge.errors import ProcessError
from simbridge.runner import ProcessResult
from simbridge.settings import Settings


class FakeRunner:
    """Records invocations instead of spawning processes.

    `stdout` is returned on success; `error` (a message) makes every call
    raise ProcessError; `on_run` runs first, e.g. to write a screenshot.
    """

    def __init__(self, stdout: str = "", error: str | None = None, on_run=None):
        self.stdout = stdout
        self.error = error
        self.on_run = on_run
        self.invocations = []

    async def run(self, invocation):
        self.invocations.append(invocation)
        if self.on_run is not None:
            self.on_run(invocation)
        if self.error is not None:
            raise ProcessError(
                self.error,
                invocation=invocation,
                result=ProcessResult(returncode=1, stderr=self.error.encode()),
            )
        return ProcessResult(returncode=0, stdout=self.stdout.encode())


@pytest.fixture
def write_screenshot():
    """Build an on_run hook that writes `data` where simctl was told to write."""

    def factory(data: bytes):
        def hook(invocation):
            with open(invocation.args[-1], "wb") as f:
                f.write(data)

        return hook

    return factory


@pytest.fixture
def settings(tmp_path):
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    return Settings(xcrun="xcrun", idb_path="idb", tmpdir=str(scratch))


@pytest.fixture
def make_adapter(settings):
    def factory(udid=None, **runner_kwargs):
        runner = FakeRunner(**runner_kwargs)
        return CommandAdapter(runner=runner, settings=replace(settings, udid=udid)), runner

    return factory


@pytest.fixture
def scratch_files(settings):
    return lambda: sorted(os.listdir(settings.tmpdir))
