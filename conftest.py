"""Global test configuration.

Shared fixtures for building sessions and executors without a real shell,
and for keeping tests that change the process-wide working directory isolated.
"""

import asyncio
import os

import pytest

from parrot.application.use_cases.execute_command import CommandExecutor
from parrot.application.use_cases.manage_sessions import SessionFactory, SessionManager
from parrot.domain.entities.display_options import DisplayOptions
from parrot.domain.ports.process_port import ProcessHandle, ProcessPort
from parrot.domain.value_objects.exit_status import ExitStatus
from parrot.infrastructure.event_bus import EventBus


class FakeHandle(ProcessHandle):
    """Process handle fed from a script of output chunks."""

    def __init__(self, pid, chunks=(), status=None):
        self._pid = pid
        self._chunks = list(chunks)
        self._status = status or ExitStatus(code=0)
        self.released = asyncio.Event()

    @property
    def pid(self):
        return self._pid

    async def read(self, size=1024):
        if not self._chunks:
            await self.released.wait()
        if self._chunks:
            return self._chunks.pop(0)
        return b""

    async def wait(self):
        return self._status


class FakeProcessPort(ProcessPort):
    """Records spawns; each child finishes once the test releases it."""

    def __init__(self, auto_release=True):
        self.auto_release = auto_release
        self.spawned = []
        self.handles = []
        self.interrupted = []
        self.interactive = []
        self.outputs = {}
        self.statuses = {}
        self.spawn_error = None
        self.interactive_status = ExitStatus(code=0)

    async def spawn(self, command, cwd):
        if self.spawn_error is not None:
            raise self.spawn_error
        self.spawned.append((command, cwd))
        handle = FakeHandle(
            1000 + len(self.handles),
            self.outputs.get(command, ()),
            self.statuses.get(command),
        )
        if self.auto_release:
            handle.released.set()
        self.handles.append(handle)
        return handle

    async def run_interactive(self, command, cwd):
        self.interactive.append((command, cwd))
        return self.interactive_status

    def interrupt(self, pid):
        self.interrupted.append(pid)
        for handle in self.handles:
            if handle.pid == pid:
                handle.released.set()
        return True


@pytest.fixture
def restore_cwd():
    """Put the process back in its starting directory after the test."""
    cwd = os.getcwd()
    yield cwd
    os.chdir(cwd)


@pytest.fixture
def process_port():
    return FakeProcessPort()


@pytest.fixture
def options():
    return DisplayOptions()


@pytest.fixture
def executor(process_port, options):
    return CommandExecutor(process_port, EventBus(), options=options, home="/home/parrot")


@pytest.fixture
def manager(executor, options, tmp_path, restore_cwd):
    factory = SessionFactory(options=options, welcome=False)
    return SessionManager(factory, canceller=executor.stop, working_directory=str(tmp_path))
