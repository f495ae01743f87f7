"""Tests for CommandExecutor with a scripted process port."""

import asyncio
import os
import re
import pytest
from unittest.mock import MagicMock

from parrot.application.use_cases.execute_command import CommandExecutor
from parrot.domain.entities.history_buffer import LineType
from parrot.domain.events.command_events import (
    CommandFinishedEvent,
    CommandQueuedEvent,
    CommandStartedEvent,
)
from parrot.domain.ports.display_port import DisplayUnavailable
from parrot.domain.value_objects.exit_status import ExitStatus
from parrot.infrastructure.event_bus import EventBus


async def _settle():
    for _ in range(5):
        await asyncio.sleep(0)


def _texts(session):
    return [line.text for line in session.history.lines]


def _drain_on_finish(executor):
    async def drain(event):
        executor.drain(event.session)

    executor.event_bus.subscribe(CommandFinishedEvent, drain)


class TestCapturedCommands:
    @pytest.mark.asyncio
    async def test_output_streamed_into_history(self, executor, manager, process_port):
        session = manager.active
        process_port.outputs["echo hi"] = [b"\x1b[32mhi\x1b[0m\nthere", b"\n"]
        executor.submit(session, "echo hi")
        assert session.is_running
        await executor.join()

        command_line = session.history[0]
        assert command_line.line_type is LineType.COMMAND
        assert re.fullmatch(r"\[\d\d:\d\d:\d\d\] echo hi", command_line.text)
        assert _texts(session)[1:] == ["hi", "there"]
        assert not session.is_running
        assert process_port.spawned == [("echo hi", session.working_directory)]

    @pytest.mark.asyncio
    async def test_non_zero_exit_reported(self, executor, manager, process_port):
        session = manager.active
        process_port.statuses["false"] = ExitStatus(code=1)
        executor.submit(session, "false")
        await executor.join()
        assert _texts(session)[-1] == "Command exited with status: 1"

    @pytest.mark.asyncio
    async def test_signal_reported(self, executor, manager, process_port):
        session = manager.active
        process_port.statuses["kill -9 $$"] = ExitStatus(signal=9)
        executor.submit(session, "kill -9 $$")
        await executor.join()
        assert _texts(session)[-1] == "Command terminated by signal: 9"

    @pytest.mark.asyncio
    async def test_spawn_failure_leaves_session_ready(self, executor, manager, process_port):
        session = manager.active
        process_port.spawn_error = FileNotFoundError(2, "No such file or directory")
        executor.submit(session, "ls")
        await executor.join()
        assert _texts(session)[-1] == "Failed to start command: No such file or directory"
        assert not session.is_running

    @pytest.mark.asyncio
    async def test_lifecycle_events_published(self, executor, manager):
        received = []

        async def record(event):
            received.append(event)

        executor.event_bus.subscribe(CommandStartedEvent, record)
        executor.event_bus.subscribe(CommandFinishedEvent, record)
        executor.submit(manager.active, "true")
        await executor.join()

        assert [type(e) for e in received] == [CommandStartedEvent, CommandFinishedEvent]
        assert received[0].pid == 1000
        assert received[1].status == ExitStatus(code=0)
        assert received[1].session is manager.active


class TestQueueing:
    @pytest.mark.asyncio
    async def test_busy_session_runs_queue_in_order(self, executor, manager, process_port):
        _drain_on_finish(executor)
        session = manager.active
        executor.submit(session, "A")
        executor.submit(session, "B")
        executor.submit(session, "C")
        assert "Command added to queue. Queue size: 1/10" in _texts(session)
        assert "Command added to queue. Queue size: 2/10" in _texts(session)

        await executor.join()
        assert [command for command, _ in process_port.spawned] == ["A", "B", "C"]
        commands = [
            line.text.split("] ", 1)[1]
            for line in session.history.lines
            if line.line_type is LineType.COMMAND
        ]
        assert commands == ["A", "B", "C"]
        assert session.queue.is_empty

    @pytest.mark.asyncio
    async def test_queued_event_published(self, executor, manager):
        received = []

        async def record(event):
            received.append(event)

        executor.event_bus.subscribe(CommandQueuedEvent, record)
        _drain_on_finish(executor)
        executor.submit(manager.active, "A")
        executor.submit(manager.active, "B")
        await executor.join()
        assert [(e.command, e.queue_length) for e in received] == [("B", 1)]

    @pytest.mark.asyncio
    async def test_full_queue_locks_input(self, executor, manager, process_port):
        process_port.auto_release = False
        session = manager.active
        executor.submit(session, "sleep 10")
        for i in range(10):
            executor.submit(session, f"echo {i}")
        assert session.queue.is_full
        assert session.editor.locked

        executor.submit(session, "echo rejected")
        assert _texts(session)[-1] == "Command queue is full! Maximum 10 commands allowed."
        assert session.history[-1].line_type is LineType.RAW
        assert "echo rejected" not in session.queue.pending()

        await _settle()
        executor.stop(session)
        assert executor.drain(session) == 1
        assert not session.editor.locked
        assert len(session.queue) == 9
        process_port.auto_release = True
        await executor.join()

    @pytest.mark.asyncio
    async def test_drain_skips_closed_session(self, executor, manager):
        session = manager.active
        session.queue.enqueue("echo late")
        session.release()
        assert executor.drain(session) == 0


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_running_command(self, executor, manager, process_port):
        process_port.auto_release = False
        session = manager.active
        executor.submit(session, "sleep 10")
        await _settle()

        executor.submit(session, "stop")
        assert process_port.interrupted == [1000]
        assert "Command interrupted (SIGINT sent)" in _texts(session)
        assert not session.is_running

        await executor.join()
        assert not session.is_running

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, executor, manager, process_port):
        session = manager.active
        executor.submit(session, "stop")
        assert _texts(session) == ["No command is currently running"]
        assert process_port.interrupted == []

    @pytest.mark.asyncio
    async def test_stale_completion_does_not_clobber_new_command(
        self, executor, manager, process_port
    ):
        process_port.auto_release = False
        session = manager.active
        executor.submit(session, "sleep 10")
        await _settle()
        executor.stop(session)

        executor.submit(session, "sleep 20")
        await _settle()
        assert session.is_running
        assert session.process is process_port.handles[1]

        process_port.handles[1].released.set()
        await executor.join()
        assert not session.is_running

    @pytest.mark.asyncio
    async def test_stop_before_child_spawned(self, executor, manager, process_port):
        process_port.auto_release = False
        process_port.outputs["sleep 3"] = [b"too late\n"]
        session = manager.active
        executor.submit(session, "sleep 3")
        executor.submit(session, "stop")

        assert not session.is_running
        assert _texts(session)[-1] == "Command interrupted (SIGINT sent)"

        await executor.join()
        assert process_port.interrupted == [1000]
        assert session.process is None
        assert "too late" not in _texts(session)

    @pytest.mark.asyncio
    async def test_close_before_child_spawned(self, executor, manager, process_port):
        process_port.auto_release = False
        closed = manager.create()
        manager.switch_to(closed.id)
        executor.submit(closed, "sleep 2; echo orphan")
        process_port.outputs["sleep 2; echo orphan"] = [b"orphan\n"]

        assert manager.close()
        await executor.join()
        assert process_port.interrupted == [1000]
        assert closed.history.lines == ()

    @pytest.mark.asyncio
    async def test_output_after_stop_is_dropped(self, executor, manager, process_port):
        process_port.auto_release = False
        process_port.outputs["echo next"] = [b"next\n"]
        session = manager.active
        executor.submit(session, "trap '' INT; sleep 1; echo late")
        await _settle()
        stale = session.process

        executor.stop(session)
        stale._chunks.append(b"late\n")
        stale._status = ExitStatus(signal=2)
        process_port.auto_release = True
        executor.submit(session, "echo next")
        await executor.join()

        texts = _texts(session)
        assert "late" not in texts
        assert "Command terminated by signal: 2" not in texts
        assert texts[-1] == "next"


class TestBuiltins:
    @pytest.mark.asyncio
    async def test_manual(self, executor, manager, process_port):
        session = manager.active
        executor.submit(session, "manual")
        assert _texts(session)[0] == "Parrot Terminal Usage:"
        assert all(line.line_type is LineType.RAW for line in session.history.lines)
        assert process_port.spawned == []

    @pytest.mark.asyncio
    async def test_cd_success(self, executor, manager, tmp_path):
        (tmp_path / "sub").mkdir()
        session = manager.active
        executor.submit(session, "cd sub")
        assert os.path.realpath(session.working_directory) == os.path.realpath(tmp_path / "sub")
        assert os.path.realpath(os.getcwd()) == os.path.realpath(tmp_path / "sub")
        assert _texts(session) == []

    @pytest.mark.asyncio
    async def test_cd_failure_keeps_directory(self, executor, manager, tmp_path):
        session = manager.active
        executor.submit(session, "cd nope")
        assert _texts(session)[-1].startswith("cd: nope: ")
        assert session.working_directory == str(tmp_path)

    def test_cd_home(self, manager, process_port, tmp_path):
        home = tmp_path / "home"
        home.mkdir()
        (home / "docs").mkdir()
        executor = CommandExecutor(process_port, EventBus(), home=str(home))
        session = manager.active

        executor.change_directory(session, "~/docs")
        assert os.path.realpath(session.working_directory) == os.path.realpath(home / "docs")
        executor.change_directory(session, "   ")
        assert os.path.realpath(session.working_directory) == os.path.realpath(home)

    @pytest.mark.asyncio
    async def test_cd_queued_while_running(self, executor, manager, process_port):
        process_port.auto_release = False
        session = manager.active
        executor.submit(session, "sleep 10")
        executor.submit(session, "cd /")
        assert session.queue.pending() == ("cd /",)
        await _settle()
        executor.shutdown(manager.sessions)
        await executor.join()


class TestInteractive:
    @pytest.mark.parametrize("command,expected", [
        ("vim notes.txt", True),
        ("top", True),
        ("lessons", True),
        ("ls", False),
        ("echo vim", False),
    ])
    def test_allow_list_prefix_match(self, executor, command, expected):
        assert executor.is_interactive(command) is expected

    @pytest.mark.asyncio
    async def test_interactive_round_trip(self, executor, manager, process_port):
        session = manager.active
        executor.submit(session, "vim notes.txt")
        await executor.join()
        assert process_port.interactive == [("vim notes.txt", session.working_directory)]
        assert process_port.spawned == []
        assert _texts(session)[1:] == [
            "Starting interactive application...",
            "Returned to Parrot Terminal",
        ]
        assert not session.is_running

    @pytest.mark.asyncio
    async def test_interactive_non_zero_exit(self, executor, manager, process_port):
        process_port.interactive_status = ExitStatus(code=1)
        session = manager.active
        executor.submit(session, "less missing")
        await executor.join()
        assert _texts(session)[-2:] == [
            "Command returned with exit code: 1",
            "Returned to Parrot Terminal",
        ]

    @pytest.mark.asyncio
    async def test_display_unavailable(self, manager, process_port):
        display = MagicMock()
        display.suspend.side_effect = DisplayUnavailable("no terminal")
        executor = CommandExecutor(process_port, EventBus(), display=display)
        session = manager.active
        executor.submit(session, "htop")
        await executor.join()
        assert "Failed to start command: no terminal" in _texts(session)
        assert process_port.interactive == []
        assert not session.is_running
