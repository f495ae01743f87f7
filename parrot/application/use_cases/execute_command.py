"""
Execute Command Use Case

Architectural Intent:
- Per-session READY/RUNNING state machine for submitted command lines
- Built-ins (stop, manual, cd) are resolved in-process before anything spawns
- Submissions to a busy session are deferred to its bounded CommandQueue
- Each running child is one asyncio task that streams output into history
  and publishes CommandFinishedEvent, which triggers the queue-drain step

Ordering Guarantee:
- At most one in-flight command per session
- A READY session starts a command immediately; a RUNNING one queues it
- Queued commands are drained strictly FIFO as each predecessor completes
"""

from __future__ import annotations
import asyncio
import logging
import os
from typing import Iterable, Optional

from parrot.domain.entities.display_options import DisplayOptions
from parrot.domain.entities.history_buffer import LineType
from parrot.domain.entities.session import Session
from parrot.domain.events.command_events import (
    CommandFinishedEvent,
    CommandQueuedEvent,
    CommandStartedEvent,
)
from parrot.domain.ports.display_port import DisplayPort, DisplayUnavailable, NullDisplay
from parrot.domain.ports.event_bus_port import EventBusPort
from parrot.domain.ports.process_port import ProcessHandle, ProcessPort
from parrot.domain.services.banner import show_manual
from parrot.domain.services.text import LineAssembler
from parrot.domain.value_objects.exit_status import ExitStatus

logger = logging.getLogger(__name__)

STOP_COMMAND = "stop"
MANUAL_COMMAND = "manual"
CD_COMMAND = "cd"

DEFAULT_INTERACTIVE_COMMANDS = (
    "vim",
    "nvim",
    "nano",
    "ranger",
    "parrot",
    "htop",
    "top",
    "sudo",
    "ssh",
    "man",
    "less",
    "more",
)

READ_CHUNK_SIZE = 1024


class CommandExecutor:
    def __init__(
        self,
        process_port: ProcessPort,
        event_bus: EventBusPort,
        display: Optional[DisplayPort] = None,
        options: Optional[DisplayOptions] = None,
        interactive_commands: Iterable[str] = DEFAULT_INTERACTIVE_COMMANDS,
        home: Optional[str] = None,
    ):
        self.process_port = process_port
        self.event_bus = event_bus
        self.display = display or NullDisplay()
        self.options = options or DisplayOptions()
        self.interactive_commands = tuple(interactive_commands)
        self._home = home
        self._tasks: set[asyncio.Task] = set()

    @property
    def home(self) -> str:
        return self._home or os.path.expanduser("~")

    def is_interactive(self, command: str) -> bool:
        return any(
            command == name or command.startswith(name)
            for name in self.interactive_commands
        )

    def submit(self, session: Session, command: str) -> None:
        """Run, resolve or queue one submitted command line for ``session``."""
        if not command:
            return

        if command == STOP_COMMAND:
            self.stop(session)
            return

        if command == MANUAL_COMMAND:
            show_manual(session.history)
            return

        if session.is_running:
            self._enqueue(session, command)
            return

        if command == CD_COMMAND or command.startswith(CD_COMMAND + " "):
            self.change_directory(session, command[len(CD_COMMAND):])
            return

        self._start(session, command)

    def stop(self, session: Session) -> bool:
        """Interrupt the session's running child; it is not reaped here.

        A child that has not been spawned yet is interrupted by its task as
        soon as the spawn returns.
        """
        if not session.is_running:
            session.history.append("No command is currently running")
            return False

        handle = session.process
        if handle is None:
            logger.debug("Session %d stopped before its child started", session.id)
        elif not self.process_port.interrupt(handle.pid):
            logger.info("Process %d already gone before interrupt", handle.pid)
        session.history.append("Command interrupted (SIGINT sent)")
        session.mark_ready()
        return True

    def change_directory(self, session: Session, target: str) -> bool:
        target = target.strip()
        if not target or target == "~":
            target = self.home
        elif target.startswith("~/"):
            target = self.home + target[1:]

        try:
            os.chdir(os.path.join(session.working_directory, target))
        except OSError as e:
            reason = e.strerror or str(e)
            session.history.append(f"cd: {target}: {reason}")
            logger.debug("cd to %s failed: %s", target, reason)
            return False

        session.working_directory = os.getcwd()
        return True

    def drain(self, session: Session) -> int:
        """Start queued commands while the session is READY; returns how many ran."""
        started = 0
        while not session.closed and not session.is_running:
            command = session.queue.dequeue()
            if command is None:
                break
            session.sync_input_lock()
            logger.debug("Dequeued %r for session %d", command, session.id)
            self.submit(session, command)
            started += 1
        return started

    def shutdown(self, sessions: Iterable[Session]) -> None:
        for session in sessions:
            if not session.is_running:
                continue
            if session.process is not None:
                self.process_port.interrupt(session.process.pid)
            session.mark_ready()

    async def join(self) -> None:
        """Wait until no command task is left, including ones started meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _enqueue(self, session: Session, command: str) -> None:
        queue = session.queue
        if queue.enqueue(command):
            session.history.append(
                f"Command added to queue. Queue size: {len(queue)}/{queue.capacity}"
            )
            self._publish(
                CommandQueuedEvent(
                    aggregate_id=str(session.id),
                    command=command,
                    session=session,
                    queue_length=len(queue),
                )
            )
        else:
            session.history.append(
                f"Command queue is full! Maximum {queue.capacity} commands allowed.",
                LineType.RAW,
            )
            logger.info("Queue full for session %d, rejected %r", session.id, command)
        session.sync_input_lock()

    def _start(self, session: Session, command: str) -> None:
        session.history.append(f"[{self.options.clock()}] {command}", LineType.COMMAND)
        run = session.mark_running()

        if self.is_interactive(command):
            coro = self._run_interactive(session, command, run)
        else:
            coro = self._run_captured(session, command, run)

        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_captured(self, session: Session, command: str, run: int) -> None:
        history = session.history
        try:
            handle = await self.process_port.spawn(command, session.working_directory)
        except OSError as e:
            if session.is_current(run):
                history.append(f"Failed to start command: {e.strerror or e}")
                session.mark_ready()
            logger.warning("Spawning %r failed: %s", command, e)
            await self._finished(session, command, None, error=str(e))
            return

        if session.is_current(run):
            session.attach(handle)
            logger.debug("Session %d running %r as pid %d", session.id, command, handle.pid)
            await self.event_bus.publish(
                [
                    CommandStartedEvent(
                        aggregate_id=str(session.id),
                        command=command,
                        session=session,
                        pid=handle.pid,
                    )
                ]
            )
        else:
            # stopped or closed while the spawn was pending
            logger.info("Interrupting pid %d, its command was cancelled", handle.pid)
            self.process_port.interrupt(handle.pid)

        await self._capture_output(handle, session, run)
        status = await handle.wait()

        if session.is_current(run):
            session.mark_ready()
            message = status.describe()
            if message:
                history.append(message)
        await self._finished(session, command, status)

    async def _capture_output(
        self, handle: ProcessHandle, session: Session, run: int
    ) -> None:
        """Stream output into history; lines of a cancelled run are dropped."""
        assembler = LineAssembler()

        def emit(lines):
            if session.is_current(run):
                for line in lines:
                    session.history.append(line)

        try:
            while chunk := await handle.read(READ_CHUNK_SIZE):
                emit(assembler.feed(chunk))
        except OSError as e:
            if session.is_current(run):
                session.history.append(
                    f"Failed to read command output: {e.strerror or e}"
                )
            logger.warning("Reading output of pid %d failed: %s", handle.pid, e)
        emit(assembler.flush())

    async def _run_interactive(self, session: Session, command: str, run: int) -> None:
        history = session.history
        history.append("Starting interactive application...")
        await self.event_bus.publish(
            [
                CommandStartedEvent(
                    aggregate_id=str(session.id),
                    command=command,
                    session=session,
                    interactive=True,
                )
            ]
        )

        status: Optional[ExitStatus] = None
        error = ""
        try:
            with self.display.suspend():
                status = await self.process_port.run_interactive(
                    command, session.working_directory
                )
        except (OSError, DisplayUnavailable) as e:
            error = str(e)
            history.append(f"Failed to start command: {error}")
            logger.warning("Interactive command %r failed: %s", command, e)

        if session.is_current(run):
            session.mark_ready()
            if status is not None and not status.succeeded:
                if status.signal is not None:
                    history.append(status.describe())
                else:
                    history.append(f"Command returned with exit code: {status.code}")
            history.append("Returned to Parrot Terminal")
        await self._finished(session, command, status, error=error)

    async def _finished(
        self,
        session: Session,
        command: str,
        status: Optional[ExitStatus],
        error: str = "",
    ) -> None:
        await self.event_bus.publish(
            [
                CommandFinishedEvent(
                    aggregate_id=str(session.id),
                    command=command,
                    session=session,
                    status=status,
                    error=error,
                )
            ]
        )

    def _publish(self, event: CommandQueuedEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.event_bus.publish([event]))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
