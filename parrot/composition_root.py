"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the Parrot application
- Single place where the shell adapter, event bus and use cases are wired together
- No adapter instantiation should occur outside this module (except CLI)

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Queue draining is subscribed to CommandFinishedEvent and only runs for the
  focused session; background sessions resume when they regain focus
"""

from dataclasses import dataclass
from typing import Optional

from parrot.application.use_cases.execute_command import CommandExecutor
from parrot.application.use_cases.handle_input import InputHandler
from parrot.application.use_cases.manage_sessions import SessionFactory, SessionManager
from parrot.domain.entities.display_options import DisplayOptions
from parrot.domain.events.command_events import CommandFinishedEvent
from parrot.domain.ports.display_port import DisplayPort
from parrot.domain.services.escape_decoder import EscapeDecoder
from parrot.infrastructure.adapters.shell_adapter import ShellAdapter
from parrot.infrastructure.config import ParrotConfig
from parrot.infrastructure.event_bus import EventBus


@dataclass
class ParrotContext:
    """DI container holding all wired dependencies."""

    config: ParrotConfig
    options: DisplayOptions
    event_bus: EventBus
    shell_adapter: ShellAdapter
    executor: CommandExecutor
    manager: SessionManager
    handler: InputHandler


def create_context(
    config: Optional[ParrotConfig] = None,
    display: Optional[DisplayPort] = None,
    working_directory: Optional[str] = None,
) -> ParrotContext:
    """Create and wire all dependencies."""
    config = config or ParrotConfig()
    limits = config.limits

    options = DisplayOptions(
        line_break_enabled=config.display.line_break_enabled,
        time_format=config.display.time_format,
    )
    event_bus = EventBus()
    shell_adapter = ShellAdapter(shell=config.shell.path)

    executor = CommandExecutor(
        shell_adapter,
        event_bus,
        display=display,
        options=options,
        interactive_commands=config.shell.interactive_commands,
    )
    factory = SessionFactory(
        options=options,
        history_capacity=limits.history_capacity,
        queue_capacity=limits.queue_capacity,
        input_capacity=limits.input_capacity,
        recall_capacity=limits.recall_capacity,
    )
    manager = SessionManager(
        factory,
        canceller=executor.stop,
        max_sessions=limits.max_sessions,
        working_directory=working_directory,
    )
    handler = InputHandler(
        manager,
        executor,
        decoder=EscapeDecoder(timeout=config.display.escape_timeout),
        options=options,
    )

    async def drain_focused(event: CommandFinishedEvent) -> None:
        if event.session is not None and manager.is_active(event.session):
            executor.drain(event.session)

    event_bus.subscribe(CommandFinishedEvent, drain_focused)

    return ParrotContext(
        config=config,
        options=options,
        event_bus=event_bus,
        shell_adapter=shell_adapter,
        executor=executor,
        manager=manager,
        handler=handler,
    )
