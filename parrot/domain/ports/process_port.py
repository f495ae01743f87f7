"""
Process Port

Architectural Intent:
- Port interface for running commands through the platform shell
- Captured children expose a merged stdout/stderr byte stream and an exit wait
- Interactive children are given the real terminal until they exit
- Implemented by ShellAdapter (asyncio subprocesses) or test doubles
"""

from abc import ABC, abstractmethod
from parrot.domain.value_objects.exit_status import ExitStatus


class ProcessHandle(ABC):
    """
    Opaque reference to one spawned child.
    """

    @property
    @abstractmethod
    def pid(self) -> int:
        pass

    @abstractmethod
    async def read(self, size: int = 1024) -> bytes:
        """
        Returns the next chunk of merged output, or b"" at end of stream.
        """
        pass

    @abstractmethod
    async def wait(self) -> ExitStatus:
        """
        Blocks until the child terminates and reports how it ended.
        """
        pass


class ProcessPort(ABC):
    """
    Port interface for spawning and signalling shell commands.
    """

    @abstractmethod
    async def spawn(self, command: str, cwd: str) -> ProcessHandle:
        """
        Starts ``command`` with stdout and stderr redirected into one pipe.
        Raises OSError if the pipe or the child cannot be created.
        """
        pass

    @abstractmethod
    async def run_interactive(self, command: str, cwd: str) -> ExitStatus:
        """
        Runs ``command`` attached to the real terminal and waits for it.
        """
        pass

    @abstractmethod
    def interrupt(self, pid: int) -> bool:
        """
        Delivers SIGINT to the child ``pid`` and every process it started.
        Returns False if the child is already gone.
        """
        pass
