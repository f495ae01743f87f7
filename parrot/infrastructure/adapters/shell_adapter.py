"""
Shell Adapter

Architectural Intent:
- Infrastructure adapter implementing ProcessPort via the platform shell
- Captured commands run as `<shell> -c <command>` under asyncio with stdout
  and stderr merged into one pipe, each in its own process group so an
  interrupt reaches every process the shell started
- Interactive commands inherit the real terminal and run in the default
  executor so the event loop keeps ticking
"""

import asyncio
import logging
import os
import signal
import subprocess
from typing import Optional

from parrot.domain.ports.process_port import ProcessHandle, ProcessPort
from parrot.domain.value_objects.exit_status import ExitStatus

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"


class ShellProcess(ProcessHandle):
    def __init__(self, process: asyncio.subprocess.Process):
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    async def read(self, size: int = 1024) -> bytes:
        if self._process.stdout is None:
            return b""
        return await self._process.stdout.read(size)

    async def wait(self) -> ExitStatus:
        returncode = await self._process.wait()
        return ExitStatus.from_returncode(returncode)


class ShellAdapter(ProcessPort):
    def __init__(self, shell: str = DEFAULT_SHELL, env: Optional[dict] = None):
        self.shell = shell
        self.env = env

    async def spawn(self, command: str, cwd: str) -> ShellProcess:
        process = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=cwd,
            env=self.env,
            executable=self.shell,
            start_new_session=True,
        )
        logger.debug("Spawned pid %d: %s", process.pid, command)
        return ShellProcess(process)

    async def run_interactive(self, command: str, cwd: str) -> ExitStatus:
        def _run():
            result = subprocess.run(
                command,
                shell=True,
                executable=self.shell,
                cwd=cwd,
                env=self.env,
            )
            return ExitStatus.from_returncode(result.returncode)

        return await asyncio.get_running_loop().run_in_executor(None, _run)

    def interrupt(self, pid: int) -> bool:
        try:
            os.killpg(pid, signal.SIGINT)
            return True
        except ProcessLookupError:
            return False
        except PermissionError as e:
            logger.warning("Not allowed to interrupt pid %d: %s", pid, e)
            return False
