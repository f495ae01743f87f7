from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExitStatus:
    """
    Value Object describing how a child process ended.

    Exactly one of ``code`` and ``signal`` is set.
    """
    code: Optional[int] = None
    signal: Optional[int] = None

    def __post_init__(self):
        if (self.code is None) == (self.signal is None):
            raise ValueError("ExitStatus needs exactly one of code or signal")

    @staticmethod
    def from_returncode(returncode: int) -> "ExitStatus":
        """Negative return codes mean the child was killed by that signal."""
        if returncode < 0:
            return ExitStatus(signal=-returncode)
        return ExitStatus(code=returncode)

    @property
    def succeeded(self) -> bool:
        return self.code == 0

    def describe(self) -> Optional[str]:
        """History line reporting a failure, or None for a clean exit."""
        if self.signal is not None:
            return f"Command terminated by signal: {self.signal}"
        if self.code:
            return f"Command exited with status: {self.code}"
        return None

    def __str__(self):
        if self.signal is not None:
            return f"signal {self.signal}"
        return f"exit {self.code}"
