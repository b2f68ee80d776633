import sys
from dataclasses import dataclass, field

from myshell.history import HistoryBuffer
from myshell.job_control import JobTable


@dataclass
class ShellContext:
    """State shared by the main loop, the builtins and the executor."""

    history: HistoryBuffer = field(default_factory=HistoryBuffer)
    jobs: JobTable = field(default_factory=JobTable)
    stdin_fd: int = 0
    stdout_fd: int = 1
    running: bool = True
    last_status: int = 0

    @classmethod
    def from_stdio(cls):
        return cls(stdin_fd=sys.stdin.fileno(), stdout_fd=sys.stdout.fileno())
