import os
import sys
import termios


class RawMode:
    """
    Non-canonical, no-echo input on a terminal for the duration of a `with`.
    Ctrl+C still raises SIGINT (ISIG is kept). The previous attributes are
    restored on exit, errors included. Non-terminal fds are left alone.
    """

    def __init__(self, fd=None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._old = None

    @property
    def active(self):
        return self._old is not None

    def __enter__(self):
        if not os.isatty(self.fd):
            return self

        self._old = termios.tcgetattr(self.fd)
        new = termios.tcgetattr(self.fd)
        new[3] = new[3] & ~(termios.ICANON | termios.ECHO)
        new[3] = new[3] | termios.ISIG
        new[6][termios.VMIN] = 1
        new[6][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSADRAIN, new)
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._old is None:
            return
        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old)
        finally:
            self._old = None
