import sys
from collections import deque

from myshell.config import MAX_HISTORY


class HistoryBuffer:
    """In-memory command history; the oldest line is evicted once full."""

    def __init__(self, capacity=MAX_HISTORY):
        if capacity < 1:
            raise ValueError("history capacity must be positive")
        self.capacity = capacity
        self.total = 0
        self._lines = deque(maxlen=capacity)

    def __len__(self):
        return len(self._lines)

    def record(self, line):
        """Thêm command vào history"""
        if not line or not line.strip():
            return
        self._lines.append(line)
        self.total += 1

    def entries(self):
        """
        Retained lines with their display ordinals.
        Returns: list of (ordinal, text), oldest first
        """
        first = max(1, self.total - self.capacity + 1)
        return list(enumerate(self._lines, start=first))

    def get(self, k):
        """Line k steps back from the most recent one, or None."""
        if k < 1 or k > len(self._lines):
            return None
        return self._lines[-k]

    def clear(self):
        self._lines.clear()

    def show(self, out=None):
        """In ra toàn bộ history"""
        out = out or sys.stdout
        for ordinal, text in self.entries():
            print(f"{ordinal}\t{text}", file=out)
