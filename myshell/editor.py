import os
import sys

from myshell.config import MAX_LINE, PROMPT

ESC = 0x1B
CTRL_D = 0x04
BACKSPACE = (0x7F, 0x08)
ENTER = (0x0A, 0x0D)

# escape decoder states
NORMAL, GOT_ESC, GOT_CSI = range(3)


class LineEditor:
    """
    Byte-at-a-time line editor for a terminal in raw mode.

    Supports insertion at the cursor, backspace, left/right cursor movement
    and up/down browsing of the history buffer. The editor does all of the
    echoing itself; when `echo` is off nothing is written at all.
    """

    def __init__(self, history, prompt=PROMPT, infd=None, out=None,
                 echo=True, capacity=MAX_LINE - 1):
        self.history = history
        self.prompt = prompt
        self.infd = sys.stdin.fileno() if infd is None else infd
        self.out = out if out is not None else sys.stdout.buffer
        self.echo = echo
        self.capacity = capacity
        self.reset()

    def reset(self):
        self.buffer = bytearray()
        self.cursor = 0
        self.browse = 0
        self.saved = b""
        self.eof = False
        self._state = NORMAL
        self._params = False

    @property
    def line(self):
        return self.buffer.decode("utf-8", errors="replace")

    # ---------- Screen ----------
    def _write(self, data):
        if not self.echo:
            return
        self.out.write(data)
        self.out.flush()

    def _place_cursor(self):
        column = len(self.prompt) + self.cursor + 1
        self._write(b"\x1b[%dG" % column)

    def redraw(self):
        self._write(b"\r\x1b[2K" + self.prompt.encode() + bytes(self.buffer))
        self._place_cursor()

    # ---------- Editing ----------
    def _load(self, data):
        self.buffer = bytearray(data[:self.capacity])
        self.cursor = len(self.buffer)
        self.redraw()

    def history_up(self):
        if self.browse >= len(self.history):
            return
        if self.browse == 0:
            self.saved = bytes(self.buffer)
        self.browse += 1
        entry = self.history.get(self.browse)
        if entry is not None:
            self._load(entry.encode("utf-8"))

    def history_down(self):
        if self.browse == 0:
            return
        self.browse -= 1
        if self.browse == 0:
            self._load(self.saved)
        else:
            self._load(self.history.get(self.browse).encode("utf-8"))

    def move_left(self):
        if self.cursor > 0:
            self.cursor -= 1
            self._place_cursor()

    def move_right(self):
        if self.cursor < len(self.buffer):
            self.cursor += 1
            self._place_cursor()

    def backspace(self):
        if self.cursor == 0:
            return
        del self.buffer[self.cursor - 1]
        self.cursor -= 1
        self.redraw()

    def insert(self, byte):
        if len(self.buffer) >= self.capacity:
            return
        self.buffer.insert(self.cursor, byte)
        self.cursor += 1
        self.redraw()

    # ---------- Input decoding ----------
    def _escape(self, byte):
        if self._state == GOT_ESC:
            self._state = GOT_CSI if byte == ord("[") else NORMAL
            self._params = False
            return

        if 0x30 <= byte <= 0x3F:
            # parameter bytes, e.g. ESC [ 1 ; 5 C
            self._params = True
            return

        self._state = NORMAL
        if self._params:
            return
        handler = {
            ord("A"): self.history_up,
            ord("B"): self.history_down,
            ord("C"): self.move_right,
            ord("D"): self.move_left,
        }.get(byte)
        if handler:
            handler()

    def feed(self, byte):
        """
        Consume one input byte.
        Returns: True once the line is finished
        """
        if self._state != NORMAL:
            self._escape(byte)
            return False

        if byte == ESC:
            self._state = GOT_ESC
        elif byte in ENTER:
            self._write(b"\r\n")
            self.history.record(self.line)
            return True
        elif byte == CTRL_D:
            if not self.buffer:
                self.eof = True
                return True
        elif byte in BACKSPACE:
            self.backspace()
        elif 0x20 <= byte <= 0x7E:
            self.insert(byte)
        return False

    def read_line(self):
        """
        Read and edit one line from infd.
        Returns: the line, or None on end-of-input with an empty buffer
        """
        self.reset()
        self._write(self.prompt.encode())

        while True:
            try:
                chunk = os.read(self.infd, 1)
            except KeyboardInterrupt:
                # Ctrl+C tại prompt: bỏ dòng hiện tại, vẽ lại prompt
                self._write(b"^C\r\n")
                self.reset()
                self._write(self.prompt.encode())
                continue
            except OSError:
                chunk = b""

            if not chunk:
                self.eof = not self.buffer
                break
            if self.feed(chunk[0]):
                break

        if self.eof:
            return None
        return self.line
