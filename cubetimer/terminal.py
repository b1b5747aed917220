"""
Keyboard input for the timer loop.

`Keyboard` puts the terminal into cbreak mode for the whole session, so a
poll for the next key is a single `select`. Prompts that need a full line
(a date, a solve number) briefly hand the terminal back in its normal mode.
"""

from __future__ import annotations

import os
import sys
import time
from typing import Any, List, Optional

if os.name == "nt":
    import msvcrt
else:
    import select
    import termios
    import tty


class Keyboard:
    def __init__(self) -> None:
        self._saved: Optional[List[Any]] = None

    def __enter__(self) -> Keyboard:
        self._cbreak()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._restore()

    def _cbreak(self) -> None:
        if os.name == "nt" or not sys.stdin.isatty():
            return
        fd = sys.stdin.fileno()
        self._saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)

    def _restore(self) -> None:
        if self._saved is not None:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None

    def key(self, timeout: Optional[float] = None) -> Optional[str]:
        """Next key pressed, or None if `timeout` seconds pass first."""
        if os.name == "nt":
            return self._key_windows(timeout)
        ready, _, _ = select.select([sys.stdin], [], [], timeout)
        if not ready:
            return None
        return sys.stdin.read(1)

    def _key_windows(self, timeout: Optional[float]) -> Optional[str]:
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if msvcrt.kbhit():
                ch = msvcrt.getch()
                # arrow and function keys arrive as two bytes
                if ch in (b"\x00", b"\xe0"):
                    msvcrt.getch()
                    continue
                return ch.decode("utf-8", errors="ignore")
            if deadline is not None and time.monotonic() >= deadline:
                return None
            time.sleep(0.005)

    def line(self, prompt: str) -> str:
        """Read a line of text with echo and line editing back on."""
        saved = self._saved
        self._restore()
        try:
            return input(prompt).strip()
        except EOFError:
            return ""
        finally:
            if saved is not None:
                self._cbreak()
