"""The cue played when the stopwatch starts."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class SoundCue(Protocol):
    def play_start_cue(self) -> None: ...


class TerminalBell:
    """Rings the terminal bell."""

    def __init__(self, stream: TextIO = sys.stdout) -> None:
        self.stream = stream

    def play_start_cue(self) -> None:
        self.stream.write("\a")
        self.stream.flush()


class Silent:
    def play_start_cue(self) -> None:
        pass
