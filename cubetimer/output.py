"""Terminal output: colours, time formatting, log records and the trend chart."""

from __future__ import annotations

import logging
import shutil
import sys
from typing import List, Optional, Sequence

from colorama import Fore, Style

C = Fore.LIGHTCYAN_EX
ERR = Fore.LIGHTRED_EX
Y = Fore.LIGHTYELLOW_EX
RESET = Fore.RESET
GREEN = Fore.LIGHTGREEN_EX
ORANGE = Fore.YELLOW
DIM = Style.DIM
UNDIM = Style.RESET_ALL


def colored(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"


def colored_output(text: str, typ: str = "info") -> None:
    """Small consistent output helper."""
    symbol = ""
    if typ == "info":
        symbol = f"{C}[*]{RESET}"
    elif typ == "input":
        symbol = f"{Y}[+]{RESET}"
    elif typ == "error":
        symbol = f"{ERR}[!]{RESET}"
    elif typ == "title":
        print(f"{C}[*]{RESET} {C}{text}{RESET}")
        return
    elif typ == "command":
        # expects text like "k = desc"
        left, _, right = text.partition(" = ")
        print(f"{Y}[{left}]{RESET} {right}")
        return

    print(f"{symbol} {text}")


class ColoredHandler(logging.Handler):
    """Routes log records through `colored_output`."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            typ = "error" if record.levelno >= logging.WARNING else "info"
            clear_status_line()
            colored_output(msg, typ)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = ColoredHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def format_time(millis: int) -> str:
    """``12345`` -> ``"12.345"``, ``83456`` -> ``"1:23.456"``."""
    minutes, rest = divmod(int(millis), 60_000)
    seconds, ms = divmod(rest, 1000)
    if minutes:
        return f"{minutes}:{seconds:02d}.{ms:03d}"
    return f"{seconds}.{ms:03d}"


def format_difference(millis: int) -> str:
    seconds, ms = divmod(abs(int(millis)), 1000)
    return f"{seconds}.{ms:03d}s"


def format_optional(millis: Optional[float]) -> str:
    if millis is None:
        return "--:--.--"
    return format_time(int(millis))


# Status line helpers
def terminal_width() -> int:
    return shutil.get_terminal_size((120, 24)).columns


def clear_status_line() -> None:
    width = terminal_width()
    sys.stdout.write("\r" + " " * width + "\r")
    sys.stdout.flush()


def write_status_line(line: str) -> None:
    clear_status_line()
    sys.stdout.write(line)
    sys.stdout.flush()


BLOCKS = " ▁▂▃▄▅▆▇█"


def sparkline(values: Sequence[float]) -> str:
    """One character per value, taller for slower times."""
    if not values:
        return ""
    low, high = min(values), max(values)
    span = high - low
    top = len(BLOCKS) - 1
    chars: List[str] = []
    for value in values:
        if span == 0:
            level = top // 2
        else:
            level = 1 + int((value - low) / span * (top - 1))
        chars.append(BLOCKS[level])
    return "".join(chars)


def render_chart(values: Sequence[float], width: Optional[int] = None) -> List[str]:
    """
    Lines of a compact trend chart for `values` (milliseconds): the
    sparkline, then the slowest and fastest value as axis labels.
    Only the most recent `width` values are drawn.
    """
    if not values:
        return []
    width = width or max(10, terminal_width() - 20)
    shown = list(values)[-width:]
    return [
        f"{format_time(int(max(shown))):>9} ┐",
        f"{'':>9} │{colored(sparkline(shown), ORANGE)}",
        f"{format_time(int(min(shown))):>9} ┘",
    ]
