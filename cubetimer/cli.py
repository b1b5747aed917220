"""
Terminal front end for the cube timer.

Keys:
 - Space: tap (start the countdown / cancel it / stop the timer / dismiss the result)
 - a: stats (count/best/worst/mean/Ao5)
 - l: list all solves
 - t: list the solves of a date (asks for YYYY-MM-DD, empty = today)
 - c: trend chart (rolling Ao5)
 - d: delete a solve (asks for its number in the list, empty = most recent)
 - r: delete all solves
 - h: help
 - q: quit

Every completed solve is written to the JSON file named by
`config.solves_path()`.
"""

from __future__ import annotations

import os
from datetime import date, datetime
from typing import List, Optional

from colorama import init as colorama_init

from . import config
from .machine import Countdown, Idle, Running, ShowingResult, TimerController
from .output import (
    C,
    DIM,
    ERR,
    GREEN,
    RESET,
    UNDIM,
    Y,
    clear_status_line,
    colored,
    colored_output,
    configure_logging,
    format_difference,
    format_optional,
    format_time,
    render_chart,
    write_status_line,
)
from .sound import TerminalBell
from .stats import average_all, average_of_last_n, chart_series, solves_on, summarize
from .store import JsonSolveStore, Solve
from .terminal import Keyboard


def status_line(controller: TimerController) -> str:
    phase = controller.phase
    if isinstance(phase, Countdown):
        return f"{C}[*]{RESET} {colored('GET SET', Y)} | {colored(str(phase.remaining), Y)}"
    if isinstance(phase, Running):
        return f"{C}[*]{RESET} {colored('RUNNING', ERR)} | {format_time(phase.elapsed_millis)}"
    if isinstance(phase, ShowingResult):
        return f"{C}[*]{RESET} {colored('DONE   ', C)} | tap to continue"
    return f"{C}[*]{RESET} {colored('READY  ', C)} | {format_time(0)}"


def print_averages(solves: List[Solve]) -> None:
    colored_output(
        f"Avg 5: {format_optional(average_of_last_n(solves, config.AVERAGE_WINDOW)):>8}"
        f"   Avg All: {format_optional(average_all(solves)):>8}",
        "info",
    )


def print_result(controller: TimerController) -> None:
    phase = controller.phase
    if not isinstance(phase, ShowingResult):
        return
    result = phase.result

    compared = result.compared_to_average_millis
    if compared is None:
        colored_output(f"Stopped > {format_time(result.time_millis)}", "info")
    else:
        color = GREEN if compared < 0 else ERR if compared > 0 else Y
        word = "faster" if compared < 0 else "slower"
        colored_output(
            f"Stopped > {colored(format_time(result.time_millis), color)}"
            f"  ({colored(f'{format_difference(compared)} {word}', color)})",
            "info",
        )

    if phase.store_error is not None:
        colored_output(f"Solve was not saved: {phase.store_error}", "error")

    print_averages(controller.history())
    print("")


def on_phase_change(controller: TimerController) -> None:
    if isinstance(controller.phase, ShowingResult):
        clear_status_line()
        print_result(controller)
    elif isinstance(controller.phase, Idle):
        clear_status_line()
        colored_output(f"Scramble: {controller.visible_scramble}", "info")


def print_stats(solves: List[Solve]) -> None:
    if not solves:
        colored_output("No solves yet.", "info")
        return

    summary = summarize(solves)
    colored_output(f"Solves:       {summary.count:>8}", "info")
    colored_output(f"{GREEN}Best:{RESET}         {format_optional(summary.best):>8}", "info")
    colored_output(f"{ERR}Worst:{RESET}        {format_optional(summary.worst):>8}", "info")
    colored_output(f"Mean (all):   {format_optional(summary.mean):>8}", "info")
    if len(solves) >= config.AVERAGE_WINDOW:
        colored_output(f"Ao5 (last 5): {format_optional(summary.average_of_5):>8}", "info")
    else:
        colored_output("Ao5: need at least 5 solves.", "info")


def list_solves(solves: List[Solve], empty_message: str = "No solves yet.") -> None:
    print("")
    if not solves:
        colored_output(empty_message, "error")
        print("")
        return

    worst = max(s.duration_millis for s in solves)
    best = min(s.duration_millis for s in solves)

    for index, solve in enumerate(solves, 1):
        color = RESET
        if solve.duration_millis == worst:
            color = ERR
        if solve.duration_millis == best:
            color = GREEN

        when = solve.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        line = f"{C}{index:03d}{RESET} {DIM}{when}{UNDIM} {color}{format_time(solve.duration_millis):>8}{RESET}"
        colored_output(line, "info")

    print("")


def print_chart(solves: List[Solve]) -> None:
    points = chart_series(solves, config.AVERAGE_WINDOW)
    print("")
    if not points:
        colored_output("No solves yet. Complete some solves to see your progression.", "info")
        print("")
        return

    if len(solves) < config.AVERAGE_WINDOW:
        colored_output(f"Progression ({len(points)} solves)", "title")
    else:
        colored_output(f"Progression (rolling Ao{config.AVERAGE_WINDOW})", "title")
    for line in render_chart([p.window_average_millis for p in points]):
        print(line)
    first = points[0].at_timestamp.astimezone().strftime("%b %d")
    last = points[-1].at_timestamp.astimezone().strftime("%b %d")
    print(f"{'':>11}{DIM}{first} .. {last}{UNDIM}")
    print("")


def confirm(question: str, keyboard: Keyboard) -> bool:
    clear_status_line()
    colored_output(f"{question} [y/N]", "input")
    return keyboard.key() in ("y", "Y")


def ask_day(keyboard: Keyboard) -> Optional[date]:
    """Calendar day typed as YYYY-MM-DD; empty input means today."""
    clear_status_line()
    text = keyboard.line(f"{Y}[+]{RESET} Date (YYYY-MM-DD, empty = today): ")
    if not text:
        return date.today()
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        colored_output(f"Not a date: {text}", "error")
        return None


def pick_solve(solves: List[Solve], keyboard: Keyboard) -> Optional[Solve]:
    """Number from the `l` listing; empty input means the most recent solve."""
    list_solves(solves)
    text = keyboard.line(f"{Y}[+]{RESET} Solve number (empty = most recent): ")
    if not text:
        return solves[-1]
    try:
        index = int(text)
    except ValueError:
        index = 0
    if not 1 <= index <= len(solves):
        colored_output(f"No solve number {text}.", "error")
        return None
    return solves[index - 1]


def help() -> None:
    print("")
    colored_output("  = tap (start / cancel / stop / continue)", "command")
    colored_output("a = stats", "command")
    colored_output("l = list", "command")
    colored_output("t = solves for a date", "command")
    colored_output("c = chart", "command")
    colored_output("d = delete a solve", "command")
    colored_output("r = delete all solves", "command")
    colored_output("q = quit", "command")
    print("")


def handle_key(controller: TimerController, key: str, keyboard: Keyboard) -> None:
    """Keys other than Space and quit; only used while idle or showing a result."""
    solves = controller.history()

    if key in ("a", "A"):
        clear_status_line()
        print("")
        print_stats(solves)
        print("")

    elif key in ("l", "L"):
        clear_status_line()
        list_solves(solves)

    elif key in ("t", "T"):
        day = ask_day(keyboard)
        if day is not None:
            colored_output(f"Solves for {day:%b %d, %Y}", "title")
            list_solves(solves_on(solves, day), "No solves for this date.")

    elif key in ("c", "C"):
        clear_status_line()
        print_chart(solves)

    elif key in ("d", "D"):
        clear_status_line()
        if not solves:
            colored_output("No solves to delete.", "error")
            return
        solve = pick_solve(solves, keyboard)
        if solve is None:
            return
        if confirm(f"Delete the solve of {format_time(solve.duration_millis)}?", keyboard):
            if controller.delete_solve(solve) is None:
                colored_output("Solve deleted.", "info")

    elif key in ("r", "R"):
        if confirm(f"Permanently delete all {len(solves)} solve(s)?", keyboard):
            if controller.delete_all() is None:
                colored_output("All solves deleted.", "info")

    elif key in ("h", "H"):
        clear_status_line()
        help()


def poll_timeout(controller: TimerController) -> float:
    wait: Optional[float] = controller.scheduler.next_due()
    if wait is None:
        return config.POLL_TIMEOUT
    return min(config.POLL_TIMEOUT, wait)


# Main loop
def main() -> None:
    colorama_init(autoreset=True)
    configure_logging(verbose=config.debug_enabled())
    os.system("cls" if os.name == "nt" else "clear")

    controller = TimerController(JsonSolveStore(config.solves_path()), sound=TerminalBell())
    controller.add_listener(on_phase_change)

    colored_output("Rubik's Cube Timer", "title")
    colored_output("------------------", "title")
    colored_output("h = help", "command")
    print("")
    colored_output(f"Scramble: {controller.visible_scramble}", "info")

    try:
        with Keyboard() as keyboard:
            while True:
                controller.scheduler.run_due()
                write_status_line(status_line(controller))

                key = keyboard.key(timeout=poll_timeout(controller))
                if key is None:
                    continue

                if key == " ":
                    controller.tap()
                elif key in ("q", "Q", "\x03", "\x04"):
                    clear_status_line()
                    colored_output("Quitting.", "info")
                    break
                elif isinstance(controller.phase, (Idle, ShowingResult)):
                    handle_key(controller, key, keyboard)

    except KeyboardInterrupt:
        clear_status_line()
        colored_output("Interrupted; exiting.", "error")
    finally:
        controller.close()


if __name__ == "__main__":
    main()
