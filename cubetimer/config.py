"""Settings for the timer.

Everything here is a plain constant except the location of the solve file,
which can be overridden with the ``CUBETIMER_SOLVES`` environment variable.
"""

from __future__ import annotations

import os

COUNTDOWN_FROM = 5
SCRAMBLE_LENGTH = 25
AVERAGE_WINDOW = 5

# seconds
COUNTDOWN_INTERVAL = 1.0
SAMPLE_INTERVAL = 0.01
POLL_TIMEOUT = 0.12

SOLVES_ENV = "CUBETIMER_SOLVES"
SOLVES_FILENAME = "solves.json"
DEBUG_ENV = "CUBETIMER_DEBUG"


def solves_path() -> str:
    """Path of the JSON file holding the solve history."""
    override = os.environ.get(SOLVES_ENV)
    if override:
        return os.path.abspath(os.path.expanduser(override))
    return os.path.join(os.getcwd(), SOLVES_FILENAME)


def debug_enabled() -> bool:
    """Debug logging is on when ``CUBETIMER_DEBUG`` is set to anything but 0."""
    return os.environ.get(DEBUG_ENV, "0") not in ("", "0")
