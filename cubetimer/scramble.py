"""Random scramble sequences in standard cube notation."""

from __future__ import annotations

import random
from typing import List, Optional

from . import config

FACES = ("U", "D", "F", "B", "L", "R")
MODIFIERS = ("", "'", "2")
OPPOSITE = {"U": "D", "D": "U", "F": "B", "B": "F", "L": "R", "R": "L"}


def face_of(move: str) -> str:
    return move[0]


def blocked(face: str, last_face: Optional[str]) -> bool:
    """True if `face` may not follow `last_face` (same face or its opposite)."""
    if last_face is None:
        return False
    return face == last_face or face == OPPOSITE[last_face]


def generate_moves(
    length: int = config.SCRAMBLE_LENGTH, rng: Optional[random.Random] = None
) -> List[str]:
    """
    Draw `length` moves such that no two neighbours turn the same face or a
    pair of opposite faces.

    Face and modifier are redrawn together until the pair is allowed, which
    keeps the choice uniform over the allowed faces.
    """
    rng = rng or random.Random()
    moves: List[str] = []
    last_face: Optional[str] = None

    for _ in range(length):
        while True:
            move = rng.choice(FACES) + rng.choice(MODIFIERS)
            if not blocked(face_of(move), last_face):
                break
        moves.append(move)
        last_face = face_of(move)

    return moves


def generate(
    length: int = config.SCRAMBLE_LENGTH, rng: Optional[random.Random] = None
) -> str:
    """Space separated scramble, e.g. ``"R U' F2 ..."``."""
    return " ".join(generate_moves(length, rng))
