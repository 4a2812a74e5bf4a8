# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Static puzzles returned when generation runs out of attempts.

In every row each kept value is larger than the sum of the row's deleted
values, so only one subset of a row can be deleted to reach its target.
That makes the mask unique and lets the solver finish every row with a
forced confirm followed by a deletion.

Masks are written one string per row: 'o' keeps a cell, 'x' deletes it.
Targets are computed from the mask when the puzzle is built.
"""

from typing import Dict, List

from config import resolve_difficulty
from models import Puzzle, parse_mask_rows
from targets import build_puzzle


FALLBACK_PUZZLES: Dict[str, Dict[str, List]] = {
    "easy": {
        "grid": [
            [1, 3, 4, 2, 5, 3, 4],
            [2, 1, 5, 3, 4, 2, 3],
            [4, 5, 1, 2, 3, 5, 2],
            [3, 2, 4, 1, 2, 4, 5],
            [5, 4, 3, 5, 1, 2, 3],
            [2, 3, 2, 4, 5, 1, 4],
            [1, 4, 3, 5, 3, 4, 1],
        ],
        "mask": [
            "xoooooo",
            "oxooooo",
            "ooxoooo",
            "oooxooo",
            "ooooxoo",
            "oooooxo",
            "xooooox",
        ],
    },
    "medium": {
        "grid": [
            [1, 2, 4, 7, 9, 5, 8],
            [6, 1, 3, 8, 5, 9, 7],
            [9, 4, 2, 1, 6, 8, 5],
            [5, 8, 6, 2, 2, 7, 9],
            [7, 5, 9, 4, 1, 2, 6],
            [8, 6, 7, 9, 5, 3, 1],
            [1, 9, 5, 6, 8, 4, 2],
        ],
        "mask": [
            "xxooooo",
            "oxxoooo",
            "ooxxooo",
            "oooxxoo",
            "ooooxxo",
            "oooooxx",
            "xooooox",
        ],
    },
    "hard": {
        "grid": [
            [3, 2, 2, 9, 11, 8, 12],
            [8, 3, 2, 2, 10, 12, 9],
            [12, 9, 3, 2, 2, 11, 10],
            [10, 11, 12, 3, 2, 2, 8],
            [9, 12, 10, 11, 3, 2, 2],
            [2, 8, 11, 12, 9, 3, 2],
            [2, 2, 9, 10, 8, 11, 3],
        ],
        "mask": [
            "xxxoooo",
            "oxxxooo",
            "ooxxxoo",
            "oooxxxo",
            "ooooxxx",
            "xooooxx",
            "xxoooox",
        ],
    },
}


def get_fallback_puzzle(difficulty: str) -> Puzzle:
    """
    Build the static puzzle for a difficulty.

    Args:
        difficulty: Difficulty name; unknown names get the medium puzzle

    Returns:
        Puzzle with source 'fallback'
    """
    name = resolve_difficulty(difficulty)
    data = FALLBACK_PUZZLES[name]
    return build_puzzle(
        data["grid"],
        parse_mask_rows(data["mask"]),
        difficulty=name,
        source="fallback",
    )
