# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Uniqueness Checker

Counts the masks that reach every row and column target, stopping as soon
as `limit` have been found. Cells are visited in row-major order and each
cell tries keep before delete, so the search order is deterministic.
"""

import logging
from typing import List, Sequence, Tuple

from models import Mask


logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 50000


def _bump(values: Tuple[int, ...], index: int, amount: int) -> Tuple[int, ...]:
    return values[:index] + (values[index] + amount,) + values[index + 1:]


class UniquenessChecker:
    """
    Backtracking search for masks that satisfy the targets.

    Attributes:
        solutions: Masks found by the last search
        nodes: Search nodes visited by the last search
        exhausted: True when the last search hit max_nodes before finishing
    """

    def __init__(
        self,
        grid: Sequence[Sequence[int]],
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        min_kept: int = 2,
        max_nodes: int = DEFAULT_MAX_NODES
    ):
        self.grid = grid
        self.size = len(grid)
        self.row_targets = tuple(row_targets)
        self.col_targets = tuple(col_targets)
        self.min_kept = min_kept
        self.max_nodes = max_nodes

        n = self.size
        # Sum of the cells after (r, c) in its row / below (r, c) in its column
        self._row_rest = [
            [sum(grid[r][c + 1:]) for c in range(n)] for r in range(n)
        ]
        self._col_rest = [
            [sum(grid[k][c] for k in range(r + 1, n)) for r in range(n)]
            for c in range(n)
        ]

        self.solutions: List[Mask] = []
        self.nodes = 0
        self.exhausted = False
        self._limit = 2

    def count_solutions(self, limit: int = 2) -> int:
        """
        Count satisfying masks, up to `limit`.

        Args:
            limit: Stop once this many solutions are found

        Returns:
            Number of solutions found, capped at `limit`
        """
        self.solutions = []
        self.nodes = 0
        self.exhausted = False
        self._limit = limit

        n = self.size
        zeros = (0,) * n
        self._search(0, zeros, zeros, zeros, zeros, ())

        if self.exhausted:
            logger.debug(
                f"Uniqueness search stopped at {self.nodes} nodes "
                f"with {len(self.solutions)} solution(s)"
            )
        return len(self.solutions)

    def is_unique(self) -> bool:
        """Exactly one mask reaches the targets (False if the search gave up)."""
        count = self.count_solutions(limit=2)
        return count == 1 and not self.exhausted

    def _line_fits(self, total: int, kept: int, rest: int, rest_count: int, target: int) -> bool:
        return (
            total <= target
            and total + rest >= target
            and kept + rest_count >= self.min_kept
        )

    def _search(
        self,
        index: int,
        row_sums: Tuple[int, ...],
        col_sums: Tuple[int, ...],
        row_kept: Tuple[int, ...],
        col_kept: Tuple[int, ...],
        path: Tuple[bool, ...]
    ):
        if len(self.solutions) >= self._limit or self.exhausted:
            return

        self.nodes += 1
        if self.nodes > self.max_nodes:
            self.exhausted = True
            return

        n = self.size
        if index == n * n:
            self.solutions.append(
                tuple(path[r * n:(r + 1) * n] for r in range(n))
            )
            return

        r, c = divmod(index, n)
        value = self.grid[r][c]
        row_rest = self._row_rest[r][c]
        col_rest = self._col_rest[c][r]
        cells_right = n - 1 - c
        cells_below = n - 1 - r

        # Keep
        if (
            self._line_fits(row_sums[r] + value, row_kept[r] + 1,
                            row_rest, cells_right, self.row_targets[r])
            and self._line_fits(col_sums[c] + value, col_kept[c] + 1,
                                col_rest, cells_below, self.col_targets[c])
        ):
            self._search(
                index + 1,
                _bump(row_sums, r, value),
                _bump(col_sums, c, value),
                _bump(row_kept, r, 1),
                _bump(col_kept, c, 1),
                path + (True,),
            )

        # Delete
        if (
            self._line_fits(row_sums[r], row_kept[r],
                            row_rest, cells_right, self.row_targets[r])
            and self._line_fits(col_sums[c], col_kept[c],
                                col_rest, cells_below, self.col_targets[c])
        ):
            self._search(
                index + 1, row_sums, col_sums, row_kept, col_kept,
                path + (False,),
            )


def count_solutions(
    grid: Sequence[Sequence[int]],
    row_targets: Sequence[int],
    col_targets: Sequence[int],
    limit: int = 2,
    min_kept: int = 2,
    max_nodes: int = DEFAULT_MAX_NODES
) -> int:
    """Convenience wrapper around UniquenessChecker.count_solutions."""
    checker = UniquenessChecker(
        grid, row_targets, col_targets,
        min_kept=min_kept, max_nodes=max_nodes,
    )
    return checker.count_solutions(limit=limit)
