# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Player-side game state.

Tracks the player's own marks on a puzzle, independent of the hidden
solution mask. A puzzle is won when every row and column of not-deleted
cells reaches its target, whichever cells the player deleted to get there.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from logical_solver import LogicalSolver, Move
from models import CellState, LineKind, Mask, Puzzle
from targets import sums_match


logger = logging.getLogger(__name__)

# Player cycle on repeated clicks
_NEXT_STATE = {
    CellState.NORMAL: CellState.DELETED,
    CellState.DELETED: CellState.CONFIRMED,
    CellState.CONFIRMED: CellState.NORMAL,
}

STATUS_COMPLETE = "complete"
STATUS_OVER = "over"
STATUS_UNDER = "under"


@dataclass(frozen=True)
class LineStatus:
    """Current sum of a row or column against its target."""
    kind: LineKind
    index: int
    current: int
    target: int

    @property
    def difference(self) -> int:
        return self.current - self.target

    @property
    def status(self) -> str:
        if self.difference == 0:
            return STATUS_COMPLETE
        return STATUS_OVER if self.difference > 0 else STATUS_UNDER

    @property
    def guide(self) -> str:
        """What still has to change: '-3' to remove 3, '+2' to restore 2."""
        if self.difference == 0:
            return "✓"
        if self.difference > 0:
            return f"-{self.difference}"
        return f"+{-self.difference}"


class GameState:
    """
    Player marks for one puzzle.

    Usage:
        state = GameState()
        state.initialize_with_puzzle(puzzle)
        state.toggle_cell(0, 3)
        if state.check_win(): ...
    """

    def __init__(self):
        self.puzzle: Optional[Puzzle] = None
        self.size = 0
        self.difficulty = "medium"
        self.game_completed = False
        self.show_guides = True
        self._states: List[List[CellState]] = []

    def initialize_with_puzzle(self, puzzle: Puzzle):
        """Load a puzzle and clear every mark."""
        self.puzzle = puzzle
        self.size = puzzle.size
        self.difficulty = puzzle.difficulty
        self._clear()
        logger.debug(f"Game state loaded {puzzle.difficulty} puzzle ({puzzle.source})")

    def reset(self):
        """Clear every mark on the current puzzle."""
        if self.puzzle is not None:
            self._clear()

    def _clear(self):
        self._states = [[CellState.NORMAL] * self.size for _ in range(self.size)]
        self.game_completed = False

    def toggle_cell(self, row: int, col: int) -> CellState:
        """
        Advance a cell through normal -> deleted -> confirmed -> normal.

        Returns:
            The cell's new state
        """
        self._check_cell(row, col)
        state = _NEXT_STATE[self._states[row][col]]
        self._states[row][col] = state
        self.game_completed = self.check_win()
        return state

    def set_cell_state(self, row: int, col: int, state: CellState):
        self._check_cell(row, col)
        self._states[row][col] = CellState(state)
        self.game_completed = self.check_win()

    def get_cell_state(self, row: int, col: int) -> CellState:
        self._check_cell(row, col)
        return self._states[row][col]

    def get_cell_value(self, row: int, col: int) -> int:
        self._check_cell(row, col)
        return self.puzzle.grid[row][col]

    def get_current_row_sum(self, row: int) -> int:
        """Sum of the row's cells the player has not deleted."""
        self._check_cell(row, 0)
        return sum(
            value for value, state in zip(self.puzzle.grid[row], self._states[row])
            if state != CellState.DELETED
        )

    def get_current_col_sum(self, col: int) -> int:
        """Sum of the column's cells the player has not deleted."""
        self._check_cell(0, col)
        return sum(
            self.puzzle.grid[r][col] for r in range(self.size)
            if self._states[r][col] != CellState.DELETED
        )

    def line_status(self, kind: LineKind, index: int) -> LineStatus:
        kind = LineKind(kind)
        if kind == LineKind.ROW:
            current = self.get_current_row_sum(index)
            target = self.puzzle.row_targets[index]
        else:
            current = self.get_current_col_sum(index)
            target = self.puzzle.col_targets[index]
        return LineStatus(kind=kind, index=index, current=current, target=target)

    def deletion_mask(self) -> Mask:
        """True where the player has deleted a cell."""
        self._require_puzzle()
        return tuple(
            tuple(state == CellState.DELETED for state in row)
            for row in self._states
        )

    def check_win(self) -> bool:
        """Every row and column of not-deleted cells matches its target."""
        self._require_puzzle()
        kept = tuple(
            tuple(state != CellState.DELETED for state in row)
            for row in self._states
        )
        return sums_match(
            self.puzzle.grid, kept,
            self.puzzle.row_targets, self.puzzle.col_targets,
        )

    def hint(self) -> Optional[Move]:
        """
        Next deduction from the player's current marks.

        Returns:
            Move to make, or None when the marks already contradict the
            targets or no deduction applies
        """
        self._require_puzzle()
        solver = LogicalSolver(
            self.puzzle.grid, self.puzzle.row_targets, self.puzzle.col_targets,
            subset_limit=self.puzzle.size,
        )
        solver.reset(
            deleted=self.deletion_mask(),
            confirmed=[
                [state == CellState.CONFIRMED for state in row]
                for row in self._states
            ],
        )
        contradiction = solver.find_contradiction()
        if contradiction:
            logger.debug(f"No hint, marks contradict the targets: {contradiction}")
            return None
        return solver.next_move()

    def _require_puzzle(self):
        if self.puzzle is None:
            raise ValueError("No puzzle loaded")

    def _check_cell(self, row: int, col: int):
        self._require_puzzle()
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise ValueError(f"Cell ({row}, {col}) is outside the {self.size}x{self.size} grid")
