# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for the player game state."""

import os
import sys
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from fallback_puzzles import get_fallback_puzzle
from game_state import GameState, STATUS_COMPLETE, STATUS_OVER, STATUS_UNDER
from logical_solver import Strategy
from models import CellState, LineKind
from targets import build_puzzle


class TestGameState(unittest.TestCase):
    """Tests for GameState."""

    def setUp(self):
        """Load the easy fallback puzzle."""
        self.puzzle = get_fallback_puzzle("easy")
        self.state = GameState()
        self.state.initialize_with_puzzle(self.puzzle)

    def test_initial_state(self):
        """Test every cell starts normal and the game is not won."""
        self.assertEqual(self.state.size, 7)
        self.assertEqual(self.state.difficulty, "easy")
        self.assertEqual(self.state.get_cell_state(3, 3), CellState.NORMAL)
        self.assertEqual(self.state.get_cell_value(0, 0), 1)
        self.assertFalse(self.state.check_win())

    def test_toggle_cycle(self):
        """Test cells cycle normal, deleted, confirmed, normal."""
        self.assertEqual(self.state.toggle_cell(2, 4), CellState.DELETED)
        self.assertEqual(self.state.toggle_cell(2, 4), CellState.CONFIRMED)
        self.assertEqual(self.state.toggle_cell(2, 4), CellState.NORMAL)

    def test_current_sums_skip_deleted_cells(self):
        """Test deleted cells leave the current sums, confirmed ones stay."""
        full = sum(self.puzzle.grid[0])
        self.assertEqual(self.state.get_current_row_sum(0), full)

        self.state.set_cell_state(0, 1, CellState.DELETED)
        self.state.set_cell_state(0, 2, CellState.CONFIRMED)

        self.assertEqual(self.state.get_current_row_sum(0), full - self.puzzle.grid[0][1])
        column_full = sum(row[1] for row in self.puzzle.grid)
        self.assertEqual(
            self.state.get_current_col_sum(1), column_full - self.puzzle.grid[0][1]
        )

    def test_line_status(self):
        """Test guides report how far a line is from its target."""
        status = self.state.line_status(LineKind.ROW, 0)
        self.assertEqual(status.status, STATUS_OVER)
        self.assertEqual(status.difference, 1)
        self.assertEqual(status.guide, "-1")

        self.state.set_cell_state(0, 0, CellState.DELETED)
        self.assertEqual(self.state.line_status(LineKind.ROW, 0).status, STATUS_COMPLETE)

        self.state.set_cell_state(0, 1, CellState.DELETED)
        status = self.state.line_status("row", 0)
        self.assertEqual(status.status, STATUS_UNDER)
        self.assertEqual(status.guide, f"+{self.puzzle.grid[0][1]}")

    def test_win_with_solution(self):
        """Test deleting the solution's cells wins the game."""
        for r in range(7):
            for c in range(7):
                if not self.puzzle.solution_mask[r][c]:
                    self.state.toggle_cell(r, c)

        self.assertTrue(self.state.check_win())
        self.assertTrue(self.state.game_completed)
        self.assertEqual(
            self.state.deletion_mask(),
            tuple(tuple(not kept for kept in row) for row in self.puzzle.solution_mask)
        )

    def test_win_with_other_mask(self):
        """Test any mask reaching the targets wins, not only the generator's."""
        puzzle = build_puzzle([[2, 2], [2, 2]], [[True, False], [False, True]], "easy")
        state = GameState()
        state.initialize_with_puzzle(puzzle)

        state.toggle_cell(0, 0)
        state.toggle_cell(1, 1)

        self.assertTrue(state.check_win())

    def test_reset(self):
        """Test reset clears every mark."""
        self.state.toggle_cell(1, 1)
        self.state.reset()

        self.assertEqual(self.state.get_cell_state(1, 1), CellState.NORMAL)
        self.assertFalse(self.state.game_completed)

    def test_out_of_range(self):
        """Test coordinates outside the grid raise ValueError."""
        with self.assertRaises(ValueError):
            self.state.toggle_cell(7, 0)
        with self.assertRaises(ValueError):
            self.state.get_current_col_sum(-1)

    def test_no_puzzle_loaded(self):
        """Test using the state before loading a puzzle raises ValueError."""
        with self.assertRaises(ValueError):
            GameState().check_win()


class TestHints(unittest.TestCase):
    """Tests for hints."""

    def setUp(self):
        """Load the medium fallback puzzle."""
        self.puzzle = get_fallback_puzzle("medium")
        self.state = GameState()
        self.state.initialize_with_puzzle(self.puzzle)

    def test_first_hint(self):
        """Test the first hint confirms the first row's large values."""
        move = self.state.hint()

        self.assertEqual(move.strategy, Strategy.FORCED)
        self.assertEqual(move.action, CellState.CONFIRMED)
        self.assertEqual(move.cells, ((0, 2), (0, 3), (0, 4), (0, 5), (0, 6)))

    def test_hint_uses_player_marks(self):
        """Test hints continue from the player's marks."""
        self.state.set_cell_state(0, 0, CellState.DELETED)
        for c in range(2, 7):
            self.state.set_cell_state(0, c, CellState.CONFIRMED)

        move = self.state.hint()

        self.assertEqual(move.strategy, Strategy.FORCED)
        self.assertEqual(move.action, CellState.DELETED)
        self.assertEqual(move.line, ("row", 0))
        self.assertEqual(move.cells, ((0, 1),))

    def test_no_hint_after_mistake(self):
        """Test no hint is given when the marks contradict the targets."""
        for c in range(7):
            self.state.set_cell_state(0, c, CellState.DELETED)

        self.assertIsNone(self.state.hint())


if __name__ == '__main__':
    unittest.main()
