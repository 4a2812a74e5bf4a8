# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Functional tests for the puzzle generator."""

import io
import logging
import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import GenerationConfig, PuzzleConfig, get_profile
from fallback_puzzles import get_fallback_puzzle
from logical_solver import SolveResult, solve_puzzle
from puzzle_generator import (
    PuzzleBatchGenerator, PuzzleGenerator, REJECTION_REASONS, generate, main
)
from targets import calculate_targets, full_col_sums, full_row_sums
from uniqueness import count_solutions
from yaml_importer import load_puzzle_from_yaml


class PuzzleInvariantsMixin:
    """Assertions every returned puzzle must satisfy."""

    def assertPuzzleInvariants(self, puzzle):
        rows, cols = calculate_targets(puzzle.grid, puzzle.solution_mask)
        self.assertEqual(rows, puzzle.row_targets)
        self.assertEqual(cols, puzzle.col_targets)

        for full, target in zip(full_row_sums(puzzle.grid), puzzle.row_targets):
            self.assertNotEqual(full, target)
        for full, target in zip(full_col_sums(puzzle.grid), puzzle.col_targets):
            self.assertNotEqual(full, target)

        for index in range(puzzle.size):
            self.assertGreaterEqual(puzzle.kept_in_row(index), 2)
            self.assertGreaterEqual(puzzle.kept_in_col(index), 2)


class TestFallbackPuzzles(PuzzleInvariantsMixin, unittest.TestCase):
    """Tests for the static fallback puzzles."""

    def test_fallbacks_satisfy_profiles(self):
        """Test each fallback fits its own difficulty profile."""
        for difficulty in ("easy", "medium", "hard"):
            puzzle = get_fallback_puzzle(difficulty)
            profile = get_profile(difficulty)

            self.assertEqual(puzzle.source, "fallback")
            self.assertEqual(puzzle.difficulty, difficulty)
            self.assertPuzzleInvariants(puzzle)
            self.assertGreaterEqual(puzzle.deletion_count(), profile.min_deletions)
            self.assertLessEqual(puzzle.deletion_count(), profile.max_deletions)
            for row in puzzle.grid:
                for value in row:
                    self.assertGreaterEqual(value, profile.min_value)
                    self.assertLessEqual(value, profile.max_value)

    def test_unknown_difficulty_gets_medium(self):
        """Test unknown names get the medium fallback."""
        self.assertEqual(get_fallback_puzzle("extreme"), get_fallback_puzzle("medium"))


class TestPuzzleGenerator(PuzzleInvariantsMixin, unittest.TestCase):
    """Tests for PuzzleGenerator and generate()."""

    def test_zero_attempts_returns_fallback(self):
        """Test an empty attempt budget returns the exact fallback."""
        for difficulty in ("easy", "medium", "hard"):
            puzzle = generate(difficulty=difficulty, max_attempts=0)

            self.assertEqual(puzzle, get_fallback_puzzle(difficulty))

    def test_unknown_difficulty(self):
        """Test unknown difficulty names generate medium puzzles."""
        puzzle = generate(difficulty="nightmare", max_attempts=0)

        self.assertEqual(puzzle.difficulty, "medium")

    def test_unsupported_size(self):
        """Test sizes other than 7 become 7 with a warning."""
        with self.assertLogs('puzzle_generator', level='WARNING'):
            generator = PuzzleGenerator(size=5)
        self.assertEqual(generator.size, 7)

        with self.assertLogs('puzzle_generator', level='WARNING'):
            puzzle = generate(size=5, difficulty="easy", max_attempts=0)
        self.assertEqual(puzzle, get_fallback_puzzle("easy"))

    def test_unknown_validation_level(self):
        """Test an unknown validation level becomes strict with a warning."""
        config = GenerationConfig(validation_level="paranoid")

        with self.assertLogs('puzzle_generator', level='WARNING'):
            generator = PuzzleGenerator(config=config)

        self.assertEqual(generator.config.validation_level, "strict")
        self.assertEqual(config.validation_level, "paranoid")

        with self.assertLogs('puzzle_generator', level='WARNING'):
            puzzle = generate(difficulty="hard", max_attempts=0, validation_level="paranoid")
        self.assertEqual(puzzle.source, "fallback")

    def test_basic_generation(self):
        """Test basic validation produces a puzzle within the profile."""
        for difficulty in ("easy", "medium", "hard"):
            puzzle = generate(difficulty=difficulty, seed=11, validation_level="basic")
            profile = get_profile(difficulty)

            self.assertPuzzleInvariants(puzzle)
            self.assertEqual(puzzle.difficulty, difficulty)
            self.assertGreaterEqual(puzzle.deletion_count(), profile.min_deletions)
            self.assertLessEqual(puzzle.deletion_count(), profile.max_deletions)

    def test_seeded_generation_is_reproducible(self):
        """Test the same seed gives the same puzzle."""
        first = generate(difficulty="medium", seed=42, validation_level="basic")
        second = generate(difficulty="medium", seed=42, validation_level="basic")

        self.assertEqual(first, second)

    def test_logical_generation_is_solvable(self):
        """Test generated puzzles from the logical level solve without guessing."""
        for difficulty in ("easy", "medium", "hard"):
            puzzle = generate(
                difficulty=difficulty, seed=3, max_attempts=200,
                validation_level="logical",
            )

            self.assertEqual(puzzle.source, "generated", difficulty)
            result = solve_puzzle(
                puzzle.grid, puzzle.row_targets, puzzle.col_targets, subset_limit=7
            )
            self.assertTrue(result.solved, difficulty)
            self.assertEqual(result.kept_mask(), puzzle.solution_mask, difficulty)
            self.assertPuzzleInvariants(puzzle)

    def test_strict_generation_is_unique(self):
        """Test generated puzzles from the strict level are solvable and unique."""
        for difficulty in ("easy", "medium", "hard"):
            puzzle = generate(difficulty=difficulty, seed=5, max_attempts=200)

            self.assertEqual(puzzle.source, "generated", difficulty)
            result = solve_puzzle(
                puzzle.grid, puzzle.row_targets, puzzle.col_targets, subset_limit=7
            )
            self.assertTrue(result.solved, difficulty)
            self.assertFalse(result.required_guessing)
            self.assertEqual(
                count_solutions(puzzle.grid, puzzle.row_targets, puzzle.col_targets), 1
            )
            self.assertPuzzleInvariants(puzzle)

    def test_fallback_is_rare_at_default_settings(self):
        """Test default strict generation mostly returns generated puzzles."""
        fallbacks = {}
        for difficulty in ("easy", "medium", "hard"):
            puzzles = [generate(difficulty=difficulty, seed=seed) for seed in range(4)]
            fallbacks[difficulty] = sum(
                1 for puzzle in puzzles if puzzle.source == "fallback"
            )

        self.assertLessEqual(sum(fallbacks.values()), 2, fallbacks)

    def test_try_generate_accounts_for_attempts(self):
        """Test every failed attempt is counted under one rejection reason."""
        generator = PuzzleGenerator(
            difficulty="hard", config=GenerationConfig(max_attempts=5), seed=9
        )

        result = generator.try_generate()

        self.assertEqual(set(result.rejections), set(REJECTION_REASONS))
        rejected = sum(result.rejections.values())
        self.assertEqual(rejected + (1 if result.ok else 0), result.attempts)
        self.assertIs(generator.last_result, result)
        self.assertNotEqual(result.ok, result.exhausted)

    def test_attempt_outcome(self):
        """Test a single attempt returns a puzzle or a known reason."""
        generator = PuzzleGenerator(difficulty="medium", seed=1)

        for _ in range(5):
            puzzle, reason = generator.attempt()
            if puzzle is None:
                self.assertIn(reason, REJECTION_REASONS)
            else:
                self.assertIsNone(reason)
                self.assertPuzzleInvariants(puzzle)

    def test_strategy_mix_gate(self):
        """Test the hard profile rejects solves made only of forced moves."""
        generator = PuzzleGenerator(difficulty="hard", seed=1)
        all_forced = SolveResult(
            solved=True, steps=10,
            strategy_counts={"forced": 10, "completion": 0, "intersection": 0, "subset_sum": 0},
        )
        mixed = SolveResult(
            solved=True, steps=10,
            strategy_counts={"forced": 6, "completion": 4, "intersection": 0, "subset_sum": 0},
        )

        self.assertFalse(generator._strategy_mix_ok(all_forced))
        self.assertTrue(generator._strategy_mix_ok(mixed))

    def test_exhaustion_logs_fallback(self):
        """Test falling back is logged at INFO."""
        generator = PuzzleGenerator(difficulty="easy", config=GenerationConfig(max_attempts=0))

        with self.assertLogs('puzzle_generator', level='INFO') as logs:
            puzzle = generator.generate()

        self.assertEqual(puzzle.source, "fallback")
        self.assertTrue(any("fallback" in line for line in logs.output))


class TestBatchAndCLI(unittest.TestCase):
    """Tests for batch generation and the command line."""

    def setUp(self):
        """Create a temporary output directory."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Drop logging handlers and remove the output directory."""
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_batch_writes_yaml(self):
        """Test a batch writes one loadable YAML file per puzzle."""
        config = PuzzleConfig(
            difficulty="easy",
            count=2,
            seed=3,
            generation={'validation_level': 'basic'},
            output={
                'directory': self.temp_dir,
                'formats': ['yaml'],
                'enable_console_logging': False,
            },
        )

        puzzles = PuzzleBatchGenerator(config).run()

        self.assertEqual(len(puzzles), 2)
        for index, puzzle in enumerate(puzzles, start=1):
            path = os.path.join(self.temp_dir, f"puzzle_easy_{index:03d}.yaml")
            self.assertTrue(os.path.exists(path))
            self.assertEqual(load_puzzle_from_yaml(path), puzzle)

    def test_main_dry_run(self):
        """Test --dry-run prints the configuration without generating."""
        argv = ['deduct-generator', '--dry-run', '-d', 'hard', '-o', self.temp_dir]

        with mock.patch.object(sys, 'argv', argv), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            main()

        self.assertIn("Difficulty: hard", out.getvalue())
        self.assertEqual(os.listdir(self.temp_dir), [])

    def test_main_prints_puzzle(self):
        """Test the CLI prints a puzzle and its solution."""
        argv = [
            'deduct-generator', '-d', 'medium', '--max-attempts', '0',
            '-o', self.temp_dir,
        ]

        with mock.patch.object(sys, 'argv', argv), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            main()

        output = out.getvalue()
        self.assertIn("Puzzle 1 (medium, fallback)", output)
        self.assertIn("Solution:", output)

    def test_main_invalid_config_exits(self):
        """Test configuration errors exit with status 1."""
        argv = ['deduct-generator', '--max-attempts', '-1', '-o', self.temp_dir]

        with mock.patch.object(sys, 'argv', argv), \
                mock.patch('sys.stdout', new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                main()

        self.assertEqual(ctx.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
