#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Sum Puzzle Generator

Generates 7x7 sum deduction puzzles by running, up to max_attempts times:
1. Grid sampling within the difficulty's value range
2. Solution mask sampling within its keep/deletion bounds
3. Target calculation from the mask
4. Feasibility validation
5. Deduction solver (validation level 'logical' and up)
6. Uniqueness search (validation level 'strict')

The first candidate that passes every gate is returned. When all attempts
fail, the static fallback for the difficulty is returned instead, so
generate() always produces a playable puzzle.

Usage:
    # With YAML configuration:
    python puzzle_generator.py --config puzzle_config.yaml

    # With command-line arguments:
    python puzzle_generator.py --difficulty hard --count 3 --seed 7
"""

import logging
import os
import random
import sys
import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import (
    DEFAULT_DIFFICULTY, DEFAULT_SIZE, MIN_KEPT_FLOOR, VALID_SIZES,
    VALIDATION_BASIC, VALIDATION_LEVELS, VALIDATION_STRICT,
    ConfigValidationError, DifficultyProfile, GenerationConfig, PuzzleConfig,
    create_argument_parser, get_profile, load_config, resolve_difficulty
)
from fallback_puzzles import get_fallback_puzzle
from grid_sampler import GridSampler
from logging_config import setup_logging
from logical_solver import LogicalSolver, SolveResult, solve_puzzle
from mask_sampler import MaskSampler
from models import Puzzle
from targets import build_puzzle, calculate_targets
from uniqueness import UniquenessChecker
from validator import FeasibilityValidator
from yaml_exporter import YAMLExporter


logger = logging.getLogger(__name__)

# Rejection reasons, in pipeline order
REJECT_MASK_SAMPLING = "mask_sampling"
REJECT_FEASIBILITY = "feasibility"
REJECT_GUESSING = "guessing"
REJECT_STEP_COUNT = "step_count"
REJECT_STRATEGY_MIX = "strategy_mix"
REJECT_NOT_UNIQUE = "not_unique"
REJECTION_REASONS = [
    REJECT_MASK_SAMPLING,
    REJECT_FEASIBILITY,
    REJECT_GUESSING,
    REJECT_STEP_COUNT,
    REJECT_STRATEGY_MIX,
    REJECT_NOT_UNIQUE,
]


@dataclass
class GenerationResult:
    """Outcome of a bounded generation run."""
    puzzle: Optional[Puzzle]
    attempts: int
    rejections: Dict[str, int] = field(
        default_factory=lambda: {reason: 0 for reason in REJECTION_REASONS}
    )
    solve_result: Optional[SolveResult] = None

    @property
    def ok(self) -> bool:
        return self.puzzle is not None

    @property
    def exhausted(self) -> bool:
        return self.puzzle is None


class PuzzleGenerator:
    """
    Generates puzzles for one size and difficulty.

    Workflow per attempt:
    1. Sample a grid and a mask
    2. Derive targets and check feasibility
    3. Solve by deduction and check step count and strategy mix
    4. Check that the solution is unique
    """

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        difficulty: str = DEFAULT_DIFFICULTY,
        config: Optional[GenerationConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        profile: Optional[DifficultyProfile] = None
    ):
        """
        Initialize the generator.

        Args:
            size: Grid size; only 7 is supported, anything else becomes 7
            difficulty: easy, medium or hard; anything else becomes medium
            config: Attempt budget, validation level and search limits;
                unknown validation levels become strict
            seed: Seed for a private random source
            rng: Random source to use instead of seeding one
            profile: Difficulty profile to use instead of the built-in one
        """
        if size not in VALID_SIZES:
            logger.warning(f"Unsupported size {size}, using {DEFAULT_SIZE}")
            size = DEFAULT_SIZE

        self.config = config or GenerationConfig()
        if self.config.validation_level not in VALIDATION_LEVELS:
            logger.warning(
                f"Unknown validation level '{self.config.validation_level}', "
                f"using '{VALIDATION_STRICT}'"
            )
            self.config = replace(self.config, validation_level=VALIDATION_STRICT)

        self.size = size
        self.difficulty = resolve_difficulty(difficulty)
        self.profile = profile or get_profile(self.difficulty)
        self.seed = seed
        self.rng = rng or random.Random(seed)

        self.grid_sampler = GridSampler(size, self.profile, self.rng)
        self.mask_sampler = MaskSampler(size, self.profile, self.rng)
        self.validator = FeasibilityValidator(self.profile)

        self.last_result: Optional[GenerationResult] = None
        self._last_solve: Optional[SolveResult] = None

    def attempt(self) -> Tuple[Optional[Puzzle], Optional[str]]:
        """
        Run the pipeline once.

        Returns:
            (puzzle, None) on success, (None, rejection reason) otherwise
        """
        self._last_solve = None
        level = self.config.validation_level

        grid = self.grid_sampler.sample()
        mask = self.mask_sampler.sample()
        if mask is None:
            return None, REJECT_MASK_SAMPLING

        row_targets, col_targets = calculate_targets(grid, mask)

        feasibility = self.validator.validate(grid, mask, row_targets, col_targets)
        if not feasibility.valid:
            logger.debug(f"Infeasible candidate: {feasibility.errors[0]}")
            return None, REJECT_FEASIBILITY

        if level != VALIDATION_BASIC:
            solver = LogicalSolver(
                grid, row_targets, col_targets,
                max_iterations=self.config.solver_max_iterations,
                subset_limit=self.config.subset_limit,
            )
            solve = solver.solve()
            self._last_solve = solve

            if solve.required_guessing:
                return None, REJECT_GUESSING

            max_steps = self.profile.max_steps
            if solve.steps < self.profile.min_steps or (
                max_steps is not None and solve.steps > max_steps
            ):
                logger.debug(f"Step count {solve.steps} outside profile bounds")
                return None, REJECT_STEP_COUNT

            if not self._strategy_mix_ok(solve):
                return None, REJECT_STRATEGY_MIX

        if level == VALIDATION_STRICT:
            checker = UniquenessChecker(
                grid, row_targets, col_targets,
                min_kept=MIN_KEPT_FLOOR,
                max_nodes=self.config.uniqueness_max_nodes,
            )
            if not checker.is_unique():
                logger.debug(
                    f"Not unique: {len(checker.solutions)} solution(s), "
                    f"{checker.nodes} nodes, exhausted={checker.exhausted}"
                )
                return None, REJECT_NOT_UNIQUE

        puzzle = build_puzzle(grid, mask, self.difficulty, seed=self.seed)
        return puzzle, None

    def try_generate(self) -> GenerationResult:
        """
        Run up to max_attempts attempts.

        Returns:
            GenerationResult holding the accepted puzzle, or no puzzle when
            every attempt was rejected
        """
        result = GenerationResult(puzzle=None, attempts=0)
        for number in range(1, self.config.max_attempts + 1):
            result.attempts = number
            puzzle, reason = self.attempt()
            if puzzle is not None:
                result.puzzle = replace(puzzle, attempts=number)
                result.solve_result = self._last_solve
                logger.info(
                    f"Generated {self.difficulty} puzzle after {number} attempt(s), "
                    f"{puzzle.deletion_count()} deletions"
                )
                break
            result.rejections[reason] += 1
            logger.debug(f"Attempt {number} rejected: {reason}")

        self.last_result = result
        return result

    def generate(self) -> Puzzle:
        """
        Generate a puzzle, falling back to the static one for the difficulty
        when every attempt is rejected. Never raises for generation failures.

        Returns:
            Puzzle
        """
        result = self.try_generate()
        if result.ok:
            return result.puzzle

        rejected = {k: v for k, v in result.rejections.items() if v}
        logger.info(
            f"No {self.difficulty} puzzle after {result.attempts} attempt(s), "
            f"using fallback (rejections: {rejected})"
        )
        return replace(get_fallback_puzzle(self.difficulty), attempts=result.attempts)

    def _strategy_mix_ok(self, solve: SolveResult) -> bool:
        percentages = solve.strategy_percentages()
        for name, (low, high) in self.profile.strategy_bounds.items():
            share = percentages.get(name, 0.0)
            if not low <= share <= high:
                logger.debug(f"Strategy '{name}' at {share:.1f}% outside [{low}, {high}]")
                return False
        return True


def generate(
    size: int = DEFAULT_SIZE,
    difficulty: str = DEFAULT_DIFFICULTY,
    seed: Optional[int] = None,
    max_attempts: Optional[int] = None,
    validation_level: Optional[str] = None
) -> Puzzle:
    """
    Generate one puzzle.

    Args:
        size: Grid size; anything but 7 becomes 7
        difficulty: easy, medium or hard; unknown names become medium
        seed: Seed for reproducible puzzles
        max_attempts: Attempt budget (default from GenerationConfig)
        validation_level: basic, logical or strict (default strict)

    Returns:
        Puzzle, generated or fallback
    """
    config = GenerationConfig()
    if max_attempts is not None:
        config.max_attempts = max_attempts
    if validation_level is not None:
        config.validation_level = validation_level
    return PuzzleGenerator(size, difficulty, config=config, seed=seed).generate()


class PuzzleBatchGenerator:
    """
    Generates `count` puzzles from a PuzzleConfig and writes them out.

    Text output goes to stdout; YAML output is written to the output
    directory, one file per puzzle.
    """

    def __init__(self, config: PuzzleConfig):
        self.config = config
        self.start_time = time.time()

        self.log_file_path = setup_logging(
            output_dir=config.output.directory,
            log_level=config.output.log_level,
            log_file_prefix=config.output.log_file_prefix,
            enable_console=config.output.enable_console_logging,
        )
        self.logger = logging.getLogger(__name__)
        self.logger.info(
            f"Initialized PuzzleBatchGenerator: {config.count} x "
            f"{config.size}x{config.size} {config.difficulty}"
        )
        self.logger.info(f"Validation level: {config.generation.validation_level}")
        self.logger.debug(f"Log file: {self.log_file_path}")

    def run(self) -> List[Puzzle]:
        """
        Generate every puzzle in the batch.

        Returns:
            List of puzzles in generation order
        """
        puzzles = []
        profile = self.config.profile()

        for index in range(self.config.count):
            seed = None if self.config.seed is None else self.config.seed + index
            generator = PuzzleGenerator(
                size=self.config.size,
                difficulty=self.config.difficulty,
                config=self.config.generation,
                seed=seed,
                profile=profile,
            )
            puzzle = generator.generate()
            puzzles.append(puzzle)

            solve_result = None
            if generator.last_result is not None:
                solve_result = generator.last_result.solve_result
            if solve_result is None:
                solve_result = solve_puzzle(
                    puzzle.grid, puzzle.row_targets, puzzle.col_targets,
                    max_iterations=self.config.generation.solver_max_iterations,
                    subset_limit=self.config.generation.subset_limit,
                )

            self._write(index, puzzle, solve_result)

        elapsed = time.time() - self.start_time
        fallbacks = sum(1 for puzzle in puzzles if puzzle.source == "fallback")
        self.logger.info(
            f"Generated {len(puzzles)} puzzle(s), {fallbacks} fallback, "
            f"in {elapsed:.2f} seconds"
        )
        return puzzles

    def _write(self, index: int, puzzle: Puzzle, solve_result: SolveResult):
        formats = self.config.output.formats

        if "text" in formats:
            print(f"Puzzle {index + 1} ({puzzle.difficulty}, {puzzle.source})")
            print(puzzle.to_string(show_solution=False))
            print()
            print("Solution:")
            print(puzzle.to_string(show_solution=True))
            print()

        if "yaml" in formats:
            path = os.path.join(
                self.config.output.directory,
                f"puzzle_{puzzle.difficulty}_{index + 1:03d}.yaml"
            )
            stats = {
                "attempts": puzzle.attempts,
                "generation_time_seconds": round(time.time() - self.start_time, 3),
            }
            YAMLExporter().save(puzzle, path, solve_result=solve_result, stats=stats)
            self.logger.info(f"   Exported to {path}")


def main():
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        config = load_config(args)

        if getattr(args, 'dry_run', False):
            print("Configuration valid:")
            print(f"  Size: {config.size}")
            print(f"  Difficulty: {config.difficulty}")
            print(f"  Count: {config.count}")
            print(f"  Seed: {config.seed}")
            print(f"  Max Attempts: {config.generation.max_attempts}")
            print(f"  Validation Level: {config.generation.validation_level}")
            print(f"  Output Formats: {', '.join(config.output.formats)}")
            print(f"  Output Directory: {config.output.directory}")
            return

        PuzzleBatchGenerator(config).run()

    except ConfigValidationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nGeneration cancelled.")
        sys.exit(0)


if __name__ == "__main__":
    main()
