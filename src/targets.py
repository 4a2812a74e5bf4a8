# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Target calculation.

A line's sum is the sum of its kept (not deleted) values. The generator uses
it to derive targets from the solution mask and the game state uses the very
same functions to decide whether the player has won.
"""

from typing import Optional, Sequence, Tuple

from models import Grid, Mask, Puzzle, freeze_grid, freeze_mask


def row_sums(grid: Sequence[Sequence[int]], kept: Sequence[Sequence[bool]]) -> Tuple[int, ...]:
    """Sum of kept values in every row."""
    return tuple(
        sum(value for value, keep in zip(grid_row, kept_row) if keep)
        for grid_row, kept_row in zip(grid, kept)
    )


def col_sums(grid: Sequence[Sequence[int]], kept: Sequence[Sequence[bool]]) -> Tuple[int, ...]:
    """Sum of kept values in every column."""
    size = len(grid)
    return tuple(
        sum(grid[r][c] for r in range(size) if kept[r][c])
        for c in range(size)
    )


def full_row_sums(grid: Sequence[Sequence[int]]) -> Tuple[int, ...]:
    return tuple(sum(row) for row in grid)


def full_col_sums(grid: Sequence[Sequence[int]]) -> Tuple[int, ...]:
    size = len(grid)
    return tuple(sum(grid[r][c] for r in range(size)) for c in range(size))


def calculate_targets(
    grid: Sequence[Sequence[int]],
    mask: Sequence[Sequence[bool]]
) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    Derive row and column targets from a grid and its solution mask.

    Returns:
        (row_targets, col_targets)
    """
    return row_sums(grid, mask), col_sums(grid, mask)


def kept_from_deleted(deleted: Sequence[Sequence[bool]]) -> Mask:
    """Turn a deletion matrix into a keep matrix."""
    return tuple(tuple(not flag for flag in row) for row in deleted)


def sums_match(
    grid: Sequence[Sequence[int]],
    kept: Sequence[Sequence[bool]],
    row_targets: Sequence[int],
    col_targets: Sequence[int]
) -> bool:
    """True when every row and column of kept values hits its target."""
    return (
        row_sums(grid, kept) == tuple(row_targets) and
        col_sums(grid, kept) == tuple(col_targets)
    )


def build_puzzle(
    grid: Sequence[Sequence[int]],
    mask: Sequence[Sequence[bool]],
    difficulty: str,
    source: str = "generated",
    attempts: int = 0,
    seed: Optional[int] = None
) -> Puzzle:
    """Freeze grid and mask, compute targets and wrap them in a Puzzle."""
    frozen_grid: Grid = freeze_grid(grid)
    frozen_mask: Mask = freeze_mask(mask)
    if len(frozen_mask) != len(frozen_grid) or any(
        len(row) != len(frozen_grid) for row in frozen_mask
    ):
        raise ValueError("Solution mask must have the same shape as the grid")
    row_targets, col_targets = calculate_targets(frozen_grid, frozen_mask)
    return Puzzle(
        grid=frozen_grid,
        solution_mask=frozen_mask,
        row_targets=row_targets,
        col_targets=col_targets,
        difficulty=difficulty,
        source=source,
        attempts=attempts,
        seed=seed,
    )
