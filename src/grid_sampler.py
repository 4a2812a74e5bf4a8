# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Grid Sampler

Fills an N x N grid with values from a difficulty's range:
- Values drawn uniformly, or by the profile's weights
- No value repeats more than max_duplicates times in a row
- Column repeats beyond the cap are replaced in a post-pass

When neither the row nor the column leaves a value free, the repeat is
kept (soft violation) instead of looping forever. The built-in profiles
always leave a value free, so this only matters for custom profiles.
"""

import logging
import random
from collections import Counter
from typing import List, Optional, Set

from config import DifficultyProfile
from models import Grid


logger = logging.getLogger(__name__)

# Redraws before picking directly from the values that are still allowed
MAX_RESAMPLE_ATTEMPTS = 10


class GridSampler:
    """Samples value grids for one difficulty profile."""

    def __init__(
        self,
        size: int,
        profile: DifficultyProfile,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize sampler.

        Args:
            size: Grid size
            profile: Difficulty profile with value range and duplicate cap
            rng: Random source (seed it for reproducible grids)
        """
        self.size = size
        self.profile = profile
        self.rng = rng or random.Random()
        self.values = profile.values()
        self.weights = profile.value_weights
        self.soft_violations = 0

    def sample(self) -> Grid:
        """
        Sample a grid.

        Returns:
            Immutable grid (tuple of row tuples)
        """
        self.soft_violations = 0
        grid = [self._sample_row() for _ in range(self.size)]
        for col in range(self.size):
            self._repair_column(grid, col)

        if self.soft_violations:
            logger.debug(
                f"Grid kept {self.soft_violations} repeat(s) over the cap "
                f"of {self.profile.max_duplicates}"
            )
        return tuple(tuple(row) for row in grid)

    def _sample_row(self) -> List[int]:
        cap = self.profile.max_duplicates
        row: List[int] = []
        counts: Counter = Counter()

        for _ in range(self.size):
            value = self._draw()
            attempts = 0
            while counts[value] >= cap and attempts < MAX_RESAMPLE_ATTEMPTS:
                value = self._draw()
                attempts += 1

            if counts[value] >= cap:
                full = {v for v, n in counts.items() if n >= cap}
                replacement = self._draw_allowed(full)
                if replacement is None:
                    self.soft_violations += 1
                else:
                    value = replacement

            row.append(value)
            counts[value] += 1
        return row

    def _repair_column(self, grid: List[List[int]], col: int):
        """Replace repeats beyond the cap in one column."""
        cap = self.profile.max_duplicates
        counts = Counter(grid[row][col] for row in range(self.size))

        for row in range(self.size):
            value = grid[row][col]
            if counts[value] <= cap:
                continue

            row_counts = Counter(grid[row])
            excluded = {v for v, n in counts.items() if n >= cap}
            excluded |= {v for v, n in row_counts.items() if n >= cap}
            excluded.add(value)

            replacement = self._draw_allowed(excluded)
            if replacement is None:
                self.soft_violations += 1
                continue

            grid[row][col] = replacement
            counts[value] -= 1
            counts[replacement] += 1

    def _draw(self) -> int:
        if self.weights:
            return self.rng.choices(self.values, weights=self.weights)[0]
        return self.rng.choice(self.values)

    def _draw_allowed(self, excluded: Set[int]) -> Optional[int]:
        """Draw a value outside `excluded`, honouring weights; None if none left."""
        candidates = []
        weights = []
        for index, value in enumerate(self.values):
            if value in excluded:
                continue
            weight = self.weights[index] if self.weights else 1.0
            if weight > 0:
                candidates.append(value)
                weights.append(weight)

        if not candidates:
            return None
        return self.rng.choices(candidates, weights=weights)[0]


def sample_grid(
    size: int,
    profile: DifficultyProfile,
    rng: Optional[random.Random] = None
) -> Grid:
    """Convenience wrapper around GridSampler."""
    return GridSampler(size, profile, rng).sample()
