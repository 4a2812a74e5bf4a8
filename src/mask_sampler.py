# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Mask Sampler

Chooses which cells the solution keeps. Every row and column keeps between
max(2, min_keep) and max_keep cells and the total number of deletions lands
inside the profile's window.
"""

import logging
import random
from typing import List, Optional

from config import DifficultyProfile
from models import Mask


logger = logging.getLogger(__name__)

MAX_REPAIR_PASSES = 60


class MaskSampler:
    """Samples solution masks for one difficulty profile."""

    def __init__(
        self,
        size: int,
        profile: DifficultyProfile,
        rng: Optional[random.Random] = None
    ):
        self.size = size
        self.profile = profile
        self.rng = rng or random.Random()
        self.min_keep = profile.keep_floor
        self.max_keep = min(profile.max_keep, size)

    def sample(self) -> Optional[Mask]:
        """
        Sample a mask.

        Returns:
            Immutable mask, or None when the column repair did not converge
        """
        if self.min_keep > self.max_keep:
            logger.debug("Keep bounds are empty, cannot sample a mask")
            return None

        per_row = self._row_deletions()
        if per_row is None:
            return None

        mask = []
        for deletions in per_row:
            kept_cols = set(self.rng.sample(range(self.size), self.size - deletions))
            mask.append([col in kept_cols for col in range(self.size)])

        if not self._repair_columns(mask):
            logger.debug("Column repair did not converge")
            return None

        deletions = sum(1 for row in mask for kept in row if not kept)
        if not self.profile.min_deletions <= deletions <= self.profile.max_deletions:
            logger.debug(f"Repair moved deletions out of range: {deletions}")
            return None

        return tuple(tuple(row) for row in mask)

    def _row_deletions(self) -> Optional[List[int]]:
        """Pick a total deletion count and spread it over the rows."""
        low_per_row = self.size - self.max_keep
        high_per_row = self.size - self.min_keep

        low = max(self.profile.min_deletions, low_per_row * self.size)
        high = min(self.profile.max_deletions, high_per_row * self.size)
        if low > high:
            logger.debug(
                f"No deletion total fits both the window "
                f"[{self.profile.min_deletions}, {self.profile.max_deletions}] "
                f"and the per-row bounds"
            )
            return None

        total = self.rng.randint(low, high)
        per_row = [low_per_row] * self.size
        remaining = total - sum(per_row)
        while remaining > 0:
            open_rows = [r for r in range(self.size) if per_row[r] < high_per_row]
            per_row[self.rng.choice(open_rows)] += 1
            remaining -= 1
        return per_row

    def _repair_columns(self, mask: List[List[bool]]) -> bool:
        for _ in range(MAX_REPAIR_PASSES):
            counts = self._column_counts(mask)
            low = [c for c in range(self.size) if counts[c] < self.min_keep]
            high = [c for c in range(self.size) if counts[c] > self.max_keep]
            if not low and not high:
                return True

            if low:
                fixed = self._raise_column(mask, self.rng.choice(low), counts)
            else:
                fixed = self._lower_column(mask, self.rng.choice(high), counts)
            if not fixed:
                return False
        return False

    def _raise_column(self, mask: List[List[bool]], col: int, counts: List[int]) -> bool:
        """Keep one more cell in `col`."""
        rows = [r for r in range(self.size) if not mask[r][col]]
        self.rng.shuffle(rows)

        # Move a kept cell along its row, row counts stay the same
        for row in rows:
            donors = [
                c for c in range(self.size)
                if mask[row][c] and counts[c] > self.min_keep
            ]
            if donors:
                donor = self.rng.choice(donors)
                mask[row][donor] = False
                mask[row][col] = True
                return True

        # Otherwise flip, in a row that can keep one more cell
        for row in rows:
            if sum(mask[row]) < self.max_keep:
                mask[row][col] = True
                return True
        return False

    def _lower_column(self, mask: List[List[bool]], col: int, counts: List[int]) -> bool:
        """Delete one more cell in `col`."""
        rows = [r for r in range(self.size) if mask[r][col]]
        self.rng.shuffle(rows)

        for row in rows:
            receivers = [
                c for c in range(self.size)
                if not mask[row][c] and counts[c] < self.max_keep
            ]
            if receivers:
                receiver = self.rng.choice(receivers)
                mask[row][receiver] = True
                mask[row][col] = False
                return True

        for row in rows:
            if sum(mask[row]) > self.min_keep:
                mask[row][col] = False
                return True
        return False

    def _column_counts(self, mask: List[List[bool]]) -> List[int]:
        return [sum(1 for r in range(self.size) if mask[r][c]) for c in range(self.size)]


def sample_mask(
    size: int,
    profile: DifficultyProfile,
    rng: Optional[random.Random] = None
) -> Optional[Mask]:
    """Convenience wrapper around MaskSampler."""
    return MaskSampler(size, profile, rng).sample()
