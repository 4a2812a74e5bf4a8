# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Puzzle Feasibility Validator

Rejects a (grid, mask, targets) candidate when:
1. A row or column is already solved with nothing deleted
2. Deletion counts fall outside the difficulty's window
3. The targets do not follow from the mask
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from config import DifficultyProfile
from targets import calculate_targets, full_col_sums, full_row_sums


@dataclass
class ValidationResult:
    """Result of feasibility validation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict = field(default_factory=dict)

    def __str__(self):
        status = "✅ FEASIBLE" if self.valid else "❌ REJECTED"
        lines = [f"Feasibility: {status}"]

        if self.errors:
            lines.append("\nErrors:")
            for e in self.errors:
                lines.append(f"  ❌ {e}")

        if self.warnings:
            lines.append("\nWarnings:")
            for w in self.warnings:
                lines.append(f"  ⚠️ {w}")

        if self.stats:
            lines.append("\nStats:")
            for k, v in self.stats.items():
                lines.append(f"  {k}: {v}")

        return "\n".join(lines)


class FeasibilityValidator:
    """
    Checks sampled candidates against a difficulty profile before the
    (more expensive) solver and uniqueness checks run.
    """

    def __init__(self, profile: DifficultyProfile):
        self.profile = profile

    def validate(
        self,
        grid: Sequence[Sequence[int]],
        mask: Sequence[Sequence[bool]],
        row_targets: Sequence[int],
        col_targets: Sequence[int]
    ) -> ValidationResult:
        """
        Validate a candidate.

        Args:
            grid: Value grid
            mask: Solution mask (True = kept)
            row_targets: Target per row
            col_targets: Target per column

        Returns:
            ValidationResult with details
        """
        result = ValidationResult(valid=True)
        size = len(grid)

        self._check_trivial_lines(grid, row_targets, col_targets, result)
        self._check_deletions(mask, size, result)

        expected_rows, expected_cols = calculate_targets(grid, mask)
        if tuple(row_targets) != expected_rows or tuple(col_targets) != expected_cols:
            result.errors.append("Targets do not match the solution mask")

        result.valid = len(result.errors) == 0
        return result

    def is_feasible(
        self,
        grid: Sequence[Sequence[int]],
        mask: Sequence[Sequence[bool]],
        row_targets: Sequence[int],
        col_targets: Sequence[int]
    ) -> bool:
        return self.validate(grid, mask, row_targets, col_targets).valid

    def _check_trivial_lines(self, grid, row_targets, col_targets, result: ValidationResult):
        """A line whose full sum already equals its target needs no decision."""
        for i, (full, target) in enumerate(zip(full_row_sums(grid), row_targets)):
            if full == target:
                result.errors.append(f"Row {i} is solved without deleting anything")
        for j, (full, target) in enumerate(zip(full_col_sums(grid), col_targets)):
            if full == target:
                result.errors.append(f"Column {j} is solved without deleting anything")

    def _check_deletions(self, mask, size: int, result: ValidationResult):
        profile = self.profile
        floor = profile.keep_floor

        row_kept = [sum(1 for kept in row if kept) for row in mask]
        col_kept = [sum(1 for r in range(size) if mask[r][c]) for c in range(size)]
        deletions = size * size - sum(row_kept)

        result.stats["deletions"] = deletions
        result.stats["row_kept"] = row_kept
        result.stats["col_kept"] = col_kept

        if not profile.min_deletions <= deletions <= profile.max_deletions:
            result.errors.append(
                f"{deletions} deletions outside "
                f"[{profile.min_deletions}, {profile.max_deletions}]"
            )

        for kind, counts in (("Row", row_kept), ("Column", col_kept)):
            for index, kept in enumerate(counts):
                if not floor <= kept <= profile.max_keep:
                    result.errors.append(
                        f"{kind} {index} keeps {kept} cells, "
                        f"expected {floor}-{profile.max_keep}"
                    )


def validate_feasibility(
    grid: Sequence[Sequence[int]],
    mask: Sequence[Sequence[bool]],
    row_targets: Sequence[int],
    col_targets: Sequence[int],
    profile: DifficultyProfile
) -> ValidationResult:
    """
    Convenience function to validate a candidate.

    Returns:
        ValidationResult
    """
    return FeasibilityValidator(profile).validate(grid, mask, row_targets, col_targets)
