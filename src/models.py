# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Data models for the sum puzzle generator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


# Immutable N x N matrices
Grid = Tuple[Tuple[int, ...], ...]
Mask = Tuple[Tuple[bool, ...], ...]
Position = Tuple[int, int]

# Text form of a solution mask row: "o" keeps a cell, "x" deletes it
MASK_KEEP_CHAR = "o"
MASK_DELETE_CHAR = "x"


class CellState(Enum):
    NORMAL = "normal"
    DELETED = "deleted"
    CONFIRMED = "confirmed"


class LineKind(Enum):
    ROW = "row"
    COL = "col"


def freeze_grid(rows: Sequence[Sequence[int]]) -> Grid:
    """Convert nested lists of values to an immutable square grid."""
    grid = tuple(tuple(int(value) for value in row) for row in rows)
    size = len(grid)
    if size == 0 or any(len(row) != size for row in grid):
        raise ValueError(f"Grid must be square and non-empty, got {len(grid)} rows")
    return grid


def freeze_mask(rows: Sequence[Sequence[bool]]) -> Mask:
    """Convert nested lists of booleans to an immutable mask."""
    return tuple(tuple(bool(cell) for cell in row) for row in rows)


def parse_mask_rows(rows: Sequence[str]) -> Mask:
    """
    Parse a mask written as strings, one per row.

    Example: ['oxo', 'ooo', 'xoo'] keeps every cell marked 'o'.
    """
    mask = []
    for text in rows:
        row = []
        for char in text.strip():
            if char == MASK_KEEP_CHAR:
                row.append(True)
            elif char == MASK_DELETE_CHAR:
                row.append(False)
            else:
                raise ValueError(f"Invalid mask character {char!r} in row {text!r}")
        mask.append(tuple(row))
    return tuple(mask)


def mask_to_rows(mask: Mask) -> List[str]:
    """Inverse of parse_mask_rows."""
    return [
        "".join(MASK_KEEP_CHAR if kept else MASK_DELETE_CHAR for kept in row)
        for row in mask
    ]


@dataclass(frozen=True)
class Puzzle:
    """A generated puzzle: grid, hidden solution and the targets it defines."""
    grid: Grid
    solution_mask: Mask
    row_targets: Tuple[int, ...]
    col_targets: Tuple[int, ...]
    difficulty: str = "medium"
    source: str = "generated"  # generated or fallback
    attempts: int = 0
    seed: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.grid)

    def deletion_count(self) -> int:
        """Number of cells the solution deletes."""
        return sum(1 for row in self.solution_mask for kept in row if not kept)

    def kept_in_row(self, row: int) -> int:
        return sum(1 for kept in self.solution_mask[row] if kept)

    def kept_in_col(self, col: int) -> int:
        return sum(1 for row in self.solution_mask if row[col])

    def to_dict(self) -> Dict[str, Any]:
        """Plain data handed to the game-state/UI layer."""
        return {
            "grid": [list(row) for row in self.grid],
            "solutionMask": [list(row) for row in self.solution_mask],
            "rowTargets": list(self.row_targets),
            "colTargets": list(self.col_targets),
            "difficulty": self.difficulty,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Puzzle':
        """Build a Puzzle from the shape produced by to_dict()."""
        return cls(
            grid=freeze_grid(data["grid"]),
            solution_mask=freeze_mask(data["solutionMask"]),
            row_targets=tuple(int(t) for t in data["rowTargets"]),
            col_targets=tuple(int(t) for t in data["colTargets"]),
            difficulty=data.get("difficulty", "medium"),
            source=data.get("source", "generated"),
        )

    def to_string(self, show_solution: bool = True) -> str:
        """
        Render the puzzle as text with row targets on the right and column
        targets underneath. Deleted cells show as '--' when the solution is
        revealed.
        """
        width = max(
            len(str(value)) for row in self.grid for value in row
        )
        width = max(width, 2)
        lines = []
        for r, row in enumerate(self.grid):
            cells = []
            for c, value in enumerate(row):
                if show_solution and not self.solution_mask[r][c]:
                    cells.append("-" * width)
                else:
                    cells.append(str(value).rjust(width))
            lines.append(" ".join(cells) + f" | {self.row_targets[r]}")
        lines.append("-" * ((width + 1) * self.size - 1))
        lines.append(" ".join(str(t).rjust(width) for t in self.col_targets))
        return "\n".join(lines)
