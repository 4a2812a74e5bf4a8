# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Deduction solver for sum puzzles.

Works only from the grid and the targets, the way a player would. Every
cell is undecided, deleted or confirmed. Rules are tried from simplest to
most involved; the first rule that finds something produces one move, the
move is applied and the scan starts over:

- forced: a line over its target by E confirms every open cell larger
  than E, otherwise deletes an open cell equal to E when none of the
  line's other open cells can add up to E
- completion: a line on target confirms its open cells, a line whose open
  cells add up to exactly its excess deletes them all
- intersection: a cell is deleted when its row or column could not shed
  its excess without it, and confirmed when deleting it would leave its
  row or column with a remainder too small to remove
- subset_sum: a line with at most subset_limit open cells enumerates
  which of them can make up the excess

Every rule only records what holds in all masks that reach the targets,
so a solver run on a consistent puzzle never ends in a contradiction.

If no rule applies before the puzzle is solved, finishing it would need a
guess.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from models import CellState, LineKind, Mask, Position
from targets import kept_from_deleted, sums_match


logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 200
DEFAULT_SUBSET_LIMIT = 2


def reachable_sums(values: Sequence[int]) -> Set[int]:
    """Every total some subset of `values` adds up to, 0 included."""
    sums = {0}
    for value in values:
        sums |= {total + value for total in sums}
    return sums


class Strategy(Enum):
    FORCED = "forced"
    COMPLETION = "completion"
    INTERSECTION = "intersection"
    SUBSET_SUM = "subset_sum"


class Line(NamedTuple):
    kind: LineKind
    index: int
    cells: Tuple[Position, ...]
    target: int

    @property
    def label(self) -> str:
        name = "Row" if self.kind == LineKind.ROW else "Column"
        return f"{name} {self.index}"


class LineState(NamedTuple):
    excess: int                         # kept sum minus target
    undecided: Tuple[Position, ...]
    undecided_sum: int


@dataclass(frozen=True)
class Move:
    """One deduction: cells that share an action and a reason."""
    strategy: Strategy
    action: CellState  # DELETED or CONFIRMED
    cells: Tuple[Position, ...]
    line: Optional[Tuple[str, int]] = None
    reason: str = ""

    def describe(self) -> str:
        verb = "Delete" if self.action == CellState.DELETED else "Keep"
        where = ", ".join(f"({r}, {c})" for r, c in self.cells)
        return f"{verb} {where}: {self.reason}"


@dataclass
class SolveResult:
    """Outcome of a solver run."""
    solved: bool
    steps: int
    strategy_counts: Dict[str, int]
    moves: List[Move] = field(default_factory=list)
    deleted: Mask = ()
    confirmed: Mask = ()
    contradiction: Optional[str] = None

    @property
    def required_guessing(self) -> bool:
        return not self.solved

    def strategy_percentages(self) -> Dict[str, float]:
        """Share of moves per strategy, in percent."""
        if not self.steps:
            return {name: 0.0 for name in self.strategy_counts}
        return {
            name: 100.0 * count / self.steps
            for name, count in self.strategy_counts.items()
        }

    def kept_mask(self) -> Mask:
        return kept_from_deleted(self.deleted)


class LogicalSolver:
    """
    Solves a puzzle by deduction only.

    Usage:
        solver = LogicalSolver(grid, row_targets, col_targets)
        result = solver.solve()
        if result.solved: ...
    """

    def __init__(
        self,
        grid: Sequence[Sequence[int]],
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        subset_limit: int = DEFAULT_SUBSET_LIMIT
    ):
        """
        Initialize the solver.

        Args:
            grid: Value grid
            row_targets: Target per row
            col_targets: Target per column
            max_iterations: Step budget; each step applies one move
            subset_limit: Largest number of open cells the subset_sum rule
                enumerates in a line
        """
        self.grid = grid
        self.size = len(grid)
        self.row_targets = tuple(row_targets)
        self.col_targets = tuple(col_targets)
        self.max_iterations = max_iterations
        self.subset_limit = subset_limit
        self.lines = self._build_lines()

        self.rules: List[Callable[[], Optional[Move]]] = [
            self._forced_move,
            self._completion_move,
            self._intersection_move,
            self._subset_sum_move,
        ]

        self.deleted: List[List[bool]] = []
        self.confirmed: List[List[bool]] = []
        self.reset()

    def _build_lines(self) -> List[Line]:
        n = self.size
        lines = [
            Line(LineKind.ROW, r, tuple((r, c) for c in range(n)), self.row_targets[r])
            for r in range(n)
        ]
        lines.extend(
            Line(LineKind.COL, c, tuple((r, c) for r in range(n)), self.col_targets[c])
            for c in range(n)
        )
        return lines

    def reset(
        self,
        deleted: Optional[Sequence[Sequence[bool]]] = None,
        confirmed: Optional[Sequence[Sequence[bool]]] = None
    ):
        """Start from an empty board, or from a partially decided one."""
        n = self.size
        self.deleted = (
            [list(row) for row in deleted] if deleted is not None
            else [[False] * n for _ in range(n)]
        )
        self.confirmed = (
            [list(row) for row in confirmed] if confirmed is not None
            else [[False] * n for _ in range(n)]
        )
        for r in range(n):
            for c in range(n):
                if self.deleted[r][c] and self.confirmed[r][c]:
                    raise ValueError(f"Cell ({r}, {c}) is both deleted and confirmed")

    def solve(
        self,
        deleted: Optional[Sequence[Sequence[bool]]] = None,
        confirmed: Optional[Sequence[Sequence[bool]]] = None
    ) -> SolveResult:
        """
        Apply rules until the puzzle is decided, no rule applies or the step
        budget runs out.

        Returns:
            SolveResult with move history and strategy usage
        """
        self.reset(deleted, confirmed)
        moves: List[Move] = []
        counts = {strategy.value: 0 for strategy in Strategy}

        for _ in range(self.max_iterations):
            if self.find_contradiction() or self.is_fully_decided():
                break
            move = self.next_move()
            if move is None:
                break
            self.apply(move)
            moves.append(move)
            counts[move.strategy.value] += 1

        contradiction = self.find_contradiction()
        solved = contradiction is None and sums_match(
            self.grid,
            kept_from_deleted(self.deleted),
            self.row_targets,
            self.col_targets,
        )

        if not solved:
            logger.debug(
                f"Solver stuck after {len(moves)} moves"
                + (f": {contradiction}" if contradiction else "")
            )

        return SolveResult(
            solved=solved,
            steps=len(moves),
            strategy_counts=counts,
            moves=moves,
            deleted=tuple(tuple(row) for row in self.deleted),
            confirmed=tuple(tuple(row) for row in self.confirmed),
            contradiction=contradiction,
        )

    def next_move(self) -> Optional[Move]:
        """First move found by the rules, simplest rule first."""
        for rule in self.rules:
            move = rule()
            if move is not None:
                return move
        return None

    def apply(self, move: Move):
        for r, c in move.cells:
            if move.action == CellState.DELETED:
                self.deleted[r][c] = True
                self.confirmed[r][c] = False
            else:
                self.confirmed[r][c] = True
                self.deleted[r][c] = False

    def is_fully_decided(self) -> bool:
        return all(
            self.deleted[r][c] or self.confirmed[r][c]
            for r in range(self.size)
            for c in range(self.size)
        )

    def find_contradiction(self) -> Optional[str]:
        """Describe a line that can no longer reach its target, if any."""
        for line in self.lines:
            state = self._line_state(line)
            if state.excess < 0:
                return f"{line.label} is {-state.excess} below its target"
            if state.excess > state.undecided_sum:
                return f"{line.label} cannot shed {state.excess} with its open cells"
        return None

    def _value(self, cell: Position) -> int:
        return self.grid[cell[0]][cell[1]]

    def _is_undecided(self, r: int, c: int) -> bool:
        return not self.deleted[r][c] and not self.confirmed[r][c]

    def _line_state(self, line: Line) -> LineState:
        kept_sum = 0
        undecided = []
        for r, c in line.cells:
            if self.deleted[r][c]:
                continue
            kept_sum += self.grid[r][c]
            if not self.confirmed[r][c]:
                undecided.append((r, c))
        return LineState(
            excess=kept_sum - line.target,
            undecided=tuple(undecided),
            undecided_sum=sum(self._value(cell) for cell in undecided),
        )

    def _line_key(self, line: Line) -> Tuple[str, int]:
        return (line.kind.value, line.index)

    # Rules

    def _forced_move(self) -> Optional[Move]:
        for line in self.lines:
            state = self._line_state(line)
            if state.excess <= 0 or not state.undecided:
                continue

            too_big = tuple(
                cell for cell in state.undecided
                if self._value(cell) > state.excess
            )
            if too_big:
                return Move(
                    strategy=Strategy.FORCED,
                    action=CellState.CONFIRMED,
                    cells=too_big,
                    line=self._line_key(line),
                    reason=(
                        f"{line.label} is {state.excess} over its target, "
                        "deleting any larger value would undershoot it"
                    ),
                )

            for cell in state.undecided:
                if self._value(cell) != state.excess:
                    continue
                # Another way to shed the excess makes this a guess
                others = [self._value(other) for other in state.undecided if other != cell]
                if state.excess in reachable_sums(others):
                    continue
                return Move(
                    strategy=Strategy.FORCED,
                    action=CellState.DELETED,
                    cells=(cell,),
                    line=self._line_key(line),
                    reason=(
                        f"{line.label} is {state.excess} over its target, "
                        "only this cell's value makes up the difference"
                    ),
                )
        return None

    def _completion_move(self) -> Optional[Move]:
        for line in self.lines:
            state = self._line_state(line)
            if not state.undecided:
                continue

            if state.excess == 0:
                return Move(
                    strategy=Strategy.COMPLETION,
                    action=CellState.CONFIRMED,
                    cells=state.undecided,
                    line=self._line_key(line),
                    reason=f"{line.label} already matches its target",
                )
            if state.excess == state.undecided_sum:
                return Move(
                    strategy=Strategy.COMPLETION,
                    action=CellState.DELETED,
                    cells=state.undecided,
                    line=self._line_key(line),
                    reason=(
                        f"{line.label} must shed {state.excess}, "
                        "all of its open cells together"
                    ),
                )
        return None

    def _intersection_move(self) -> Optional[Move]:
        n = self.size
        row_lines = self.lines[:n]
        col_lines = self.lines[n:]
        row_states = [self._line_state(line) for line in row_lines]
        col_states = [self._line_state(line) for line in col_lines]

        for r in range(n):
            for c in range(n):
                if not self._is_undecided(r, c):
                    continue
                value = self.grid[r][c]
                crossing = ((row_lines[r], row_states[r]), (col_lines[c], col_states[c]))

                for line, state in crossing:
                    others = state.undecided_sum - value
                    if others < state.excess:
                        return Move(
                            strategy=Strategy.INTERSECTION,
                            action=CellState.DELETED,
                            cells=((r, c),),
                            line=self._line_key(line),
                            reason=(
                                f"{line.label} must shed {state.excess} but its "
                                f"other open cells hold only {others}"
                            ),
                        )

                for line, state in crossing:
                    remainder = state.excess - value
                    if remainder <= 0:
                        continue
                    other_values = [
                        self._value(cell) for cell in state.undecided
                        if cell != (r, c)
                    ]
                    if other_values and remainder < min(other_values):
                        return Move(
                            strategy=Strategy.INTERSECTION,
                            action=CellState.CONFIRMED,
                            cells=((r, c),),
                            line=self._line_key(line),
                            reason=(
                                f"Deleting it would leave {line.label} "
                                f"{remainder} over, less than any other open cell"
                            ),
                        )
        return None

    def _subset_sum_move(self) -> Optional[Move]:
        if self.subset_limit < 1:
            return None

        for line in self.lines:
            state = self._line_state(line)
            count = len(state.undecided)
            if state.excess <= 0 or count == 0 or count > self.subset_limit:
                continue

            valid = [
                set(combo)
                for k in range(count + 1)
                for combo in combinations(state.undecided, k)
                if sum(self._value(cell) for cell in combo) == state.excess
            ]
            if not valid:
                continue

            always = tuple(
                cell for cell in state.undecided
                if all(cell in subset for subset in valid)
            )
            if always:
                return Move(
                    strategy=Strategy.SUBSET_SUM,
                    action=CellState.DELETED,
                    cells=always,
                    line=self._line_key(line),
                    reason=(
                        f"Every way to shed {state.excess} from "
                        f"{line.label} deletes these cells"
                    ),
                )

            never = tuple(
                cell for cell in state.undecided
                if all(cell not in subset for subset in valid)
            )
            if never:
                return Move(
                    strategy=Strategy.SUBSET_SUM,
                    action=CellState.CONFIRMED,
                    cells=never,
                    line=self._line_key(line),
                    reason=(
                        f"No way to shed {state.excess} from "
                        f"{line.label} uses these cells"
                    ),
                )
        return None


def solve_puzzle(
    grid: Sequence[Sequence[int]],
    row_targets: Sequence[int],
    col_targets: Sequence[int],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    subset_limit: int = DEFAULT_SUBSET_LIMIT
) -> SolveResult:
    """
    Convenience function to run the solver once.

    Returns:
        SolveResult
    """
    solver = LogicalSolver(
        grid, row_targets, col_targets,
        max_iterations=max_iterations,
        subset_limit=subset_limit,
    )
    return solver.solve()
