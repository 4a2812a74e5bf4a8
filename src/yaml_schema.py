# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
YAML schema definitions for the puzzle file format.

Defines the data structures written by YAMLExporter and read back by
YAMLImporter.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any


@dataclass
class GenerationStats:
    """Statistics from puzzle generation."""
    attempts: int = 0
    generation_time_seconds: float = 0.0


@dataclass
class SolverStats:
    """How the deduction solver fared on the puzzle."""
    solved: bool = False
    steps: int = 0
    strategy_counts: Dict[str, int] = field(default_factory=dict)
    contradiction: Optional[str] = None


@dataclass
class GridData:
    """Grid representation in the puzzle."""
    values: List[List[int]]
    solution_mask: List[str]  # one row per string, 'o' kept and 'x' deleted
    row_targets: Optional[List[int]] = None
    col_targets: Optional[List[int]] = None


@dataclass
class PuzzleMetadata:
    """Metadata for the puzzle."""
    difficulty: str
    size: int
    source: str = "generated"
    date: str = ""
    seed: Optional[int] = None
    generation_stats: GenerationStats = field(default_factory=GenerationStats)


@dataclass
class PuzzleYAMLData:
    """
    Complete puzzle data for the YAML format.

    This is the main data structure that gets serialized to/from YAML.
    """
    metadata: PuzzleMetadata
    grid: GridData
    solver: Optional[SolverStats] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for YAML serialization.

        Returns:
            Dictionary representation of the puzzle
        """
        stats = self.metadata.generation_stats
        data = {
            'metadata': {
                'difficulty': self.metadata.difficulty,
                'size': self.metadata.size,
                'source': self.metadata.source,
                'date': self.metadata.date,
                'seed': self.metadata.seed,
                'generation_stats': {
                    'attempts': stats.attempts,
                    'generation_time_seconds': stats.generation_time_seconds,
                },
            },
            'grid': {
                'values': [list(row) for row in self.grid.values],
                'solution_mask': list(self.grid.solution_mask),
                'row_targets': self.grid.row_targets,
                'col_targets': self.grid.col_targets,
            },
        }

        if self.solver:
            data['solver'] = {
                'solved': self.solver.solved,
                'steps': self.solver.steps,
                'strategy_counts': dict(self.solver.strategy_counts),
                'contradiction': self.solver.contradiction,
            }

        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PuzzleYAMLData':
        """
        Create PuzzleYAMLData from dictionary.

        Args:
            data: Dictionary representation (from YAML)

        Returns:
            PuzzleYAMLData instance
        """
        meta_data = data.get('metadata', {}) or {}
        stats_data = meta_data.get('generation_stats', {}) or {}
        grid_data = data.get('grid', {}) or {}

        stats = GenerationStats(
            attempts=stats_data.get('attempts', 0),
            generation_time_seconds=stats_data.get('generation_time_seconds', 0.0),
        )

        values = grid_data.get('values', []) or []
        metadata = PuzzleMetadata(
            difficulty=meta_data.get('difficulty', 'medium'),
            size=meta_data.get('size', len(values)),
            source=meta_data.get('source', 'generated'),
            date=str(meta_data.get('date', '') or ''),
            seed=meta_data.get('seed'),
            generation_stats=stats,
        )

        grid = GridData(
            values=values,
            solution_mask=grid_data.get('solution_mask', []) or [],
            row_targets=grid_data.get('row_targets'),
            col_targets=grid_data.get('col_targets'),
        )

        solver = None
        solver_data = data.get('solver')
        if solver_data:
            solver = SolverStats(
                solved=solver_data.get('solved', False),
                steps=solver_data.get('steps', 0),
                strategy_counts=solver_data.get('strategy_counts', {}) or {},
                contradiction=solver_data.get('contradiction'),
            )

        return cls(metadata=metadata, grid=grid, solver=solver)
