# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
YAML exporter for sum puzzles.

Writes a puzzle, optionally with solver and generation statistics, to the
YAML puzzle format read by YAMLImporter.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from logical_solver import SolveResult
from models import Puzzle, mask_to_rows
from yaml_schema import GenerationStats, GridData, PuzzleMetadata, PuzzleYAMLData, SolverStats


class YAMLExportError(Exception):
    """Raised when YAML export fails."""
    pass


class YAMLExporter:
    """
    Exports puzzles to the YAML puzzle format.

    Usage:
        exporter = YAMLExporter()
        yaml_str = exporter.export(puzzle, solve_result, stats)
        exporter.save(puzzle, 'output/puzzle.yaml', solve_result, stats)
    """

    def export(
        self,
        puzzle: Puzzle,
        solve_result: Optional[SolveResult] = None,
        stats: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Export puzzle to YAML string.

        Args:
            puzzle: Puzzle to export
            solve_result: Optional solver run on the puzzle
            stats: Optional generation statistics (attempts,
                generation_time_seconds)

        Returns:
            YAML string representation of the puzzle
        """
        data_dict = self.build_puzzle_data(puzzle, solve_result, stats).to_dict()

        header = "# Sum Puzzle\n"
        header += "# solution_mask rows: 'o' keeps a cell, 'x' deletes it\n\n"

        try:
            yaml_content = yaml.dump(
                data_dict,
                default_flow_style=None,
                allow_unicode=True,
                sort_keys=False,
                indent=2,
                width=80,
            )
        except yaml.YAMLError as e:
            raise YAMLExportError(f"Could not serialize puzzle: {e}")

        return header + yaml_content

    def save(
        self,
        puzzle: Puzzle,
        path: str,
        solve_result: Optional[SolveResult] = None,
        stats: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Save puzzle to YAML file.

        Args:
            puzzle: Puzzle to export
            path: Output file path
            solve_result: Optional solver run on the puzzle
            stats: Optional generation statistics

        Returns:
            Path to saved file
        """
        yaml_content = self.export(puzzle, solve_result, stats)

        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(yaml_content)
        except OSError as e:
            raise YAMLExportError(f"Could not write {path}: {e}")

        return str(path)

    def build_puzzle_data(
        self,
        puzzle: Puzzle,
        solve_result: Optional[SolveResult],
        stats: Optional[Dict[str, Any]]
    ) -> PuzzleYAMLData:
        """Build PuzzleYAMLData from a puzzle and its statistics."""
        gen_stats = GenerationStats(attempts=puzzle.attempts)
        if stats:
            gen_stats.attempts = stats.get('attempts', gen_stats.attempts)
            gen_stats.generation_time_seconds = stats.get('generation_time_seconds', 0.0)

        metadata = PuzzleMetadata(
            difficulty=puzzle.difficulty,
            size=puzzle.size,
            source=puzzle.source,
            date=datetime.now().strftime("%Y-%m-%d"),
            seed=puzzle.seed,
            generation_stats=gen_stats,
        )

        grid = GridData(
            values=[list(row) for row in puzzle.grid],
            solution_mask=mask_to_rows(puzzle.solution_mask),
            row_targets=list(puzzle.row_targets),
            col_targets=list(puzzle.col_targets),
        )

        solver = None
        if solve_result is not None:
            solver = SolverStats(
                solved=solve_result.solved,
                steps=solve_result.steps,
                strategy_counts=dict(solve_result.strategy_counts),
                contradiction=solve_result.contradiction,
            )

        return PuzzleYAMLData(metadata=metadata, grid=grid, solver=solver)


def export_puzzle_to_yaml(puzzle: Puzzle, output_path: str, **kwargs) -> str:
    """
    Convenience function to export a puzzle to a YAML file.

    Args:
        puzzle: Puzzle to export
        output_path: Output file path
        **kwargs: solve_result, stats

    Returns:
        Path to saved file
    """
    return YAMLExporter().save(puzzle, output_path, **kwargs)
