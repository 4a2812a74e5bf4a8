# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
YAML importer for sum puzzles.

Loads puzzles from the YAML puzzle format, so saved or hand-written
puzzles can be replayed. Targets may be left out; they are then derived
from the solution mask.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from models import Puzzle, parse_mask_rows
from targets import build_puzzle
from yaml_schema import PuzzleYAMLData


class YAMLImportError(Exception):
    """Raised when YAML import fails."""
    pass


class YAMLImporter:
    """
    Imports puzzles from the YAML puzzle format.

    Usage:
        importer = YAMLImporter()
        puzzle = importer.load('puzzle.yaml')
    """

    def load(self, path: str) -> Puzzle:
        """
        Load puzzle from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Puzzle instance

        Raises:
            YAMLImportError: If file doesn't exist or is invalid
        """
        path = Path(path)

        if not path.exists():
            raise YAMLImportError(f"Puzzle file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise YAMLImportError(f"Invalid YAML in puzzle file: {e}")

        if not isinstance(data, dict):
            raise YAMLImportError(
                f"Puzzle file must contain a YAML mapping, got {type(data)}"
            )

        return self.parse(data)

    def load_string(self, yaml_content: str) -> Puzzle:
        """
        Load puzzle from YAML string.

        Args:
            yaml_content: YAML string content

        Returns:
            Puzzle instance
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise YAMLImportError(f"Invalid YAML content: {e}")

        if not isinstance(data, dict):
            raise YAMLImportError(
                f"YAML content must be a mapping, got {type(data)}"
            )

        return self.parse(data)

    def parse(self, data: Dict[str, Any]) -> Puzzle:
        """
        Parse dictionary data into a Puzzle.

        Args:
            data: Dictionary from YAML

        Returns:
            Puzzle instance

        Raises:
            YAMLImportError: If the data is malformed or its targets do not
                follow from the solution mask
        """
        try:
            puzzle_data = PuzzleYAMLData.from_dict(data)
        except (AttributeError, TypeError) as e:
            raise YAMLImportError(f"Failed to parse puzzle data: {e}")

        errors = self.validate_structure(puzzle_data)
        if errors:
            raise YAMLImportError(
                "Invalid puzzle data:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        return self.to_puzzle(puzzle_data)

    def to_puzzle(self, puzzle_data: PuzzleYAMLData) -> Puzzle:
        """
        Convert puzzle data to a Puzzle, checking any stored targets.

        Args:
            puzzle_data: PuzzleYAMLData instance

        Returns:
            Puzzle instance
        """
        try:
            mask = parse_mask_rows(puzzle_data.grid.solution_mask)
            puzzle = build_puzzle(
                puzzle_data.grid.values,
                mask,
                difficulty=puzzle_data.metadata.difficulty,
                source=puzzle_data.metadata.source,
                attempts=puzzle_data.metadata.generation_stats.attempts,
                seed=puzzle_data.metadata.seed,
            )
        except (TypeError, ValueError) as e:
            raise YAMLImportError(f"Invalid grid data: {e}")

        stored_rows = puzzle_data.grid.row_targets
        if stored_rows is not None and tuple(stored_rows) != puzzle.row_targets:
            raise YAMLImportError(
                f"Row targets {list(stored_rows)} do not match the solution "
                f"mask, expected {list(puzzle.row_targets)}"
            )
        stored_cols = puzzle_data.grid.col_targets
        if stored_cols is not None and tuple(stored_cols) != puzzle.col_targets:
            raise YAMLImportError(
                f"Column targets {list(stored_cols)} do not match the solution "
                f"mask, expected {list(puzzle.col_targets)}"
            )

        return puzzle

    def validate_structure(self, puzzle_data: PuzzleYAMLData) -> List[str]:
        """
        Validate puzzle data structure.

        Args:
            puzzle_data: PuzzleYAMLData instance

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        size = puzzle_data.metadata.size
        values = puzzle_data.grid.values
        mask_rows = puzzle_data.grid.solution_mask

        if not values:
            errors.append("Missing grid values")
        elif len(values) != size:
            errors.append(f"Grid has {len(values)} rows but size is {size}")

        if len(mask_rows) != len(values):
            errors.append(
                f"Solution mask has {len(mask_rows)} rows, "
                f"grid has {len(values)}"
            )
        for index, row in enumerate(mask_rows):
            if not isinstance(row, str):
                errors.append(f"Solution mask row {index} must be a string")

        for key, targets in (
            ("row_targets", puzzle_data.grid.row_targets),
            ("col_targets", puzzle_data.grid.col_targets),
        ):
            if targets is None:
                continue
            if not isinstance(targets, list) or len(targets) != len(values):
                errors.append(f"{key} needs {len(values)} entries")

        return errors


def load_puzzle_from_yaml(path: str) -> Puzzle:
    """
    Convenience function to load a puzzle from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Puzzle instance
    """
    return YAMLImporter().load(path)
