# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Configuration module for the sum puzzle generator.

Holds the difficulty profiles and handles loading configuration from YAML
files and command-line arguments, with proper merging and validation.
"""

import argparse
import logging
from dataclasses import dataclass, field, asdict, fields, replace
from pathlib import Path
from typing import Optional, List, Dict, Any, Set

import yaml


logger = logging.getLogger(__name__)

DEFAULT_SIZE = 7
DEFAULT_DIFFICULTY = "medium"

# Valid configuration values
VALID_SIZES = [7]
VALID_DIFFICULTIES = ["easy", "medium", "hard"]
VALID_OUTPUT_FORMATS = ["text", "yaml"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Validation levels, loosest first
VALIDATION_BASIC = "basic"        # feasibility only
VALIDATION_LOGICAL = "logical"    # + deduction solver gates
VALIDATION_STRICT = "strict"      # + unique solution
VALIDATION_LEVELS = [VALIDATION_BASIC, VALIDATION_LOGICAL, VALIDATION_STRICT]

STRATEGY_NAMES = ["forced", "completion", "intersection", "subset_sum"]

# Every row and column keeps at least this many cells
MIN_KEPT_FLOOR = 2


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass(frozen=True)
class DifficultyProfile:
    """Fixed generation parameters for one difficulty."""
    name: str
    min_value: int
    max_value: int
    max_duplicates: int           # per row and per column
    min_keep: int                 # kept cells per row/column
    max_keep: int
    min_deletions: int            # deleted cells in the whole grid
    max_deletions: int
    value_weights: Optional[List[float]] = None
    min_steps: int = 0
    max_steps: Optional[int] = None
    # strategy name -> [min_percent, max_percent] of solver moves
    strategy_bounds: Dict[str, List[float]] = field(default_factory=dict)

    @property
    def keep_floor(self) -> int:
        return max(MIN_KEPT_FLOOR, self.min_keep)

    def values(self) -> List[int]:
        return list(range(self.min_value, self.max_value + 1))

    def validate(self, size: int = DEFAULT_SIZE) -> List[str]:
        """Return a list of problems with this profile for a given grid size."""
        errors = []
        prefix = f"Profile '{self.name}'"
        if self.min_value < 1:
            errors.append(f"{prefix}: min_value must be positive")
        if self.max_value < self.min_value:
            errors.append(f"{prefix}: max_value must be >= min_value")
        if self.max_duplicates < 1:
            errors.append(f"{prefix}: max_duplicates must be at least 1")
        elif len(self.values()) * self.max_duplicates < size:
            errors.append(
                f"{prefix}: {len(self.values())} values with at most "
                f"{self.max_duplicates} repeats cannot fill a row of {size}"
            )
        if not MIN_KEPT_FLOOR <= self.keep_floor <= self.max_keep <= size:
            errors.append(
                f"{prefix}: keep bounds must satisfy "
                f"{MIN_KEPT_FLOOR} <= min_keep <= max_keep <= {size}"
            )
        if self.max_keep >= size:
            errors.append(
                f"{prefix}: max_keep must be below {size} so every line "
                "has a deletion"
            )
        if self.min_deletions > self.max_deletions:
            errors.append(f"{prefix}: min_deletions must be <= max_deletions")
        if self.value_weights is not None and (
            len(self.value_weights) != len(self.values()) or
            any(w < 0 for w in self.value_weights) or
            sum(self.value_weights) <= 0
        ):
            errors.append(
                f"{prefix}: value_weights needs one non-negative weight per value"
            )
        for name, bounds in self.strategy_bounds.items():
            if name not in STRATEGY_NAMES:
                errors.append(f"{prefix}: unknown strategy '{name}'")
            elif len(bounds) != 2 or not 0 <= bounds[0] <= bounds[1] <= 100:
                errors.append(
                    f"{prefix}: strategy bounds for '{name}' must be "
                    "[min, max] percentages"
                )
        return errors


DIFFICULTY_PROFILES: Dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        name="easy",
        min_value=1,
        max_value=9,
        max_duplicates=2,
        # One or two deletions per line keep the excesses small
        min_keep=5,
        max_keep=6,
        min_deletions=7,
        max_deletions=11,
        min_steps=1,
    ),
    "medium": DifficultyProfile(
        name="medium",
        min_value=1,
        max_value=9,
        max_duplicates=2,
        min_keep=3,
        max_keep=6,
        min_deletions=12,
        max_deletions=18,
        min_steps=1,
    ),
    "hard": DifficultyProfile(
        name="hard",
        min_value=2,
        max_value=12,
        max_duplicates=2,
        min_keep=3,
        max_keep=5,
        min_deletions=16,
        max_deletions=24,
        min_steps=8,
        strategy_bounds={"forced": [0.0, 90.0]},
    ),
}


def resolve_difficulty(name: Optional[str]) -> str:
    """Map a difficulty name to a known one; unknown names become medium."""
    key = (name or "").strip().lower()
    if key in DIFFICULTY_PROFILES:
        return key
    logger.warning(f"Unknown difficulty '{name}', using '{DEFAULT_DIFFICULTY}'")
    return DEFAULT_DIFFICULTY


def get_profile(
    name: Optional[str],
    overrides: Optional[Dict[str, Dict[str, Any]]] = None
) -> DifficultyProfile:
    """
    Look up a difficulty profile.

    Args:
        name: Difficulty name (easy, medium, hard); unknown names fall back
            to medium
        overrides: Optional mapping of difficulty name to profile fields

    Returns:
        DifficultyProfile with overrides applied
    """
    key = resolve_difficulty(name)
    profile = DIFFICULTY_PROFILES[key]
    if overrides and overrides.get(key):
        known = {f.name for f in fields(DifficultyProfile)} - {"name"}
        changes = {k: v for k, v in overrides[key].items() if k in known}
        profile = replace(profile, **changes)
    return profile


@dataclass
class GenerationConfig:
    """Configuration for puzzle generation."""
    max_attempts: int = 100
    validation_level: str = VALIDATION_STRICT
    solver_max_iterations: int = 200
    subset_limit: int = DEFAULT_SIZE      # whole lines
    uniqueness_max_nodes: int = 50000


@dataclass
class OutputConfig:
    """Configuration for output."""
    directory: str = "./output"
    formats: List[str] = field(default_factory=lambda: ["text"])
    log_level: str = "INFO"
    log_file_prefix: str = "puzzle_generator"
    enable_console_logging: bool = True


@dataclass
class PuzzleConfig:
    """Complete configuration for puzzle generation."""
    size: int = DEFAULT_SIZE
    difficulty: str = DEFAULT_DIFFICULTY
    count: int = 1
    seed: Optional[int] = None

    # Sub-configurations
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    # difficulty name -> DifficultyProfile field overrides
    profiles: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    # Settings given on the command line, dotted for sub-configurations
    explicit: Set[str] = field(default_factory=set, repr=False, compare=False)

    def __post_init__(self):
        """Convert dicts to dataclass instances if needed."""
        if isinstance(self.generation, dict):
            self.generation = GenerationConfig(**self.generation)
        if isinstance(self.output, dict):
            self.output = OutputConfig(**self.output)

    def profile(self) -> DifficultyProfile:
        """Difficulty profile for this configuration."""
        return get_profile(self.difficulty, self.profiles)

    @classmethod
    def from_yaml(cls, path: str) -> 'PuzzleConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            PuzzleConfig instance

        Raises:
            ConfigValidationError: If file doesn't exist or is invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigValidationError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration file must contain a YAML mapping, got {type(data)}"
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'PuzzleConfig':
        """Create PuzzleConfig from dictionary."""
        # Handle nested 'puzzle' key
        puzzle_data = data.get('puzzle', {}) or {}

        config = cls(
            size=puzzle_data.get('size', DEFAULT_SIZE),
            difficulty=puzzle_data.get('difficulty', DEFAULT_DIFFICULTY),
            count=puzzle_data.get('count', 1),
            seed=puzzle_data.get('seed'),
        )

        if 'generation' in data:
            gen_data = data['generation'] or {}
            defaults = config.generation
            config.generation = GenerationConfig(
                max_attempts=gen_data.get('max_attempts', defaults.max_attempts),
                validation_level=gen_data.get(
                    'validation_level', defaults.validation_level
                ),
                solver_max_iterations=gen_data.get(
                    'solver_max_iterations', defaults.solver_max_iterations
                ),
                subset_limit=gen_data.get('subset_limit', defaults.subset_limit),
                uniqueness_max_nodes=gen_data.get(
                    'uniqueness_max_nodes', defaults.uniqueness_max_nodes
                ),
            )

        if 'output' in data:
            out_data = data['output'] or {}
            defaults = config.output
            config.output = OutputConfig(
                directory=out_data.get('directory', defaults.directory),
                formats=out_data.get('formats', defaults.formats),
                log_level=out_data.get('log_level', defaults.log_level),
                log_file_prefix=out_data.get(
                    'log_file_prefix', defaults.log_file_prefix
                ),
                enable_console_logging=out_data.get(
                    'enable_console_logging', defaults.enable_console_logging
                ),
            )

        if 'profiles' in data:
            profiles = data['profiles'] or {}
            if not isinstance(profiles, dict):
                raise ConfigValidationError(
                    "'profiles' must map difficulty names to settings"
                )
            config.profiles = {
                str(name).lower(): dict(values or {})
                for name, values in profiles.items()
            }

        return config

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'PuzzleConfig':
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            PuzzleConfig instance
        """
        config = cls()

        # Map CLI arguments to config
        if getattr(args, 'size', None):
            config.size = args.size
            config.explicit.add('size')
        if getattr(args, 'difficulty', None):
            config.difficulty = args.difficulty
            config.explicit.add('difficulty')
        if getattr(args, 'count', None):
            config.count = args.count
            config.explicit.add('count')
        if getattr(args, 'seed', None) is not None:
            config.seed = args.seed
            config.explicit.add('seed')
        if getattr(args, 'max_attempts', None) is not None:
            config.generation.max_attempts = args.max_attempts
            config.explicit.add('generation.max_attempts')
        if getattr(args, 'validation_level', None):
            config.generation.validation_level = args.validation_level
            config.explicit.add('generation.validation_level')
        if getattr(args, 'output', None):
            config.output.directory = args.output
            config.explicit.add('output.directory')
        if getattr(args, 'format', None):
            config.output.formats = [
                fmt.strip() for fmt in args.format.split(',') if fmt.strip()
            ]
            config.explicit.add('output.formats')
        if getattr(args, 'verbose', False):
            config.output.log_level = "DEBUG"
            config.explicit.add('output.log_level')

        return config

    @classmethod
    def merge(
        cls,
        yaml_config: 'PuzzleConfig',
        cli_config: 'PuzzleConfig'
    ) -> 'PuzzleConfig':
        """
        Merge configurations with CLI taking precedence over YAML.

        Args:
            yaml_config: Configuration loaded from YAML file
            cli_config: Configuration from command-line arguments

        Returns:
            Merged PuzzleConfig instance
        """
        # Start with YAML config as base
        merged = PuzzleConfig(
            size=yaml_config.size,
            difficulty=yaml_config.difficulty,
            count=yaml_config.count,
            seed=yaml_config.seed,
            generation=replace(yaml_config.generation),
            output=replace(yaml_config.output),
            profiles=dict(yaml_config.profiles),
        )

        # Override with CLI values given explicitly or differing from defaults
        default = cls()
        for name in CLI_SETTINGS:
            value = _get_setting(cli_config, name)
            if name in cli_config.explicit or value != _get_setting(default, name):
                _set_setting(merged, name, value)

        return merged

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.size not in VALID_SIZES:
            errors.append(
                f"Invalid size {self.size}. Must be one of: {VALID_SIZES}"
            )

        if str(self.difficulty).lower() not in VALID_DIFFICULTIES:
            errors.append(
                f"Invalid difficulty '{self.difficulty}'. "
                f"Must be one of: {VALID_DIFFICULTIES}"
            )

        if self.count < 1:
            errors.append("count must be at least 1")

        if self.generation.max_attempts < 0:
            errors.append("max_attempts must be non-negative")

        if self.generation.validation_level not in VALIDATION_LEVELS:
            errors.append(
                f"Invalid validation level '{self.generation.validation_level}'. "
                f"Must be one of: {VALIDATION_LEVELS}"
            )

        if self.generation.solver_max_iterations < 1:
            errors.append("solver_max_iterations must be positive")

        if self.generation.subset_limit < 0:
            errors.append("subset_limit must be non-negative")

        if self.generation.uniqueness_max_nodes < 1:
            errors.append("uniqueness_max_nodes must be positive")

        for fmt in self.output.formats:
            if fmt not in VALID_OUTPUT_FORMATS:
                errors.append(
                    f"Invalid output format '{fmt}'. "
                    f"Must be one of: {VALID_OUTPUT_FORMATS}"
                )

        if self.output.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level '{self.output.log_level}'")

        for name in self.profiles:
            if name not in VALID_DIFFICULTIES:
                errors.append(f"Profile override for unknown difficulty '{name}'")
                continue
            try:
                errors.extend(get_profile(name, self.profiles).validate(self.size))
            except TypeError as e:
                errors.append(f"Invalid profile override for '{name}': {e}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'puzzle': {
                'size': self.size,
                'difficulty': self.difficulty,
                'count': self.count,
                'seed': self.seed,
            },
            'generation': asdict(self.generation),
            'output': asdict(self.output),
            'profiles': dict(self.profiles),
        }


# Settings the command line can override, dotted for sub-configurations
CLI_SETTINGS = [
    'size',
    'difficulty',
    'count',
    'seed',
    'generation.max_attempts',
    'generation.validation_level',
    'output.directory',
    'output.formats',
    'output.log_level',
]


def _get_setting(config: 'PuzzleConfig', name: str) -> Any:
    section, _, attr = name.rpartition('.')
    return getattr(getattr(config, section) if section else config, attr)


def _set_setting(config: 'PuzzleConfig', name: str, value: Any):
    section, _, attr = name.rpartition('.')
    setattr(getattr(config, section) if section else config, attr, value)


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Generate sum deduction puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # A single medium puzzle printed to the console
  deduct-generator --difficulty medium

  # Reproducible batch written as YAML
  deduct-generator -d hard -n 5 --seed 42 --format text,yaml -o ./puzzles

  # Using YAML configuration, CLI arguments override it
  deduct-generator --config puzzle_config.yaml --difficulty easy
"""
    )

    # Configuration file
    parser.add_argument(
        "--config", "-c",
        metavar="PATH",
        help="YAML configuration file"
    )

    # Puzzle settings
    parser.add_argument(
        "--size", "-s",
        type=int,
        choices=VALID_SIZES,
        help=f"Grid size (default: {DEFAULT_SIZE})"
    )
    parser.add_argument(
        "--difficulty", "-d",
        choices=VALID_DIFFICULTIES,
        help=f"Difficulty level (default: {DEFAULT_DIFFICULTY})"
    )
    parser.add_argument(
        "--count", "-n",
        type=int,
        metavar="INT",
        help="Number of puzzles to generate (default: 1)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        metavar="INT",
        help="Random seed for reproducible puzzles"
    )

    # Generation settings
    parser.add_argument(
        "--max-attempts",
        type=int,
        metavar="INT",
        help="Attempts before falling back to a built-in puzzle (default: 100)"
    )
    parser.add_argument(
        "--validation-level",
        choices=VALIDATION_LEVELS,
        help="How strictly candidates are checked (default: strict)"
    )

    # Output settings
    parser.add_argument(
        "--output", "-o",
        metavar="PATH",
        help="Output directory"
    )
    parser.add_argument(
        "--format",
        metavar="FORMATS",
        help="Comma-separated output formats (text, yaml)"
    )

    # Other options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate config without generating"
    )

    return parser


def load_config(args: Optional[argparse.Namespace] = None) -> PuzzleConfig:
    """
    Load configuration from command-line and/or YAML file.

    Args:
        args: Parsed command-line arguments (if None, parses sys.argv)

    Returns:
        Fully resolved PuzzleConfig

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if args is None:
        parser = create_argument_parser()
        args = parser.parse_args()

    # Load from YAML if specified
    yaml_config = None
    if getattr(args, 'config', None):
        yaml_config = PuzzleConfig.from_yaml(args.config)

    # Load from CLI
    cli_config = PuzzleConfig.from_args(args)

    # Merge configurations
    if yaml_config:
        config = PuzzleConfig.merge(yaml_config, cli_config)
    else:
        config = cli_config

    # Validate
    errors = config.validate()
    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )

    return config
