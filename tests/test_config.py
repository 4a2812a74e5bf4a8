# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for config module."""

import os
import sys
import tempfile
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import (
    PuzzleConfig, GenerationConfig, OutputConfig, ConfigValidationError,
    DIFFICULTY_PROFILES, VALID_DIFFICULTIES, VALIDATION_STRICT,
    create_argument_parser, get_profile, load_config, resolve_difficulty
)


class TestPuzzleConfig(unittest.TestCase):
    """Tests for PuzzleConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = PuzzleConfig()

        self.assertEqual(config.size, 7)
        self.assertEqual(config.difficulty, "medium")
        self.assertEqual(config.count, 1)
        self.assertIsNone(config.seed)
        self.assertEqual(config.profiles, {})

    def test_nested_config_from_dict(self):
        """Test creating config with nested dict values."""
        config = PuzzleConfig(
            generation={'max_attempts': 10},
            output={'directory': './test_output'}
        )

        self.assertEqual(config.generation.max_attempts, 10)
        self.assertEqual(config.output.directory, './test_output')

    def test_validation_valid_config(self):
        """Test validation of valid configuration."""
        config = PuzzleConfig(difficulty="hard", count=3, seed=1)

        self.assertEqual(config.validate(), [])

    def test_validation_invalid_size(self):
        """Test validation catches invalid size."""
        config = PuzzleConfig(size=9)

        errors = config.validate()
        self.assertTrue(any("size" in e.lower() for e in errors))

    def test_validation_invalid_difficulty(self):
        """Test validation catches invalid difficulty."""
        config = PuzzleConfig(difficulty="impossible")

        errors = config.validate()
        self.assertTrue(any("difficulty" in e.lower() for e in errors))

    def test_validation_invalid_level_and_format(self):
        """Test validation catches unknown validation level and format."""
        config = PuzzleConfig(
            generation={'validation_level': 'paranoid'},
            output={'formats': ['svg']}
        )

        errors = config.validate()
        self.assertTrue(any("validation level" in e.lower() for e in errors))
        self.assertTrue(any("format" in e.lower() for e in errors))

    def test_validation_bad_profile_override(self):
        """Test validation reports a profile override that breaks its bounds."""
        config = PuzzleConfig(profiles={'easy': {'min_deletions': 20, 'max_deletions': 10}})

        errors = config.validate()
        self.assertTrue(any("min_deletions" in e for e in errors))

    def test_profile_applies_overrides(self):
        """Test profile() merges per-difficulty overrides."""
        config = PuzzleConfig(difficulty="hard", profiles={'hard': {'min_steps': 12}})

        profile = config.profile()
        self.assertEqual(profile.min_steps, 12)
        self.assertEqual(profile.max_value, 12)

    def test_to_dict(self):
        """Test conversion to dictionary."""
        config = PuzzleConfig(difficulty="easy", seed=5)

        result = config.to_dict()

        self.assertIn('puzzle', result)
        self.assertEqual(result['puzzle']['difficulty'], "easy")
        self.assertEqual(result['puzzle']['seed'], 5)
        self.assertEqual(result['generation']['validation_level'], VALIDATION_STRICT)


class TestGenerationConfig(unittest.TestCase):
    """Tests for GenerationConfig class."""

    def test_default_values(self):
        """Test default generation config values."""
        config = GenerationConfig()

        self.assertEqual(config.max_attempts, 100)
        self.assertEqual(config.validation_level, "strict")
        self.assertEqual(config.solver_max_iterations, 200)
        self.assertEqual(config.subset_limit, 7)
        self.assertEqual(config.uniqueness_max_nodes, 50000)


class TestOutputConfig(unittest.TestCase):
    """Tests for OutputConfig class."""

    def test_default_values(self):
        """Test default output config values."""
        config = OutputConfig()

        self.assertEqual(config.directory, "./output")
        self.assertEqual(config.formats, ["text"])
        self.assertEqual(config.log_level, "INFO")


class TestDifficultyProfiles(unittest.TestCase):
    """Tests for built-in difficulty profiles."""

    def test_builtin_profiles_are_valid(self):
        """Test every built-in profile passes its own validation."""
        for name in VALID_DIFFICULTIES:
            self.assertEqual(DIFFICULTY_PROFILES[name].validate(7), [], name)

    def test_value_ranges(self):
        """Test value ranges per difficulty."""
        self.assertEqual(get_profile("easy").values(), list(range(1, 10)))
        self.assertEqual(get_profile("medium").values(), list(range(1, 10)))
        self.assertEqual(get_profile("hard").values(), list(range(2, 13)))

    def test_unknown_difficulty_falls_back_to_medium(self):
        """Test unknown difficulty names resolve to medium."""
        with self.assertLogs('config', level='WARNING'):
            self.assertEqual(resolve_difficulty("nightmare"), "medium")
        self.assertEqual(get_profile("Easy").name, "easy")

    def test_keep_floor(self):
        """Test the kept-cell floor never drops below two."""
        profile = get_profile("medium", {'medium': {'min_keep': 1}})
        self.assertEqual(profile.keep_floor, 2)


class TestYAMLLoading(unittest.TestCase):
    """Tests for YAML configuration loading."""

    def setUp(self):
        """Create a temporary YAML file for testing."""
        self.temp_file = tempfile.NamedTemporaryFile(
            mode='w', suffix='.yaml', delete=False
        )
        self.temp_file.write('''
puzzle:
  size: 7
  difficulty: hard
  count: 3
  seed: 42

generation:
  max_attempts: 30
  validation_level: logical

output:
  directory: "./test_output"
  formats: [text, yaml]

profiles:
  hard:
    min_steps: 10
''')
        self.temp_file.close()

    def tearDown(self):
        """Clean up temporary file."""
        os.unlink(self.temp_file.name)

    def test_load_from_yaml(self):
        """Test loading configuration from YAML file."""
        config = PuzzleConfig.from_yaml(self.temp_file.name)

        self.assertEqual(config.difficulty, "hard")
        self.assertEqual(config.count, 3)
        self.assertEqual(config.seed, 42)
        self.assertEqual(config.generation.max_attempts, 30)
        self.assertEqual(config.generation.validation_level, "logical")
        self.assertEqual(config.output.directory, "./test_output")
        self.assertEqual(config.output.formats, ["text", "yaml"])
        self.assertEqual(config.profile().min_steps, 10)

    def test_load_nonexistent_file(self):
        """Test error when loading non-existent file."""
        with self.assertRaises(ConfigValidationError):
            PuzzleConfig.from_yaml("/nonexistent/path.yaml")

    def test_load_non_mapping(self):
        """Test error when the YAML file is not a mapping."""
        with open(self.temp_file.name, 'w') as f:
            f.write("- just\n- a list\n")

        with self.assertRaises(ConfigValidationError):
            PuzzleConfig.from_yaml(self.temp_file.name)

    def test_cli_overrides_yaml(self):
        """Test load_config lets CLI arguments override the file."""
        parser = create_argument_parser()
        args = parser.parse_args([
            '--config', self.temp_file.name, '--difficulty', 'easy', '--seed', '7'
        ])

        config = load_config(args)

        self.assertEqual(config.difficulty, "easy")
        self.assertEqual(config.seed, 7)
        self.assertEqual(config.count, 3)
        self.assertEqual(config.generation.max_attempts, 30)


class TestConfigMerge(unittest.TestCase):
    """Tests for configuration merging."""

    def test_merge_prefers_cli(self):
        """Test that CLI config takes precedence over YAML."""
        yaml_config = PuzzleConfig(difficulty="hard")
        cli_config = PuzzleConfig(difficulty="easy")

        merged = PuzzleConfig.merge(yaml_config, cli_config)

        self.assertEqual(merged.difficulty, "easy")

    def test_merge_keeps_yaml_when_cli_default(self):
        """Test that YAML values are kept when CLI uses defaults."""
        yaml_config = PuzzleConfig(
            difficulty="hard",
            count=4,
            generation={'max_attempts': 12}
        )
        cli_config = PuzzleConfig()  # All defaults

        merged = PuzzleConfig.merge(yaml_config, cli_config)

        self.assertEqual(merged.difficulty, "hard")
        self.assertEqual(merged.count, 4)
        self.assertEqual(merged.generation.max_attempts, 12)

    def test_merge_explicit_cli_default_overrides_yaml(self):
        """Test CLI values equal to the built-in defaults still override YAML."""
        yaml_config = PuzzleConfig(
            difficulty="hard",
            generation={'max_attempts': 12, 'validation_level': 'logical'}
        )
        args = create_argument_parser().parse_args([
            '--validation-level', 'strict', '--max-attempts', '100', '-d', 'medium'
        ])
        cli_config = PuzzleConfig.from_args(args)

        merged = PuzzleConfig.merge(yaml_config, cli_config)

        self.assertIn('generation.validation_level', cli_config.explicit)
        self.assertEqual(merged.generation.validation_level, "strict")
        self.assertEqual(merged.generation.max_attempts, 100)
        self.assertEqual(merged.difficulty, "medium")

    def test_from_args_verbose(self):
        """Test --verbose switches the log level to DEBUG."""
        args = create_argument_parser().parse_args(['-v', '--format', 'yaml'])

        config = PuzzleConfig.from_args(args)

        self.assertEqual(config.output.log_level, "DEBUG")
        self.assertEqual(config.output.formats, ["yaml"])

    def test_load_config_rejects_invalid(self):
        """Test load_config raises on invalid values."""
        args = create_argument_parser().parse_args(['--count', '0', '--max-attempts', '-1'])

        with self.assertRaises(ConfigValidationError):
            load_config(args)


if __name__ == '__main__':
    unittest.main()
