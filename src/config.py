# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Configuration module for the daily word grid service.

Handles loading configuration from YAML files and command-line arguments,
with proper merging and validation.
"""

import os
import json
import argparse
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any

import yaml


# Default model for AI operations
DEFAULT_MODEL = "claude-sonnet-4-20250514"

# Valid configuration values
VALID_LANGUAGES = ["finnish", "english"]
VALID_PLACEMENT_STRATEGIES = ["random", "serpentine"]
VALID_STORAGE_BACKENDS = ["memory", "yaml"]
VALID_MISSING_DICTIONARY_POLICIES = ["accept", "reject"]
VALID_COMPLETION_POLICIES = ["exact_set", "letter_sum"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
MIN_GRID_DIMENSION = 2


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class PuzzleSettings:
    """Shape of generated puzzles."""
    rows: int = 6
    columns: int = 5
    language: str = "finnish"
    min_valid_word_length: int = 3


@dataclass
class GenerationConfig:
    """Configuration for puzzle generation."""
    max_ai_callbacks: int = 10
    limits: Dict[str, int] = field(default_factory=lambda: {
        "themes": 3,
        "theme_words": 5,
    })
    placement_strategy: str = "random"
    max_placement_attempts: Optional[int] = 20000
    timeout_seconds: float = 120.0
    fallback_to_builtin_themes: bool = True


@dataclass
class AIConfig:
    """Configuration for AI integration."""
    model: Optional[str] = None
    prompt_config: str = "./prompts.yaml"
    api_key: Optional[str] = None
    api_key_env: str = "ANTHROPIC_API_KEY"
    model_env: str = "ANTHROPIC_MODEL"


@dataclass
class StorageConfig:
    """Configuration for game storage."""
    backend: str = "yaml"
    directory: str = "./games"
    game_cache_ttl: int = 24 * 60 * 60


@dataclass
class DictionaryConfig:
    """Configuration for validation dictionaries."""
    paths: Dict[str, str] = field(default_factory=lambda: {
        "fi-kotus-2024": "data/fi-dictionary-kotus-2024.txt",
    })
    language_dictionaries: Dict[str, Optional[str]] = field(default_factory=lambda: {
        "finnish": "fi-kotus-2024",
        "english": None,
    })
    cache_ttl: int = 7 * 24 * 60 * 60


@dataclass
class ValidationConfig:
    """Configuration for word and completion checks."""
    missing_dictionary_policy: str = "reject"
    completion_missing_dictionary_policy: str = "reject"
    completion_policy: str = "letter_sum"
    completion_reward: Optional[str] = None


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    directory: str = "./logs"
    log_level: str = "INFO"
    log_file_prefix: str = "sanaharava"
    enable_console: bool = True


@dataclass
class ServiceConfig:
    """Complete configuration for the service."""
    puzzle: PuzzleSettings = field(default_factory=PuzzleSettings)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    dictionaries: DictionaryConfig = field(default_factory=DictionaryConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Section name -> dataclass type
    SECTIONS = {
        'puzzle': PuzzleSettings,
        'generation': GenerationConfig,
        'ai': AIConfig,
        'storage': StorageConfig,
        'dictionaries': DictionaryConfig,
        'validation': ValidationConfig,
        'logging': LoggingConfig,
    }

    def __post_init__(self):
        """Convert dicts to dataclass instances if needed."""
        for name, section_type in self.SECTIONS.items():
            value = getattr(self, name)
            if isinstance(value, dict):
                setattr(self, name, section_type(**value))

    @classmethod
    def from_yaml(cls, path: str) -> 'ServiceConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            ServiceConfig instance

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

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration file must contain a YAML mapping, got {type(data)}"
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'ServiceConfig':
        """Create ServiceConfig from dictionary."""
        config = cls()

        for name, section_type in cls.SECTIONS.items():
            section_data = data.get(name)
            if section_data is None:
                continue
            if not isinstance(section_data, dict):
                raise ConfigValidationError(f"Section '{name}' must be a mapping")

            known = set(section_type.__dataclass_fields__)
            unknown = set(section_data) - known
            if unknown:
                raise ConfigValidationError(
                    f"Unknown keys in section '{name}': {sorted(unknown)}"
                )

            defaults = asdict(getattr(config, name))
            defaults.update(section_data)
            setattr(config, name, section_type(**defaults))

        return config

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'ServiceConfig':
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            ServiceConfig instance
        """
        config = cls()

        # Map CLI arguments to config
        if getattr(args, 'rows', None):
            config.puzzle.rows = args.rows
        if getattr(args, 'columns', None):
            config.puzzle.columns = args.columns
        if getattr(args, 'language', None):
            config.puzzle.language = args.language
        if getattr(args, 'strategy', None):
            config.generation.placement_strategy = args.strategy
        if getattr(args, 'storage_dir', None):
            config.storage.directory = args.storage_dir
        if getattr(args, 'api_key', None):
            config.ai.api_key = args.api_key
        if getattr(args, 'model', None):
            config.ai.model = args.model
        if getattr(args, 'verbose', False):
            config.logging.log_level = "DEBUG"

        return config

    @classmethod
    def merge(
        cls,
        yaml_config: 'ServiceConfig',
        cli_config: 'ServiceConfig'
    ) -> 'ServiceConfig':
        """
        Merge configurations with CLI taking precedence over YAML.

        Args:
            yaml_config: Configuration loaded from YAML file
            cli_config: Configuration from command-line arguments

        Returns:
            Merged ServiceConfig instance
        """
        merged = cls._from_dict(yaml_config.to_dict())
        default = cls()

        # Override with CLI values (non-default values)
        if cli_config.puzzle.rows != default.puzzle.rows:
            merged.puzzle.rows = cli_config.puzzle.rows
        if cli_config.puzzle.columns != default.puzzle.columns:
            merged.puzzle.columns = cli_config.puzzle.columns
        if cli_config.puzzle.language != default.puzzle.language:
            merged.puzzle.language = cli_config.puzzle.language
        if (cli_config.generation.placement_strategy !=
                default.generation.placement_strategy):
            merged.generation.placement_strategy = (
                cli_config.generation.placement_strategy
            )
        if cli_config.storage.directory != default.storage.directory:
            merged.storage.directory = cli_config.storage.directory
        if cli_config.ai.api_key:
            merged.ai.api_key = cli_config.ai.api_key
        if cli_config.ai.model:
            merged.ai.model = cli_config.ai.model
        if cli_config.logging.log_level != default.logging.log_level:
            merged.logging.log_level = cli_config.logging.log_level

        return merged

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        # Validate grid shape
        for name in ('rows', 'columns'):
            value = getattr(self.puzzle, name)
            if not isinstance(value, int) or value < MIN_GRID_DIMENSION:
                errors.append(
                    f"Invalid {name} {value!r}. Must be an integer >= {MIN_GRID_DIMENSION}"
                )

        if self.puzzle.language not in VALID_LANGUAGES:
            errors.append(
                f"Invalid language '{self.puzzle.language}'. "
                f"Must be one of: {VALID_LANGUAGES}"
            )

        if self.puzzle.min_valid_word_length < 1:
            errors.append("min_valid_word_length must be positive")

        # Validate generation
        if self.generation.max_ai_callbacks < 0:
            errors.append("max_ai_callbacks must be non-negative")

        if self.generation.placement_strategy not in VALID_PLACEMENT_STRATEGIES:
            errors.append(
                f"Invalid placement strategy '{self.generation.placement_strategy}'. "
                f"Must be one of: {VALID_PLACEMENT_STRATEGIES}"
            )

        attempts = self.generation.max_placement_attempts
        if attempts is not None and attempts < 1:
            errors.append("max_placement_attempts must be positive or null")

        if self.generation.timeout_seconds <= 0:
            errors.append("timeout_seconds must be positive")

        # Validate storage
        if self.storage.backend not in VALID_STORAGE_BACKENDS:
            errors.append(
                f"Invalid storage backend '{self.storage.backend}'. "
                f"Must be one of: {VALID_STORAGE_BACKENDS}"
            )

        # Validate dictionaries
        for language, name in self.dictionaries.language_dictionaries.items():
            if name is not None and name not in self.dictionaries.paths:
                errors.append(
                    f"Dictionary '{name}' for {language} has no configured path"
                )

        # Validate policies
        for name in ('missing_dictionary_policy', 'completion_missing_dictionary_policy'):
            value = getattr(self.validation, name)
            if value not in VALID_MISSING_DICTIONARY_POLICIES:
                errors.append(
                    f"Invalid {name} '{value}'. "
                    f"Must be one of: {VALID_MISSING_DICTIONARY_POLICIES}"
                )

        if self.validation.completion_policy not in VALID_COMPLETION_POLICIES:
            errors.append(
                f"Invalid completion policy '{self.validation.completion_policy}'. "
                f"Must be one of: {VALID_COMPLETION_POLICIES}"
            )

        if self.logging.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid log level '{self.logging.log_level}'. "
                f"Must be one of: {VALID_LOG_LEVELS}"
            )

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {name: asdict(getattr(self, name)) for name in self.SECTIONS}

    def dictionary_for_language(self, language: str) -> Optional[str]:
        """Dictionary name used for games in a language."""
        return self.dictionaries.language_dictionaries.get(language)


def discover_api_key(config: ServiceConfig) -> Optional[str]:
    """
    Discover API key from multiple sources in priority order.

    Priority order:
    1. CLI argument (already in config if provided)
    2. Config file api_key field
    3. Environment variable (ANTHROPIC_API_KEY or custom)
    4. Anthropic config file (~/.anthropic/api_key)
    5. Anthropic config JSON (~/.config/anthropic/config.json)

    Args:
        config: ServiceConfig instance

    Returns:
        API key string or None if not found
    """
    # Priority 1-2: Already in config
    if config.ai.api_key and config.ai.api_key != "null":
        return config.ai.api_key

    # Priority 3: Environment variable
    env_var = config.ai.api_key_env or "ANTHROPIC_API_KEY"
    if os.environ.get(env_var):
        return os.environ[env_var]

    # Priority 4: Anthropic config file (plain text)
    anthropic_key_file = Path.home() / ".anthropic" / "api_key"
    if anthropic_key_file.exists():
        key = anthropic_key_file.read_text().strip()
        if key:
            return key

    # Priority 5: Anthropic config JSON
    anthropic_config = Path.home() / ".config" / "anthropic" / "config.json"
    if anthropic_config.exists():
        try:
            cfg = json.loads(anthropic_config.read_text())
            if cfg.get("api_key"):
                return cfg["api_key"]
        except json.JSONDecodeError:
            pass

    return None


def get_model(config: ServiceConfig) -> str:
    """
    Get AI model from config with fallback chain.

    Priority order:
    1. Config ai.model field (from CLI or config file)
    2. Environment variable (ANTHROPIC_MODEL or custom)
    3. Default model

    Args:
        config: ServiceConfig instance

    Returns:
        Model name string
    """
    if config.ai.model and config.ai.model != "null":
        return config.ai.model

    env_var = config.ai.model_env or "ANTHROPIC_MODEL"
    if os.environ.get(env_var):
        return os.environ[env_var]

    return DEFAULT_MODEL


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Generate and check daily word grid puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate today's puzzle
  sanaharava generate

  # Generate an English puzzle for a given date
  sanaharava generate --date 2024-11-01 --language english

  # Check a word and a set of found words
  sanaharava check-word KETTU --date 2024-11-01
  sanaharava check-complete KETTU ORAVA ... --date 2024-11-01
"""
    )

    parser.add_argument(
        "--config", "-c",
        metavar="PATH",
        help="YAML configuration file"
    )
    parser.add_argument(
        "--storage-dir",
        metavar="PATH",
        help="Directory for stored games"
    )
    parser.add_argument(
        "--api-key",
        metavar="KEY",
        help="Anthropic API key"
    )
    parser.add_argument(
        "--model",
        metavar="MODEL",
        help="AI model to use"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a new puzzle")
    generate.add_argument("--date", metavar="YYYY-MM-DD", help="Puzzle id (default: today)")
    generate.add_argument("--language", "-l", choices=VALID_LANGUAGES, help="Puzzle language")
    generate.add_argument("--rows", type=int, metavar="INT", help="Grid rows (default: 6)")
    generate.add_argument("--columns", type=int, metavar="INT", help="Grid columns (default: 5)")
    generate.add_argument(
        "--strategy",
        choices=VALID_PLACEMENT_STRATEGIES,
        help="Letter placement strategy"
    )

    show = subparsers.add_parser("show", help="Print a stored puzzle")
    show.add_argument("--date", metavar="YYYY-MM-DD", help="Puzzle id (default: latest)")
    show.add_argument("--solution", action="store_true", help="Also print solution words")

    check_word = subparsers.add_parser("check-word", help="Check a submitted word")
    check_word.add_argument("word", help="Word to check")
    check_word.add_argument("--date", metavar="YYYY-MM-DD", help="Puzzle id (default: latest)")

    check_complete = subparsers.add_parser(
        "check-complete", help="Check whether found words complete a puzzle"
    )
    check_complete.add_argument("words", nargs="+", help="Found words")
    check_complete.add_argument("--date", metavar="YYYY-MM-DD", help="Puzzle id (default: latest)")

    subparsers.add_parser("dates", help="List stored puzzle dates, newest first")

    return parser


def load_config(args: Optional[argparse.Namespace] = None) -> ServiceConfig:
    """
    Load configuration from command-line and/or YAML file.

    Args:
        args: Parsed command-line arguments (if None, parses sys.argv)

    Returns:
        Fully resolved ServiceConfig

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if args is None:
        parser = create_argument_parser()
        args = parser.parse_args()

    yaml_config = None
    if getattr(args, 'config', None):
        yaml_config = ServiceConfig.from_yaml(args.config)

    cli_config = ServiceConfig.from_args(args)

    if yaml_config:
        config = ServiceConfig.merge(yaml_config, cli_config)
    else:
        config = cli_config

    errors = config.validate()
    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )

    return config
