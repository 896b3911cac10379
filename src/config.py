# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Configuration module for the word search book builder.

Handles loading configuration from YAML files and command-line arguments,
with proper merging and validation.
"""

import argparse
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from models import ConfigurationError, Difficulty, DirectionPolicy
from units import KDP_TRIM_SIZES_INCHES, DEFAULT_TRIM_SIZE, Margins

__all__ = [
    "ConfigurationError", "BookSettings", "PuzzleSettings", "OutputConfig",
    "BookConfig", "create_argument_parser", "load_config",
]


# Valid configuration values
VALID_TRIM_SIZES = list(KDP_TRIM_SIZES_INCHES)
VALID_PUZZLES_PER_PAGE = [1, 2, 4]
VALID_INTERIOR_THEMES = ["light", "dark"]
VALID_FONT_FAMILIES = ["sans", "serif", "mono", "handwritten"]
VALID_DIFFICULTIES = [d.value for d in Difficulty]
VALID_DIRECTIONS = ["horizontal", "vertical", "diagonal", "backward"]
VALID_OUTPUT_FORMATS = ["pdf", "svg", "yaml"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 30


@dataclass
class BookSettings:
    """Book-level layout settings consumed by the compositor."""
    title: str = "Word Search Puzzle Book"
    subtitle: str = ""
    author: str = ""
    trim_size: str = DEFAULT_TRIM_SIZE
    bleed: bool = False
    puzzles_per_page: int = 1
    interior_theme: str = "light"
    font_family: str = "sans"
    theme: str = ""
    include_cover_page: bool = True
    include_page_numbers: bool = True
    include_answers: bool = True
    include_theme_facts: bool = False
    theme_facts: List[str] = field(default_factory=list)
    margins: Margins = field(default_factory=Margins)
    decoration_seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.margins, dict):
            self.margins = Margins(**self.margins)

    def validate(self) -> List[str]:
        errors = []
        if self.trim_size not in VALID_TRIM_SIZES:
            errors.append(
                f"Invalid trim size '{self.trim_size}'. "
                f"Must be one of: {VALID_TRIM_SIZES}"
            )
        if self.puzzles_per_page not in VALID_PUZZLES_PER_PAGE:
            errors.append(
                f"Invalid puzzles per page {self.puzzles_per_page}. "
                f"Must be one of: {VALID_PUZZLES_PER_PAGE}"
            )
        if self.interior_theme not in VALID_INTERIOR_THEMES:
            errors.append(
                f"Invalid interior theme '{self.interior_theme}'. "
                f"Must be one of: {VALID_INTERIOR_THEMES}"
            )
        if self.font_family not in VALID_FONT_FAMILIES:
            errors.append(
                f"Invalid font family '{self.font_family}'. "
                f"Must be one of: {VALID_FONT_FAMILIES}"
            )
        for name, value in asdict(self.margins).items():
            if value < 0:
                errors.append(f"Margin '{name}' must be non-negative")
        return errors


@dataclass
class PuzzleSettings:
    """Settings for synthesizing the puzzles of one book."""
    quantity: int = 20
    grid_size: int = 15
    words_per_puzzle: int = 10
    difficulty: str = "medium"
    directions: DirectionPolicy = field(default_factory=DirectionPolicy)
    words: List[str] = field(default_factory=list)
    custom_words: str = ""
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.directions, dict):
            self.directions = DirectionPolicy(**self.directions)
        elif isinstance(self.directions, (list, tuple)):
            self.directions = DirectionPolicy.from_names(list(self.directions))

    def validate(self) -> List[str]:
        errors = []
        if self.quantity < 1:
            errors.append("Quantity must be at least 1")
        if not MIN_GRID_SIZE <= self.grid_size <= MAX_GRID_SIZE:
            errors.append(
                f"Invalid grid size {self.grid_size}. "
                f"Must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}"
            )
        if self.words_per_puzzle < 0:
            errors.append("words_per_puzzle must be non-negative")
        if self.difficulty.lower() not in VALID_DIFFICULTIES:
            errors.append(
                f"Invalid difficulty '{self.difficulty}'. "
                f"Must be one of: {VALID_DIFFICULTIES}"
            )
        if not self.directions.allowed_directions():
            errors.append("At least one direction must be enabled")
        return errors


@dataclass
class OutputConfig:
    """Configuration for output."""
    directory: str = "./output"
    base_name: str = "wordsearch"
    formats: List[str] = field(default_factory=lambda: ["pdf", "yaml"])
    workers: Optional[int] = None
    log_level: str = "INFO"
    log_file_prefix: str = "wordsearch_book"
    enable_console_logging: bool = True

    def validate(self) -> List[str]:
        errors = []
        for fmt in self.formats:
            if fmt not in VALID_OUTPUT_FORMATS:
                errors.append(
                    f"Invalid output format '{fmt}'. "
                    f"Must be one of: {VALID_OUTPUT_FORMATS}"
                )
        if self.workers is not None and self.workers < 1:
            errors.append("workers must be at least 1")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid log level '{self.log_level}'. "
                f"Must be one of: {VALID_LOG_LEVELS}"
            )
        return errors


@dataclass
class BookConfig:
    """Complete configuration for building one book."""
    book: BookSettings = field(default_factory=BookSettings)
    puzzles: PuzzleSettings = field(default_factory=PuzzleSettings)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self):
        """Convert dicts to dataclass instances if needed."""
        if isinstance(self.book, dict):
            self.book = BookSettings(**self.book)
        if isinstance(self.puzzles, dict):
            self.puzzles = PuzzleSettings(**self.puzzles)
        if isinstance(self.output, dict):
            self.output = OutputConfig(**self.output)

    @classmethod
    def from_yaml(cls, path: str) -> 'BookConfig':
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            BookConfig instance

        Raises:
            ConfigurationError: If file doesn't exist or is invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a YAML mapping, got {type(data)}"
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'BookConfig':
        """Create BookConfig from dictionary."""
        sections = {
            'book': BookSettings,
            'puzzles': PuzzleSettings,
            'output': OutputConfig,
        }
        kwargs = {}
        for key, section_cls in sections.items():
            section = data.get(key) or {}
            if not isinstance(section, dict):
                raise ConfigurationError(f"Section '{key}' must be a mapping")
            allowed = section_cls.__dataclass_fields__
            unknown = set(section) - set(allowed)
            if unknown:
                raise ConfigurationError(
                    f"Unknown key(s) in '{key}': {sorted(unknown)}"
                )
            try:
                kwargs[key] = section_cls(**section)
            except TypeError as e:
                raise ConfigurationError(f"Invalid '{key}' section: {e}")
        return cls(**kwargs)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'BookConfig':
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            BookConfig instance
        """
        config = cls()
        book, puzzles, output = config.book, config.puzzles, config.output

        # Map CLI arguments to config
        if getattr(args, 'title', None):
            book.title = args.title
        if getattr(args, 'subtitle', None):
            book.subtitle = args.subtitle
        if getattr(args, 'author', None):
            book.author = args.author
        if getattr(args, 'trim_size', None):
            book.trim_size = args.trim_size
        if getattr(args, 'bleed', False):
            book.bleed = True
        if getattr(args, 'puzzles_per_page', None):
            book.puzzles_per_page = args.puzzles_per_page
        if getattr(args, 'interior_theme', None):
            book.interior_theme = args.interior_theme
        if getattr(args, 'font_family', None):
            book.font_family = args.font_family
        if getattr(args, 'theme', None):
            book.theme = args.theme
        if getattr(args, 'no_cover', False):
            book.include_cover_page = False
        if getattr(args, 'no_page_numbers', False):
            book.include_page_numbers = False
        if getattr(args, 'no_answers', False):
            book.include_answers = False

        if getattr(args, 'quantity', None):
            puzzles.quantity = args.quantity
        if getattr(args, 'grid_size', None):
            puzzles.grid_size = args.grid_size
        if getattr(args, 'words_per_puzzle', None):
            puzzles.words_per_puzzle = args.words_per_puzzle
        if getattr(args, 'difficulty', None):
            puzzles.difficulty = args.difficulty
        if getattr(args, 'directions', None):
            puzzles.directions = DirectionPolicy.from_names(
                args.directions.split(',')
            )
        if getattr(args, 'words', None):
            puzzles.custom_words = args.words
        if getattr(args, 'words_file', None):
            puzzles.words = _read_words_file(args.words_file)
        if getattr(args, 'seed', None) is not None:
            puzzles.seed = args.seed

        if getattr(args, 'output', None):
            output.directory = args.output
        if getattr(args, 'base_name', None):
            output.base_name = args.base_name
        if getattr(args, 'format', None):
            output.formats = [f.strip() for f in args.format.split(',')]
        if getattr(args, 'workers', None):
            output.workers = args.workers
        if getattr(args, 'verbose', False):
            output.log_level = "DEBUG"

        return config

    @classmethod
    def merge(
        cls,
        yaml_config: 'BookConfig',
        cli_config: 'BookConfig'
    ) -> 'BookConfig':
        """
        Merge configurations with CLI taking precedence over YAML.

        A CLI value overrides the YAML value only when it differs from the
        built-in default.

        Args:
            yaml_config: Configuration loaded from YAML file
            cli_config: Configuration from command-line arguments

        Returns:
            Merged BookConfig instance
        """
        default = cls()
        merged = {}
        for section in ('book', 'puzzles', 'output'):
            values = dict(vars(getattr(yaml_config, section)))
            cli_values = vars(getattr(cli_config, section))
            default_values = vars(getattr(default, section))
            for name, value in cli_values.items():
                if value != default_values[name]:
                    values[name] = value
            merged[section] = values
        return cls(**merged)

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        return (self.book.validate() + self.puzzles.validate() +
                self.output.validate())

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'book': asdict(self.book),
            'puzzles': asdict(self.puzzles),
            'output': asdict(self.output),
        }


def _read_words_file(path: str) -> List[str]:
    """Read one word per line, ignoring blanks and '#' comments."""
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Word list file not found: {file_path}")
    words = []
    for line in file_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if line and not line.startswith('#'):
            words.append(line)
    return words


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Generate print-ready word search puzzle books",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using command-line arguments
  wordsearch-book --title "Animals" --words "cat,dog,horse" --quantity 10

  # Using YAML configuration
  wordsearch-book --config book.yaml

  # CLI arguments override YAML
  wordsearch-book --config book.yaml --difficulty hard --bleed
"""
    )

    # Configuration file
    parser.add_argument(
        "--config", "-c",
        metavar="PATH",
        help="YAML configuration file"
    )

    # Book settings
    parser.add_argument("--title", "-t", metavar="TEXT", help="Book title")
    parser.add_argument("--subtitle", metavar="TEXT", help="Book subtitle")
    parser.add_argument("--author", "-a", metavar="TEXT", help="Author name")
    parser.add_argument(
        "--trim-size",
        choices=VALID_TRIM_SIZES,
        help="KDP trim size (default: 6x9)"
    )
    parser.add_argument(
        "--bleed",
        action="store_true",
        help="Add 0.125in bleed on every edge"
    )
    parser.add_argument(
        "--puzzles-per-page",
        type=int,
        choices=VALID_PUZZLES_PER_PAGE,
        help="Puzzles per page (default: 1)"
    )
    parser.add_argument(
        "--interior-theme",
        choices=VALID_INTERIOR_THEMES,
        help="Interior color theme"
    )
    parser.add_argument(
        "--font-family",
        choices=VALID_FONT_FAMILIES,
        help="Font family"
    )
    parser.add_argument(
        "--theme",
        metavar="TEXT",
        help="Theme used in puzzle titles"
    )
    parser.add_argument("--no-cover", action="store_true", help="Omit cover page")
    parser.add_argument(
        "--no-page-numbers", action="store_true", help="Omit page numbers"
    )
    parser.add_argument("--no-answers", action="store_true", help="Omit answer key")

    # Puzzle settings
    parser.add_argument(
        "--words", "-w",
        metavar="LIST",
        help="Comma-separated word list"
    )
    parser.add_argument(
        "--words-file",
        metavar="PATH",
        help="File with one word per line"
    )
    parser.add_argument(
        "--quantity", "-n",
        type=int,
        metavar="INT",
        help="Number of puzzles (default: 20)"
    )
    parser.add_argument(
        "--grid-size", "-s",
        type=int,
        metavar="INT",
        help="Grid width/height (default: 15)"
    )
    parser.add_argument(
        "--words-per-puzzle",
        type=int,
        metavar="INT",
        help="Maximum words per puzzle (default: 10)"
    )
    parser.add_argument(
        "--difficulty", "-d",
        choices=VALID_DIFFICULTIES,
        help="Overlap difficulty"
    )
    parser.add_argument(
        "--directions",
        metavar="LIST",
        help=f"Comma-separated subset of {VALID_DIRECTIONS}"
    )
    parser.add_argument(
        "--seed",
        type=int,
        metavar="INT",
        help="Random seed for reproducible books"
    )

    # Output settings
    parser.add_argument("--output", "-o", metavar="PATH", help="Output directory")
    parser.add_argument("--base-name", metavar="TEXT", help="Output file base name")
    parser.add_argument(
        "--format",
        metavar="FORMATS",
        help=f"Comma-separated output formats {VALID_OUTPUT_FORMATS}"
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="INT",
        help="Worker processes for puzzle synthesis (default: CPU count)"
    )

    parser.add_argument(
        "--puzzles-file",
        metavar="PATH",
        help="Render a saved YAML puzzle set instead of synthesizing"
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


def load_config(args: Optional[argparse.Namespace] = None) -> BookConfig:
    """
    Load configuration from command-line and/or YAML file.

    Args:
        args: Parsed command-line arguments (if None, parses sys.argv)

    Returns:
        Fully resolved BookConfig

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if args is None:
        parser = create_argument_parser()
        args = parser.parse_args()

    # Load from YAML if specified
    yaml_config = None
    if getattr(args, 'config', None):
        yaml_config = BookConfig.from_yaml(args.config)

    # Load from CLI
    cli_config = BookConfig.from_args(args)

    # Merge configurations
    if yaml_config:
        config = BookConfig.merge(yaml_config, cli_config)
    else:
        config = cli_config

    # Validate
    errors = config.validate()
    if errors:
        raise ConfigurationError(
            "Configuration validation failed:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )

    return config
