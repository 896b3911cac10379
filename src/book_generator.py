#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word Search Book Generator

Builds print-ready word search puzzle books:
1. Word list from configured words plus comma-separated custom words
2. Puzzle synthesis fanned out over a process pool
3. Validation of every synthesized grid
4. Book composition (cover, contents, puzzles, answer key)
5. PDF / SVG rendering and YAML puzzle-set export

Usage:
    # With YAML configuration:
    python book_generator.py --config book.yaml

    # With command-line arguments:
    python book_generator.py --title "Animals" --words "cat,dog,horse"

    # Re-render a saved puzzle set without synthesis:
    python book_generator.py --config book.yaml --puzzles-file output/wordsearch_puzzles.yaml
"""

import logging
import os
import random
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from typing import Dict, Iterable, List, Optional

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models import Difficulty, Puzzle
from word_search_generator import synthesize_seeded
from validator import validate_puzzle
from book_compositor import BookLayoutCompositor
from pdf_renderer import render_pdf
from svg_renderer import SVGRenderer
from yaml_exporter import YAMLExporter
from config import (
    BookConfig, PuzzleSettings, ConfigurationError,
    create_argument_parser, load_config
)
from logging_config import init_worker_logging, setup_logging, worker_log_listener

logger = logging.getLogger(__name__)

SEED_BITS = 32


def build_word_list(words: Iterable[str], custom_words: str = "") -> List[str]:
    """
    Merge the configured word list with comma-separated custom words.

    Custom entries are trimmed and empty entries dropped. Normalization
    (case, length, duplicates) happens during synthesis.
    """
    all_words = [w for w in words if w and str(w).strip()]
    if custom_words:
        all_words.extend(
            w.strip() for w in custom_words.split(',') if w.strip()
        )
    return all_words


def derive_seeds(quantity: int, seed: Optional[int] = None) -> List[int]:
    """One independent integer seed per puzzle, from a master seed."""
    master = random.Random(seed)
    return [master.getrandbits(SEED_BITS) for _ in range(quantity)]


def check_layout(config: BookConfig):
    """
    Reject word counts that cannot be listed below the grid on the
    configured page.

    Raises:
        ConfigurationError: If words_per_puzzle exceeds the slot capacity
    """
    puzzles = config.puzzles
    capacity = BookLayoutCompositor(config.book).max_words_per_puzzle(
        puzzles.grid_size
    )
    if puzzles.words_per_puzzle > capacity:
        raise ConfigurationError(
            f"words_per_puzzle {puzzles.words_per_puzzle} exceeds the "
            f"{capacity} words that fit below a "
            f"{puzzles.grid_size}x{puzzles.grid_size} grid on "
            f"{config.book.trim_size} with {config.book.puzzles_per_page} "
            f"puzzles per page"
        )


def synthesize_puzzles(
    words: List[str],
    settings: PuzzleSettings,
    workers: Optional[int] = None
) -> List[Puzzle]:
    """
    Synthesize settings.quantity puzzles from a shared word pool.

    Each puzzle gets its own seed, so results are identical regardless
    of the worker count. Puzzles are returned in slot order.

    Args:
        words: Shared word pool
        settings: Puzzle settings (quantity, grid size, policy, seed)
        workers: Worker processes (default: CPU count); 1 runs inline

    Returns:
        List of puzzles, one per slot
    """
    quantity = settings.quantity
    difficulty = Difficulty.parse(settings.difficulty)
    seeds = derive_seeds(quantity, settings.seed)
    args = (words, settings.grid_size, settings.directions, difficulty,
            settings.words_per_puzzle)

    pool_size = min(workers or os.cpu_count() or 1, quantity)
    if pool_size <= 1:
        logger.debug(f"Synthesizing {quantity} puzzles inline")
        return [synthesize_seeded(*args, seed) for seed in seeds]

    logger.debug(f"Synthesizing {quantity} puzzles with {pool_size} workers")
    with worker_log_listener() as log_queue:
        executor = ProcessPoolExecutor(
            max_workers=pool_size,
            initializer=init_worker_logging,
            initargs=(log_queue,),
        )
        completed = False
        try:
            futures = [executor.submit(synthesize_seeded, *args, seed)
                       for seed in seeds]
            puzzles = [future.result() for future in futures]
            completed = True
        except KeyboardInterrupt:
            logger.warning("Synthesis interrupted, cancelling pending puzzles")
            raise
        finally:
            # Pending work is cancelled on every failure path
            executor.shutdown(wait=completed, cancel_futures=not completed)
    return puzzles


class WordSearchBookGenerator:
    """
    Complete word search book pipeline.

    Workflow:
    1. Build word list
    2. Synthesize puzzles (or load a saved puzzle set)
    3. Validate puzzles
    4. Compose pages
    5. Render PDF / SVG, export YAML
    """

    def __init__(self, config: BookConfig):
        """
        Initialize the book generator.

        Args:
            config: BookConfig instance with all settings
        """
        self.config = config
        self.start_time = time.time()

        # Initialize logging
        self.log_file_path = setup_logging(
            output_dir=config.output.directory,
            log_level=config.output.log_level,
            log_file_prefix=config.output.log_file_prefix,
            enable_console=config.output.enable_console_logging,
        )
        self.logger = logging.getLogger(__name__)
        self.logger.info(f"Initialized WordSearchBookGenerator: {config.book.title}")
        self.logger.info(
            f"Puzzles: {config.puzzles.quantity} x "
            f"{config.puzzles.grid_size}x{config.puzzles.grid_size}, "
            f"Difficulty: {config.puzzles.difficulty}"
        )
        self.logger.debug(f"Log file: {self.log_file_path}")

        self.word_list: List[str] = []
        self.puzzles: List[Puzzle] = []

    def generate(self, puzzles: Optional[List[Puzzle]] = None) -> Dict[str, str]:
        """
        Build the book.

        Args:
            puzzles: Previously synthesized puzzles; synthesis is skipped
                when given

        Returns:
            Dict of output name to file path
        """
        config = self.config
        self.logger.info("=" * 60)
        self.logger.info("WORD SEARCH BOOK GENERATOR")
        self.logger.info("=" * 60)
        self.logger.info(f"   Title: {config.book.title}")
        self.logger.info(f"   Trim: {config.book.trim_size}, Bleed: {config.book.bleed}")
        self.logger.info(f"   Puzzles per page: {config.book.puzzles_per_page}")

        if puzzles is None:
            check_layout(config)

            # Step 1: Word list
            self.logger.info("Step 1: Building word list...")
            self.word_list = build_word_list(
                config.puzzles.words, config.puzzles.custom_words
            )
            self.logger.info(f"   - {len(self.word_list)} words available")
            if not self.word_list:
                self.logger.warning("   - Word list is empty, grids will be pure noise")

            # Step 2: Synthesis
            self.logger.info("Step 2: Synthesizing puzzles...")
            self.puzzles = synthesize_puzzles(
                self.word_list, config.puzzles, config.output.workers
            )
        else:
            self.logger.info(f"Using {len(puzzles)} pre-built puzzles")
            self.puzzles = list(puzzles)
        self.logger.info(f"   - {len(self.puzzles)} puzzles ready")

        # Step 3: Validation
        self.logger.info("Step 3: Validating puzzles...")
        self._validate_puzzles()

        # Step 4: Composition
        self.logger.info("Step 4: Composing pages...")
        pages = BookLayoutCompositor(config.book).compose(self.puzzles)
        self.logger.info(f"   - {len(pages)} pages")

        # Step 5: Output
        self.logger.info("Step 5: Writing output...")
        output_files = self._write_outputs(pages)

        elapsed = time.time() - self.start_time
        self.logger.info("=" * 60)
        self.logger.info("GENERATION COMPLETE!")
        self.logger.info("=" * 60)
        self.logger.info("Output files:")
        for name, path in output_files.items():
            self.logger.info(f"   {name}: {path}")
        self.logger.info(f"Generation time: {elapsed:.2f} seconds")

        return output_files

    def _validate_puzzles(self):
        settings = self.config.puzzles
        for index, puzzle in enumerate(self.puzzles):
            result = validate_puzzle(
                puzzle,
                grid_size=settings.grid_size,
                difficulty=settings.difficulty,
                direction_policy=settings.directions,
            )
            if not result.valid:
                for error in result.errors:
                    self.logger.error(f"   Puzzle {index + 1}: {error}")
            if puzzle.dropped_words:
                self.logger.warning(
                    f"   Puzzle {index + 1}: placed {len(puzzle.used_words)} words, "
                    f"dropped {len(puzzle.dropped_words)} "
                    f"({', '.join(puzzle.dropped_words)})"
                )
            elif len(puzzle.used_words) < settings.words_per_puzzle:
                self.logger.warning(
                    f"   Puzzle {index + 1}: only {len(puzzle.used_words)} of "
                    f"{settings.words_per_puzzle} words available"
                )

    def _write_outputs(self, pages) -> Dict[str, str]:
        config = self.config
        output_dir = config.output.directory
        base_name = config.output.base_name
        formats = config.output.formats
        os.makedirs(output_dir, exist_ok=True)
        output_files: Dict[str, str] = {}

        if "pdf" in formats:
            pdf_path = os.path.join(output_dir, f"{base_name}.pdf")
            render_pdf(
                pages, pdf_path,
                title=config.book.title,
                author=config.book.author,
                theme=config.book.theme,
            )
            output_files["pdf"] = pdf_path

        if "svg" in formats:
            svg_dir = os.path.join(output_dir, "svg")
            files = SVGRenderer().save_all(pages, svg_dir, base_name)
            self.logger.info(f"   - {len(files)} SVG pages in {svg_dir}")
            output_files["svg"] = svg_dir

        if "yaml" in formats:
            yaml_path = os.path.join(output_dir, f"{base_name}_puzzles.yaml")
            YAMLExporter().save(self.puzzles, yaml_path, {
                'title': config.book.title,
                'theme': config.book.theme,
                'grid_size': config.puzzles.grid_size,
                'difficulty': config.puzzles.difficulty,
                'seed': config.puzzles.seed,
            })
            output_files["yaml"] = yaml_path

        return output_files


def main():
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        # Load configuration
        config = load_config(args)
        check_layout(config)

        # Handle dry-run
        if args.dry_run:
            print("Configuration valid:")
            print(f"  Title: {config.book.title}")
            print(f"  Trim Size: {config.book.trim_size} (bleed: {config.book.bleed})")
            print(f"  Puzzles: {config.puzzles.quantity}")
            print(f"  Grid Size: {config.puzzles.grid_size}")
            print(f"  Difficulty: {config.puzzles.difficulty}")
            print(f"  Formats: {', '.join(config.output.formats)}")
            print(f"  Output Directory: {config.output.directory}")
            return

        puzzles = None
        if args.puzzles_file:
            puzzles = YAMLExporter().load_puzzles(args.puzzles_file)

        generator = WordSearchBookGenerator(config)
        generator.generate(puzzles)

    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nGeneration cancelled.")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
