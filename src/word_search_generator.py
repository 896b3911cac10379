# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word Search Generator

Places words into a square letter grid with randomized retries:
- Longest words first, while the grid is emptiest
- Random direction and in-bounds start per attempt
- Difficulty controls how freely words may cross
- Remaining cells filled with random A-Z noise

Words that cannot be placed within MAX_ATTEMPTS are dropped, never raised.
"""

import logging
import random
import string
from typing import Iterable, List, Optional, Tuple, Union

from models import (
    ConfigurationError, Difficulty, Direction, DirectionPolicy,
    Position, Puzzle, WordPlacement
)

logger = logging.getLogger(__name__)


MAX_ATTEMPTS = 100

# Chance that medium difficulty accepts each matching-letter crossing
MEDIUM_OVERLAP_ACCEPTANCE = 0.3

EMPTY = ""


def normalize_words(words: Iterable[str], grid_size: int) -> List[str]:
    """
    Prepare raw words for placement.

    Uppercases, drops internal whitespace, discards non-alphabetic entries
    and entries longer than the grid, removes case-insensitive duplicates
    and sorts longest first (stable for equal lengths).

    Args:
        words: Arbitrary-case candidate words
        grid_size: Grid width/height

    Returns:
        Normalized word list
    """
    seen = set()
    result = []
    for raw in words:
        word = "".join(str(raw).split()).upper()
        if not word:
            continue
        if not (word.isascii() and word.isalpha()):
            logger.debug(f"Skipping non-alphabetic word: {raw!r}")
            continue
        if len(word) > grid_size:
            logger.debug(f"Skipping '{word}': longer than grid ({grid_size})")
            continue
        if word in seen:
            continue
        seen.add(word)
        result.append(word)

    result.sort(key=len, reverse=True)
    return result


class WordSearchGenerator:
    """Synthesizes word search grids for one grid size and policy."""

    def __init__(
        self,
        grid_size: int = 15,
        direction_policy: Optional[DirectionPolicy] = None,
        difficulty: Union[str, Difficulty] = Difficulty.MEDIUM,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize generator.

        Args:
            grid_size: Width and height of the grid
            direction_policy: Enabled placement axes (default: all forward)
            difficulty: easy, medium or hard overlap policy
            rng: Random source; pass a seeded Random for reproducible grids

        Raises:
            ConfigurationError: If the grid size or policy is unusable
        """
        if not isinstance(grid_size, int) or grid_size <= 0:
            raise ConfigurationError(
                f"Grid size must be a positive integer, got {grid_size!r}"
            )
        self.grid_size = grid_size
        self.direction_policy = direction_policy or DirectionPolicy()
        self.difficulty = Difficulty.parse(difficulty)
        self.directions = self.direction_policy.allowed_directions()
        if not self.directions:
            raise ConfigurationError("Direction policy enables no directions")
        self.rng = rng or random.Random()

        self._grid: List[List[str]] = []

    def generate(
        self,
        words: Iterable[str],
        max_words: Optional[int] = None
    ) -> Puzzle:
        """
        Build one puzzle.

        Args:
            words: Candidate words (any case)
            max_words: Stop once this many words are placed (None = no cap)

        Returns:
            Fully filled Puzzle with recorded placements
        """
        if max_words is not None and max_words < 0:
            raise ConfigurationError(
                f"max_words must be non-negative, got {max_words}"
            )

        size = self.grid_size
        self._grid = [[EMPTY] * size for _ in range(size)]
        placements: List[WordPlacement] = []
        used_words: List[str] = []
        dropped_words: List[str] = []

        for word in normalize_words(words, size):
            if max_words is not None and len(used_words) >= max_words:
                break

            placement = self._place_word(word)
            if placement is None:
                logger.debug(
                    f"Dropped '{word}' after {MAX_ATTEMPTS} attempts"
                )
                dropped_words.append(word)
                continue

            placements.append(placement)
            used_words.append(word)

        self._fill_noise()

        logger.debug(
            f"Synthesized {size}x{size} grid: {len(used_words)} placed, "
            f"{len(dropped_words)} dropped ({self.difficulty.value})"
        )

        return Puzzle(
            grid=tuple(tuple(row) for row in self._grid),
            word_placements=tuple(placements),
            used_words=tuple(used_words),
            dropped_words=tuple(dropped_words),
        )

    def _place_word(self, word: str) -> Optional[WordPlacement]:
        """Try random positions until one fits or attempts run out."""
        for _ in range(MAX_ATTEMPTS):
            direction = self.rng.choice(self.directions)

            (min_x, max_x), (min_y, max_y) = self._start_range(
                len(word), direction
            )
            start_x = self.rng.randint(min_x, max_x)
            start_y = self.rng.randint(min_y, max_y)

            if self._can_place(word, start_x, start_y, direction):
                return self._write_word(word, start_x, start_y, direction)

        return None

    def _start_range(
        self,
        length: int,
        direction: Direction
    ) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Inclusive start ranges keeping the whole word inside the grid."""
        return (
            self._axis_range(length, direction.dx),
            self._axis_range(length, direction.dy),
        )

    def _axis_range(self, length: int, delta: int) -> Tuple[int, int]:
        last = self.grid_size - 1
        if delta > 0:
            return 0, last - (length - 1)
        if delta < 0:
            return length - 1, last
        return 0, last

    def _can_place(
        self,
        word: str,
        start_x: int,
        start_y: int,
        direction: Direction
    ) -> bool:
        """Check bounds, letter conflicts and the difficulty overlap rule."""
        size = self.grid_size
        for i, letter in enumerate(word):
            x = start_x + i * direction.dx
            y = start_y + i * direction.dy

            if not (0 <= x < size and 0 <= y < size):
                return False

            current = self._grid[y][x]
            if current == EMPTY:
                continue

            if current != letter:
                return False

            if self.difficulty is Difficulty.EASY:
                return False

            if (self.difficulty is Difficulty.MEDIUM and
                    self.rng.random() > MEDIUM_OVERLAP_ACCEPTANCE):
                return False

        return True

    def _write_word(
        self,
        word: str,
        start_x: int,
        start_y: int,
        direction: Direction
    ) -> WordPlacement:
        positions: List[Position] = []
        for i, letter in enumerate(word):
            x = start_x + i * direction.dx
            y = start_y + i * direction.dy
            self._grid[y][x] = letter
            positions.append((x, y))
        return WordPlacement(
            word=word, positions=tuple(positions), direction=direction
        )

    def _fill_noise(self):
        for row in self._grid:
            for x, letter in enumerate(row):
                if letter == EMPTY:
                    row[x] = self.rng.choice(string.ascii_uppercase)


def synthesize(
    words: Iterable[str],
    grid_size: int,
    direction_policy: Optional[DirectionPolicy] = None,
    difficulty: Union[str, Difficulty] = Difficulty.MEDIUM,
    max_words: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> Puzzle:
    """Synthesize a single puzzle. See WordSearchGenerator."""
    generator = WordSearchGenerator(
        grid_size=grid_size,
        direction_policy=direction_policy,
        difficulty=difficulty,
        rng=rng,
    )
    return generator.generate(words, max_words=max_words)


def synthesize_seeded(
    words: List[str],
    grid_size: int,
    direction_policy: DirectionPolicy,
    difficulty: Difficulty,
    max_words: Optional[int],
    seed: int
) -> Puzzle:
    """Picklable entry point for worker processes."""
    return synthesize(
        words, grid_size, direction_policy, difficulty, max_words,
        rng=random.Random(seed),
    )
