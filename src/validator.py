# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Word Search Puzzle Validator

Checks that a synthesized puzzle is printable and solvable as recorded:
1. Grid is square and fully filled with A-Z letters
2. Every placement reads its word along a constant allowed direction
3. Easy puzzles have no shared cells between words
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from models import Difficulty, DirectionPolicy, Puzzle


@dataclass
class ValidationResult:
    """Result of puzzle validation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict = field(default_factory=dict)

    def __str__(self):
        lines = ["Structure: VALID" if self.valid else "Structure: INVALID"]

        if self.errors:
            lines.append("\nErrors:")
            for e in self.errors:
                lines.append(f"  - {e}")

        if self.warnings:
            lines.append("\nWarnings:")
            for w in self.warnings:
                lines.append(f"  - {w}")

        if self.stats:
            lines.append("\nStats:")
            for k, v in self.stats.items():
                lines.append(f"  {k}: {v}")

        return "\n".join(lines)


class PuzzleValidator:
    """Validates a word search puzzle against its synthesis settings."""

    def __init__(
        self,
        puzzle: Puzzle,
        grid_size: Optional[int] = None,
        difficulty: Optional[Union[str, Difficulty]] = None,
        direction_policy: Optional[DirectionPolicy] = None
    ):
        """
        Initialize validator.

        Args:
            puzzle: The puzzle to check
            grid_size: Expected grid size (defaults to the puzzle's own)
            difficulty: When easy, shared cells are reported as errors
            direction_policy: When given, directions must be allowed by it
        """
        self.puzzle = puzzle
        self.grid_size = grid_size if grid_size is not None else puzzle.size
        self.difficulty = Difficulty.parse(difficulty) if difficulty else None
        self.direction_policy = direction_policy

    def validate(self) -> ValidationResult:
        result = ValidationResult(valid=True)
        self._validate_grid(result)
        if result.valid:
            self._validate_placements(result)
            self._collect_stats(result)
        result.valid = not result.errors
        return result

    def _validate_grid(self, result: ValidationResult):
        grid = self.puzzle.grid
        size = self.grid_size

        if len(grid) != size:
            result.errors.append(f"Grid has {len(grid)} rows, expected {size}")
        for y, row in enumerate(grid):
            if len(row) != size:
                result.errors.append(
                    f"Row {y} has {len(row)} cells, expected {size}"
                )
            for x, letter in enumerate(row):
                if len(letter) != 1 or not ("A" <= letter <= "Z"):
                    result.errors.append(f"Cell ({x}, {y}) is not A-Z: {letter!r}")
        result.valid = not result.errors

    def _validate_placements(self, result: ValidationResult):
        puzzle = self.puzzle
        size = self.grid_size
        allowed = None
        if self.direction_policy is not None:
            allowed = set(self.direction_policy.allowed_directions())

        for placement in puzzle.word_placements:
            word = placement.word
            positions = placement.positions

            if len(word) > size:
                result.errors.append(f"'{word}' is longer than the grid")
            if len(positions) != len(word):
                result.errors.append(
                    f"'{word}' has {len(positions)} positions for {len(word)} letters"
                )
                continue

            if allowed is not None and placement.direction not in allowed:
                result.errors.append(
                    f"'{word}' uses disallowed direction {placement.direction.name}"
                )

            dx, dy = placement.direction.dx, placement.direction.dy
            for i, (x, y) in enumerate(positions):
                if not (0 <= x < size and 0 <= y < size):
                    result.errors.append(f"'{word}' leaves the grid at ({x}, {y})")
                    break
                if puzzle.grid[y][x] != word[i]:
                    result.errors.append(
                        f"'{word}' letter {i} expected {word[i]} at ({x}, {y}), "
                        f"found {puzzle.grid[y][x]}"
                    )
                    break
                if i > 0:
                    px, py = positions[i - 1]
                    if (x - px, y - py) != (dx, dy):
                        result.errors.append(f"'{word}' path is not a straight line")
                        break

        placed = [p.word for p in puzzle.word_placements]
        if list(puzzle.used_words) != placed:
            result.errors.append("used_words does not match recorded placements")

        if self.difficulty is Difficulty.EASY:
            shared = self._shared_cells()
            if shared:
                result.errors.append(
                    f"Easy puzzle has {shared} cell(s) shared between words"
                )

        if puzzle.dropped_words:
            result.warnings.append(
                f"{len(puzzle.dropped_words)} word(s) could not be placed: "
                f"{', '.join(puzzle.dropped_words)}"
            )

    def _shared_cells(self) -> int:
        counts = Counter(
            pos for p in self.puzzle.word_placements for pos in p.positions
        )
        return sum(1 for n in counts.values() if n > 1)

    def _collect_stats(self, result: ValidationResult):
        size = self.grid_size
        solution_cells = len(self.puzzle.solution_cells())
        result.stats["size"] = f"{size}x{size}"
        result.stats["words_placed"] = len(self.puzzle.word_placements)
        result.stats["words_dropped"] = len(self.puzzle.dropped_words)
        result.stats["shared_cells"] = self._shared_cells()
        result.stats["solution_ratio"] = (
            solution_cells / (size * size) if size else 0.0
        )


def validate_puzzle(
    puzzle: Puzzle,
    grid_size: Optional[int] = None,
    difficulty: Optional[Union[str, Difficulty]] = None,
    direction_policy: Optional[DirectionPolicy] = None
) -> ValidationResult:
    """
    Convenience function to validate a puzzle.

    Args:
        puzzle: The puzzle to check
        grid_size: Expected grid size
        difficulty: Synthesis difficulty (easy enables the no-overlap check)
        direction_policy: Synthesis direction policy

    Returns:
        ValidationResult
    """
    validator = PuzzleValidator(puzzle, grid_size, difficulty, direction_policy)
    return validator.validate()
