# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Data models for the word search book builder.

Puzzle-side models (directions, placements, puzzles) and the page-side
draw primitives produced by the book compositor. Coordinates on pages
are points, origin top-left, y increasing downward.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


class ConfigurationError(Exception):
    """Raised for invalid input shape or settings (caller bug)."""
    pass


class Direction(Enum):
    """Placement vectors as (dx, dy); y grows downward."""
    HORIZONTAL = (1, 0)
    VERTICAL = (0, 1)
    DIAGONAL_DOWN = (1, 1)
    DIAGONAL_UP = (1, -1)
    HORIZONTAL_BACK = (-1, 0)
    VERTICAL_BACK = (0, -1)
    DIAGONAL_DOWN_BACK = (-1, 1)
    DIAGONAL_UP_BACK = (-1, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def from_vector(cls, dx: int, dy: int) -> 'Direction':
        return cls((dx, dy))


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union[str, 'Difficulty']) -> 'Difficulty':
        """Accept an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Invalid difficulty '{value}'. "
                f"Must be one of: {[d.value for d in cls]}"
            )


@dataclass(frozen=True)
class DirectionPolicy:
    """Which placement axes are enabled; backward mirrors each one."""
    horizontal: bool = True
    vertical: bool = True
    diagonal: bool = True
    backward: bool = False

    def allowed_directions(self) -> List[Direction]:
        """Expand the policy into concrete direction vectors."""
        directions = []
        if self.horizontal:
            directions.append(Direction.HORIZONTAL)
            if self.backward:
                directions.append(Direction.HORIZONTAL_BACK)
        if self.vertical:
            directions.append(Direction.VERTICAL)
            if self.backward:
                directions.append(Direction.VERTICAL_BACK)
        if self.diagonal:
            directions.append(Direction.DIAGONAL_DOWN)
            directions.append(Direction.DIAGONAL_UP)
            if self.backward:
                directions.append(Direction.DIAGONAL_DOWN_BACK)
                directions.append(Direction.DIAGONAL_UP_BACK)
        return directions

    @classmethod
    def from_names(cls, names: List[str]) -> 'DirectionPolicy':
        """Build a policy from names like ["horizontal", "backward"]."""
        known = {"horizontal", "vertical", "diagonal", "backward"}
        flags = {n.strip().lower() for n in names if n.strip()}
        unknown = flags - known
        if unknown:
            raise ConfigurationError(
                f"Unknown direction(s) {sorted(unknown)}. "
                f"Must be among: {sorted(known)}"
            )
        return cls(**{name: name in flags for name in known})


Position = Tuple[int, int]  # (x, y) == (column, row)


@dataclass(frozen=True)
class WordPlacement:
    """The ordered cell path a placed word occupies."""
    word: str
    positions: Tuple[Position, ...]
    direction: Direction

    @property
    def start(self) -> Position:
        return self.positions[0]


@dataclass(frozen=True)
class Puzzle:
    """A synthesized word search. Immutable once created."""
    grid: Tuple[Tuple[str, ...], ...]
    word_placements: Tuple[WordPlacement, ...] = ()
    used_words: Tuple[str, ...] = ()
    dropped_words: Tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.grid)

    def letter_at(self, x: int, y: int) -> str:
        return self.grid[y][x]

    def solution_cells(self) -> FrozenSet[Position]:
        """Every cell covered by at least one placed word."""
        return frozenset(
            pos for placement in self.word_placements
            for pos in placement.positions
        )

    def to_string(self) -> str:
        """Convert grid to string representation."""
        return "\n".join(" ".join(row) for row in self.grid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'size': self.size,
            'grid': ["".join(row) for row in self.grid],
            'used_words': list(self.used_words),
            'dropped_words': list(self.dropped_words),
            'placements': [
                {
                    'word': p.word,
                    'direction': p.direction.name.lower(),
                    'positions': [[x, y] for x, y in p.positions],
                }
                for p in self.word_placements
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Puzzle':
        placements = tuple(
            WordPlacement(
                word=p['word'],
                positions=tuple((int(x), int(y)) for x, y in p['positions']),
                direction=Direction[p['direction'].upper()],
            )
            for p in data.get('placements', [])
        )
        return cls(
            grid=tuple(tuple(row) for row in data['grid']),
            word_placements=placements,
            used_words=tuple(data.get('used_words', [])),
            dropped_words=tuple(data.get('dropped_words', [])),
        )


# ---------------------------------------------------------------------------
# Page draw primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    color: str
    opacity: float = 1.0


@dataclass(frozen=True)
class StrokeRect:
    x: float
    y: float
    width: float
    height: float
    color: str
    line_width: float = 1.0


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    line_width: float = 1.0


@dataclass(frozen=True)
class TextRun:
    """
    A single line of text.

    (x, y) is the top-left of the text box. When width is set, align
    positions the text inside [x, x + width]; otherwise text starts at x.
    """
    text: str
    x: float
    y: float
    font: str
    font_size: float
    color: str
    align: str = "left"  # left, center, right
    width: Optional[float] = None


DrawCommand = Union[FillRect, StrokeRect, Line, TextRun]


class PageKind(Enum):
    COVER = "cover"
    TABLE_OF_CONTENTS = "toc"
    PUZZLES = "puzzles"
    ANSWER_KEY_TITLE = "answer_key_title"
    ANSWERS = "answers"


@dataclass(frozen=True)
class Page:
    """One physical page: its 1-based position and draw commands."""
    number: int
    kind: PageKind
    width: float
    height: float
    commands: Tuple[DrawCommand, ...] = field(default_factory=tuple)
    puzzle_indices: Tuple[int, ...] = ()

    def texts(self) -> List[str]:
        """All text on the page, in draw order."""
        return [c.text for c in self.commands if isinstance(c, TextRun)]
