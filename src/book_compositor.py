# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Book Layout Compositor

Turns synthesized puzzles into an ordered list of pages:
- Cover (optional): background, title block, decorative sample grid
- Table of contents with estimated page numbers
- Puzzle pages, 1, 2 or 4 puzzles per page
- Answer key title page and answer pages (optional)

Pages carry draw commands in points, origin top-left. Rendering to PDF or
SVG is done by pdf_renderer / svg_renderer.
"""

import logging
import math
import random
import string
import zlib
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple

from reportlab.pdfbase.pdfmetrics import stringWidth

from config import BookSettings, VALID_PUZZLES_PER_PAGE
from models import (
    ConfigurationError, DrawCommand, FillRect, Line, Page, PageKind,
    Position, Puzzle, StrokeRect, TextRun
)
from units import PageGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThemeColors:
    text: str
    background: str
    grid: str


@dataclass(frozen=True)
class FontSet:
    regular: str
    bold: str
    italic: str


@dataclass(frozen=True)
class WordListLayout:
    """Font size, column count and row pitch chosen for a word list."""
    font_size: float
    columns: int
    row_pitch: float
    height: float


THEME_COLORS = {
    "light": ThemeColors(text="#000000", background="#FFFFFF", grid="#DDDDDD"),
    "dark": ThemeColors(text="#FFFFFF", background="#222222", grid="#444444"),
}

# Standard PDF fonts only; handwritten has no built-in face
FONT_FAMILIES = {
    "sans": FontSet("Helvetica", "Helvetica-Bold", "Helvetica-Oblique"),
    "serif": FontSet("Times-Roman", "Times-Bold", "Times-Italic"),
    "mono": FontSet("Courier", "Courier-Bold", "Courier-Oblique"),
    "handwritten": FontSet("Times-Roman", "Times-Bold", "Times-Italic"),
}

HIGHLIGHT_COLOR = "#4080FF"
HIGHLIGHT_OPACITY = 0.3

LINE_SPACING = 1.2

# Puzzle cell layout
TITLE_BAND_PT = 30
TITLE_FONT_SIZE = 14
LETTER_SCALE = 0.6
WORD_LIST_RESERVE_PT = 60
WORD_LIST_GAP_PT = 10
WORD_LIST_HEADER_PT = 15
WORD_ROW_PT = 15
WORDS_PER_ROW = 4
WORD_FONT_SIZES = (9, 8, 7, 6)
WORD_COLUMN_GAP_PT = 4
MIN_CELL_PT = 5
FACT_FONT_SIZE = 8

# Cover decoration
COVER_GRID_CELLS = 10
COVER_CELL_PT = 20
COVER_HIGHLIGHT_THRESHOLD = 0.8

# Table of contents
TOC_HEADER_OFFSET_PT = 60
TOC_ENTRY_PITCH_PT = 20
TOC_ANSWER_BLOCK_PT = 40

PAGE_NUMBER_FONT_SIZE = 10


def wrap_text(text: str, font: str, font_size: float, max_width: float) -> List[str]:
    """
    Greedy word wrap using the font's metrics.

    A single word wider than max_width is kept on its own line.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and stringWidth(candidate, font, font_size) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def puzzle_title(index: int, theme: str = "") -> str:
    """Title shown above puzzle number index (0-based)."""
    if theme:
        return f"{theme[0].upper() + theme[1:]} Search #{index + 1}"
    return f"Word Search #{index + 1}"


class BookLayoutCompositor:
    """Computes page geometry and draw commands for a puzzle book."""

    def __init__(self, settings: BookSettings):
        """
        Initialize compositor.

        Args:
            settings: Book-level layout settings

        Raises:
            ConfigurationError: If puzzles_per_page is not 1, 2 or 4
        """
        if settings.puzzles_per_page not in VALID_PUZZLES_PER_PAGE:
            raise ConfigurationError(
                f"puzzles_per_page must be one of {VALID_PUZZLES_PER_PAGE}, "
                f"got {settings.puzzles_per_page!r}"
            )
        self.settings = settings
        self.geometry = PageGeometry.for_trim_size(
            settings.trim_size, settings.bleed, settings.margins
        )

        if settings.interior_theme not in THEME_COLORS:
            logger.warning(
                f"Unknown interior theme '{settings.interior_theme}', using light"
            )
        self.colors = THEME_COLORS.get(settings.interior_theme, THEME_COLORS["light"])
        self.fonts = FONT_FAMILIES.get(settings.font_family, FONT_FAMILIES["sans"])

    def compose(self, puzzles: Sequence[Puzzle]) -> List[Page]:
        """
        Lay out the whole book.

        Args:
            puzzles: Synthesized puzzles in book order

        Returns:
            Pages in print order, numbered from 1
        """
        settings = self.settings
        per_page = settings.puzzles_per_page
        groups = [
            tuple(range(start, min(start + per_page, len(puzzles))))
            for start in range(0, len(puzzles), per_page)
        ]

        pages: List[Page] = []

        def add_page(kind: PageKind, build, indices: Tuple[int, ...] = ()):
            number = len(pages) + 1
            commands = [self._background()]
            commands.extend(build(number))
            if kind is not PageKind.COVER and settings.include_page_numbers:
                commands.append(self._page_number(number))
            pages.append(Page(
                number=number,
                kind=kind,
                width=self.geometry.width,
                height=self.geometry.height,
                commands=tuple(commands),
                puzzle_indices=indices,
            ))

        if settings.include_cover_page:
            add_page(PageKind.COVER, lambda n: self._cover_commands())

        add_page(
            PageKind.TABLE_OF_CONTENTS,
            lambda n: self._toc_commands(puzzles, n)
        )

        for group in groups:
            add_page(
                PageKind.PUZZLES,
                lambda n, g=group: self._group_commands(puzzles, g, n, answers=False),
                group,
            )

        if settings.include_answers:
            add_page(PageKind.ANSWER_KEY_TITLE, self._answer_title_commands)
            for group in groups:
                add_page(
                    PageKind.ANSWERS,
                    lambda n, g=group: self._group_commands(puzzles, g, n, answers=True),
                    group,
                )

        logger.info(
            f"Composed {len(pages)} pages for {len(puzzles)} puzzles "
            f"({self.geometry.width:g}x{self.geometry.height:g}pt)"
        )
        return pages

    # ------------------------------------------------------------------
    # Page pieces
    # ------------------------------------------------------------------

    def _background(self) -> FillRect:
        geo = self.geometry
        return FillRect(0, 0, geo.width, geo.height, self.colors.background)

    def _page_number(self, number: int) -> TextRun:
        geo = self.geometry
        inset = geo.bleed_inset
        return TextRun(
            text=f"Page {number}",
            x=inset,
            y=geo.height - geo.margins.bottom / 2 - inset,
            font=self.fonts.regular,
            font_size=PAGE_NUMBER_FONT_SIZE,
            color=self.colors.text,
            align="center",
            width=geo.width - 2 * inset,
        )

    def _centered_block(
        self,
        text: str,
        y: float,
        font: str,
        font_size: float,
        x: float,
        width: float
    ) -> Tuple[List[TextRun], float]:
        """Wrapped, centered lines; returns the runs and the bottom y."""
        runs = []
        line_height = font_size * LINE_SPACING
        for i, line in enumerate(wrap_text(text, font, font_size, width)):
            runs.append(TextRun(
                text=line,
                x=x,
                y=y + i * line_height,
                font=font,
                font_size=font_size,
                color=self.colors.text,
                align="center",
                width=width,
            ))
        return runs, y + len(runs) * line_height

    def _cover_commands(self) -> List[DrawCommand]:
        geo = self.geometry
        settings = self.settings
        inset = geo.bleed_inset
        text_width = (geo.width - geo.margins.inner - geo.margins.outer
                      - 2 * inset)
        text_x = (geo.width - text_width) / 2
        commands: List[DrawCommand] = []

        title_y = geo.height / 4 + inset
        runs, title_bottom = self._centered_block(
            settings.title, title_y, self.fonts.bold, 36, text_x, text_width
        )
        commands.extend(runs)

        if settings.subtitle:
            subtitle_y = max(title_y + 50, title_bottom + 8)
            runs, _ = self._centered_block(
                settings.subtitle, subtitle_y, self.fonts.regular, 24,
                text_x, text_width
            )
            commands.extend(runs)

        commands.extend(self._cover_decoration())

        if settings.author:
            author_y = geo.height - geo.height / 6 - inset
            runs, _ = self._centered_block(
                f"by {settings.author}", author_y, self.fonts.regular, 18,
                text_x, text_width
            )
            commands.extend(runs)

        return commands

    def _cover_decoration(self) -> List[DrawCommand]:
        """Cosmetic sample grid; unrelated to any real puzzle."""
        geo = self.geometry
        seed = self.settings.decoration_seed
        if seed is None:
            seed = zlib.crc32(self.settings.title.encode('utf-8'))
        rng = random.Random(seed)

        size = COVER_GRID_CELLS * COVER_CELL_PT
        grid_x = (geo.width - size) / 2
        grid_y = geo.height / 2
        commands: List[DrawCommand] = []

        for row in range(COVER_GRID_CELLS):
            for col in range(COVER_GRID_CELLS):
                cell_x = grid_x + col * COVER_CELL_PT
                cell_y = grid_y + row * COVER_CELL_PT
                if rng.random() > COVER_HIGHLIGHT_THRESHOLD:
                    commands.append(FillRect(
                        cell_x, cell_y, COVER_CELL_PT, COVER_CELL_PT,
                        HIGHLIGHT_COLOR, HIGHLIGHT_OPACITY
                    ))
                commands.append(StrokeRect(
                    cell_x, cell_y, COVER_CELL_PT, COVER_CELL_PT, self.colors.grid
                ))
                commands.append(TextRun(
                    text=rng.choice(string.ascii_uppercase),
                    x=cell_x,
                    y=cell_y + 5,
                    font=self.fonts.bold,
                    font_size=12,
                    color=self.colors.text,
                    align="center",
                    width=COVER_CELL_PT,
                ))
        return commands

    def _toc_commands(self, puzzles: Sequence[Puzzle], number: int) -> List[DrawCommand]:
        """
        Table of contents.

        Page numbers are estimated from the fixed page sequence: puzzle
        pages start right after the TOC and hold puzzles_per_page each.
        """
        geo = self.geometry
        settings = self.settings
        per_page = settings.puzzles_per_page
        bold, regular = self.fonts.bold, self.fonts.regular
        text = self.colors.text

        content_x = geo.content_left(number)
        content_w = geo.content_width
        title_y = geo.content_top
        commands: List[DrawCommand] = [TextRun(
            "Table of Contents", content_x, title_y, bold, 24, text,
            align="center", width=content_w
        )]

        content_y = title_y + TOC_HEADER_OFFSET_PT
        content_bottom = geo.height - geo.margins.bottom - geo.bleed_inset
        label_w = content_w * 0.7
        page_w = content_w * 0.3

        commands.append(TextRun("Puzzle", content_x, content_y, bold, 12, text,
                                width=label_w))
        commands.append(TextRun("Page", content_x + label_w, content_y, bold, 12,
                                text, align="right", width=page_w))

        line_y = content_y + 20
        commands.append(Line(content_x, line_y, content_x + content_w, line_y, text))

        start_page = 3 if settings.include_cover_page else 2
        entry_limit = content_bottom - 20
        if settings.include_answers:
            entry_limit -= TOC_ANSWER_BLOCK_PT

        entry_y = line_y + 15
        for i in range(len(puzzles)):
            if entry_y > entry_limit:
                logger.warning(
                    f"Table of contents full: listed {i} of {len(puzzles)} puzzles"
                )
                break
            page_num = start_page + i // per_page
            commands.append(TextRun(puzzle_title(i, settings.theme), content_x,
                                    entry_y, regular, 11, text, width=label_w))
            commands.append(TextRun(str(page_num), content_x + label_w, entry_y,
                                    regular, 11, text, align="right", width=page_w))
            entry_y += TOC_ENTRY_PITCH_PT

        if settings.include_answers:
            answer_y = entry_y + 10
            commands.append(Line(content_x, answer_y, content_x + content_w,
                                 answer_y, text))
            answer_page = start_page + math.ceil(len(puzzles) / per_page)
            commands.append(TextRun("Answer Key", content_x, answer_y + 15, bold,
                                    11, text, width=label_w))
            commands.append(TextRun(str(answer_page), content_x + label_w,
                                    answer_y + 15, bold, 11, text, align="right",
                                    width=page_w))

        return commands

    def _answer_title_commands(self, number: int) -> List[DrawCommand]:
        geo = self.geometry
        return [TextRun(
            "Answer Key", geo.content_left(number), geo.content_top + 20,
            self.fonts.bold, 24, self.colors.text,
            align="center", width=geo.content_width
        )]

    def _slot_rects(self, number: int) -> List[Tuple[float, float, float, float]]:
        """(x, y, width, height) of each puzzle slot on a page."""
        geo = self.geometry
        left, top = geo.content_left(number), geo.content_top
        width, height = geo.content_width, geo.content_height
        per_page = self.settings.puzzles_per_page
        if per_page == 1:
            return [(left, top, width, height)]
        if per_page == 2:
            half = height / 2
            return [(left, top + j * half, width, half) for j in range(2)]
        half_w, half_h = width / 2, height / 2
        return [
            (left + (j % 2) * half_w, top + (j // 2) * half_h, half_w, half_h)
            for j in range(4)
        ]

    def _group_commands(
        self,
        puzzles: Sequence[Puzzle],
        group: Tuple[int, ...],
        number: int,
        answers: bool
    ) -> List[DrawCommand]:
        commands: List[DrawCommand] = []
        for slot, index in zip(self._slot_rects(number), group):
            x, y, width, height = slot
            if answers:
                commands.extend(self._answer_cell(puzzles[index], index, x, y,
                                                  width, height))
            else:
                commands.extend(self._puzzle_cell(puzzles[index], index, x, y,
                                                  width, height))
        return commands

    def _title_run(self, index: int, x: float, y: float, width: float) -> TextRun:
        return TextRun(
            puzzle_title(index, self.settings.theme), x, y, self.fonts.bold,
            TITLE_FONT_SIZE, self.colors.text, align="center", width=width
        )

    def _theme_fact(self, index: int) -> Optional[str]:
        settings = self.settings
        if not (settings.include_theme_facts and settings.theme_facts):
            return None
        return settings.theme_facts[index % len(settings.theme_facts)]

    def _word_list_layout(
        self,
        words: Sequence[str],
        width: float,
        max_height: float
    ) -> Optional[WordListLayout]:
        """
        Largest word font whose columns fit the slot width and whose rows
        fit max_height. Columns are dropped until the widest word fits.

        Returns:
            The layout, or None if the list does not fit even at the
            smallest size
        """
        for font_size in WORD_FONT_SIZES:
            widest = max((stringWidth(w, self.fonts.regular, font_size)
                          for w in words), default=0.0)
            columns = min(WORDS_PER_ROW,
                          int((width + WORD_COLUMN_GAP_PT)
                              // (widest + WORD_COLUMN_GAP_PT)))
            if columns < 1:
                continue
            row_pitch = WORD_ROW_PT * font_size / WORD_FONT_SIZES[0]
            rows = math.ceil(len(words) / columns)
            list_height = (WORD_LIST_GAP_PT + WORD_LIST_HEADER_PT
                           + rows * row_pitch)
            if list_height <= max_height:
                return WordListLayout(font_size, columns, row_pitch, list_height)
        return None

    def max_words_per_puzzle(self, grid_size: int) -> int:
        """
        Upper bound on the words one puzzle slot can list below a grid of
        grid_size cells, at the smallest word font and full column count.
        """
        slot_height = self._slot_rects(1)[0][3]
        rows_height = (slot_height - TITLE_BAND_PT - grid_size * MIN_CELL_PT
                       - WORD_LIST_GAP_PT - WORD_LIST_HEADER_PT)
        row_pitch = WORD_ROW_PT * WORD_FONT_SIZES[-1] / WORD_FONT_SIZES[0]
        return max(0, int(rows_height // row_pitch)) * WORDS_PER_ROW

    def _puzzle_cell(
        self,
        puzzle: Puzzle,
        index: int,
        x: float,
        y: float,
        width: float,
        height: float
    ) -> List[DrawCommand]:
        """Title, letter grid and word list for one puzzle."""
        words = puzzle.used_words

        fact = self._theme_fact(index)
        fact_lines = []
        if fact:
            fact_lines = wrap_text(f"Did you know? {fact}", self.fonts.italic,
                                   FACT_FONT_SIZE, width)
        fact_height = len(fact_lines) * FACT_FONT_SIZE * LINE_SPACING

        # The grid keeps at least MIN_CELL_PT per cell vertically
        max_reserve = height - TITLE_BAND_PT - puzzle.size * MIN_CELL_PT
        layout = self._word_list_layout(words, width, max_reserve - fact_height)
        if layout is None:
            raise ConfigurationError(
                f"{puzzle_title(index, self.settings.theme)}: {len(words)} words "
                f"do not fit below a {puzzle.size}x{puzzle.size} grid on "
                f"{self.settings.trim_size} with "
                f"{self.settings.puzzles_per_page} puzzles per page"
            )

        reserve = min(max_reserve,
                      max(WORD_LIST_RESERVE_PT, layout.height + fact_height))
        puzzle_size = max(0.0, min(width, height - TITLE_BAND_PT - reserve))

        grid_x = x + (width - puzzle_size) / 2
        grid_y = y + TITLE_BAND_PT
        commands: List[DrawCommand] = [self._title_run(index, x, y, width)]
        commands.extend(self._grid_commands(puzzle, grid_x, grid_y, puzzle_size,
                                            frozenset()))

        text = self.colors.text
        words_y = grid_y + puzzle_size + WORD_LIST_GAP_PT
        column_width = width / layout.columns
        commands.append(TextRun("Find these words:", x, words_y, self.fonts.bold,
                                10, text))
        for i, word in enumerate(words):
            row, col = divmod(i, layout.columns)
            commands.append(TextRun(
                word, x + col * column_width,
                words_y + WORD_LIST_HEADER_PT + row * layout.row_pitch,
                self.fonts.regular, layout.font_size, text
            ))

        rows = math.ceil(len(words) / layout.columns)
        fact_y = words_y + WORD_LIST_HEADER_PT + rows * layout.row_pitch
        for i, line in enumerate(fact_lines):
            commands.append(TextRun(
                line, x, fact_y + i * FACT_FONT_SIZE * LINE_SPACING,
                self.fonts.italic, FACT_FONT_SIZE, text
            ))

        return commands

    def _answer_cell(
        self,
        puzzle: Puzzle,
        index: int,
        x: float,
        y: float,
        width: float,
        height: float
    ) -> List[DrawCommand]:
        """Title and solved grid with every placed word highlighted."""
        puzzle_size = max(0.0, min(width, height - TITLE_BAND_PT))
        grid_x = x + (width - puzzle_size) / 2
        grid_y = y + TITLE_BAND_PT
        commands: List[DrawCommand] = [self._title_run(index, x, y, width)]
        commands.extend(self._grid_commands(puzzle, grid_x, grid_y, puzzle_size,
                                            puzzle.solution_cells()))
        return commands

    def _grid_commands(
        self,
        puzzle: Puzzle,
        grid_x: float,
        grid_y: float,
        puzzle_size: float,
        highlighted: FrozenSet[Position]
    ) -> List[DrawCommand]:
        if puzzle.size == 0 or puzzle_size <= 0:
            return []
        cell = puzzle_size / puzzle.size
        font_size = cell * LETTER_SCALE
        commands: List[DrawCommand] = []
        for row_idx, row in enumerate(puzzle.grid):
            for col_idx, letter in enumerate(row):
                cell_x = grid_x + col_idx * cell
                cell_y = grid_y + row_idx * cell
                is_solution = (col_idx, row_idx) in highlighted
                if is_solution:
                    commands.append(FillRect(cell_x, cell_y, cell, cell,
                                             HIGHLIGHT_COLOR, HIGHLIGHT_OPACITY))
                commands.append(StrokeRect(cell_x, cell_y, cell, cell,
                                           self.colors.grid))
                commands.append(TextRun(
                    text=letter,
                    x=cell_x,
                    y=cell_y + (cell - font_size) / 2,
                    font=self.fonts.bold if is_solution else self.fonts.regular,
                    font_size=font_size,
                    color=self.colors.text,
                    align="center",
                    width=cell,
                ))
        return commands


def compose(settings: BookSettings, puzzles: Sequence[Puzzle]) -> List[Page]:
    """Compose a book. See BookLayoutCompositor."""
    return BookLayoutCompositor(settings).compose(puzzles)


def expected_page_count(settings: BookSettings, puzzle_count: int) -> int:
    """Page count compose() produces for puzzle_count puzzles."""
    groups = math.ceil(puzzle_count / settings.puzzles_per_page)
    count = (1 if settings.include_cover_page else 0) + 1 + groups
    if settings.include_answers:
        count += 1 + groups
    return count
