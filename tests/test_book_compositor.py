# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for book layout composition."""

import math
import os
import random
import sys
import unittest

from reportlab.pdfbase.pdfmetrics import stringWidth

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from book_compositor import (
    HIGHLIGHT_COLOR, BookLayoutCompositor, compose, expected_page_count,
    puzzle_title, wrap_text
)
from config import BookSettings
from models import (
    ConfigurationError, FillRect, PageKind, Puzzle, StrokeRect, TextRun
)
from units import PageGeometry
from word_search_generator import synthesize


WORDS = ["ELEPHANT", "GIRAFFE", "PENGUIN", "ZEBRA", "OTTER", "LYNX", "PANDA"]


def make_puzzles(count, size=12):
    return [
        synthesize(WORDS, size, rng=random.Random(seed))
        for seed in range(count)
    ]


def make_filled_puzzle(size, word_count):
    grid = tuple(tuple("A" * size) for _ in range(size))
    words = tuple(f"WORD{chr(65 + i % 26)}" for i in range(word_count))
    return Puzzle(grid=grid, used_words=words)


def toc_entries(page):
    """(label, page number) pairs from a table of contents page."""
    runs = [c for c in page.commands if isinstance(c, TextRun)]
    entries = []
    for label, number in zip(runs, runs[1:]):
        if (label.y == number.y and number.align == "right"
                and number.text.isdigit()):
            entries.append((label.text, int(number.text)))
    return entries


class TestPagination(unittest.TestCase):
    """Tests for page sequencing and counts."""

    def test_cover_toc_and_one_puzzle(self):
        """Test one puzzle with cover and no answers yields exactly 3 pages."""
        settings = BookSettings(trim_size="6x9", bleed=False, puzzles_per_page=1,
                                include_cover_page=True, include_answers=False)

        pages = compose(settings, make_puzzles(1))

        self.assertEqual(len(pages), 3)
        self.assertEqual(
            [p.kind for p in pages],
            [PageKind.COVER, PageKind.TABLE_OF_CONTENTS, PageKind.PUZZLES]
        )

    def test_page_count_formula(self):
        """Test page count matches cover + TOC + groups (+ answer title + groups)."""
        for per_page in (1, 2, 4):
            for count in (1, 3, 4, 9):
                for cover in (True, False):
                    for answers in (True, False):
                        settings = BookSettings(
                            puzzles_per_page=per_page,
                            include_cover_page=cover,
                            include_answers=answers,
                        )
                        groups = math.ceil(count / per_page)
                        expected = (int(cover) + 1 + groups
                                    + (1 + groups if answers else 0))

                        pages = compose(settings, make_puzzles(count, 6))

                        self.assertEqual(len(pages), expected)
                        self.assertEqual(
                            expected_page_count(settings, count), expected
                        )

    def test_page_order_with_answers(self):
        """Test answer pages follow the answer key title in the same grouping."""
        settings = BookSettings(puzzles_per_page=2)

        pages = compose(settings, make_puzzles(3))

        self.assertEqual([p.kind for p in pages], [
            PageKind.COVER, PageKind.TABLE_OF_CONTENTS,
            PageKind.PUZZLES, PageKind.PUZZLES,
            PageKind.ANSWER_KEY_TITLE,
            PageKind.ANSWERS, PageKind.ANSWERS,
        ])
        self.assertEqual(pages[2].puzzle_indices, (0, 1))
        self.assertEqual(pages[3].puzzle_indices, (2,))
        self.assertEqual(pages[5].puzzle_indices, (0, 1))
        self.assertEqual([p.number for p in pages], list(range(1, 8)))

    def test_empty_puzzle_list(self):
        """Test zero puzzles still yields cover, TOC and answer title."""
        pages = compose(BookSettings(), [])

        self.assertEqual(
            [p.kind for p in pages],
            [PageKind.COVER, PageKind.TABLE_OF_CONTENTS, PageKind.ANSWER_KEY_TITLE]
        )

    def test_invalid_puzzles_per_page(self):
        """Test puzzles_per_page outside 1, 2, 4 is rejected."""
        for per_page in (0, 3, 5):
            with self.assertRaises(ConfigurationError):
                BookLayoutCompositor(BookSettings(puzzles_per_page=per_page))

    def test_compose_is_idempotent(self):
        """Test composing twice yields identical page trees."""
        settings = BookSettings(puzzles_per_page=4, title="Idempotent",
                                subtitle="Twice", author="Tester")
        puzzles = make_puzzles(6)
        compositor = BookLayoutCompositor(settings)

        self.assertEqual(compositor.compose(puzzles), compositor.compose(puzzles))
        self.assertEqual(compose(settings, puzzles), compose(settings, puzzles))


class TestGeometry(unittest.TestCase):
    """Tests for page dimensions."""

    def test_six_by_nine_with_bleed(self):
        """Test 6x9 with bleed is 6*72+18 by 9*72+18 points."""
        pages = compose(BookSettings(trim_size="6x9", bleed=True), make_puzzles(1))

        for page in pages:
            self.assertEqual(page.width, 6 * 72 + 18)
            self.assertEqual(page.height, 9 * 72 + 18)

    def test_six_by_nine_without_bleed(self):
        """Test 6x9 without bleed is the bare trim size."""
        pages = compose(BookSettings(trim_size="6x9"), make_puzzles(1))

        self.assertEqual((pages[0].width, pages[0].height), (432, 648))

    def test_unknown_trim_size_falls_back(self):
        """Test an unknown trim size falls back to 6x9 with a warning."""
        with self.assertLogs('units', level='WARNING'):
            compositor = BookLayoutCompositor(BookSettings(trim_size="4x4"))

        self.assertEqual(compositor.geometry.width, 432)
        self.assertEqual(compositor.geometry.height, 648)

    def test_puzzle_grids_are_square(self):
        """Test every grid cell on puzzle pages is square."""
        pages = compose(BookSettings(puzzles_per_page=2), make_puzzles(2))

        cells = [c for c in pages[2].commands if isinstance(c, StrokeRect)]
        self.assertEqual(len(cells), 2 * 12 * 12)
        for cell in cells:
            self.assertAlmostEqual(cell.width, cell.height)

    def assert_puzzle_pages_fit(self, settings, puzzle, count):
        geometry = PageGeometry.for_trim_size(settings.trim_size)
        bottom = geometry.content_top + geometry.content_height
        words = set(puzzle.used_words)

        pages = compose(settings, [puzzle] * count)

        puzzle_pages = [p for p in pages if p.kind is PageKind.PUZZLES]
        self.assertTrue(puzzle_pages)
        for page in puzzle_pages:
            cells = [c for c in page.commands if isinstance(c, StrokeRect)]
            self.assertEqual(len(cells),
                             len(page.puzzle_indices) * puzzle.size ** 2)
            self.assertGreater(cells[0].width, 0)

            runs = [c for c in page.commands if isinstance(c, TextRun)]
            for run in runs:
                self.assertLessEqual(run.y + run.font_size, bottom + 1e-6)

            # Listed words never run into the next column or past the page
            right = geometry.content_left(page.number) + geometry.content_width
            rows = {}
            for run in runs:
                if run.text in words:
                    rows.setdefault(run.y, []).append(run)
            self.assertTrue(rows)
            for row in rows.values():
                row.sort(key=lambda r: r.x)
                edges = [r.x for r in row[1:]] + [right]
                for run, edge in zip(row, edges):
                    end = run.x + stringWidth(run.text, run.font, run.font_size)
                    self.assertLessEqual(end, edge + 1e-6)

    def test_content_stays_inside_slots(self):
        """Test long word lists shrink the grid instead of overflowing."""
        settings = BookSettings(puzzles_per_page=4, include_answers=False,
                                include_page_numbers=False)

        self.assert_puzzle_pages_fit(settings, make_filled_puzzle(15, 40), 4)

    def test_small_trim_four_per_page_keeps_grid(self):
        """Test a long list on 5x8 at 4 per page keeps a drawn grid."""
        settings = BookSettings(trim_size="5x8", puzzles_per_page=4,
                                include_answers=False, include_page_numbers=False)

        self.assert_puzzle_pages_fit(settings, make_filled_puzzle(20, 20), 4)

    def test_long_words_use_fewer_columns(self):
        """Test words too wide for four columns are laid out in fewer."""
        words = ("CROCODILE", "BUTTERFLY", "PORCUPINE", "ALLIGATOR",
                 "WOLVERINE", "CHAMELEON", "SALAMANDER", "RHINOCEROS")
        grid = tuple(tuple("A" * 12) for _ in range(12))
        puzzle = Puzzle(grid=grid, used_words=words)
        settings = BookSettings(puzzles_per_page=4, include_answers=False,
                                include_page_numbers=False)

        self.assert_puzzle_pages_fit(settings, puzzle, 4)

    def test_word_list_too_long_for_slot(self):
        """Test a list that cannot fit below the grid is rejected."""
        settings = BookSettings(trim_size="5x8", puzzles_per_page=4,
                                include_answers=False)

        with self.assertRaises(ConfigurationError):
            compose(settings, [make_filled_puzzle(20, 60)] * 4)

    def test_max_words_per_puzzle(self):
        """Test the slot word capacity for a small trim at 4 per page."""
        compositor = BookLayoutCompositor(
            BookSettings(trim_size="5x8", puzzles_per_page=4)
        )

        # 252pt slot: 30 title + 100 grid + 25 header leaves 9 rows of 10pt
        self.assertEqual(compositor.max_words_per_puzzle(20), 36)
        self.assertGreater(BookLayoutCompositor(BookSettings())
                           .max_words_per_puzzle(15), 100)


class TestTableOfContents(unittest.TestCase):
    """Tests for the table of contents."""

    def test_toc_page_numbers_match_actual_pages(self):
        """Test every TOC entry points at the page that holds it."""
        for per_page in (1, 2, 4):
            for cover in (True, False):
                settings = BookSettings(puzzles_per_page=per_page,
                                        include_cover_page=cover)
                pages = compose(settings, make_puzzles(7))

                toc = next(p for p in pages
                           if p.kind is PageKind.TABLE_OF_CONTENTS)
                entries = dict(toc_entries(toc))

                for page in pages:
                    if page.kind is PageKind.PUZZLES:
                        for index in page.puzzle_indices:
                            self.assertEqual(entries[puzzle_title(index)],
                                             page.number)
                    if page.kind is PageKind.ANSWER_KEY_TITLE:
                        self.assertEqual(entries["Answer Key"], page.number)

    def test_toc_without_answers(self):
        """Test no Answer Key entry is listed when answers are off."""
        pages = compose(BookSettings(include_answers=False), make_puzzles(2))

        self.assertNotIn("Answer Key", pages[1].texts())

    def test_toc_truncates_when_full(self):
        """Test entries that do not fit the single TOC page are omitted."""
        settings = BookSettings(puzzles_per_page=4)
        puzzles = make_puzzles(1, 5) * 60

        with self.assertLogs('book_compositor', level='WARNING'):
            pages = compose(settings, puzzles)

        entries = toc_entries(pages[1])
        self.assertLess(len(entries), 61)
        self.assertEqual(entries[-1][0], "Answer Key")
        self.assertEqual(len(pages), expected_page_count(settings, 60))


class TestPageContent(unittest.TestCase):
    """Tests for what each page draws."""

    def test_page_numbers_on_every_page_but_cover(self):
        """Test page-number text appears on all pages except the cover."""
        pages = compose(BookSettings(), make_puzzles(2))

        self.assertNotIn("Page 1", pages[0].texts())
        for page in pages[1:]:
            self.assertIn(f"Page {page.number}", page.texts())

    def test_page_numbers_disabled(self):
        """Test include_page_numbers=False omits page numbers."""
        pages = compose(BookSettings(include_page_numbers=False), make_puzzles(1))

        for page in pages:
            self.assertFalse(any(t.startswith("Page ") for t in page.texts()))

    def test_page_number_honors_bleed(self):
        """Test the page number sits above the bottom margin and bleed inset."""
        settings = BookSettings(bleed=True, include_cover_page=False)
        page = compose(settings, make_puzzles(1))[0]

        run = next(c for c in page.commands
                   if isinstance(c, TextRun) and c.text == "Page 1")
        self.assertEqual(run.y, page.height - 36 / 2 - 9)
        self.assertEqual(run.align, "center")

    def test_every_page_has_background(self):
        """Test every page starts with a full-page background fill."""
        settings = BookSettings(interior_theme="dark")
        pages = compose(settings, make_puzzles(1))

        for page in pages:
            background = page.commands[0]
            self.assertIsInstance(background, FillRect)
            self.assertEqual(background.color, "#222222")
            self.assertEqual((background.width, background.height),
                             (page.width, page.height))

    def test_cover_text(self):
        """Test the cover carries title, subtitle and author line."""
        settings = BookSettings(title="Animal Search", subtitle="Volume One",
                                author="Jo Smith")
        cover = compose(settings, [])[0]

        texts = cover.texts()
        self.assertIn("Animal Search", texts)
        self.assertIn("Volume One", texts)
        self.assertIn("by Jo Smith", texts)

    def test_cover_decoration_seeded(self):
        """Test the cover decoration depends on decoration_seed."""
        first = compose(BookSettings(decoration_seed=1), [])[0]
        second = compose(BookSettings(decoration_seed=2), [])[0]

        self.assertNotEqual(first.commands, second.commands)

    def test_theme_prefixed_titles(self):
        """Test puzzle titles carry the capitalized theme."""
        pages = compose(BookSettings(theme="ocean"), make_puzzles(1))

        self.assertIn("Ocean Search #1", pages[2].texts())

    def test_word_list_below_grid(self):
        """Test every used word is listed on the puzzle page."""
        puzzle = make_puzzles(1)[0]
        pages = compose(BookSettings(include_answers=False), [puzzle])

        texts = pages[2].texts()
        self.assertIn("Find these words:", texts)
        for word in puzzle.used_words:
            self.assertIn(word, texts)

    def test_answer_page_highlights_solution_cells(self):
        """Test answer cells are highlighted once per solution cell, in bold."""
        puzzle = make_puzzles(1)[0]
        settings = BookSettings(include_cover_page=False)
        compositor = BookLayoutCompositor(settings)
        pages = compositor.compose([puzzle])

        answers = pages[-1]
        highlights = [c for c in answers.commands
                      if isinstance(c, FillRect) and c.color == HIGHLIGHT_COLOR]
        self.assertEqual(len(highlights), len(puzzle.solution_cells()))
        for fill in highlights:
            self.assertEqual(fill.opacity, 0.3)

        bold_letters = [c for c in answers.commands
                        if isinstance(c, TextRun) and len(c.text) == 1
                        and c.font == compositor.fonts.bold]
        self.assertEqual(len(bold_letters), len(puzzle.solution_cells()))

        puzzle_page = pages[1]
        self.assertFalse(any(
            isinstance(c, FillRect) and c.color == HIGHLIGHT_COLOR
            for c in puzzle_page.commands
        ))

    def test_theme_facts(self):
        """Test a theme fact is added under each puzzle when enabled."""
        settings = BookSettings(include_theme_facts=True,
                                theme_facts=["Owls can rotate their heads."])
        pages = compose(settings, make_puzzles(1))

        self.assertTrue(any(t.startswith("Did you know?")
                            for t in pages[2].texts()))

    def test_font_family(self):
        """Test the font family applies to page text."""
        pages = compose(BookSettings(font_family="mono"), make_puzzles(1))

        fonts = {c.font for c in pages[2].commands if isinstance(c, TextRun)}
        self.assertTrue(fonts <= {"Courier", "Courier-Bold", "Courier-Oblique"})


class TestHelpers(unittest.TestCase):
    """Tests for text helpers."""

    def test_wrap_text_respects_width(self):
        """Test wrapped lines fit inside the given width."""
        text = "The quick brown fox jumps over the lazy dog " * 3
        lines = wrap_text(text, "Helvetica", 12, 100)

        self.assertGreater(len(lines), 1)
        self.assertEqual(" ".join(lines), " ".join(text.split()))
        for line in lines:
            if " " in line:
                self.assertLessEqual(stringWidth(line, "Helvetica", 12), 100)

    def test_puzzle_title(self):
        """Test default and themed puzzle titles."""
        self.assertEqual(puzzle_title(0), "Word Search #1")
        self.assertEqual(puzzle_title(4, "animal"), "Animal Search #5")


if __name__ == '__main__':
    unittest.main()
