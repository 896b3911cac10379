# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for page geometry helpers."""

import os
import sys
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from models import ConfigurationError
from units import (
    BLEED_PT, KDP_TRIM_SIZES_INCHES, Margins, PageGeometry, inches_to_points,
    points_to_inches, points_to_pixels, resolve_trim_size
)


class TestConversions(unittest.TestCase):
    """Tests for unit conversion."""

    def test_inches_and_points(self):
        """Test 72 points per inch both ways."""
        self.assertEqual(inches_to_points(6), 432)
        self.assertEqual(points_to_inches(648), 9)
        self.assertEqual(BLEED_PT, 9)

    def test_points_to_pixels(self):
        """Test pixel conversion at 300 DPI."""
        self.assertEqual(points_to_pixels(72), 300)
        self.assertEqual(points_to_pixels(432), 1800)
        self.assertEqual(points_to_pixels(72, dpi=150), 150)


class TestTrimSizes(unittest.TestCase):
    """Tests for trim size lookup."""

    def test_all_trim_sizes(self):
        """Test every trim size resolves to inches * 72."""
        for key, (width, height) in KDP_TRIM_SIZES_INCHES.items():
            self.assertEqual(resolve_trim_size(key), (width * 72, height * 72))

    def test_fallback(self):
        """Test unknown keys fall back to 6x9 with a warning."""
        with self.assertLogs('units', level='WARNING'):
            self.assertEqual(resolve_trim_size("bogus"), (432, 648))

    def test_strict_lookup_raises(self):
        """Test unknown keys raise when no fallback is allowed."""
        with self.assertRaises(ConfigurationError):
            resolve_trim_size("bogus", fallback=None)


class TestPageGeometry(unittest.TestCase):
    """Tests for PageGeometry."""

    def test_bleed_adds_nine_points_per_edge(self):
        """Test bleed grows both dimensions by 18 points."""
        geometry = PageGeometry.for_trim_size("8.5x11", bleed=True)

        self.assertEqual(geometry.width, 8.5 * 72 + 18)
        self.assertEqual(geometry.height, 11 * 72 + 18)
        self.assertEqual(geometry.bleed_inset, 9)

    def test_pixel_size(self):
        """Test pixel dimensions at 300 DPI."""
        geometry = PageGeometry.for_trim_size("6x9")

        self.assertEqual((geometry.width_px, geometry.height_px), (1800, 2700))

    def test_content_box(self):
        """Test margins and bleed are removed from the content box."""
        geometry = PageGeometry.for_trim_size(
            "6x9", bleed=True, margins=Margins(top=20, bottom=30, inner=40, outer=10)
        )

        self.assertEqual(geometry.content_width, 450 - 18 - 40 - 10)
        self.assertEqual(geometry.content_height, 666 - 18 - 20 - 30)
        self.assertEqual(geometry.content_top, 9 + 20)

    def test_mirrored_margins(self):
        """Test odd pages put the inner margin left, even pages the outer."""
        geometry = PageGeometry.for_trim_size(
            "6x9", margins=Margins(inner=54, outer=36)
        )

        self.assertEqual(geometry.content_left(1), 54)
        self.assertEqual(geometry.content_left(2), 36)
        self.assertEqual(geometry.content_left(3), 54)


if __name__ == '__main__':
    unittest.main()
