# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Page geometry helpers shared by the book compositor and renderers.

All layout is computed in points (72 per inch), origin top-left,
y increasing downward. Pixel sizes are derived at a fixed 300 DPI.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from models import ConfigurationError

logger = logging.getLogger(__name__)


POINTS_PER_INCH = 72
RENDER_DPI = 300

# KDP bleed allowance: 0.125in on every trimmed edge
BLEED_INCHES = 0.125
BLEED_PT = BLEED_INCHES * POINTS_PER_INCH  # 9pt

DEFAULT_MARGIN_PT = 0.5 * POINTS_PER_INCH

# Baseline sits this fraction of the font size below a text box's top
TEXT_BASELINE_RATIO = 0.8

# Amazon KDP trim sizes (width, height) in inches
KDP_TRIM_SIZES_INCHES: Dict[str, Tuple[float, float]] = {
    "5x8": (5, 8),
    "6x9": (6, 9),
    "7x10": (7, 10),
    "8x10": (8, 10),
    "8.5x11": (8.5, 11),
    "8.25x8.25": (8.25, 8.25),
}

DEFAULT_TRIM_SIZE = "6x9"


def inches_to_points(inches: float) -> float:
    """Convert inches to points."""
    return inches * POINTS_PER_INCH


def points_to_inches(points: float) -> float:
    """Convert points to inches."""
    return points / POINTS_PER_INCH


def points_to_pixels(points: float, dpi: int = RENDER_DPI) -> int:
    """Convert points to whole device pixels at the given DPI."""
    return int(round(points / POINTS_PER_INCH * dpi))


def resolve_trim_size(
    key: str,
    fallback: Optional[str] = DEFAULT_TRIM_SIZE
) -> Tuple[float, float]:
    """
    Look up a trim size and return (width, height) in points.

    Args:
        key: Trim size name such as "6x9"
        fallback: Trim size used when key is unknown, or None to fail

    Returns:
        (width, height) in points

    Raises:
        ConfigurationError: If key is unknown and no fallback is given
    """
    if key in KDP_TRIM_SIZES_INCHES:
        width_in, height_in = KDP_TRIM_SIZES_INCHES[key]
    elif fallback is not None and fallback in KDP_TRIM_SIZES_INCHES:
        logger.warning(f"Unknown trim size '{key}', using {fallback}")
        width_in, height_in = KDP_TRIM_SIZES_INCHES[fallback]
    else:
        raise ConfigurationError(
            f"Unknown trim size '{key}'. "
            f"Must be one of: {list(KDP_TRIM_SIZES_INCHES)}"
        )
    return inches_to_points(width_in), inches_to_points(height_in)


@dataclass(frozen=True)
class Margins:
    """Page margins in points. Inner is the binding side."""
    top: float = DEFAULT_MARGIN_PT
    bottom: float = DEFAULT_MARGIN_PT
    inner: float = DEFAULT_MARGIN_PT
    outer: float = DEFAULT_MARGIN_PT


@dataclass(frozen=True)
class PageGeometry:
    """Resolved physical page for one book."""
    trim_width: float
    trim_height: float
    bleed: bool = False
    margins: Margins = Margins()

    @classmethod
    def for_trim_size(
        cls,
        trim_size: str,
        bleed: bool = False,
        margins: Optional[Margins] = None
    ) -> 'PageGeometry':
        """Build geometry from a named trim size, falling back to 6x9."""
        width, height = resolve_trim_size(trim_size)
        return cls(
            trim_width=width,
            trim_height=height,
            bleed=bleed,
            margins=margins or Margins(),
        )

    @property
    def bleed_inset(self) -> float:
        return BLEED_PT if self.bleed else 0.0

    @property
    def width(self) -> float:
        return self.trim_width + 2 * self.bleed_inset

    @property
    def height(self) -> float:
        return self.trim_height + 2 * self.bleed_inset

    @property
    def width_px(self) -> int:
        return points_to_pixels(self.width)

    @property
    def height_px(self) -> int:
        return points_to_pixels(self.height)

    @property
    def content_width(self) -> float:
        """Usable width after bleed and inner/outer margins."""
        return (self.width - 2 * self.bleed_inset
                - self.margins.inner - self.margins.outer)

    @property
    def content_height(self) -> float:
        """Usable height after bleed and top/bottom margins."""
        return (self.height - 2 * self.bleed_inset
                - self.margins.top - self.margins.bottom)

    @property
    def content_top(self) -> float:
        return self.bleed_inset + self.margins.top

    def content_left(self, page_number: int) -> float:
        """
        Left edge of the content box.

        Odd (recto) pages bind on the left, so the inner margin is on the
        left; even (verso) pages carry the outer margin on the left.
        """
        if page_number % 2 == 1:
            return self.bleed_inset + self.margins.inner
        return self.bleed_inset + self.margins.outer
