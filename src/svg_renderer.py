# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
SVG Renderer for composed book pages.
Produces one standalone SVG document per page, for previews.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
from xml.sax.saxutils import escape, quoteattr

from models import DrawCommand, FillRect, Line, Page, StrokeRect, TextRun
from units import TEXT_BASELINE_RATIO, points_to_pixels

# PDF base-14 names mapped to CSS families
CSS_FONT_FAMILIES = {
    "Helvetica": "Helvetica, Arial, sans-serif",
    "Times": "'Times New Roman', Times, serif",
    "Courier": "'Courier New', Courier, monospace",
}

TEXT_ANCHORS = {"left": "start", "center": "middle", "right": "end"}


@dataclass
class SVGConfig:
    """Configuration for SVG rendering."""
    # Size output in device pixels at this DPI; None keeps points
    dpi: Optional[int] = None
    include_title: bool = True


class SVGRenderer:
    """Renders composed pages as SVG."""

    def __init__(self, config: Optional[SVGConfig] = None):
        self.config = config or SVGConfig()

    def render(self, page: Page) -> str:
        """
        Render one page.

        Args:
            page: Composed page

        Returns:
            SVG string
        """
        cfg = self.config
        if cfg.dpi:
            width = points_to_pixels(page.width, cfg.dpi)
            height = points_to_pixels(page.height, cfg.dpi)
        else:
            width, height = page.width, page.height

        svg_parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'viewBox="0 0 {page.width:g} {page.height:g}" '
            f'width="{width:g}" height="{height:g}">'
        ]

        if cfg.include_title:
            svg_parts.append(f'  <title>Page {page.number}</title>')

        for command in page.commands:
            svg_parts.append('  ' + self._render_command(command))

        svg_parts.append('</svg>')
        return "\n".join(svg_parts)

    def render_all(self, pages: Sequence[Page]) -> List[str]:
        return [self.render(page) for page in pages]

    def save_all(
        self,
        pages: Sequence[Page],
        output_dir: str = ".",
        base_name: str = "wordsearch"
    ) -> Dict[int, str]:
        """
        Render pages and save one file per page.

        Returns dict mapping page number to file path.
        """
        os.makedirs(output_dir, exist_ok=True)
        files = {}
        for page in pages:
            path = os.path.join(output_dir, f"{base_name}_page_{page.number:03d}.svg")
            with open(path, 'w', encoding='utf-8') as f:
                f.write(self.render(page))
            files[page.number] = path
        return files

    def _render_command(self, command: DrawCommand) -> str:
        if isinstance(command, FillRect):
            opacity = ""
            if command.opacity < 1:
                opacity = f' fill-opacity="{command.opacity:g}"'
            return (
                f'<rect x="{command.x:g}" y="{command.y:g}" '
                f'width="{command.width:g}" height="{command.height:g}" '
                f'fill="{command.color}"{opacity}/>'
            )
        if isinstance(command, StrokeRect):
            return (
                f'<rect x="{command.x:g}" y="{command.y:g}" '
                f'width="{command.width:g}" height="{command.height:g}" '
                f'fill="none" stroke="{command.color}" '
                f'stroke-width="{command.line_width:g}"/>'
            )
        if isinstance(command, Line):
            return (
                f'<line x1="{command.x1:g}" y1="{command.y1:g}" '
                f'x2="{command.x2:g}" y2="{command.y2:g}" '
                f'stroke="{command.color}" stroke-width="{command.line_width:g}"/>'
            )
        if isinstance(command, TextRun):
            return self._render_text(command)
        raise TypeError(f"Unknown draw command: {type(command).__name__}")

    def _render_text(self, run: TextRun) -> str:
        anchor = "start"
        x = run.x
        if run.width is not None:
            anchor = TEXT_ANCHORS.get(run.align, "start")
            if run.align == "center":
                x = run.x + run.width / 2
            elif run.align == "right":
                x = run.x + run.width

        base, _, style = run.font.partition("-")
        family = CSS_FONT_FAMILIES.get(base, CSS_FONT_FAMILIES["Helvetica"])
        weight = ' font-weight="bold"' if "Bold" in style else ""
        italic = ' font-style="italic"' if ("Oblique" in style or "Italic" in style) else ""
        baseline = run.y + run.font_size * TEXT_BASELINE_RATIO

        return (
            f'<text x="{x:g}" y="{baseline:g}" '
            f'font-family={quoteattr(family)} font-size="{run.font_size:g}"'
            f'{weight}{italic} fill="{run.color}" text-anchor="{anchor}">'
            f'{escape(run.text)}</text>'
        )
