# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Render composed pages to a PDF document using ReportLab.

Pages use a top-left origin with y growing downward; ReportLab uses a
bottom-left origin, so every y coordinate is flipped against the page
height here.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Sequence, Union

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas

from models import DrawCommand, FillRect, Line, Page, StrokeRect, TextRun
from units import TEXT_BASELINE_RATIO

logger = logging.getLogger(__name__)

PDF_SUBJECT = "Word Search Puzzle Book"


def render_pdf(
    pages: Sequence[Page],
    output: Union[str, Path, BinaryIO],
    title: str = "",
    author: str = "",
    theme: str = "",
) -> None:
    """
    Write pages to a PDF file or binary stream.

    Args:
        pages: Composed pages in print order
        output: File path or writable binary stream
        title: Document title metadata
        author: Document author metadata
        theme: Added to the keywords metadata
    """
    if not pages:
        logger.warning("No pages to render, creating empty PDF")

    if isinstance(output, (str, Path)):
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        target = str(output)
    else:
        target = output

    first_size = (pages[0].width, pages[0].height) if pages else (432, 648)
    c = canvas.Canvas(target, pagesize=first_size)
    c.setTitle(title)
    c.setAuthor(author)
    c.setSubject(PDF_SUBJECT)
    c.setKeywords(", ".join(k for k in ("word search", "puzzle", theme) if k))

    for page in pages:
        c.setPageSize((page.width, page.height))
        for command in page.commands:
            _draw(c, command, page.height)
        c.showPage()

    c.save()
    logger.info(f"Rendered {len(pages)} pages to PDF")


def render_pdf_bytes(pages: Sequence[Page], **metadata) -> bytes:
    """Render pages and return the PDF document as bytes."""
    buffer = io.BytesIO()
    render_pdf(pages, buffer, **metadata)
    return buffer.getvalue()


def _draw(c: canvas.Canvas, command: DrawCommand, page_height: float):
    if isinstance(command, FillRect):
        c.saveState()
        c.setFillColor(HexColor(command.color))
        c.setFillAlpha(command.opacity)
        c.rect(command.x, page_height - command.y - command.height,
               command.width, command.height, stroke=0, fill=1)
        c.restoreState()
    elif isinstance(command, StrokeRect):
        c.saveState()
        c.setStrokeColor(HexColor(command.color))
        c.setLineWidth(command.line_width)
        c.rect(command.x, page_height - command.y - command.height,
               command.width, command.height, stroke=1, fill=0)
        c.restoreState()
    elif isinstance(command, Line):
        c.saveState()
        c.setStrokeColor(HexColor(command.color))
        c.setLineWidth(command.line_width)
        c.line(command.x1, page_height - command.y1,
               command.x2, page_height - command.y2)
        c.restoreState()
    elif isinstance(command, TextRun):
        _draw_text(c, command, page_height)
    else:
        raise TypeError(f"Unknown draw command: {type(command).__name__}")


def _draw_text(c: canvas.Canvas, run: TextRun, page_height: float):
    baseline = page_height - (run.y + run.font_size * TEXT_BASELINE_RATIO)
    c.saveState()
    c.setFillColor(HexColor(run.color))
    c.setFont(run.font, run.font_size)
    if run.width is not None and run.align == "center":
        c.drawCentredString(run.x + run.width / 2, baseline, run.text)
    elif run.width is not None and run.align == "right":
        c.drawRightString(run.x + run.width, baseline, run.text)
    else:
        c.drawString(run.x, baseline, run.text)
    c.restoreState()
