"""
Module: export.writer

Purpose:
    Assemble output pages into a PDF using ReportLab. Each OutputPage
    becomes one PDF page, sized so the image fills it exactly.

Key Functions:
    - write_pdf(): Write pages to a PDF file

Dependencies:
    - reportlab: PDF generation
    - PIL: JPEG encoding

Used By:
    - export.controller: export_document()
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .slicer import OutputPage

logger = logging.getLogger(__name__)


class WriteError(Exception):
    """The output document could not be written."""


def write_pdf(
    pages: Sequence[OutputPage],
    output_path: Path,
    dpi: float = 2,
    quality: float = 0.8,
) -> Path:
    """
    Write output pages to a PDF.

    The file is written to a temporary path first and moved into place
    only when complete, so a failed write never leaves a partial file.

    Args:
        pages: Output pages in order
        output_path: Destination PDF
        dpi: Pixels per point used when the pages were rendered
        quality: JPEG quality, 0..1

    Returns:
        The output path

    Raises:
        WriteError: If there are no pages or the file cannot be written
    """
    if not pages:
        raise WriteError("No pages to write")

    output_path = Path(output_path)
    temp_path = output_path.with_suffix(output_path.suffix + ".tmp")
    jpeg_quality = _jpeg_quality(quality)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        c = canvas.Canvas(str(temp_path))
        for page in pages:
            width_pt = _px_to_pt(page.image.width, dpi)
            height_pt = _px_to_pt(page.image.height, dpi)
            c.setPageSize((width_pt, height_pt))
            c.drawImage(_pil_to_reader(page.image, jpeg_quality), 0, 0, width=width_pt, height=height_pt)
            c.showPage()
        c.save()
        temp_path.replace(output_path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise WriteError(f"Failed to write {output_path}: {e}") from e
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise

    logger.info(f"Wrote {len(pages)} pages to {output_path}")
    return output_path


def _jpeg_quality(quality: float) -> int:
    """Map 0..1 quality to Pillow's JPEG scale (1-95)."""
    return max(1, min(95, round(quality * 100)))


def _pil_to_reader(img: Image.Image, jpeg_quality: int) -> ImageReader:
    """Encode a page image as JPEG for ReportLab."""
    buf = io.BytesIO()
    img.convert("RGB").save(buf, format="JPEG", quality=jpeg_quality)
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: int, dpi: float) -> float:
    """Convert pixels to PDF points at `dpi` pixels per point."""
    return px / dpi
