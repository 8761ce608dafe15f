"""
Module: render.rasterizer

Purpose:
    Page sources that turn source document pages into RGB rasters. The
    engine never edits PDF content; it only works on these rasters.

Key Classes:
    - PageSize: Natural page size in PDF points
    - PageSource: Abstract page source
    - PdfPageSource: PyMuPDF-backed source for PDF files
    - ImagePageSource: In-memory source built from PIL images
    - RasterizationError: A page image could not be produced

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL.Image: Raster handling
    - asyncio (std): Serialised, off-loop rendering

Used By:
    - render.compositor: build_page_composite()
    - export.controller: Export loop
    - interactive.viewer: View rendering
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import fitz
from PIL import Image

logger = logging.getLogger(__name__)


class RasterizationError(Exception):
    """The page source failed to produce a page image."""

    def __init__(self, message: str, page_index: int | None = None):
        super().__init__(message)
        self.page_index = page_index


@dataclass(frozen=True)
class PageSize:
    """Natural (unscaled) page size in PDF points."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Page size must be positive: {self.width}x{self.height}")


class PageSource(ABC):
    """
    Abstract source of page rasters.

    Page indices are 0-based. `rasterize` returns an RGB image whose size
    is the natural page size times `scale`.
    """

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages."""

    @abstractmethod
    def page_size(self, index: int) -> PageSize:
        """Natural size of a page."""

    @abstractmethod
    async def rasterize(self, index: int, scale: float) -> Image.Image:
        """
        Render a page.

        Raises:
            RasterizationError: If the page cannot be rendered
        """

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.page_count:
            raise RasterizationError(
                f"Page index {index} out of range (0-{self.page_count - 1})", page_index=index
            )


class PdfPageSource(PageSource):
    """
    PyMuPDF page source.

    Rendering runs in a worker thread so the event loop stays responsive;
    an asyncio.Lock makes sure only one page renders at a time.

    Example:
        >>> with PdfPageSource.open("paper.pdf") as source:
        ...     image = asyncio.run(source.rasterize(0, 2.0))
    """

    def __init__(self, doc: fitz.Document, name: str = ""):
        self._doc = doc
        self.name = name
        self._lock = asyncio.Lock()

    @classmethod
    def open(cls, path: Path | str) -> "PdfPageSource":
        """
        Open a PDF file.

        Raises:
            RasterizationError: If the file cannot be opened as a PDF
        """
        path = Path(path)
        try:
            doc = fitz.open(path)
        except Exception as e:
            raise RasterizationError(f"Failed to open {path}: {e}") from e
        logger.info(f"Opened {path.name} ({doc.page_count} pages)")
        return cls(doc, name=path.name)

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "document.pdf") -> "PdfPageSource":
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise RasterizationError(f"Failed to open {name}: {e}") from e
        return cls(doc, name=name)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page_size(self, index: int) -> PageSize:
        self._check_index(index)
        rect = self._doc[index].rect
        return PageSize(rect.width, rect.height)

    async def rasterize(self, index: int, scale: float) -> Image.Image:
        self._check_index(index)
        async with self._lock:
            try:
                return await asyncio.to_thread(self._render, index, scale)
            except Exception as e:
                raise RasterizationError(f"Failed to render page {index}: {e}", page_index=index) from e

    def _render(self, index: int, scale: float) -> Image.Image:
        page = self._doc[index]
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False, colorspace=fitz.csRGB)
        logger.debug(f"Rendered page {index} at scale {scale:.3f} -> {pix.width}x{pix.height}")
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "PdfPageSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ImagePageSource(PageSource):
    """
    Page source backed by in-memory images.

    Each image is treated as a page whose natural size is given in
    points; rasterizing resizes the image to that size times the scale.
    """

    def __init__(self, images: Sequence[Image.Image], sizes: Sequence[PageSize] | None = None):
        if sizes is not None and len(sizes) != len(images):
            raise ValueError("sizes must match images")
        self._images = [img.convert("RGB") for img in images]
        self._sizes = list(sizes) if sizes is not None else [PageSize(*img.size) for img in self._images]

    @property
    def page_count(self) -> int:
        return len(self._images)

    def page_size(self, index: int) -> PageSize:
        self._check_index(index)
        return self._sizes[index]

    async def rasterize(self, index: int, scale: float) -> Image.Image:
        self._check_index(index)
        size = self._sizes[index]
        width = max(1, round(size.width * scale))
        height = max(1, round(size.height * scale))
        image = self._images[index]
        if image.size == (width, height):
            return image.copy()
        return image.resize((width, height), Image.Resampling.LANCZOS)
