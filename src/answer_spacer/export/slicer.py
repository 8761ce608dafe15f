"""
Module: export.slicer

Purpose:
    Cuts a stream of page composites into fixed-size output pages.
    In continuous mode content flows from one source page into the next
    output page with no gap; in independent mode every source page starts
    on a fresh output page.

Key Classes:
    - PageSlicer: Incremental slicer (feed one composite at a time)
    - OutputPage: One finished output page
    - RowCopy: Record of a row range copied into an output page

Key Functions:
    - slice_to_pages(): Slice a whole sequence of composites
    - stitch_long_page(): Stack all composites into one tall page

Dependencies:
    - PIL.Image: Page assembly

Used By:
    - export.controller: Paginated and long exports
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from PIL import Image

from answer_spacer.common.thresholds import STYLE_THRESHOLDS
from answer_spacer.render.compositor import CompositeRaster

logger = logging.getLogger(__name__)

RasterLike = Union[CompositeRaster, Image.Image]


@dataclass(frozen=True)
class RowCopy:
    """
    A band of rows copied from a stream raster into an output page.

    Attributes:
        source_index: Position of the raster in the stream (0-based)
        source_top: First row copied from the raster
        dest_top: First row written in the output page
        height: Number of rows
    """

    source_index: int
    source_top: int
    dest_top: int
    height: int


@dataclass
class OutputPage:
    """
    One output page.

    Attributes:
        index: 0-indexed position in the output document
        image: RGB page image
        copies: Row bands copied into the page, top to bottom
    """

    index: int
    image: Image.Image
    copies: list[RowCopy] = field(default_factory=list)

    @property
    def filled_height(self) -> int:
        """Rows covered by copied content (the rest is white padding)."""
        return sum(c.height for c in self.copies)


def _as_image(raster: RasterLike) -> Image.Image:
    image = raster.image if isinstance(raster, CompositeRaster) else raster
    return image if image.mode == "RGB" else image.convert("RGB")


class PageSlicer:
    """
    Incremental pagination of a composite stream.

    Feed composites in source order with `feed()`; each call returns the
    output pages completed so far. Call `finish()` once at the end to
    flush the last partial page (continuous mode). At most one output page
    is kept between calls.

    Example:
        >>> slicer = PageSlicer(1190, 1683)
        >>> pages = []
        >>> for composite in composites:
        ...     pages.extend(slicer.feed(composite))
        >>> pages.extend(slicer.finish())
    """

    def __init__(self, page_width: int, page_height: int, continue_across: bool = True):
        if page_width < 1 or page_height < 1:
            raise ValueError(f"Output page must be at least 1x1 px: {page_width}x{page_height}")
        self.page_width = int(page_width)
        self.page_height = int(page_height)
        self.continue_across = continue_across

        self._source_index = 0
        self._next_page_index = 0
        self._current: OutputPage | None = None
        self._y_dest = 0
        self._finished = False

    def feed(self, raster: RasterLike) -> list[OutputPage]:
        """Consume one composite; return the pages it completed."""
        if self._finished:
            raise RuntimeError("PageSlicer.feed() called after finish()")

        image = _as_image(raster)
        source_index = self._source_index
        self._source_index += 1

        if self.continue_across:
            pages = self._feed_continuous(image, source_index)
        else:
            pages = self._feed_independent(image, source_index)
        logger.debug(
            f"Sliced stream raster {source_index} ({image.height} rows) into {len(pages)} completed pages"
        )
        return pages

    def finish(self) -> list[OutputPage]:
        """Flush the partially filled page, if any."""
        self._finished = True
        if self._current is None:
            return []
        page = self._current
        self._current = None
        self._y_dest = 0
        return [page]

    # ─────────────────────────────────────────────────────────────────────
    # Policies
    # ─────────────────────────────────────────────────────────────────────

    def _feed_continuous(self, image: Image.Image, source_index: int) -> list[OutputPage]:
        completed = []
        slice_offset = 0
        while slice_offset < image.height:
            if self._current is None:
                self._current = self._new_page()
                self._y_dest = 0

            remaining_in_slice = image.height - slice_offset
            remaining_on_page = self.page_height - self._y_dest
            h = min(remaining_in_slice, remaining_on_page)
            self._copy(image, source_index, slice_offset, self._current, self._y_dest, h)
            self._y_dest += h
            slice_offset += h

            if self._y_dest >= self.page_height:
                completed.append(self._current)
                self._current = None
                self._y_dest = 0
        return completed

    def _feed_independent(self, image: Image.Image, source_index: int) -> list[OutputPage]:
        completed = []
        offset = 0
        while offset < image.height:
            page = self._new_page()
            h = min(self.page_height, image.height - offset)
            self._copy(image, source_index, offset, page, 0, h)
            completed.append(page)
            offset += h
        return completed

    # ─────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────

    def _new_page(self) -> OutputPage:
        image = Image.new("RGB", (self.page_width, self.page_height), STYLE_THRESHOLDS.background)
        page = OutputPage(index=self._next_page_index, image=image)
        self._next_page_index += 1
        return page

    def _copy(
        self,
        image: Image.Image,
        source_index: int,
        source_top: int,
        page: OutputPage,
        dest_top: int,
        height: int,
    ) -> None:
        width = min(image.width, self.page_width)
        band = image.crop((0, source_top, width, source_top + height))
        page.image.paste(band, (0, dest_top))
        page.copies.append(RowCopy(source_index, source_top, dest_top, height))


def slice_to_pages(
    rasters: Iterable[RasterLike],
    page_width: int,
    page_height: int,
    continue_across: bool = True,
) -> list[OutputPage]:
    """
    Slice a sequence of composites into output pages.

    Args:
        rasters: Composites in source order
        page_width: Output page width (px)
        page_height: Output page height (px)
        continue_across: Carry overflow into the next output page

    Returns:
        Output pages in order. In continuous mode their number is
        ceil(total height / page_height).

    Raises:
        ValueError: If the page size is smaller than 1x1
    """
    slicer = PageSlicer(page_width, page_height, continue_across=continue_across)
    pages: list[OutputPage] = []
    for raster in rasters:
        pages.extend(slicer.feed(raster))
    pages.extend(slicer.finish())
    logger.info(f"Sliced stream into {len(pages)} pages ({page_width}x{page_height})")
    return pages


def stitch_long_page(rasters: Iterable[RasterLike], width: int) -> OutputPage:
    """
    Stack all composites into a single page as tall as the whole stream.

    Raises:
        ValueError: If width < 1 or the stream is empty
    """
    if width < 1:
        raise ValueError(f"width must be >= 1: {width}")
    images = [_as_image(r) for r in rasters]
    if not images:
        raise ValueError("No rasters to stitch")

    total_height = sum(img.height for img in images)
    canvas = Image.new("RGB", (int(width), total_height), STYLE_THRESHOLDS.background)
    page = OutputPage(index=0, image=canvas)

    y_offset = 0
    for i, img in enumerate(images):
        canvas.paste(img.crop((0, 0, min(img.width, int(width)), img.height)), (0, y_offset))
        page.copies.append(RowCopy(i, 0, y_offset, img.height))
        y_offset += img.height
    return page
