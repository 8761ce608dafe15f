"""
Module: render.compositor

Purpose:
    Builds the reflowed raster of one source page: original content strips
    are copied to their shifted positions and spacer blocks are drawn in
    the gaps. The result is one tall image per source page.

Key Functions:
    - build_composite(): Draw a SegmentPlan from an already rendered page
    - build_page_composite(): Rasterize a page, plan it and build it
    - iter_page_composites(): Ordered composites for a whole document

Key Classes:
    - CompositeRaster: Reflowed raster of one source page

Dependencies:
    - PIL.Image: Image stitching
    - answer_spacer.layout.planner: Segment planning
    - answer_spacer.render.styles: Spacer drawing

Used By:
    - export.controller: Export composites
    - interactive.viewer: On-screen page rendering
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Iterable, Sequence

from PIL import Image

from answer_spacer.common.thresholds import STYLE_THRESHOLDS
from answer_spacer.core.models.segments import SegmentPlan
from answer_spacer.core.models.spacer import Spacer
from answer_spacer.layout.planner import plan_segments

from .rasterizer import PageSource
from .styles import render_spacer_style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositeRaster:
    """
    Reflowed raster of one source page.

    Attributes:
        page_index: 0-indexed source page
        image: RGB image, exactly the target width wide
        scale: Pixels per source unit
    """

    page_index: int
    image: Image.Image
    scale: float

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


def composite_height(total_height: float, scale: float) -> int:
    """Pixel height of a composite whose reflowed height is `total_height`."""
    # Rounding first keeps float noise (e.g. 900.0000001) from adding a row
    return max(1, math.ceil(round(total_height * scale, 6)))


def round_px(value: float) -> int:
    """Round half up, so shared segment boundaries land on the same row."""
    return int(math.floor(value + 0.5))


def build_composite(
    source_raster: Image.Image,
    plan: SegmentPlan,
    target_width: int,
    scale_to_width: float,
    page_index: int = 0,
) -> CompositeRaster:
    """
    Draw a segment plan into a new composite.

    Each content segment copies the matching horizontal strip of the
    source raster, resized to the target width. Each spacer segment is
    drawn with its style. The canvas is pre-filled white, so rows left
    uncovered by rounding stay white.

    Args:
        source_raster: Rendered source page (any size, any scale)
        plan: Plan for the page
        target_width: Output width in pixels
        scale_to_width: Pixels per source unit in the composite
        page_index: Source page the composite belongs to

    Returns:
        CompositeRaster of target_width x ceil(total_height * scale_to_width)

    Raises:
        ValueError: If target_width or scale_to_width is not positive
    """
    if target_width < 1:
        raise ValueError(f"target_width must be >= 1: {target_width}")
    if scale_to_width <= 0:
        raise ValueError(f"scale_to_width must be > 0: {scale_to_width}")

    height = composite_height(plan.total_height, scale_to_width)
    canvas = Image.new("RGB", (int(target_width), height), STYLE_THRESHOLDS.background)
    source = source_raster.convert("RGB") if source_raster.mode != "RGB" else source_raster

    # Source rows per source unit, taken from the raster itself
    source_rows = source.height / plan.page_height

    for segment in plan:
        top = round_px(segment.dest_offset * scale_to_width)
        if top >= height:
            continue

        if segment.is_content:
            # Content past the page bottom (spacer below the page) stays blank
            source_end = min(segment.source_end, plan.page_height)
            length = source_end - segment.source_start
            if length <= 0:
                continue
            bottom = min(height, round_px((segment.dest_offset + length) * scale_to_width))
            src_top = round_px(segment.source_start * source_rows)
            src_bottom = min(source.height, round_px(source_end * source_rows))
            if bottom <= top or src_bottom <= src_top:
                continue

            strip = source.crop((0, src_top, source.width, src_bottom))
            size = (int(target_width), bottom - top)
            if strip.size != size:
                strip = strip.resize(size, Image.Resampling.LANCZOS)
            canvas.paste(strip, (0, top))
            logger.debug(
                f"Page {page_index}: content rows {src_top}-{src_bottom} -> {top}-{bottom}"
            )
        else:
            bottom = min(height, round_px(segment.dest_end * scale_to_width))
            if bottom <= top:
                continue
            render_spacer_style(
                canvas,
                segment.spacer,
                origin_x=0,
                dest_y=top,
                dest_height=bottom - top,
                dest_width=int(target_width),
                scale=scale_to_width,
            )
            logger.debug(f"Page {page_index}: spacer {segment.spacer.id} -> {top}-{bottom}")

    return CompositeRaster(page_index=page_index, image=canvas, scale=scale_to_width)


async def build_page_composite(
    source: PageSource,
    page_index: int,
    spacers: Iterable[Spacer],
    target_width: int,
) -> CompositeRaster:
    """
    Rasterize one page and build its composite.

    The page is rendered at the scale that maps its natural width to
    `target_width`, so content strips are copied without resampling.

    Raises:
        RasterizationError: If the page cannot be rendered
    """
    size = source.page_size(page_index)
    scale_to_width = target_width / size.width
    raster = await source.rasterize(page_index, scale_to_width)
    plan = plan_segments(size.height, spacers)
    return build_composite(raster, plan, target_width, scale_to_width, page_index=page_index)


async def iter_page_composites(
    source: PageSource,
    spacers_for: Callable[[int], Sequence[Spacer]],
    target_width: int,
    pages: Iterable[int] | None = None,
) -> AsyncIterator[CompositeRaster]:
    """
    Yield composites in source-page order, one page at a time.

    Only the composite currently being consumed is held in memory, which
    lets the slicer treat the document as one continuous stream.

    Args:
        source: Page source
        spacers_for: Returns the spacers of a page (insertion order)
        target_width: Output width in pixels
        pages: Page indices to include (default: all)
    """
    indices = range(source.page_count) if pages is None else pages
    for page_index in indices:
        composite = await build_page_composite(source, page_index, spacers_for(page_index), target_width)
        logger.debug(f"Built composite for page {page_index}: {composite.width}x{composite.height}")
        yield composite
