"""
Module: render.styles

Purpose:
    Draws the background and pattern of a spacer into a raster region.
    Pattern phase is measured from the top of the region, so resizing
    one spacer never shifts the pattern of another.

Key Functions:
    - render_spacer_style(): Fill a region with a spacer's style
    - render_spacer_tile(): Standalone image of a spacer (previews)

Dependencies:
    - PIL.Image, PIL.ImageDraw: Drawing

Used By:
    - render.compositor: Spacer segments
    - interactive.viewer: Ghost previews
"""

from __future__ import annotations

from PIL import Image, ImageDraw

from answer_spacer.common.thresholds import STYLE_THRESHOLDS
from answer_spacer.core.models.spacer import Spacer, SpacerStyle


def render_spacer_style(
    image: Image.Image,
    spacer: Spacer,
    origin_x: int,
    dest_y: int,
    dest_height: int,
    dest_width: int,
    scale: float,
) -> None:
    """
    Draw `spacer` into the rectangle (origin_x, dest_y, dest_width, dest_height).

    The region is drawn on its own tile and pasted, so nothing outside
    the rectangle is touched.

    Args:
        image: Target image, modified in place
        spacer: Spacer whose style is drawn
        origin_x: Left edge of the region (px)
        dest_y: Top edge of the region (px)
        dest_height: Region height (px)
        dest_width: Region width (px)
        scale: Pixels per source unit, applied to pattern sizes
    """
    if dest_width <= 0 or dest_height <= 0:
        return
    tile = render_spacer_tile(spacer, dest_width, dest_height, scale)
    image.paste(tile, (int(origin_x), int(dest_y)))


def render_spacer_tile(spacer: Spacer, width: int, height: int, scale: float) -> Image.Image:
    """Render a spacer as a standalone RGB image of the given pixel size."""
    tile = Image.new("RGB", (max(1, int(width)), max(1, int(height))), STYLE_THRESHOLDS.background)
    draw = ImageDraw.Draw(tile)
    w, h = tile.size

    if spacer.style is SpacerStyle.RULED:
        for y in _steps(h, spacer.rule_spacing * scale):
            draw.line([(0, y), (w - 1, y)], fill=STYLE_THRESHOLDS.pattern_color, width=STYLE_THRESHOLDS.line_width)

    elif spacer.style is SpacerStyle.DOT_GRID:
        r = STYLE_THRESHOLDS.dot_radius
        pitch = spacer.dot_pitch * scale
        for x in _steps(w, pitch):
            for y in _steps(h, pitch):
                draw.ellipse([x - r, y - r, x + r, y + r], fill=STYLE_THRESHOLDS.pattern_color)

    elif spacer.style is SpacerStyle.SQUARED:
        size = spacer.grid_size * scale
        for x in _steps(w, size):
            draw.line([(x, 0), (x, h - 1)], fill=STYLE_THRESHOLDS.pattern_color, width=STYLE_THRESHOLDS.line_width)
        for y in _steps(h, size):
            draw.line([(0, y), (w - 1, y)], fill=STYLE_THRESHOLDS.pattern_color, width=STYLE_THRESHOLDS.line_width)

    return tile


def _steps(extent: int, step: float) -> list[int]:
    """Pixel positions 0, step, 2*step, ... below extent."""
    if step <= 0:
        return []
    # Sub-pixel pitches would fill the region solid
    step = max(step, 1.0)
    positions = []
    i = 0
    while True:
        pos = i * step
        if pos >= extent:
            break
        positions.append(int(round(pos)))
        i += 1
    return positions
