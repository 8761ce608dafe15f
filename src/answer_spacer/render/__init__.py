"""
Render Package

Page rasterization, spacer styles and reflowed page composites.
"""

from .rasterizer import (
    ImagePageSource,
    PageSize,
    PageSource,
    PdfPageSource,
    RasterizationError,
)
from .styles import render_spacer_style, render_spacer_tile
from .compositor import (
    CompositeRaster,
    build_composite,
    build_page_composite,
    composite_height,
    iter_page_composites,
)

__all__ = [
    "ImagePageSource",
    "PageSize",
    "PageSource",
    "PdfPageSource",
    "RasterizationError",
    "render_spacer_style",
    "render_spacer_tile",
    "CompositeRaster",
    "build_composite",
    "build_page_composite",
    "composite_height",
    "iter_page_composites",
]
