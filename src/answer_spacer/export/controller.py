"""
Module: export.controller

Purpose:
    Orchestrate an export.
    Rasterize → Plan → Composite → Slice (or stitch) → Write

Key Functions:
    - render_export_pages(): Produce the output pages of a document
    - export_document(): Render and write the output PDF

Key Classes:
    - ExportResult: Summary of a finished export
    - ExportError: Terminal export failure

Dependencies:
    - render.compositor: Per-page composites
    - export.slicer: Pagination
    - export.writer: PDF assembly

Used By:
    - cli: `export` subcommand
    - interactive.editor: Export action
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from answer_spacer.render.compositor import iter_page_composites
from answer_spacer.render.rasterizer import PageSource, RasterizationError
from answer_spacer.store.spacer_store import SpacerStore

from .config import ExportConfig, ExportMode
from .slicer import OutputPage, PageSlicer, stitch_long_page
from .writer import WriteError, write_pdf

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ExportError(Exception):
    """Export aborted; no output was produced."""

    def __init__(self, message: str, page_index: int | None = None):
        super().__init__(message)
        self.page_index = page_index


@dataclass(frozen=True)
class ExportResult:
    """
    Summary of a finished export (immutable).

    Attributes:
        output_path: Written PDF
        page_count: Number of output pages
        source_page_count: Number of source pages processed
        mode: Export mode used
        duration_s: Wall time of the export
    """

    output_path: Path
    page_count: int
    source_page_count: int
    mode: ExportMode
    duration_s: float


async def render_export_pages(
    source: PageSource,
    store: SpacerStore,
    config: ExportConfig,
    progress: Optional[ProgressCallback] = None,
) -> list[OutputPage]:
    """
    Render every source page with its spacers and paginate the result.

    Source pages are processed strictly in order. In paginated mode only
    the composite being sliced and the output page being filled are held
    besides the finished pages.

    Args:
        source: Page source for the document
        store: Spacers to insert
        config: Export configuration
        progress: Called with (pages_done, page_count) after each source page

    Returns:
        Output pages in order

    Raises:
        ExportError: If any page fails to rasterize; partial pages are discarded
    """
    total = source.page_count
    if total == 0:
        raise ExportError("Document has no pages")

    target_width = config.page_width_px
    logger.info(
        f"Exporting {total} pages: mode={config.mode.value}, continue_across={config.continue_across}, "
        f"page={target_width}x{config.page_height_px}px"
    )

    slicer = PageSlicer(target_width, config.page_height_px, continue_across=config.continue_across)
    pages: list[OutputPage] = []
    composites = []
    done = 0

    try:
        async for composite in iter_page_composites(source, store.spacers_for, target_width):
            if config.mode is ExportMode.LONG:
                composites.append(composite)
            else:
                pages.extend(slicer.feed(composite))
            done += 1
            if progress is not None:
                progress(done, total)
    except RasterizationError as e:
        logger.error(f"Export aborted at page {e.page_index}: {e}")
        raise ExportError(f"Failed to render page {e.page_index}: {e}", page_index=e.page_index) from e

    if config.mode is ExportMode.LONG:
        return [stitch_long_page(composites, target_width)]

    pages.extend(slicer.finish())
    logger.info(f"Rendered {len(pages)} output pages from {total} source pages")
    return pages


async def export_document(
    source: PageSource,
    store: SpacerStore,
    config: ExportConfig,
    output_path: Path,
    progress: Optional[ProgressCallback] = None,
) -> ExportResult:
    """
    Render the document and write it to `output_path`.

    Raises:
        ExportError: If rendering or writing fails; no file is left behind
    """
    start_time = time.perf_counter()
    pages = await render_export_pages(source, store, config, progress=progress)

    try:
        write_pdf(pages, Path(output_path), dpi=config.dpi, quality=config.output_quality)
    except WriteError as e:
        raise ExportError(str(e)) from e

    duration = time.perf_counter() - start_time
    logger.info(f"Export complete in {duration:.2f}s: {output_path}")
    return ExportResult(
        output_path=Path(output_path),
        page_count=len(pages),
        source_page_count=source.page_count,
        mode=config.mode,
        duration_s=duration,
    )
