"""
Export Package

Pagination of reflowed composites and PDF output.

Main entry points:
    - render_export_pages(): Output pages for a document
    - export_document(): Render and write a PDF
"""

from .config import A4_HEIGHT_PT, A4_WIDTH_PT, ExportConfig, ExportMode
from .slicer import OutputPage, PageSlicer, RowCopy, slice_to_pages, stitch_long_page
from .writer import WriteError, write_pdf
from .controller import ExportError, ExportResult, export_document, render_export_pages

__all__ = [
    "A4_HEIGHT_PT",
    "A4_WIDTH_PT",
    "ExportConfig",
    "ExportMode",
    "OutputPage",
    "PageSlicer",
    "RowCopy",
    "slice_to_pages",
    "stitch_long_page",
    "WriteError",
    "write_pdf",
    "ExportError",
    "ExportResult",
    "export_document",
    "render_export_pages",
]
