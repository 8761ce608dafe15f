"""
Command-line interface.

    python -m answer_spacer export paper.pdf --project paper.json -o out.pdf
    python -m answer_spacer plan --project paper.json --page-height 842 --page 0
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from answer_spacer import __version__
from answer_spacer.core.models.spacer import InputError
from answer_spacer.core.utils.serialization import ProjectError, load_project
from answer_spacer.export.config import ExportConfig, ExportMode
from answer_spacer.export.controller import ExportError, export_document
from answer_spacer.layout.planner import plan_segments
from answer_spacer.render.rasterizer import PdfPageSource, RasterizationError
from answer_spacer.store.spacer_store import SpacerStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="answer-spacer",
        description="Insert answer space into PDF pages and re-paginate them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Render a PDF with spacers inserted")
    export.add_argument("input", type=Path, help="Source PDF")
    export.add_argument("--project", type=Path, help="Project file with spacers")
    export.add_argument("-o", "--output", type=Path, required=True, help="Output PDF")
    export.add_argument("--mode", choices=[m.value for m in ExportMode], default=ExportMode.PAGINATED.value)
    export.add_argument("--no-continue", action="store_true", help="Start every source page on a new output page")
    export.add_argument("--dpi", type=float, default=2, help="Pixels per point (default: 2)")
    export.add_argument("--quality", type=float, default=0.8, help="JPEG quality 0..1 (default: 0.8)")
    export.add_argument("-v", "--verbose", action="store_true")

    plan = sub.add_parser("plan", help="Print the segment plan of one page")
    plan.add_argument("--project", type=Path, required=True, help="Project file with spacers")
    plan.add_argument("--page-height", type=float, required=True, help="Natural page height in points")
    plan.add_argument("--page", type=int, default=0, help="0-indexed page (default: 0)")
    plan.add_argument("-v", "--verbose", action="store_true")

    return parser


def _run_export(args: argparse.Namespace) -> int:
    store = load_project(args.project).store if args.project else SpacerStore()
    config = ExportConfig(
        mode=args.mode,
        continue_across=not args.no_continue,
        dpi=args.dpi,
        output_quality=args.quality,
    )

    def progress(done: int, total: int) -> None:
        logger.info(f"Rendered page {done}/{total}")

    with PdfPageSource.open(args.input) as source:
        result = asyncio.run(export_document(source, store, config, args.output, progress=progress))

    print(f"Wrote {result.page_count} pages to {result.output_path} ({result.duration_s:.1f}s)")
    return 0


def _run_plan(args: argparse.Namespace) -> int:
    project = load_project(args.project)
    plan = plan_segments(args.page_height, project.store.spacers_for(args.page))
    for segment in plan:
        if segment.is_content:
            print(
                f"content  src {segment.source_start:g}-{segment.source_end:g}  "
                f"dest {segment.dest_offset:g}-{segment.dest_end:g}"
            )
        else:
            print(
                f"spacer   id {segment.spacer.id} ({segment.spacer.style.value})  "
                f"dest {segment.dest_offset:g}-{segment.dest_end:g}"
            )
    print(f"total height {plan.total_height:g}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "export":
            return _run_export(args)
        return _run_plan(args)
    except (ProjectError, ExportError, RasterizationError, InputError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
