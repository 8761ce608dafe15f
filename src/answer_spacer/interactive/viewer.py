"""
Module: interactive.viewer

Purpose:
    Renders the on-screen view: every source page reflowed around its
    spacers at the current zoom, stacked into one continuous document,
    with hit boxes for the spacers and optional page-break guides.

Key Classes:
    - ViewRenderer: Renders DocumentViews under a RenderCoordinator
    - DocumentView: All rendered pages of one attempt
    - PageView: One rendered page
    - SpacerBox: On-screen rectangle of a spacer

Dependencies:
    - render.compositor: Composite building
    - layout.guides: Page-break guides

Used By:
    - interactive.editor: Re-renders after edits
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from PIL import Image

from answer_spacer.core.models.segments import Segment, SegmentPlan
from answer_spacer.layout.guides import page_break_positions
from answer_spacer.layout.planner import plan_segments
from answer_spacer.render.compositor import build_composite, round_px
from answer_spacer.render.rasterizer import PageSource
from answer_spacer.store.spacer_store import SpacerStore

from .coordinator import RenderAttempt, RenderCoordinator
from .state import ViewState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpacerBox:
    """On-screen rectangle of a spacer, in px relative to its page top."""

    spacer_id: str
    top: int
    height: int

    def contains(self, y: float) -> bool:
        return self.top <= y < self.top + self.height


@dataclass(frozen=True)
class PageView:
    """
    One page as shown on screen.

    Attributes:
        page_index: 0-indexed source page
        image: Reflowed page image
        plan: Segment plan the image was built from
        scale: View px per source unit
        document_offset: Top of this page within the stacked document (px)
        spacer_boxes: Hit boxes for the page's spacers
        page_breaks: Output page-break guide positions (px, page-relative)
    """

    page_index: int
    image: Image.Image
    plan: SegmentPlan
    scale: float
    document_offset: int
    spacer_boxes: tuple[SpacerBox, ...]
    page_breaks: tuple[float, ...] = ()

    @property
    def height(self) -> int:
        return self.image.height

    def spacer_at(self, y: float) -> Optional[str]:
        """Id of the spacer under page-relative y, if any."""
        for box in self.spacer_boxes:
            if box.contains(y):
                return box.spacer_id
        return None

    def box_for(self, spacer_id: str) -> Optional[SpacerBox]:
        for box in self.spacer_boxes:
            if box.spacer_id == spacer_id:
                return box
        return None


@dataclass(frozen=True)
class DocumentView:
    """All pages of one completed render, stacked top to bottom."""

    token: int
    pages: tuple[PageView, ...]

    @property
    def total_height(self) -> int:
        return sum(p.height for p in self.pages)

    def page(self, page_index: int) -> Optional[PageView]:
        for view in self.pages:
            if view.page_index == page_index:
                return view
        return None

    def locate(self, document_y: float) -> Optional[tuple[PageView, float]]:
        """Page under a document y and the page-relative y."""
        for view in self.pages:
            if view.document_offset <= document_y < view.document_offset + view.height:
                return view, document_y - view.document_offset
        return None


def _spacer_box(segment: Segment, scale_to_width: float) -> SpacerBox:
    # Same rows the compositor paints for the spacer
    top = round_px(segment.dest_offset * scale_to_width)
    bottom = round_px(segment.dest_end * scale_to_width)
    return SpacerBox(spacer_id=segment.spacer.id, top=top, height=bottom - top)


class ViewRenderer:
    """
    Renders the document view.

    Owns a RenderCoordinator; after every awaited rasterization the
    attempt's token is checked so superseded renders stop early.
    """

    def __init__(
        self,
        source: PageSource,
        store: SpacerStore,
        state: ViewState,
        notify: Optional[Callable[[str], Any]] = None,
    ):
        self.source = source
        self.store = store
        self.state = state
        state.page_count = source.page_count
        self.coordinator: RenderCoordinator[DocumentView] = RenderCoordinator(self.render, notify=notify)

    @property
    def current_view(self) -> Optional[DocumentView]:
        """Last successfully rendered view."""
        return self.coordinator.last_result

    async def render(self, attempt: RenderAttempt) -> DocumentView:
        """Render every page for `attempt`."""
        pages = []
        document_offset = 0
        for page_index in range(self.source.page_count):
            view = await self._render_page(attempt, page_index, document_offset)
            pages.append(view)
            document_offset += view.height
        logger.debug(f"Render {attempt.token}: {len(pages)} pages, {document_offset}px")
        return DocumentView(token=attempt.token, pages=tuple(pages))

    async def _render_page(self, attempt: RenderAttempt, page_index: int, document_offset: int) -> PageView:
        size = self.source.page_size(page_index)
        scale = self.state.scale
        width = max(1, math.floor(size.width * scale))
        scale_to_width = width / size.width

        raster = await self.source.rasterize(page_index, scale_to_width)
        self.coordinator.check(attempt)

        plan = plan_segments(size.height, self.store.spacers_for(page_index))
        composite = build_composite(raster, plan, width, scale_to_width, page_index=page_index)

        boxes = tuple(_spacer_box(seg, scale_to_width) for seg in plan.spacer_segments)
        breaks: tuple[float, ...] = ()
        if self.state.show_page_breaks:
            breaks = tuple(page_break_positions(width, composite.height, document_offset))

        return PageView(
            page_index=page_index,
            image=composite.image,
            plan=plan,
            scale=scale_to_width,
            document_offset=document_offset,
            spacer_boxes=boxes,
            page_breaks=breaks,
        )
