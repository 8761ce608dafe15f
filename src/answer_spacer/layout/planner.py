"""
Module: planner

Purpose:
    Computes how a source page is split into content strips and spacer
    blocks once spacers push the content below them downwards.

Key Functions:
    - plan_segments(): Build the SegmentPlan for one page

Dependencies:
    - answer_spacer.core.models

Used By:
    - render.compositor: Draws plans into composites
    - layout.guides: Maps reflowed positions back to source positions
    - cli: `plan` subcommand
"""

from __future__ import annotations

import logging
from typing import Iterable

from answer_spacer.core.models.segments import Segment, SegmentPlan
from answer_spacer.core.models.spacer import InputError, Spacer

logger = logging.getLogger(__name__)


def plan_segments(page_height: float, spacers: Iterable[Spacer]) -> SegmentPlan:
    """
    Plan the reflowed layout of one page.

    Spacers are stably sorted by y, so spacers sharing a y keep the order
    they were given in. A spacer whose y lies beyond the page height is
    still placed; it simply has no content below it.

    Args:
        page_height: Natural page height (source units)
        spacers: The page's spacers, in insertion order

    Returns:
        SegmentPlan whose total_height is page_height plus all spacer heights

    Raises:
        InputError: If page_height is not positive

    Example:
        >>> plan = plan_segments(800, [Spacer(id="1", y=300, height=100)])
        >>> [(s.kind.value, s.dest_offset, s.length) for s in plan]
        [('content', 0.0, 300.0), ('spacer', 300.0, 100), ('content', 400.0, 500.0)]
    """
    if page_height <= 0:
        raise InputError(f"page_height must be > 0: {page_height}")

    ordered = sorted(spacers, key=lambda s: s.y)
    segments: list[Segment] = []
    current_y = 0.0
    cumulative_offset = 0.0

    for spacer in ordered:
        if spacer.y > current_y:
            segments.append(
                Segment.content(
                    source_start=current_y,
                    length=spacer.y - current_y,
                    dest_offset=current_y + cumulative_offset,
                )
            )
        segments.append(Segment.for_spacer(spacer, dest_offset=spacer.y + cumulative_offset))
        current_y = spacer.y
        cumulative_offset += spacer.height

    if current_y < page_height:
        segments.append(
            Segment.content(
                source_start=current_y,
                length=page_height - current_y,
                dest_offset=current_y + cumulative_offset,
            )
        )

    total_height = page_height + cumulative_offset
    logger.debug(
        f"Planned {len(segments)} segments for page height {page_height} "
        f"({len(ordered)} spacers, total {total_height})"
    )
    return SegmentPlan(page_height=page_height, segments=tuple(segments), total_height=total_height)
