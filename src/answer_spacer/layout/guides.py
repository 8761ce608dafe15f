"""
Reflow guides: mapping between reflowed view positions and source
positions, and the output page-break markers shown over the view.
"""

from __future__ import annotations

import math
from typing import Iterable

from answer_spacer.common.thresholds import VIEW_THRESHOLDS
from answer_spacer.core.models.spacer import Spacer


def to_source_y(reflowed_y: float, spacers: Iterable[Spacer]) -> float:
    """
    Convert a y in reflowed units to original source-page units.

    Walks the spacers in y order and subtracts the height of every
    spacer whose reflowed top lies above `reflowed_y`. The result is
    clamped to 0 so a click inside the first spacer maps to the page top.

    Example:
        >>> to_source_y(450, [Spacer(id="1", y=300, height=100)])
        350.0
    """
    cumulative_offset = 0.0
    source_y = float(reflowed_y)
    for spacer in sorted(spacers, key=lambda s: s.y):
        if spacer.y + cumulative_offset < reflowed_y:
            cumulative_offset += spacer.height
            source_y = reflowed_y - cumulative_offset
        else:
            break
    return max(0.0, source_y)


def page_break_positions(
    page_width: float,
    container_height: float,
    document_offset: float = 0.0,
    ratio: float = VIEW_THRESHOLDS.page_break_ratio,
) -> list[float]:
    """
    Positions of output page breaks within one reflowed page.

    Breaks fall every `page_width * ratio` units measured from the top of
    the whole document, so the guides stay continuous across source pages
    when `document_offset` is the reflowed height of all earlier pages.

    Args:
        page_width: Displayed page width
        container_height: Displayed reflowed height of this page
        document_offset: Displayed height of all preceding pages
        ratio: Output page height / width

    Returns:
        Break positions relative to the top of this page, ascending
    """
    step = page_width * ratio
    if step <= 0:
        return []

    y = step - math.fmod(document_offset, step)
    if y == step:
        y = 0.0

    positions = []
    while y < container_height - 1:
        positions.append(y)
        y += step
    return positions
