"""
Module: segments

Purpose:
    Data models produced by the segment planner. A plan is an ordered
    sequence of content strips and spacer blocks with their reflowed
    destination offsets. Plans are recomputed on every call and never
    mutated or persisted.

Key Classes:
    - SegmentKind: content | spacer
    - Segment: One strip of the reflowed page
    - SegmentPlan: Complete plan for a page

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - layout.planner: Creates plans
    - render.compositor: Draws plans into composites
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .spacer import Spacer


class SegmentKind(str, Enum):
    CONTENT = "content"
    SPACER = "spacer"


@dataclass(frozen=True, slots=True)
class Segment:
    """
    One strip of a reflowed page (immutable).

    Attributes:
        kind: CONTENT copies original rows, SPACER draws a block
        dest_offset: Top of the strip in reflowed units
        length: Height of the strip in reflowed units
        source_start: First original row covered (content only)
        spacer: The spacer drawn (spacer only)

    Example:
        >>> seg = Segment.content(source_start=300, length=500, dest_offset=400)
        >>> seg.dest_end
        900
    """

    kind: SegmentKind
    dest_offset: float
    length: float
    source_start: Optional[float] = None
    spacer: Optional[Spacer] = None

    @classmethod
    def content(cls, source_start: float, length: float, dest_offset: float) -> "Segment":
        return cls(
            kind=SegmentKind.CONTENT,
            dest_offset=dest_offset,
            length=length,
            source_start=source_start,
        )

    @classmethod
    def for_spacer(cls, spacer: Spacer, dest_offset: float) -> "Segment":
        return cls(
            kind=SegmentKind.SPACER,
            dest_offset=dest_offset,
            length=spacer.height,
            spacer=spacer,
        )

    @property
    def is_content(self) -> bool:
        return self.kind is SegmentKind.CONTENT

    @property
    def source_length(self) -> Optional[float]:
        """Length in original units (content only)."""
        return self.length if self.is_content else None

    @property
    def source_end(self) -> Optional[float]:
        if not self.is_content:
            return None
        return self.source_start + self.length

    @property
    def dest_end(self) -> float:
        return self.dest_offset + self.length


@dataclass(frozen=True, slots=True)
class SegmentPlan:
    """
    Reflow plan for a single source page.

    Attributes:
        page_height: Original page height (source units)
        segments: Segments in destination order
        total_height: page_height plus the sum of spacer heights
    """

    page_height: float
    segments: tuple[Segment, ...]
    total_height: float

    @property
    def spacer_segments(self) -> tuple[Segment, ...]:
        return tuple(s for s in self.segments if not s.is_content)

    @property
    def content_segments(self) -> tuple[Segment, ...]:
        return tuple(s for s in self.segments if s.is_content)

    @property
    def inserted_height(self) -> float:
        """Total spacer height injected into the page."""
        return self.total_height - self.page_height

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)
