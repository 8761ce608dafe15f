"""
Layout Package

Reflow planning around spacers and the guides derived from it.
"""

from .planner import plan_segments
from .guides import page_break_positions, to_source_y

__all__ = [
    "plan_segments",
    "page_break_positions",
    "to_source_y",
]
