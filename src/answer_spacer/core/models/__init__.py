"""
Core Models Package

Immutable, validated data models shared by every layer.

All models in this package are frozen dataclasses. Editing a spacer
produces a new value that replaces the old one in the store; nothing
handed to a planner or renderer can change underneath it.
"""

from .spacer import InputError, Spacer, SpacerPreset, SpacerStyle
from .segments import Segment, SegmentKind, SegmentPlan

__all__ = [
    "InputError",
    "Spacer",
    "SpacerPreset",
    "SpacerStyle",
    "Segment",
    "SegmentKind",
    "SegmentPlan",
]
