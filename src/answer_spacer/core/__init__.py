"""
Answer Spacer Core Package

Shared data models, payload validation and serialization helpers.
These models are the single source of truth for every other subpackage.
"""

from .models import (
    InputError,
    Segment,
    SegmentKind,
    SegmentPlan,
    Spacer,
    SpacerPreset,
    SpacerStyle,
)

__all__ = [
    "InputError",
    "Segment",
    "SegmentKind",
    "SegmentPlan",
    "Spacer",
    "SpacerPreset",
    "SpacerStyle",
]
