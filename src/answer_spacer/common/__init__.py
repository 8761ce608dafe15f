"""Common tunables shared across the package."""

from __future__ import annotations

from .thresholds import (
    SPACER_THRESHOLDS,
    STYLE_THRESHOLDS,
    VIEW_THRESHOLDS,
    SpacerThresholds,
    StyleThresholds,
    ViewThresholds,
)

__all__ = [
    "SPACER_THRESHOLDS",
    "STYLE_THRESHOLDS",
    "VIEW_THRESHOLDS",
    "SpacerThresholds",
    "StyleThresholds",
    "ViewThresholds",
]
