"""Centralized threshold and magic number configuration.

This module contains the tunables used by the editor, the renderers and
the exporter. Having these in one place makes tuning easier and documents
what each value controls.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpacerThresholds:
    """Defaults and limits for spacer editing."""

    default_height: float = 100.0  # Height of a freshly inserted spacer
    min_resize_height: float = 20.0  # Resize handle never goes below this
    nudge_step: float = 5.0  # Arrow-key movement
    duplicate_offset: float = 20.0  # Vertical offset of a duplicated spacer
    drag_threshold_px: float = 5.0  # Pointer travel before a press becomes a drag

    # Default pattern preset
    default_rule_spacing: float = 20.0
    default_dot_pitch: float = 10.0
    default_grid_size: float = 20.0


@dataclass(frozen=True)
class ViewThresholds:
    """Limits for the interactive view."""

    min_zoom: float = 0.5
    max_zoom: float = 3.0
    zoom_step: float = 1.2
    fit_width_gutter: int = 40  # Horizontal padding subtracted for fit-to-width
    min_fit_width: int = 100
    frame_interval_s: float = 1 / 60  # Coalescing window for scheduled renders

    # Page-break guides follow the A4 aspect ratio (842pt / 595pt)
    page_break_ratio: float = 842 / 595


@dataclass(frozen=True)
class StyleThresholds:
    """Drawing parameters for spacer patterns."""

    background: str = "white"
    pattern_color: str = "#dddddd"
    line_width: int = 1
    dot_radius: int = 1


SPACER_THRESHOLDS = SpacerThresholds()
VIEW_THRESHOLDS = ViewThresholds()
STYLE_THRESHOLDS = StyleThresholds()
