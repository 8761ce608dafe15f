"""
Module: interactive.state

Purpose:
    Explicit editor state handed to every handler: current page, zoom,
    active tool, selection and display options.

Key Classes:
    - Tool: SELECT | ADD_SPACE
    - ViewState: Mutable view/editor state
    - ViewConfig: Zoom limits (immutable)

Used By:
    - interactive.editor: Event handlers
    - interactive.viewer: Page rendering
    - settings.store, core.utils.serialization: Persistence
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from answer_spacer.common.thresholds import VIEW_THRESHOLDS
from answer_spacer.core.models.spacer import SpacerPreset
from answer_spacer.export.config import ExportConfig

logger = logging.getLogger(__name__)


class Tool(str, Enum):
    """Active pointer tool."""

    SELECT = "select"
    ADD_SPACE = "add-space"


@dataclass(frozen=True)
class ViewConfig:
    """Zoom limits for the view (immutable)."""

    min_zoom: float = VIEW_THRESHOLDS.min_zoom
    max_zoom: float = VIEW_THRESHOLDS.max_zoom
    zoom_step: float = VIEW_THRESHOLDS.zoom_step

    def __post_init__(self) -> None:
        if not 0 < self.min_zoom <= self.max_zoom:
            raise ValueError(f"Invalid zoom range: {self.min_zoom}-{self.max_zoom}")
        if self.zoom_step <= 1:
            raise ValueError(f"zoom_step must be > 1: {self.zoom_step}")

    def clamp(self, scale: float) -> float:
        return min(self.max_zoom, max(self.min_zoom, scale))


@dataclass
class ViewState:
    """
    Editor state.

    Attributes:
        page_count: Pages in the open document (0 when none is open)
        current_page: 0-indexed page shown
        scale: Zoom factor (view px per source unit)
        tool: Active tool
        selected_id: Selected spacer, if any
        show_page_breaks: Draw output page-break guides
        show_placement_guide: Draw the insertion guide under the pointer
        last_preset: Style copied into new spacers
        export_options: Options for the next export
    """

    page_count: int = 0
    current_page: int = 0
    scale: float = 1.0
    tool: Tool = Tool.SELECT
    selected_id: Optional[str] = None
    show_page_breaks: bool = False
    show_placement_guide: bool = True
    last_preset: SpacerPreset = field(default_factory=SpacerPreset)
    export_options: ExportConfig = field(default_factory=ExportConfig)
    config: ViewConfig = field(default_factory=ViewConfig, repr=False)

    def __post_init__(self) -> None:
        self.scale = self.config.clamp(self.scale)

    # Navigation

    def go_to_page(self, page_index: int) -> bool:
        """Move to a page; out-of-range pages are ignored. Returns True if moved."""
        if not 0 <= page_index < self.page_count or page_index == self.current_page:
            return False
        self.current_page = page_index
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    # Zoom

    def set_scale(self, scale: float) -> bool:
        """Set zoom, clamped to the configured range. Returns True if it changed."""
        if not math.isfinite(scale):
            return False
        new_scale = self.config.clamp(scale)
        if math.isclose(new_scale, self.scale):
            return False
        self.scale = new_scale
        return True

    def zoom_in(self) -> bool:
        return self.set_scale(self.scale * self.config.zoom_step)

    def zoom_out(self) -> bool:
        return self.set_scale(self.scale / self.config.zoom_step)

    def fit_to_width(self, container_width: float, base_page_width: float) -> bool:
        """Zoom so a page of natural width `base_page_width` fills the container."""
        if base_page_width <= 0:
            return False
        available = max(VIEW_THRESHOLDS.min_fit_width, container_width - VIEW_THRESHOLDS.fit_width_gutter)
        return self.set_scale(available / base_page_width)

    # Tools and selection

    def set_tool(self, tool: Tool) -> None:
        self.tool = Tool(tool)
        logger.debug(f"Tool set to {self.tool.value}")

    def toggle_add_space(self) -> Tool:
        self.set_tool(Tool.SELECT if self.tool is Tool.ADD_SPACE else Tool.ADD_SPACE)
        return self.tool

    def select(self, spacer_id: Optional[str]) -> None:
        self.selected_id = spacer_id

    def clear_selection(self) -> None:
        self.selected_id = None
