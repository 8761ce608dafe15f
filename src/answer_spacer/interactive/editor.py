"""
Module: interactive.editor

Purpose:
    Editing handlers a front end calls in response to user input. Each
    handler takes the explicit ViewState, mutates the SpacerStore, then
    triggers a re-render (immediate or coalesced) and persists settings.

Key Classes:
    - SpacerEditor: Handlers for clicks, keys, property edits, zoom,
      navigation, drag/resize and project actions

Dependencies:
    - store.spacer_store: Spacer mutations
    - interactive.viewer: Rendering
    - interactive.adjustment: Two-phase drag/resize
    - settings.store: Persistence

Used By:
    - Front ends embedding the editor
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from answer_spacer.common.thresholds import SPACER_THRESHOLDS
from answer_spacer.core.models.spacer import Spacer, SpacerPreset
from answer_spacer.core.utils.serialization import ProjectData, load_project, save_project
from answer_spacer.export.config import ExportConfig
from answer_spacer.export.controller import ExportResult, export_document
from answer_spacer.layout.guides import to_source_y
from answer_spacer.settings.store import SettingsStore
from answer_spacer.store.spacer_store import SpacerStore

from .adjustment import AdjustmentKind, DragGesture, GhostPreview, PendingAdjustment, begin_adjustment
from .state import Tool, ViewState
from .viewer import DocumentView, ViewRenderer

logger = logging.getLogger(__name__)

# Properties that also update the last-used preset
_PRESET_FIELDS = ("style", "rule_spacing", "dot_pitch", "grid_size")

_NUDGE_KEYS = {
    "ArrowUp": -SPACER_THRESHOLDS.nudge_step,
    "ArrowDown": SPACER_THRESHOLDS.nudge_step,
}
_DELETE_KEYS = ("Delete", "Backspace")


class SpacerEditor:
    """
    Editing session over one document.

    Args:
        renderer: View renderer (holds the page source, store and state)
        settings: Optional settings store; when given, edits are persisted
    """

    def __init__(self, renderer: ViewRenderer, settings: Optional[SettingsStore] = None):
        self.renderer = renderer
        self.settings = settings
        self._gesture: Optional[DragGesture] = None
        self._adjustment: Optional[PendingAdjustment] = None
        self._press_y = 0.0

    @property
    def store(self) -> SpacerStore:
        return self.renderer.store

    @property
    def state(self) -> ViewState:
        return self.renderer.state

    @classmethod
    def restore(cls, renderer: ViewRenderer, settings: SettingsStore) -> "SpacerEditor":
        """Create an editor and load saved spacers and preferences into it."""
        state = renderer.state
        settings.load_spacers(renderer.store)
        state.set_scale(settings.get_scale())
        state.go_to_page(settings.get_current_page())
        display = settings.get_display_options()
        state.show_page_breaks = display["show_page_breaks"]
        state.show_placement_guide = display["show_placement_guide"]
        state.last_preset = settings.get_last_preset()
        state.export_options = settings.get_export_options()
        return cls(renderer, settings)

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────

    async def render(self, reason: str = "") -> Optional[DocumentView]:
        return await self.renderer.coordinator.request_render(reason)

    def schedule_render(self, reason: str = "") -> asyncio.Task:
        return self.renderer.coordinator.schedule_render(reason)

    # ─────────────────────────────────────────────────────────────────────
    # Pointer
    # ─────────────────────────────────────────────────────────────────────

    async def click_page(self, page_index: int, view_y: float) -> Optional[Spacer]:
        """
        Handle a click at page-relative view y.

        With ADD_SPACE a spacer is inserted at the matching source y and
        selected. With SELECT the spacer under the pointer is selected (or
        the selection cleared).
        """
        if self.state.tool is Tool.ADD_SPACE:
            source_y = to_source_y(view_y / self.state.scale, self.store.spacers_for(page_index))
            spacer = self.store.create(page_index, source_y, self.state.last_preset)
            self.state.select(spacer.id)
            logger.info(f"Inserted spacer {spacer.id} on page {page_index} at y={source_y:.1f}")
            self._save_spacers()
            await self.render("add spacer")
            return spacer

        view = self.renderer.current_view
        page = view.page(page_index) if view else None
        spacer_id = page.spacer_at(view_y) if page else None
        self.state.select(spacer_id)
        return self.store.find(spacer_id) if spacer_id else None

    def press_spacer(self, spacer_id: str, view_y: float) -> None:
        """Pointer pressed on a spacer body: may become a click or a drag."""
        self._gesture = DragGesture(spacer_id, view_y)

    def press_resize_handle(self, spacer_id: str, view_y: float) -> PendingAdjustment:
        self._gesture = None
        self._adjustment = self._begin(spacer_id, AdjustmentKind.RESIZE, view_y)
        return self._adjustment

    def pointer_move(self, view_y: float) -> Optional[GhostPreview]:
        """Track the pointer; returns the ghost preview while adjusting."""
        if self._gesture is not None and self._gesture.move(view_y):
            gesture = self._gesture
            self._gesture = None
            self._adjustment = self._begin(gesture.spacer_id, AdjustmentKind.DRAG, gesture.start_y)
        if self._adjustment is not None:
            return self._adjustment.update_preview(view_y - self._press_y)
        return None

    async def pointer_release(self) -> Optional[Spacer]:
        """Finish a press: a click selects, a drag or resize is committed."""
        if self._gesture is not None:
            spacer_id = self._gesture.spacer_id
            self._gesture = None
            self.state.select(spacer_id)
            return None

        adjustment = self._adjustment
        if adjustment is None:
            return None
        self._adjustment = None
        updated = adjustment.commit()
        if updated is not None:
            self._save_spacers()
        await self.render(f"{adjustment.kind.value} commit")
        return updated

    def cancel_adjustment(self) -> None:
        self._gesture = None
        if self._adjustment is not None:
            self._adjustment.cancel()
            self._adjustment = None

    def _begin(self, spacer_id: str, kind: AdjustmentKind, press_y: float) -> PendingAdjustment:
        self._press_y = press_y
        box = None
        view = self.renderer.current_view
        if view is not None:
            page = view.page(self.store.page_of(spacer_id))
            box = page.box_for(spacer_id) if page else None
        return begin_adjustment(
            self.store,
            spacer_id,
            kind,
            display_top=box.top if box else 0.0,
            scale=self.state.scale,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Keyboard and selection actions
    # ─────────────────────────────────────────────────────────────────────

    async def handle_key(self, key: str) -> bool:
        """Delete / nudge the selected spacer. Returns True if the key was handled."""
        if self.state.selected_id is None:
            return False
        if key in _DELETE_KEYS:
            await self.delete_selected()
            return True
        if key in _NUDGE_KEYS:
            await self.nudge_selected(_NUDGE_KEYS[key])
            return True
        return False

    async def delete_selected(self) -> Optional[Spacer]:
        spacer_id = self.state.selected_id
        if spacer_id is None or spacer_id not in self.store:
            return None
        removed = self.store.delete(spacer_id)
        self.state.clear_selection()
        self._save_spacers()
        await self.render("delete spacer")
        return removed

    async def duplicate_selected(self) -> Optional[Spacer]:
        spacer_id = self.state.selected_id
        if spacer_id is None or spacer_id not in self.store:
            return None
        copy = self.store.duplicate(spacer_id)
        self.state.select(copy.id)
        self._save_spacers()
        await self.render("duplicate spacer")
        return copy

    async def nudge_selected(self, delta: float) -> Optional[Spacer]:
        spacer_id = self.state.selected_id
        if spacer_id is None or spacer_id not in self.store:
            return None
        updated = self.store.nudge(spacer_id, delta)
        self._save_spacers()
        self.schedule_render("nudge")
        return updated

    async def set_property(self, spacer_id: str, name: str, value: Any, immediate: bool = False) -> Spacer:
        """
        Edit one spacer property from the property panel.

        Style properties also become the preset for new spacers. Immediate
        edits render at once; others are coalesced into the next frame.

        Raises:
            KeyError: If the spacer does not exist
            InputError: If the value is invalid
        """
        updated = self.store.update(spacer_id, **{name: value})
        if name in _PRESET_FIELDS:
            self.state.last_preset = updated.preset
            if self.settings is not None:
                self.settings.set_last_preset(updated.preset)

        self._save_spacers()
        if immediate:
            await self.render(f"edit {name}")
        else:
            self.schedule_render(f"edit {name}")
        return updated

    def set_preset(self, preset: SpacerPreset) -> None:
        self.state.last_preset = preset
        if self.settings is not None:
            self.settings.set_last_preset(preset)

    def set_tool(self, tool: Tool) -> None:
        self.state.set_tool(tool)

    # ─────────────────────────────────────────────────────────────────────
    # Navigation, zoom and display
    # ─────────────────────────────────────────────────────────────────────

    async def go_to_page(self, page_index: int) -> bool:
        if not self.state.go_to_page(page_index):
            return False
        if self.settings is not None:
            self.settings.set_current_page(page_index)
        await self.render("navigate")
        return True

    async def set_zoom(self, scale: float) -> bool:
        return await self._apply_zoom(self.state.set_scale(scale))

    async def zoom_in(self) -> bool:
        return await self._apply_zoom(self.state.zoom_in())

    async def zoom_out(self) -> bool:
        return await self._apply_zoom(self.state.zoom_out())

    async def fit_to_width(self, container_width: float) -> bool:
        if self.renderer.source.page_count == 0:
            return False
        base_width = self.renderer.source.page_size(0).width
        return await self._apply_zoom(self.state.fit_to_width(container_width, base_width))

    async def _apply_zoom(self, changed: bool) -> bool:
        if not changed:
            return False
        if self.settings is not None:
            self.settings.set_scale(self.state.scale)
        await self.render("zoom")
        return True

    async def set_show_page_breaks(self, enabled: bool) -> None:
        if self.state.show_page_breaks == enabled:
            return
        self.state.show_page_breaks = enabled
        self._save_display()
        await self.render("page breaks")

    def set_show_placement_guide(self, enabled: bool) -> None:
        self.state.show_placement_guide = enabled
        self._save_display()

    # ─────────────────────────────────────────────────────────────────────
    # Project actions
    # ─────────────────────────────────────────────────────────────────────

    async def clear_project(self) -> None:
        self.store.clear()
        self.state.clear_selection()
        self._save_spacers()
        await self.render("clear")

    def save_project(self, path: Path, pdf_name: Optional[str] = None) -> Path:
        return save_project(
            path,
            self.store,
            scale=self.state.scale,
            current_page=self.state.current_page,
            pdf_name=pdf_name,
        )

    async def load_project(self, path: Path) -> ProjectData:
        """
        Replace the spacers with those of a project file.

        Raises:
            ProjectError: If the file cannot be read or is malformed
        """
        project = load_project(path)
        self.store.load(project.store.to_mapping())
        self.state.clear_selection()
        self.state.set_scale(project.scale)
        self.state.go_to_page(project.current_page)
        self._save_spacers()
        await self.render("load project")
        return project

    async def export(self, output_path: Path, config: Optional[ExportConfig] = None) -> ExportResult:
        """
        Export the document with the current spacers.

        Raises:
            ExportError: If the export fails
        """
        config = config or self.state.export_options
        self.state.export_options = config
        if self.settings is not None:
            self.settings.set_export_options(config)
        return await export_document(self.renderer.source, self.store, config, output_path)

    # Persistence

    def _save_spacers(self) -> None:
        if self.settings is not None:
            self.settings.save_spacers(self.store)

    def _save_display(self) -> None:
        if self.settings is not None:
            self.settings.set_display_options(self.state.show_page_breaks, self.state.show_placement_guide)
