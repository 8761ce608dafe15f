"""
Module: interactive.adjustment

Purpose:
    Two-phase drag and resize of a spacer. While the pointer is held only
    a ghost preview moves; the store is written once, on commit.

Key Functions:
    - begin_adjustment(): Start a drag or resize

Key Classes:
    - PendingAdjustment: In-flight adjustment (preview / commit / cancel)
    - GhostPreview: Preview rectangle in view pixels
    - DragGesture: Tells a click from a drag

Used By:
    - interactive.editor: Pointer handlers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from answer_spacer.common.thresholds import SPACER_THRESHOLDS
from answer_spacer.core.models.spacer import Spacer
from answer_spacer.store.spacer_store import SpacerStore

logger = logging.getLogger(__name__)


class AdjustmentKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"


@dataclass(frozen=True)
class GhostPreview:
    """Preview rectangle, in view pixels relative to the page top."""

    top: float
    height: float


class PendingAdjustment:
    """
    An uncommitted drag or resize.

    `update_preview()` takes the pointer travel since the press, in view
    pixels. The store is untouched until `commit()`.
    """

    def __init__(
        self,
        store: SpacerStore,
        spacer: Spacer,
        kind: AdjustmentKind,
        display_top: float,
        scale: float,
    ):
        self._store = store
        self.spacer_id = spacer.id
        self.kind = kind
        self.scale = scale
        self._start = spacer
        self._display_top = display_top
        self._delta = 0.0
        self._done = False

    @property
    def active(self) -> bool:
        return not self._done

    @property
    def target_y(self) -> float:
        if self.kind is not AdjustmentKind.DRAG:
            return self._start.y
        return max(0.0, self._start.y + self._delta / self.scale)

    @property
    def target_height(self) -> float:
        if self.kind is not AdjustmentKind.RESIZE:
            return self._start.height
        return max(SPACER_THRESHOLDS.min_resize_height, self._start.height + self._delta / self.scale)

    @property
    def ghost(self) -> GhostPreview:
        if self.kind is AdjustmentKind.DRAG:
            return GhostPreview(top=self._display_top + self._delta, height=self._start.height * self.scale)
        return GhostPreview(top=self._display_top, height=self.target_height * self.scale)

    def update_preview(self, delta: float) -> GhostPreview:
        """Move the ghost to `delta` view pixels from the press position."""
        self._ensure_active()
        self._delta = float(delta)
        return self.ghost

    def commit(self) -> Optional[Spacer]:
        """
        Write the adjustment to the store.

        Returns:
            The updated spacer, or None if nothing changed
        """
        self._ensure_active()
        self._done = True
        if self.kind is AdjustmentKind.DRAG:
            if self.target_y == self._start.y:
                return None
            updated = self._store.move(self.spacer_id, self.target_y)
        else:
            if self.target_height == self._start.height:
                return None
            updated = self._store.resize(self.spacer_id, self.target_height)
        logger.debug(f"Committed {self.kind.value} of spacer {self.spacer_id}")
        return updated

    def cancel(self) -> None:
        self._done = True

    def _ensure_active(self) -> None:
        if self._done:
            raise RuntimeError(f"Adjustment of spacer {self.spacer_id} already finished")


def begin_adjustment(
    store: SpacerStore,
    spacer_id: str,
    kind: AdjustmentKind | str,
    display_top: float = 0.0,
    scale: float = 1.0,
) -> PendingAdjustment:
    """
    Start a drag or resize.

    Args:
        store: Store holding the spacer
        spacer_id: Spacer to adjust
        kind: DRAG moves y, RESIZE changes height
        display_top: Current on-screen top of the spacer (view px)
        scale: View px per source unit

    Raises:
        KeyError: If the spacer does not exist
    """
    if scale <= 0:
        raise ValueError(f"scale must be > 0: {scale}")
    return PendingAdjustment(store, store.get(spacer_id), AdjustmentKind(kind), display_top, scale)


class DragGesture:
    """
    Press on a spacer: becomes a drag once the pointer travels vertically
    past the threshold, otherwise the release is a click (select).
    """

    def __init__(self, spacer_id: str, start_y: float, threshold: float = SPACER_THRESHOLDS.drag_threshold_px):
        self.spacer_id = spacer_id
        self.start_y = start_y
        self.threshold = threshold
        self.dragging = False

    def move(self, y: float) -> bool:
        """Track pointer movement. Returns True when the gesture just became a drag."""
        if self.dragging:
            return False
        if abs(y - self.start_y) > self.threshold:
            self.dragging = True
            return True
        return False
