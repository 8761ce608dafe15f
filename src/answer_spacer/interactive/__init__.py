"""
Interactive Package

Editor state, render coordination, view rendering and editing handlers.
"""

from .state import Tool, ViewConfig, ViewState
from .coordinator import RenderAttempt, RenderCoordinator, RenderState, StaleRenderDiscard
from .adjustment import AdjustmentKind, DragGesture, GhostPreview, PendingAdjustment, begin_adjustment
from .viewer import DocumentView, PageView, SpacerBox, ViewRenderer
from .editor import SpacerEditor

__all__ = [
    "Tool",
    "ViewConfig",
    "ViewState",
    "RenderAttempt",
    "RenderCoordinator",
    "RenderState",
    "StaleRenderDiscard",
    "AdjustmentKind",
    "DragGesture",
    "GhostPreview",
    "PendingAdjustment",
    "begin_adjustment",
    "DocumentView",
    "PageView",
    "SpacerBox",
    "ViewRenderer",
    "SpacerEditor",
]
