"""
Module: interactive.coordinator

Purpose:
    Serialises interactive re-renders. Every render attempt carries a
    token; when a newer attempt starts, results of older ones are dropped
    instead of being shown. Rasterization itself cannot be cancelled, so
    a superseded render still runs to completion.

Key Classes:
    - RenderCoordinator: Idle / Rendering(token) state machine
    - RenderAttempt: One render attempt and its token
    - StaleRenderDiscard: Raised inside a superseded render to stop it early

Dependencies:
    - asyncio (std): Scheduling and frame coalescing

Used By:
    - interactive.viewer: Token checks after each rasterization
    - interactive.editor: Render requests after edits
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from answer_spacer.common.thresholds import VIEW_THRESHOLDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StaleRenderDiscard(Exception):
    """A render attempt was superseded; its result must not be shown."""


class RenderState(str, Enum):
    IDLE = "idle"
    RENDERING = "rendering"


@dataclass(frozen=True)
class RenderAttempt:
    """
    One render attempt.

    Attributes:
        token: Monotonically increasing attempt number
        reason: What triggered the render (for logs)
    """

    token: int
    reason: str = ""


class RenderCoordinator(Generic[T]):
    """
    Token-based render coordination.

    Args:
        render_fn: Async function doing the actual render for an attempt
        notify: Called with a message when the current render fails
        frame_interval: Coalescing window of `schedule_render()` (seconds)

    Example:
        >>> coordinator = RenderCoordinator(viewer.render)
        >>> await coordinator.request_render("zoom")
    """

    def __init__(
        self,
        render_fn: Callable[[RenderAttempt], Awaitable[T]],
        notify: Optional[Callable[[str], Any]] = None,
        frame_interval: float = VIEW_THRESHOLDS.frame_interval_s,
    ):
        self._render_fn = render_fn
        self._notify = notify
        self.frame_interval = frame_interval

        self._token = 0
        self._state = RenderState.IDLE
        self._scheduled: Optional[asyncio.Task] = None
        self._scheduled_reasons: list[str] = []

        self.last_result: Optional[T] = None
        self.discarded = 0

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def token(self) -> int:
        return self._token

    # ─────────────────────────────────────────────────────────────────────
    # Attempts
    # ─────────────────────────────────────────────────────────────────────

    def begin(self, reason: str = "") -> RenderAttempt:
        """Start a new attempt, superseding any in flight."""
        self._token += 1
        self._state = RenderState.RENDERING
        return RenderAttempt(token=self._token, reason=reason)

    def is_current(self, attempt: RenderAttempt) -> bool:
        return attempt.token == self._token

    def check(self, attempt: RenderAttempt) -> None:
        """
        Abort a superseded attempt.

        Raises:
            StaleRenderDiscard: If a newer attempt has started
        """
        if not self.is_current(attempt):
            raise StaleRenderDiscard(f"Render {attempt.token} superseded by {self._token}")

    async def request_render(self, reason: str = "") -> Optional[T]:
        """
        Render now.

        Returns:
            The render result, or None if the attempt was superseded or failed.
            On failure the previous `last_result` stays in place.
        """
        attempt = self.begin(reason)
        logger.debug(f"Render {attempt.token} started ({reason or 'unspecified'})")
        try:
            result = await self._render_fn(attempt)
        except StaleRenderDiscard:
            self._discard(attempt)
            return None
        except Exception as e:
            if not self.is_current(attempt):
                self._discard(attempt)
                return None
            self._state = RenderState.IDLE
            logger.warning(f"Render {attempt.token} failed: {e}")
            if self._notify is not None:
                self._notify(f"Failed to render: {e}")
            return None

        if not self.is_current(attempt):
            self._discard(attempt)
            return None

        self.last_result = result
        self._state = RenderState.IDLE
        logger.debug(f"Render {attempt.token} finished")
        return result

    # ─────────────────────────────────────────────────────────────────────
    # Coalescing
    # ─────────────────────────────────────────────────────────────────────

    def schedule_render(self, reason: str = "") -> asyncio.Task:
        """
        Request a render on the next frame.

        All calls made before the frame fires share one render. Must be
        called from within a running event loop.

        Returns:
            The task that performs the coalesced render
        """
        self._scheduled_reasons.append(reason)
        if self._scheduled is None or self._scheduled.done():
            self._scheduled = asyncio.get_running_loop().create_task(self._run_scheduled())
        return self._scheduled

    async def _run_scheduled(self) -> Optional[T]:
        await asyncio.sleep(self.frame_interval)
        reasons = [r for r in self._scheduled_reasons if r]
        self._scheduled_reasons = []
        self._scheduled = None
        return await self.request_render(", ".join(dict.fromkeys(reasons)))

    def _discard(self, attempt: RenderAttempt) -> None:
        self.discarded += 1
        logger.debug(f"Discarded stale render {attempt.token} (current {self._token})")
