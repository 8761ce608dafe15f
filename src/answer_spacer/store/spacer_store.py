"""
Module: spacer_store

Purpose:
    Owns the collection of spacers, keyed by 0-based source page index.
    Every mutation goes through this class so the id index and the
    per-page lists stay consistent.

Key Classes:
    - SpacerStore: Per-page spacer collections with O(1) lookup by id

Key Functions:
    - add() / create(): Insert a spacer
    - update() / move() / resize() / nudge(): Replace a spacer by id
    - delete() / duplicate() / clear(): Structural edits
    - spacers_for() / sorted_for(): Read a page's spacers

Dependencies:
    - answer_spacer.core.models.spacer

Used By:
    - layout.planner (via sorted_for)
    - interactive.editor: Editing handlers
    - export.controller: Export planning
    - settings.store, core.utils.serialization: Persistence
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from answer_spacer.common.thresholds import SPACER_THRESHOLDS
from answer_spacer.core.models.spacer import InputError, Spacer, SpacerPreset

logger = logging.getLogger(__name__)


class SpacerStore:
    """
    Mapping of page index -> ordered spacers.

    Spacers keep their insertion order within a page; `sorted_for()`
    derives the y-sorted view used for planning. Ties in y keep insertion
    order.

    Example:
        >>> store = SpacerStore()
        >>> s = store.create(0, y=300, preset=SpacerPreset())
        >>> store.resize(s.id, 150).height
        150
    """

    def __init__(self) -> None:
        self._pages: dict[int, list[Spacer]] = {}
        self._index: dict[str, tuple[int, int]] = {}
        self._next_id = 1

    # ─────────────────────────────────────────────────────────────────────
    # Insertion
    # ─────────────────────────────────────────────────────────────────────

    def add(self, page_index: int, spacer: Spacer) -> Spacer:
        """
        Append a spacer to a page.

        Raises:
            InputError: If the page index is invalid or the id already exists
        """
        _check_page_index(page_index)
        if not isinstance(spacer, Spacer):
            raise InputError(f"Expected a Spacer, got {type(spacer).__name__}")
        if spacer.id in self._index:
            raise InputError(f"Duplicate spacer id: {spacer.id}")

        page = self._pages.setdefault(page_index, [])
        page.append(spacer)
        self._index[spacer.id] = (page_index, len(page) - 1)
        self._bump_next_id(spacer.id)
        logger.debug(f"Added spacer {spacer.id} to page {page_index} at y={spacer.y}")
        return spacer

    def create(
        self,
        page_index: int,
        y: float,
        preset: SpacerPreset | None = None,
        height: float = SPACER_THRESHOLDS.default_height,
    ) -> Spacer:
        """Create a spacer with a fresh id and a copy of the preset."""
        spacer = Spacer.from_preset(self._allocate_id(), y, preset or SpacerPreset(), height=height)
        return self.add(page_index, spacer)

    def duplicate(self, spacer_id: str) -> Spacer:
        """Copy a spacer under a new id, offset downwards, on the same page."""
        original = self.get(spacer_id)
        page_index = self.page_of(spacer_id)
        copy = Spacer.from_preset(
            self._allocate_id(),
            original.y + SPACER_THRESHOLDS.duplicate_offset,
            original.preset,
            height=original.height,
        )
        return self.add(page_index, copy)

    # ─────────────────────────────────────────────────────────────────────
    # Replacement
    # ─────────────────────────────────────────────────────────────────────

    def update(self, spacer_id: str, **changes: Any) -> Spacer:
        """
        Replace a spacer with a validated copy carrying `changes`.

        The spacer keeps its position in the page list; no other spacer
        is touched.

        Raises:
            KeyError: If the id is unknown
            InputError: If the new values are invalid
        """
        page_index, position = self._locate(spacer_id)
        updated = self._pages[page_index][position].with_changes(**changes)
        self._pages[page_index][position] = updated
        return updated

    def move(self, spacer_id: str, y: float) -> Spacer:
        return self.update(spacer_id, y=y)

    def resize(self, spacer_id: str, height: float) -> Spacer:
        return self.update(spacer_id, height=height)

    def nudge(self, spacer_id: str, delta: float) -> Spacer:
        """Shift a spacer by `delta`, never above the top of the page."""
        spacer = self.get(spacer_id)
        return self.update(spacer_id, y=max(0.0, spacer.y + delta))

    # ─────────────────────────────────────────────────────────────────────
    # Removal
    # ─────────────────────────────────────────────────────────────────────

    def delete(self, spacer_id: str) -> Spacer:
        """Remove a spacer. A page left with no spacers is dropped."""
        page_index, position = self._locate(spacer_id)
        page = self._pages[page_index]
        removed = page.pop(position)
        del self._index[spacer_id]

        if page:
            for i in range(position, len(page)):
                self._index[page[i].id] = (page_index, i)
        else:
            del self._pages[page_index]
        logger.debug(f"Deleted spacer {spacer_id} from page {page_index}")
        return removed

    def clear(self) -> None:
        self._pages.clear()
        self._index.clear()

    # ─────────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────────

    def get(self, spacer_id: str) -> Spacer:
        page_index, position = self._locate(spacer_id)
        return self._pages[page_index][position]

    def find(self, spacer_id: str) -> Spacer | None:
        entry = self._index.get(spacer_id)
        if entry is None:
            return None
        return self._pages[entry[0]][entry[1]]

    def page_of(self, spacer_id: str) -> int:
        return self._locate(spacer_id)[0]

    def spacers_for(self, page_index: int) -> tuple[Spacer, ...]:
        """Spacers of a page in insertion order."""
        return tuple(self._pages.get(page_index, ()))

    def sorted_for(self, page_index: int) -> tuple[Spacer, ...]:
        """Spacers of a page stably sorted by y."""
        return tuple(sorted(self._pages.get(page_index, ()), key=lambda s: s.y))

    def pages(self) -> list[int]:
        """Page indices that currently hold spacers, ascending."""
        return sorted(self._pages)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, spacer_id: object) -> bool:
        return spacer_id in self._index

    # ─────────────────────────────────────────────────────────────────────
    # Persistence helpers
    # ─────────────────────────────────────────────────────────────────────

    def to_mapping(self) -> dict[str, list[dict[str, Any]]]:
        """Serialize as {page_index (str): [spacer dict, ...]} in list order."""
        return {
            str(page_index): [s.to_dict() for s in self._pages[page_index]]
            for page_index in self.pages()
        }

    def load(self, mapping: Mapping[Any, Iterable[Mapping[str, Any]]]) -> None:
        """
        Replace the store contents from a serialized mapping.

        The store is left unchanged if any entry is invalid.

        Raises:
            InputError: If a page key or spacer is invalid
        """
        staged = SpacerStore()
        for key, spacers in mapping.items():
            try:
                page_index = int(key)
            except (TypeError, ValueError):
                raise InputError(f"Invalid page key: {key!r}") from None
            for raw in spacers:
                staged.add(page_index, Spacer.from_dict(raw))

        self._pages = staged._pages
        self._index = staged._index
        self._next_id = max(self._next_id, staged._next_id)
        logger.info(f"Loaded {len(self)} spacers across {len(self._pages)} pages")

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Iterable[Mapping[str, Any]]]) -> "SpacerStore":
        store = cls()
        store.load(mapping)
        return store

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _locate(self, spacer_id: str) -> tuple[int, int]:
        try:
            return self._index[spacer_id]
        except KeyError:
            raise KeyError(f"Unknown spacer id: {spacer_id}") from None

    def _allocate_id(self) -> str:
        while str(self._next_id) in self._index:
            self._next_id += 1
        spacer_id = str(self._next_id)
        self._next_id += 1
        return spacer_id

    def _bump_next_id(self, spacer_id: str) -> None:
        # Numeric ids from loaded files must never be handed out again
        if spacer_id.isdigit():
            self._next_id = max(self._next_id, int(spacer_id) + 1)


def _check_page_index(page_index: int) -> None:
    if isinstance(page_index, bool) or not isinstance(page_index, int) or page_index < 0:
        raise InputError(f"Page index must be a non-negative integer: {page_index!r}")
