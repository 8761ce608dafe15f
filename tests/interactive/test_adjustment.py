"""
Unit tests for drag and resize adjustments.
"""

import pytest

from answer_spacer.interactive.adjustment import (
    AdjustmentKind,
    DragGesture,
    GhostPreview,
    begin_adjustment,
)


@pytest.fixture
def spacer(store):
    return store.create(0, 100, height=60)


class TestDragAdjustment:
    def test_preview_when_dragging_then_store_untouched(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.DRAG, display_top=100)

        ghost = adjustment.update_preview(40)

        assert ghost == GhostPreview(top=140, height=60)
        assert store.get(spacer.id) == spacer

    def test_commit_when_dragged_then_y_written_once(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, "drag")
        adjustment.update_preview(10)
        adjustment.update_preview(40)

        updated = adjustment.commit()

        assert updated.y == 140
        assert store.get(spacer.id).y == 140
        assert not adjustment.active

    def test_commit_when_zoomed_then_delta_divided_by_scale(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.DRAG, scale=2.0)
        adjustment.update_preview(40)

        assert adjustment.commit().y == 120

    def test_commit_when_dragged_above_top_then_clamped(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.DRAG)
        adjustment.update_preview(-500)

        assert adjustment.commit().y == 0

    def test_commit_when_unmoved_then_no_change(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.DRAG)
        assert adjustment.commit() is None

    def test_cancel_when_called_then_store_untouched_and_finished(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.DRAG)
        adjustment.update_preview(40)
        adjustment.cancel()

        assert store.get(spacer.id) == spacer
        with pytest.raises(RuntimeError):
            adjustment.commit()


class TestResizeAdjustment:
    def test_preview_when_resizing_then_ghost_height_follows(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.RESIZE, display_top=50, scale=0.5)

        ghost = adjustment.update_preview(10)

        assert ghost == GhostPreview(top=50, height=40)

    def test_commit_when_shrunk_below_minimum_then_clamped(self, store, spacer):
        adjustment = begin_adjustment(store, spacer.id, AdjustmentKind.RESIZE)
        adjustment.update_preview(-1000)

        assert adjustment.commit().height == 20
        assert store.get(spacer.id).y == 100


class TestBeginAdjustment:
    def test_begin_when_unknown_id_then_key_error(self, store):
        with pytest.raises(KeyError):
            begin_adjustment(store, "missing", AdjustmentKind.DRAG)

    def test_begin_when_scale_not_positive_then_raises(self, store, spacer):
        with pytest.raises(ValueError):
            begin_adjustment(store, spacer.id, AdjustmentKind.DRAG, scale=0)


class TestDragGesture:
    def test_move_when_within_threshold_then_not_dragging(self):
        gesture = DragGesture("1", start_y=100)

        assert gesture.move(104) is False
        assert gesture.move(96) is False
        assert gesture.dragging is False

    def test_move_when_past_threshold_then_drag_starts_once(self):
        gesture = DragGesture("1", start_y=100)

        assert gesture.move(106) is True
        assert gesture.move(150) is False
        assert gesture.dragging is True
