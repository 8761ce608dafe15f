"""
Tests for the editing handlers.

Every test drives a SpacerEditor over an in-memory document and checks
the store, the view state, the rendered view and the persisted settings.
"""

import asyncio

import fitz
import pytest

from answer_spacer.core.models import Spacer, SpacerStyle
from answer_spacer.export.config import ExportConfig, ExportMode
from answer_spacer.interactive.editor import SpacerEditor
from answer_spacer.interactive.state import Tool, ViewState
from answer_spacer.interactive.viewer import ViewRenderer
from answer_spacer.settings.store import SettingsStore
from answer_spacer.store.spacer_store import SpacerStore


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"


@pytest.fixture
def make_editor(make_source, store, settings_path):
    def _make(*sizes, scale=1.0, persist=True):
        source = make_source(*(sizes or ((40, 100),)))
        renderer = ViewRenderer(source, store, ViewState(page_count=source.page_count, scale=scale))
        return SpacerEditor(renderer, SettingsStore(settings_path) if persist else None)

    return _make


class TestAddSpace:
    def test_click_when_add_space_then_spacer_inserted_and_selected(self, make_editor, store):
        editor = make_editor()
        editor.set_tool(Tool.ADD_SPACE)

        spacer = asyncio.run(editor.click_page(0, 50))

        assert spacer.y == 50
        assert spacer.height == 100
        assert editor.state.selected_id == spacer.id
        assert editor.renderer.current_view.page(0).box_for(spacer.id).top == 50

    def test_click_when_below_existing_spacer_then_mapped_to_source_y(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()
        editor.set_tool(Tool.ADD_SPACE)

        assert asyncio.run(editor.click_page(0, 60)).y == 40

    def test_click_when_zoomed_then_view_y_divided_by_scale(self, make_editor):
        editor = make_editor(scale=2.0)
        editor.set_tool(Tool.ADD_SPACE)

        assert asyncio.run(editor.click_page(0, 100)).y == 50

    def test_click_when_add_space_then_new_spacer_uses_last_preset(self, make_editor, store):
        store.add(0, Spacer(id="a", y=0, height=20))
        editor = make_editor()

        async def scenario():
            await editor.set_property("a", "style", "dot-grid", immediate=True)
            editor.set_tool(Tool.ADD_SPACE)
            return await editor.click_page(0, 80)

        assert asyncio.run(scenario()).style is SpacerStyle.DOT_GRID


class TestSelection:
    def test_click_when_select_tool_then_spacer_under_pointer_selected(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        async def scenario():
            await editor.render("open")
            hit = await editor.click_page(0, 40)
            selected = editor.state.selected_id
            await editor.click_page(0, 90)
            return hit, selected

        hit, selected = asyncio.run(scenario())

        assert hit.id == "a"
        assert selected == "a"
        assert editor.state.selected_id is None


class TestPointerAdjustments:
    def test_drag_when_past_threshold_then_moved_on_release(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        async def scenario():
            await editor.render("open")
            editor.press_spacer("a", 35)
            assert editor.pointer_move(38) is None
            ghost = editor.pointer_move(55)
            assert store.get("a").y == 30
            return ghost, await editor.pointer_release()

        ghost, updated = asyncio.run(scenario())

        assert ghost.top == 50
        assert updated.y == 50
        assert editor.renderer.current_view.page(0).box_for("a").top == 50

    def test_drag_when_zoomed_then_delta_scaled(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor(scale=2.0)

        async def scenario():
            await editor.render("open")
            editor.press_spacer("a", 70)
            editor.pointer_move(110)
            return await editor.pointer_release()

        assert asyncio.run(scenario()).y == 50

    def test_press_when_released_without_drag_then_selects(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        editor.press_spacer("a", 35)
        editor.pointer_move(37)
        result = asyncio.run(editor.pointer_release())

        assert result is None
        assert editor.state.selected_id == "a"
        assert store.get("a").y == 30

    def test_resize_when_released_then_height_committed(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        editor.press_resize_handle("a", 50)
        ghost = editor.pointer_move(80)
        updated = asyncio.run(editor.pointer_release())

        assert ghost.height == 50
        assert updated.height == 50

    def test_cancel_when_dragging_then_store_untouched(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        editor.press_spacer("a", 35)
        editor.pointer_move(80)
        editor.cancel_adjustment()

        assert asyncio.run(editor.pointer_release()) is None
        assert store.get("a").y == 30


class TestKeyboard:
    def test_key_when_no_selection_then_not_handled(self, make_editor):
        assert asyncio.run(make_editor().handle_key("Delete")) is False

    def test_arrow_down_when_selected_then_nudged(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()
        editor.state.select("a")

        async def scenario():
            handled = await editor.handle_key("ArrowDown")
            await editor.schedule_render()
            return handled

        assert asyncio.run(scenario()) is True
        assert store.get("a").y == 35

    def test_arrow_up_when_near_top_then_clamped(self, make_editor, store):
        store.add(0, Spacer(id="a", y=2, height=20))
        editor = make_editor()
        editor.state.select("a")

        asyncio.run(editor.handle_key("ArrowUp"))
        assert store.get("a").y == 0

    @pytest.mark.parametrize("key", ["Delete", "Backspace"])
    def test_delete_when_selected_then_removed_and_persisted(self, make_editor, store, settings_path, key):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()
        editor.state.select("a")

        assert asyncio.run(editor.handle_key(key)) is True
        assert "a" not in store
        assert editor.state.selected_id is None
        assert SettingsStore(settings_path).data["spacers"] == {}

    def test_key_when_unrelated_then_not_handled(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()
        editor.state.select("a")

        assert asyncio.run(editor.handle_key("x")) is False


class TestPropertyEdits:
    def test_set_property_when_deferred_then_renders_are_coalesced(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        async def scenario():
            await editor.set_property("a", "height", 40)
            await editor.set_property("a", "height", 60)
            await editor.schedule_render()

        asyncio.run(scenario())

        assert store.get("a").height == 60
        assert editor.renderer.coordinator.token == 1
        assert editor.renderer.current_view.page(0).height == 160

    def test_set_property_when_style_then_preset_persisted(self, make_editor, store, settings_path):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()

        asyncio.run(editor.set_property("a", "style", "ruled", immediate=True))

        assert editor.state.last_preset.style is SpacerStyle.RULED
        assert SettingsStore(settings_path).get_last_preset().style is SpacerStyle.RULED

    def test_duplicate_when_selected_then_copy_selected(self, make_editor, store):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()
        editor.state.select("a")

        copy = asyncio.run(editor.duplicate_selected())

        assert copy.y == 50
        assert editor.state.selected_id == copy.id


class TestViewActions:
    def test_zoom_in_when_called_then_scale_persisted_and_restored(self, make_editor, make_source, store, settings_path):
        store.add(0, Spacer(id="a", y=30, height=20))
        editor = make_editor()
        asyncio.run(editor.zoom_in())
        editor.settings.save_spacers(store)

        source = make_source((40, 100))
        restored = SpacerEditor.restore(
            ViewRenderer(source, SpacerStore(), ViewState(page_count=1)),
            SettingsStore(settings_path),
        )

        assert restored.state.scale == pytest.approx(1.2)
        assert restored.store.get("a").y == 30

    def test_restore_when_saved_page_then_state_on_that_page(self, make_source, settings_path):
        SettingsStore(settings_path).set_current_page(1)
        source = make_source((40, 100), (40, 100))

        restored = SpacerEditor.restore(ViewRenderer(source, SpacerStore(), ViewState()), SettingsStore(settings_path))

        assert restored.state.page_count == 2
        assert restored.state.current_page == 1

    def test_go_to_page_when_valid_then_persisted(self, make_editor, settings_path):
        editor = make_editor((40, 100), (40, 100))

        assert asyncio.run(editor.go_to_page(1)) is True
        assert asyncio.run(editor.go_to_page(5)) is False
        assert SettingsStore(settings_path).get_current_page() == 1

    def test_fit_to_width_when_called_then_zoom_matches_container(self, make_editor):
        editor = make_editor()

        # 40pt page in a 140px container with a 40px gutter
        asyncio.run(editor.fit_to_width(140))
        assert editor.state.scale == pytest.approx(2.5)

    def test_page_breaks_when_toggled_then_rendered_and_persisted(self, make_editor, settings_path):
        editor = make_editor()

        asyncio.run(editor.set_show_page_breaks(True))

        assert editor.renderer.current_view.pages[0].page_breaks
        assert SettingsStore(settings_path).get_display_options()["show_page_breaks"] is True


class TestProjectActions:
    def test_save_then_load_project_when_cleared_then_spacers_restored(self, make_editor, store, tmp_path):
        store.add(0, Spacer(id="a", y=30, height=20, style="squared"))
        editor = make_editor()
        path = editor.save_project(tmp_path / "paper.json", pdf_name="paper.pdf")

        async def scenario():
            await editor.clear_project()
            assert len(store) == 0
            return await editor.load_project(path)

        project = asyncio.run(scenario())

        assert project.pdf_name == "paper.pdf"
        assert store.get("a").style is SpacerStyle.SQUARED

    def test_load_project_when_saved_on_second_page_then_navigates_there(self, make_editor, make_source, tmp_path):
        editor = make_editor((40, 100), (40, 100))
        asyncio.run(editor.go_to_page(1))
        path = editor.save_project(tmp_path / "paper.json")

        fresh = SpacerEditor(ViewRenderer(make_source((40, 100), (40, 100)), SpacerStore(), ViewState()))
        project = asyncio.run(fresh.load_project(path))

        assert project.current_page == 1
        assert fresh.state.current_page == 1

    def test_export_when_called_then_pdf_written_and_options_persisted(self, make_editor, tmp_path, settings_path):
        editor = make_editor((40, 100), (40, 100))
        config = ExportConfig(mode=ExportMode.LONG, dpi=1, page_width_pt=40, page_height_pt=60)
        output = tmp_path / "out.pdf"

        result = asyncio.run(editor.export(output, config))

        assert result.page_count == 1
        with fitz.open(output) as doc:
            assert doc.page_count == 1
        assert SettingsStore(settings_path).get_export_options().mode is ExportMode.LONG

    def test_editor_when_no_settings_then_works_in_memory(self, make_editor, store):
        editor = make_editor(persist=False)
        editor.set_tool(Tool.ADD_SPACE)

        asyncio.run(editor.click_page(0, 10))
        assert len(store) == 1
