"""
Unit Tests for Project Serialization

Tests save_project / load_project.
"""

import json

import pytest

from answer_spacer.core.models import SpacerPreset
from answer_spacer.core.utils.serialization import (
    ProjectError,
    load_project,
    save_project,
    serialize_project,
)
from answer_spacer.store.spacer_store import SpacerStore


class TestSaveProject:
    """Tests for save_project()."""

    def test_save_when_called_then_writes_expected_keys(self, tmp_path, store):
        store.create(0, 100)
        path = save_project(tmp_path / "p.json", store, scale=1.5, current_page=2, pdf_name="paper.pdf")

        data = json.loads(path.read_text())
        assert set(data) >= {"spacers", "scale", "current_page", "pdf_name", "timestamp"}
        assert data["scale"] == 1.5
        assert data["current_page"] == 2
        assert data["pdf_name"] == "paper.pdf"
        assert data["spacers"]["0"][0]["y"] == 100

    def test_serialize_when_ties_then_list_order_kept(self, store):
        a = store.create(0, 100, height=50)
        b = store.create(0, 100, height=30)

        ids = [s["id"] for s in serialize_project(store)["spacers"]["0"]]
        assert ids == [a.id, b.id]


class TestLoadProject:
    """Tests for load_project()."""

    def test_load_when_saved_then_spacers_restored(self, tmp_path, store):
        store.create(0, 100, SpacerPreset(style="ruled"))
        store.create(3, 250, height=40)
        path = save_project(tmp_path / "p.json", store, scale=2.0, current_page=3)

        project = load_project(path)

        assert project.store.to_mapping() == store.to_mapping()
        assert project.scale == 2.0
        assert project.current_page == 3

    def test_load_when_older_camel_case_file_then_pages_shifted_to_zero_based(self, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(
            json.dumps(
                {
                    "spacers": {
                        "1": [{"id": "1690000000000", "y": 10, "height": 100, "ruleSpacing": 25}],
                        "3": [{"id": "1690000000001", "y": 40, "height": 50}],
                    },
                    "currentPage": 1,
                    "pdfName": "old.pdf",
                }
            )
        )

        project = load_project(path)

        assert project.pdf_name == "old.pdf"
        assert project.current_page == 0
        assert project.store.pages() == [0, 2]
        assert project.store.page_of("1690000000000") == 0
        assert project.store.get("1690000000000").rule_spacing == 25

    def test_load_when_older_file_has_page_zero_then_raises(self, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(json.dumps({"spacers": {"0": [{"id": "1", "y": 0, "height": 10}]}}))
        with pytest.raises(ProjectError, match="Invalid project file format"):
            load_project(path)

    def test_load_when_empty_store_saved_then_round_trips(self, tmp_path):
        path = save_project(tmp_path / "empty.json", SpacerStore(), current_page=2)

        project = load_project(path)

        assert len(project.store) == 0
        assert project.store.pages() == []
        assert project.current_page == 2

    def test_load_when_spacers_key_missing_then_raises(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"schema_version": 1, "scale": 1.0}))
        with pytest.raises(ProjectError, match="missing 'spacers'"):
            load_project(path)

    def test_load_when_not_json_then_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{nope")
        with pytest.raises(ProjectError, match="Failed to read project"):
            load_project(path)

    def test_load_when_invalid_spacer_then_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"schema_version": 1, "spacers": {"0": [{"id": "1", "y": 0, "height": -4}]}}))
        with pytest.raises(ProjectError, match="Invalid project file format"):
            load_project(path)

    def test_load_when_numeric_ids_then_new_ids_do_not_collide(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"schema_version": 1, "spacers": {"0": [{"id": "41", "y": 0, "height": 10}]}}))

        project = load_project(path)
        created = project.store.create(0, 50)

        assert created.id == "42"
        assert isinstance(project.store, SpacerStore)
