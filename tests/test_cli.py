"""
Tests for the command-line interface.
"""

import fitz
import pytest

from answer_spacer.cli import main
from answer_spacer.core.models import Spacer
from answer_spacer.core.utils.serialization import save_project
from answer_spacer.store.spacer_store import SpacerStore


@pytest.fixture
def pdf_path(tmp_path):
    path = tmp_path / "paper.pdf"
    doc = fitz.open()
    for number in (1, 2):
        page = doc.new_page(width=595, height=842)
        page.insert_text((72, 100), f"Question {number}", fontsize=14)
    doc.save(path)
    doc.close()
    return path


@pytest.fixture
def project_path(tmp_path):
    store = SpacerStore()
    store.add(0, Spacer(id="1", y=300, height=100, style="ruled"))
    return save_project(tmp_path / "paper.json", store, pdf_name="paper.pdf")


class TestPlanCommand:
    def test_plan_when_spacer_then_segments_printed(self, project_path, capsys):
        code = main(["plan", "--project", str(project_path), "--page-height", "800"])
        out = capsys.readouterr().out.splitlines()

        assert code == 0
        assert out == [
            "content  src 0-300  dest 0-300",
            "spacer   id 1 (ruled)  dest 300-400",
            "content  src 300-800  dest 400-900",
            "total height 900",
        ]

    def test_plan_when_page_without_spacers_then_single_segment(self, project_path, capsys):
        main(["plan", "--project", str(project_path), "--page-height", "800", "--page", "1"])
        assert capsys.readouterr().out.splitlines()[-1] == "total height 800"

    def test_plan_when_project_missing_then_error_exit(self, tmp_path, capsys):
        code = main(["plan", "--project", str(tmp_path / "missing.json"), "--page-height", "800"])

        assert code == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestExportCommand:
    def test_export_when_continuous_then_overflow_adds_a_page(self, pdf_path, project_path, tmp_path, capsys):
        output = tmp_path / "out.pdf"

        code = main(["export", str(pdf_path), "--project", str(project_path), "-o", str(output), "--dpi", "1"])

        assert code == 0
        assert "Wrote 3 pages" in capsys.readouterr().out
        with fitz.open(output) as doc:
            assert doc.page_count == 3
            assert doc[0].rect.width == pytest.approx(595)

    def test_export_when_long_mode_then_single_page(self, pdf_path, tmp_path):
        output = tmp_path / "out.pdf"

        code = main(["export", str(pdf_path), "-o", str(output), "--mode", "long", "--dpi", "1"])

        assert code == 0
        with fitz.open(output) as doc:
            assert doc.page_count == 1

    def test_export_when_input_not_pdf_then_error_exit(self, tmp_path, capsys):
        bogus = tmp_path / "bogus.pdf"
        bogus.write_bytes(b"plain text")

        code = main(["export", str(bogus), "-o", str(tmp_path / "out.pdf")])

        assert code == 1
        assert "Error:" in capsys.readouterr().err
        assert not (tmp_path / "out.pdf").exists()

    def test_export_when_dpi_invalid_then_error_exit(self, pdf_path, tmp_path):
        assert main(["export", str(pdf_path), "-o", str(tmp_path / "out.pdf"), "--dpi", "0"]) == 1
