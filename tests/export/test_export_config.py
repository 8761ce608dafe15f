"""
Unit tests for ExportConfig.
"""

import pytest

from answer_spacer.export.config import ExportConfig, ExportMode


class TestExportConfig:
    def test_defaults_when_created_then_a4_at_two_pixels_per_point(self):
        config = ExportConfig()

        assert config.mode is ExportMode.PAGINATED
        assert config.continue_across is True
        assert (config.page_width_px, config.page_height_px) == (1190, 1683)

    def test_mode_when_string_then_coerced(self):
        assert ExportConfig(mode="long").mode is ExportMode.LONG

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"mode": "scroll"},
            {"dpi": 0},
            {"dpi": float("nan")},
            {"output_quality": 0},
            {"output_quality": 1.5},
            {"page_width_pt": -1},
            {"page_height_pt": 0.1, "dpi": 1},
        ],
    )
    def test_init_when_invalid_then_raises(self, kwargs):
        with pytest.raises(ValueError):
            ExportConfig(**kwargs)

    def test_from_dict_when_camel_case_then_accepted(self):
        config = ExportConfig.from_dict({"mode": "long", "continueAcross": False, "jpegQuality": 0.5})

        assert config.mode is ExportMode.LONG
        assert config.continue_across is False
        assert config.output_quality == 0.5

    def test_to_dict_when_round_tripped_then_equal(self):
        config = ExportConfig(mode=ExportMode.LONG, continue_across=False, dpi=3, output_quality=0.6)
        assert ExportConfig.from_dict(config.to_dict()) == config
