"""
Module: export.config

Purpose:
    Configuration dataclass for exports. Immutable configuration with
    validation on construction.

Key Classes:
    - ExportConfig: Output shape, resolution and encoding quality
    - ExportMode: paginated | long

Dependencies:
    - dataclasses (std)

Used By:
    - export.controller: Export driver
    - settings.store: Persisted export options
    - cli: `export` subcommand
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

# A4 in PDF points
A4_WIDTH_PT = 595.28
A4_HEIGHT_PT = 841.89


class ExportMode(str, Enum):
    PAGINATED = "paginated"
    LONG = "long"


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for one export (immutable).

    Attributes:
        mode: PAGINATED slices into fixed-size pages, LONG emits one tall page
        continue_across: Let content flow across source-page boundaries
        dpi: Rasterization multiplier (pixels per point)
        output_quality: Lossy encoding quality, 0..1
        page_width_pt: Output page width in points
        page_height_pt: Output page height in points

    Example:
        >>> config = ExportConfig(mode="long", dpi=3)
        >>> config.page_width_px
        1785
    """

    mode: ExportMode = ExportMode.PAGINATED
    continue_across: bool = True
    dpi: float = 2
    output_quality: float = 0.8
    page_width_pt: float = A4_WIDTH_PT
    page_height_pt: float = A4_HEIGHT_PT

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        try:
            object.__setattr__(self, "mode", ExportMode(self.mode))
        except ValueError:
            raise ValueError(f"mode must be 'paginated' or 'long': {self.mode!r}") from None
        if not math.isfinite(self.dpi) or self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if not 0 < self.output_quality <= 1:
            raise ValueError(f"output_quality must be in (0, 1]: {self.output_quality}")
        if self.page_width_pt <= 0 or self.page_height_pt <= 0:
            raise ValueError(
                f"Page size must be positive: {self.page_width_pt}x{self.page_height_pt}"
            )
        if self.page_width_px < 1 or self.page_height_px < 1:
            raise ValueError("Output page is smaller than one pixel at this dpi")

    @property
    def page_width_px(self) -> int:
        return math.floor(self.page_width_pt * self.dpi)

    @property
    def page_height_px(self) -> int:
        return math.floor(self.page_height_pt * self.dpi)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "continue_across": self.continue_across,
            "dpi": self.dpi,
            "output_quality": self.output_quality,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExportConfig":
        """Build from persisted options; accepts the older camelCase keys."""
        defaults = cls()
        return cls(
            mode=data.get("mode", defaults.mode),
            continue_across=bool(data.get("continue_across", data.get("continueAcross", defaults.continue_across))),
            dpi=data.get("dpi", defaults.dpi),
            output_quality=data.get("output_quality", data.get("jpegQuality", defaults.output_quality)),
        )
