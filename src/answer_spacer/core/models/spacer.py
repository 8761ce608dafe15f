"""
Module: spacer

Purpose:
    Provides the Spacer dataclass - a user-inserted block of answer space
    injected into a page's vertical flow. Positions are always expressed in
    original, unreflowed source-page units.

Key Classes:
    - SpacerStyle: Visual pattern drawn inside a spacer
    - Spacer: Validated, immutable spacer value
    - SpacerPreset: Last-used style settings copied into new spacers
    - InputError: Raised for malformed spacer values

Dependencies:
    - dataclasses (std)
    - enum (std)
    - math (std)

Used By:
    - store.spacer_store: Per-page collections
    - layout.planner: Reflow planning
    - render.styles: Pattern drawing
    - core.utils.serialization: JSON round-trips
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from answer_spacer.common.thresholds import SPACER_THRESHOLDS


class InputError(ValueError):
    """Malformed spacer value, rejected before it reaches planning."""


class SpacerStyle(str, Enum):
    """Pattern drawn inside a spacer.

    Values match the strings persisted by earlier project files.
    """

    PLAIN = "plain"
    RULED = "ruled"
    DOT_GRID = "dot-grid"
    SQUARED = "squared"

    @classmethod
    def parse(cls, value: Any) -> "SpacerStyle":
        """Parse a style from its wire value (or an existing member)."""
        if isinstance(value, SpacerStyle):
            return value
        try:
            return cls(str(value))
        except ValueError:
            raise InputError(f"Unknown spacer style: {value!r}") from None


def _require_positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InputError(f"{name} must be a number: {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InputError(f"{name} must be > 0: {value}")


@dataclass(frozen=True, slots=True)
class SpacerPreset:
    """
    Style settings copied into newly inserted spacers.

    Attributes:
        style: Pattern style
        rule_spacing: Distance between ruled lines (source units)
        dot_pitch: Distance between dots (source units)
        grid_size: Size of a grid square (source units)
    """

    style: SpacerStyle = SpacerStyle.PLAIN
    rule_spacing: float = SPACER_THRESHOLDS.default_rule_spacing
    dot_pitch: float = SPACER_THRESHOLDS.default_dot_pitch
    grid_size: float = SPACER_THRESHOLDS.default_grid_size

    def __post_init__(self) -> None:
        object.__setattr__(self, "style", SpacerStyle.parse(self.style))
        _require_positive("rule_spacing", self.rule_spacing)
        _require_positive("dot_pitch", self.dot_pitch)
        _require_positive("grid_size", self.grid_size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "style": self.style.value,
            "rule_spacing": self.rule_spacing,
            "dot_pitch": self.dot_pitch,
            "grid_size": self.grid_size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpacerPreset":
        """Deserialize, accepting both snake_case and camelCase keys."""
        defaults = cls()
        return cls(
            style=data.get("style", defaults.style),
            rule_spacing=_pick(data, "rule_spacing", "ruleSpacing", defaults.rule_spacing),
            dot_pitch=_pick(data, "dot_pitch", "dotPitch", defaults.dot_pitch),
            grid_size=_pick(data, "grid_size", "gridSize", defaults.grid_size),
        )


@dataclass(frozen=True, slots=True)
class Spacer:
    """
    A fixed-height block inserted into a page's flow.

    Attributes:
        id: Unique, stable identifier
        y: Insertion offset in original (unreflowed) source-page units
        height: Block height in source-page units
        style: Pattern style
        rule_spacing: Distance between ruled lines
        dot_pitch: Distance between dots
        grid_size: Size of a grid square

    Invariants:
        - id is non-empty
        - y >= 0 (may exceed the page height)
        - height > 0
        - pattern sizes > 0

    Example:
        >>> s = Spacer(id="1", y=300, height=100)
        >>> s.bottom
        400
    """

    id: str
    y: float
    height: float
    style: SpacerStyle = SpacerStyle.PLAIN
    rule_spacing: float = SPACER_THRESHOLDS.default_rule_spacing
    dot_pitch: float = SPACER_THRESHOLDS.default_dot_pitch
    grid_size: float = SPACER_THRESHOLDS.default_grid_size

    def __post_init__(self) -> None:
        """Validate spacer on construction."""
        if not isinstance(self.id, str) or not self.id:
            raise InputError(f"Spacer id must be a non-empty string: {self.id!r}")
        if not isinstance(self.y, (int, float)) or isinstance(self.y, bool):
            raise InputError(f"y must be a number: {self.y!r}")
        if not math.isfinite(self.y) or self.y < 0:
            raise InputError(f"y must be >= 0: {self.y}")
        _require_positive("height", self.height)
        object.__setattr__(self, "style", SpacerStyle.parse(self.style))
        _require_positive("rule_spacing", self.rule_spacing)
        _require_positive("dot_pitch", self.dot_pitch)
        _require_positive("grid_size", self.grid_size)

    @property
    def bottom(self) -> float:
        """Original y plus height (not a reflowed coordinate)."""
        return self.y + self.height

    @property
    def preset(self) -> SpacerPreset:
        """Style settings of this spacer."""
        return SpacerPreset(
            style=self.style,
            rule_spacing=self.rule_spacing,
            dot_pitch=self.dot_pitch,
            grid_size=self.grid_size,
        )

    def with_changes(self, **changes: Any) -> "Spacer":
        """Return a validated copy with the given fields replaced."""
        if "id" in changes and changes["id"] != self.id:
            raise InputError("Spacer id cannot be changed")
        try:
            return replace(self, **changes)
        except TypeError as e:
            raise InputError(f"Unknown spacer property: {e}") from e

    @classmethod
    def from_preset(
        cls,
        spacer_id: str,
        y: float,
        preset: SpacerPreset,
        height: float = SPACER_THRESHOLDS.default_height,
    ) -> "Spacer":
        """Create a spacer carrying a copy of the given preset."""
        return cls(
            id=spacer_id,
            y=y,
            height=height,
            style=preset.style,
            rule_spacing=preset.rule_spacing,
            dot_pitch=preset.dot_pitch,
            grid_size=preset.grid_size,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": self.id,
            "y": self.y,
            "height": self.height,
            "style": self.style.value,
            "rule_spacing": self.rule_spacing,
            "dot_pitch": self.dot_pitch,
            "grid_size": self.grid_size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Spacer":
        """
        Deserialize from a dict.

        Accepts the camelCase keys (ruleSpacing, dotPitch, gridSize) used by
        older project files.

        Raises:
            InputError: If a field is missing or invalid
        """
        for key in ("id", "y", "height"):
            if key not in data:
                raise InputError(f"Spacer is missing '{key}'")
        return cls(
            id=str(data["id"]),
            y=data["y"],
            height=data["height"],
            style=data.get("style", SpacerStyle.PLAIN),
            rule_spacing=_pick(data, "rule_spacing", "ruleSpacing", SPACER_THRESHOLDS.default_rule_spacing),
            dot_pitch=_pick(data, "dot_pitch", "dotPitch", SPACER_THRESHOLDS.default_dot_pitch),
            grid_size=_pick(data, "grid_size", "gridSize", SPACER_THRESHOLDS.default_grid_size),
        )


def _pick(data: dict[str, Any], key: str, alt_key: str, default: float) -> Any:
    if key in data:
        return data[key]
    return data.get(alt_key, default)
