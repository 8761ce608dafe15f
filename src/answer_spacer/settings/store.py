"""
Settings persistence.

Stores the editor's spacers and preferences in a JSON file. Any
malformed data results in a graceful fallback to defaults, never an
exception at load time.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from answer_spacer.core.models.spacer import InputError, SpacerPreset
from answer_spacer.core.schemas.validator import ValidationError, validate_spacer_map
from answer_spacer.export.config import ExportConfig
from answer_spacer.store.spacer_store import SpacerStore

logger = logging.getLogger(__name__)


class SettingsStore:
    """Lightweight JSON-backed store for editor state."""

    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.data: Dict[str, Any] = {}
        self.load_error: Optional[str] = None

        if self.path.exists():
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
                if not isinstance(loaded, dict):
                    raise ValueError("top level is not an object")
                self.data = loaded
            except json.JSONDecodeError as e:
                self.load_error = f"Settings file is corrupted: {e}"
            except (OSError, ValueError) as e:
                self.load_error = f"Failed to read settings: {e}"
            if self.load_error:
                logger.warning(f"{self.load_error}; using defaults")
                self.data = {}

        if "version" not in self.data:
            self.data["version"] = self.CURRENT_VERSION

    # Spacers

    def load_spacers(self, store: SpacerStore) -> bool:
        """
        Fill `store` from the saved spacers.

        Returns False (and leaves the store empty) if the saved data is
        malformed.
        """
        raw = self.data.get("spacers")
        if not raw:
            return False
        try:
            validate_spacer_map(raw)
            store.load(raw)
        except (ValidationError, InputError) as e:
            logger.warning(f"Ignoring saved spacers: {e}")
            store.clear()
            return False
        return True

    def save_spacers(self, store: SpacerStore) -> None:
        self.data["spacers"] = store.to_mapping()
        self._save()

    # View

    def get_scale(self) -> float:
        return self._safe_float(self.data.get("scale"), 1.0)

    def set_scale(self, scale: float) -> None:
        self.data["scale"] = scale
        self._save()

    def get_current_page(self) -> int:
        value = self.data.get("current_page")
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        return 0

    def set_current_page(self, page_index: int) -> None:
        self.data["current_page"] = page_index
        self._save()

    def get_display_options(self) -> Dict[str, bool]:
        raw = self.data.get("display_options")
        options = raw if isinstance(raw, dict) else {}
        return {
            "show_page_breaks": bool(options.get("show_page_breaks", False)),
            "show_placement_guide": bool(options.get("show_placement_guide", True)),
        }

    def set_display_options(self, show_page_breaks: bool, show_placement_guide: bool) -> None:
        self.data["display_options"] = {
            "show_page_breaks": show_page_breaks,
            "show_placement_guide": show_placement_guide,
        }
        self._save()

    # Presets and export

    def get_last_preset(self) -> SpacerPreset:
        raw = self.data.get("last_preset")
        if isinstance(raw, dict):
            try:
                return SpacerPreset.from_dict(raw)
            except InputError as e:
                logger.debug(f"Ignoring saved preset: {e}")
        return SpacerPreset()

    def set_last_preset(self, preset: SpacerPreset) -> None:
        self.data["last_preset"] = preset.to_dict()
        self._save()

    def get_export_options(self) -> ExportConfig:
        raw = self.data.get("export_options")
        if isinstance(raw, dict):
            try:
                return ExportConfig.from_dict(raw)
            except (TypeError, ValueError) as e:
                logger.debug(f"Ignoring saved export options: {e}")
        return ExportConfig()

    def set_export_options(self, config: ExportConfig) -> None:
        self.data["export_options"] = config.to_dict()
        self._save()

    def reset(self) -> None:
        self.data = {"version": self.CURRENT_VERSION}
        self._save()

    # Internals

    def _safe_float(self, value: Any, default: float) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            return default
        return float(value)

    def _save(self) -> None:
        """Safely write settings with atomic replacement.

        Uses a temp file to prevent corruption if write is interrupted.
        """
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_suffix(".tmp")
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path is not None and temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
