"""Settings persistence."""

from .store import SettingsStore

__all__ = ["SettingsStore"]
