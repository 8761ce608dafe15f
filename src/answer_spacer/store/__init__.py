"""Spacer storage."""

from .spacer_store import SpacerStore

__all__ = ["SpacerStore"]
