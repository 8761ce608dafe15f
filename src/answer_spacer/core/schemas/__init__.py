"""
Schemas Package

Structural validation for persisted payloads.
"""

from .validator import (
    validate_project,
    validate_spacer_map,
    ValidationError,
    PROJECT_SCHEMA_VERSION,
)

__all__ = [
    "validate_project",
    "validate_spacer_map",
    "ValidationError",
    "PROJECT_SCHEMA_VERSION",
]
