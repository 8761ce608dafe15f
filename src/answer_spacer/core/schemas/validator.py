"""
Payload Validation Utilities

Validates JSON payloads (settings blobs and project files) before they
are turned into models.

- `validate_spacer_map()` checks the per-page spacer mapping
- `validate_project()` checks a saved project file
- Fail fast on any structural violation; value-level checks are left to
  the model constructors, which raise InputError
"""

from __future__ import annotations

from typing import Any


PROJECT_SCHEMA_VERSION = 1


class ValidationError(Exception):
    """Raised when a payload fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_spacer_map(data: Any, *, path: str = "spacers") -> None:
    """
    Validate a mapping of page key -> list of spacer dicts.

    Page keys may be ints or digit strings (JSON object keys are strings).

    Args:
        data: Payload to validate
        path: Location of the payload, used in error messages

    Raises:
        ValidationError: If the structure is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must be a dict", path=path)

    for key, spacers in data.items():
        key_path = f"{path}.{key}"
        if isinstance(key, bool) or not (isinstance(key, int) or str(key).lstrip("-").isdigit()):
            raise ValidationError(f"Invalid page key: {key!r}", path=key_path)
        if int(key) < 0:
            raise ValidationError(f"Page key must be >= 0: {key}", path=key_path)
        if not isinstance(spacers, list):
            raise ValidationError(f"{key_path} must be a list", path=key_path)
        for i, spacer in enumerate(spacers):
            _validate_spacer(spacer, f"{key_path}[{i}]")


def _validate_spacer(data: Any, path: str) -> None:
    """Validate the structure of one spacer dict."""
    if not isinstance(data, dict):
        raise ValidationError("spacer must be a dict", path=path)

    required = ["id", "y", "height"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Spacer missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    for field_name in ("y", "height"):
        value = data[field_name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"Invalid {field_name}: {value!r} (must be a number)",
                path=f"{path}.{field_name}",
            )


def validate_project(data: Any) -> None:
    """
    Validate a project file payload.

    Args:
        data: Parsed JSON document

    Raises:
        ValidationError: If the payload is not a project
    """
    if not isinstance(data, dict):
        raise ValidationError("Project must be a JSON object")
    if "spacers" not in data:
        raise ValidationError("Invalid project file format: missing 'spacers'", path="spacers")

    version = data.get("schema_version", PROJECT_SCHEMA_VERSION)
    if version != PROJECT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported project schema version: {version} (expected {PROJECT_SCHEMA_VERSION})",
            path="schema_version",
        )

    validate_spacer_map(data["spacers"])

    scale = data.get("scale")
    if scale is not None and (isinstance(scale, bool) or not isinstance(scale, (int, float)) or scale <= 0):
        raise ValidationError(f"Invalid scale: {scale!r}", path="scale")
