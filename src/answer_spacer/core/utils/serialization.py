"""
Serialization Utilities

Project files: a JSON snapshot of the spacers and view settings for one
source document, so work can be saved and reopened later.

- `save_project()` writes `{spacers, scale, current_page, pdf_name, timestamp}`
- `load_project()` validates before building any model
- Spacer ids and list order are preserved, so ties in y survive a round trip
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from answer_spacer.store.spacer_store import SpacerStore

from ..models.spacer import InputError
from ..schemas.validator import PROJECT_SCHEMA_VERSION, ValidationError, validate_project

logger = logging.getLogger(__name__)


class ProjectError(Exception):
    """A project file could not be read or is malformed."""


@dataclass(frozen=True)
class ProjectData:
    """
    Contents of a project file.

    Attributes:
        store: SpacerStore with the saved spacers
        scale: Saved zoom
        current_page: Saved 0-indexed page
        pdf_name: Name of the source document the project was made for
        timestamp: When the project was saved (ISO 8601)
    """

    store: SpacerStore
    scale: float = 1.0
    current_page: int = 0
    pdf_name: Optional[str] = None
    timestamp: Optional[str] = None


def serialize_project(
    store: SpacerStore,
    *,
    scale: float = 1.0,
    current_page: int = 0,
    pdf_name: Optional[str] = None,
) -> dict[str, Any]:
    """Build the JSON payload of a project."""
    return {
        "schema_version": PROJECT_SCHEMA_VERSION,
        "spacers": store.to_mapping(),
        "scale": scale,
        "current_page": current_page,
        "pdf_name": pdf_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def save_project(
    path: Path,
    store: SpacerStore,
    *,
    scale: float = 1.0,
    current_page: int = 0,
    pdf_name: Optional[str] = None,
) -> Path:
    """
    Write a project file.

    Args:
        path: Destination .json file
        store: SpacerStore to save
        scale: Current zoom
        current_page: Current 0-indexed page
        pdf_name: Name of the source document

    Returns:
        The written path
    """
    path = Path(path)
    payload = serialize_project(store, scale=scale, current_page=current_page, pdf_name=pdf_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info(f"Saved project with {len(store)} spacers to {path}")
    return path


def deserialize_project(data: dict[str, Any]) -> ProjectData:
    """
    Build ProjectData from a parsed project file.

    Files without a `schema_version` come from the earlier web editor:
    their page keys and `currentPage` are 1-based and are shifted to
    0-based here. Their camelCase keys (currentPage, pdfName) are accepted.

    Raises:
        ValidationError: If the structure is invalid
        InputError: If a spacer value is invalid
    """
    validate_project(data)
    legacy = "schema_version" not in data

    spacers = _legacy_pages(data["spacers"]) if legacy else data["spacers"]
    store = SpacerStore.from_mapping(spacers)

    current_page = data.get("current_page", data.get("currentPage", 1 if legacy else 0))
    if isinstance(current_page, bool) or not isinstance(current_page, int):
        current_page = 1 if legacy else 0
    if legacy:
        current_page -= 1
    current_page = max(0, current_page)

    return ProjectData(
        store=store,
        scale=float(data.get("scale") or 1.0),
        current_page=current_page,
        pdf_name=data.get("pdf_name", data.get("pdfName")),
        timestamp=data.get("timestamp"),
    )


def _legacy_pages(spacers: dict[Any, Any]) -> dict[int, Any]:
    """Re-key a 1-based page mapping to 0-based page indices."""
    pages = {}
    for key, entries in spacers.items():
        page_number = int(key)
        if page_number < 1:
            raise ValidationError(f"Page numbers start at 1 in legacy files: {key!r}", path=f"spacers.{key}")
        pages[page_number - 1] = entries
    return pages


def load_project(path: Path) -> ProjectData:
    """
    Read a project file.

    Raises:
        ProjectError: If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ProjectError(f"Failed to read project {path}: {e}") from e

    try:
        project = deserialize_project(data)
    except (ValidationError, InputError) as e:
        raise ProjectError(f"Invalid project file format: {e}") from e

    logger.info(f"Loaded project {path.name}: {len(project.store)} spacers")
    return project
