"""Serialization helpers for project files."""

from .serialization import (
    ProjectData,
    ProjectError,
    deserialize_project,
    load_project,
    save_project,
    serialize_project,
)

__all__ = [
    "ProjectData",
    "ProjectError",
    "deserialize_project",
    "load_project",
    "save_project",
    "serialize_project",
]
