"""Load a rust-project document from disk."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from rust_project.kernel.project import Project, parse_project


class ProjectDocumentError(ValueError):
    """Raised when a project document cannot be read or fails the schema."""


def load_project_from_path(path: Path) -> Project:
    """Read and parse a rust-project document (all or nothing)."""
    if not path.exists():
        raise FileNotFoundError(f"Project document not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectDocumentError(f"Failed to read {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectDocumentError(f"Invalid JSON in {path}: {e}") from e

    return load_project_from_dict(data, origin=str(path))


def load_project_from_dict(data: object, origin: str = "<dict>") -> Project:
    if not isinstance(data, dict):
        raise ProjectDocumentError(f"{origin}: project document must be a JSON object")
    try:
        return parse_project(data)
    except ValidationError as e:
        raise ProjectDocumentError(f"{origin}: invalid project document: {e}") from e
