"""Job file reading.

A job file is a small TOML document describing the dependency to update
and, optionally, how to run the lock tool. Parsed with tomlkit, the same
way project files are read elsewhere, so values round-trip unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit

from .models import Dependency, UpdateJob, UpdaterSettings


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file."""
    return tomlkit.parse(path.read_text())


def _plain(doc: tomlkit.TOMLDocument, key: str) -> dict[str, Any] | None:
    table = doc.get(key)
    if table is None:
        return None
    # Strip tomlkit item wrappers so pydantic sees plain dicts and lists
    return table.unwrap()


def get_settings(doc: tomlkit.TOMLDocument) -> UpdaterSettings:
    """Extract [settings], falling back to defaults for anything missing."""
    return UpdaterSettings.model_validate(_plain(doc, "settings") or {})


def get_dependency(doc: tomlkit.TOMLDocument) -> Dependency:
    """Extract the [dependency] table.

    Raises:
        ValueError: If the job has no [dependency] table.
        pydantic.ValidationError: If the table is malformed.
    """
    data = _plain(doc, "dependency")
    if not data:
        raise ValueError("No [dependency] table defined in job file")
    return Dependency.model_validate(data)


def load_job(path: Path) -> UpdateJob:
    """Read an update job from a TOML file."""
    doc = load_toml(path)
    return UpdateJob(dependency=get_dependency(doc), settings=get_settings(doc))
