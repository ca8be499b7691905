"""Manifest (`package.json`) rewrite.

The template's manifest carries metadata of the template repository itself.
The rewrite strips the keys that only make sense there and stamps the new
project's identity over a fixed set of keys. Every other key is preserved in
place.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from repo_scaffold.scaffold.errors import ManifestError
from repo_scaffold.scaffold.process import GitIdentity

logger = logging.getLogger(__name__)

UNNECESSARY_KEYS: tuple[str, ...] = ("keywords", "license", "files")
INITIAL_VERSION = "1.0.0"


class ManifestFields(BaseModel):
    """Keys overwritten in the copied manifest."""

    name: str = Field(min_length=1)
    author: str = ""
    provide: bool = True
    version: str = INITIAL_VERSION

    @classmethod
    def for_project(cls, name: str, identity: GitIdentity) -> ManifestFields:
        return cls(name=name, author=identity.author)


def load_manifest(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except OSError as e:
        raise ManifestError(f"Manifest could not be read: {path} ({e})") from e

    try:
        # utf-8-sig drops a leading BOM.
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ManifestError(f"Manifest is not valid UTF-8: {path} ({e})") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest is not valid JSON: {path} ({e})") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest must contain a JSON object: {path}")
    return data


def write_manifest(path: Path, data: dict[str, Any]) -> None:
    try:
        path.write_text(
            json.dumps(data, indent="\t", ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise ManifestError(f"Manifest could not be written: {path} ({e})") from e


def patch_manifest(data: dict[str, Any], fields: ManifestFields) -> dict[str, Any]:
    """Return a patched copy of `data`; the input is left untouched."""

    patched = {key: value for key, value in data.items() if key not in UNNECESSARY_KEYS}
    patched.update(fields.model_dump())
    return patched


def rewrite_manifest(path: Path, *, name: str, identity: GitIdentity) -> dict[str, Any]:
    """Load, patch and write back the manifest at `path`."""

    fields = ManifestFields.for_project(name, identity)
    patched = patch_manifest(load_manifest(path), fields)
    write_manifest(path, patched)
    logger.info("Manifest updated", extra={"path": str(path), "name": name})
    return patched
