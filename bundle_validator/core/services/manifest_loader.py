"""
Manifest loading — every file in a directory → generic Kubernetes objects.

Decode problems are collected, not raised: one bad file never hides
the rest of the directory. Only a missing or unreadable directory is
fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from bundle_validator.core.errors import (
    BundleError,
    BundleStructureError,
    ManifestDecodeError,
    ValidationError,
)
from bundle_validator.core.models.manifest import ManifestObject, describe_decode_error
from bundle_validator.core.services.bundle_common import _read_yaml

logger = logging.getLogger(__name__)


def list_manifest_files(directory: Path) -> list[Path]:
    """Regular, non-hidden files in ``directory``, sorted by name.

    Raises:
        ValidationError: If the directory is missing or unreadable.
    """
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ValidationError([
            BundleStructureError(f"Unable to read directory {directory}: {e.strerror or e}",
                                 path=str(directory)),
        ]) from e

    return [p for p in entries if p.is_file() and not p.name.startswith(".")]


def read_document(path: Path) -> dict[str, Any] | None:
    """Decode one file into a field tree carrying ``kind`` and ``apiVersion``.

    Returns None for an empty document.

    Raises:
        ManifestDecodeError: If the file cannot be read or decoded.
    """
    try:
        doc = _read_yaml(path)
    except (OSError, UnicodeDecodeError):
        raise ManifestDecodeError(f"Unable to read file {path}", path=str(path)) from None
    except yaml.YAMLError as e:
        raise ManifestDecodeError(
            f"Unable to decode file {path}: {_one_line(str(e))}", path=str(path),
        ) from None

    if doc is None:
        return None

    if not isinstance(doc, dict):
        raise ManifestDecodeError(
            f"Unable to decode file {path}: expected a mapping, got {type(doc).__name__}",
            path=str(path),
        )

    for field, label in (("kind", "Kind"), ("apiVersion", "apiVersion")):
        if not doc.get(field):
            raise ManifestDecodeError(
                f"Unable to decode file {path}: Object '{label}' is missing",
                path=str(path),
            )
    return doc


def load_manifest(path: Path) -> ManifestObject | None:
    """Decode one file into a ``ManifestObject``.

    Returns None for an empty document.

    Raises:
        ManifestDecodeError: If the file cannot be read or decoded, or
            its ``metadata`` does not fit ``ObjectMeta``.
    """
    doc = read_document(path)
    if doc is None:
        return None
    try:
        return ManifestObject.from_document(doc, source=path.name)
    except PydanticValidationError as e:
        raise _metadata_error(path, doc, e) from None


def load_manifests(directory: Path) -> tuple[list[ManifestObject], list[BundleError]]:
    """Load every manifest file in ``directory``.

    An object whose ``metadata`` fails to decode is kept, unprojected,
    next to its decode error so later checks still see its kind.

    Returns:
        (objects, errors) — objects in file-name order, and one
        ``ManifestDecodeError`` per file that could not be decoded.

    Raises:
        ValidationError: If the directory is missing or unreadable.
    """
    objects: list[ManifestObject] = []
    errors: list[BundleError] = []

    for path in list_manifest_files(directory):
        try:
            doc = read_document(path)
        except ManifestDecodeError as e:
            logger.debug("Decode failed for %s: %s", path, e)
            errors.append(e)
            continue
        if doc is None:
            continue
        try:
            objects.append(ManifestObject.from_document(doc, source=path.name))
        except PydanticValidationError as e:
            logger.debug("Metadata decode failed for %s", path)
            errors.append(_metadata_error(path, doc, e))
            objects.append(ManifestObject.from_raw(doc, source=path.name))

    logger.debug("Loaded %d objects from %s (%d decode errors)",
                 len(objects), directory, len(errors))
    return objects, errors


def _metadata_error(
    path: Path,
    doc: dict[str, Any],
    exc: PydanticValidationError,
) -> ManifestDecodeError:
    return ManifestDecodeError(
        f"Unable to decode {doc.get('kind')} from file {path.name}: "
        f"{describe_decode_error(exc, 'metadata')}",
        path=str(path),
    )


def _one_line(text: str) -> str:
    return " ".join(line.strip() for line in text.splitlines() if line.strip())
