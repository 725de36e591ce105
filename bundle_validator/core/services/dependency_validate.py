"""
Dependency validation — ``metadata/dependencies.yaml`` entries.

The file is optional. When present it holds a ``dependencies`` list of
``{type, value}`` entries. Each entry is dispatched on ``type``; every
field of a known type is checked independently, so an entry with three
empty fields yields three errors.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import ValidationError as PydanticValidationError

from bundle_validator.core.errors import BundleError, DependencyError
from bundle_validator.core.models.dependency import (
    GVK_TYPE,
    LABEL_TYPE,
    PACKAGE_TYPE,
    DependencyEntry,
    GVKDependency,
    LabelDependency,
    PackageDependency,
)
from bundle_validator.core.models.manifest import describe_decode_error
from bundle_validator.core.services.bundle_common import (
    DEPENDENCIES_FILE,
    METADATA_DIR,
    _read_yaml,
    is_semver_range,
)

T = TypeVar("T", GVKDependency, PackageDependency, LabelDependency)

logger = logging.getLogger(__name__)


def dependencies_path(bundle_dir: Path) -> Path:
    return bundle_dir / METADATA_DIR / DEPENDENCIES_FILE


def load_dependencies(bundle_dir: Path) -> tuple[list[DependencyEntry], list[BundleError]]:
    """Read the dependencies file of a bundle, if it has one.

    Returns:
        (entries, errors). A missing file gives ``([], [])``.
    """
    path = dependencies_path(bundle_dir)
    if not path.exists():
        logger.debug("No dependencies file at %s", path)
        return [], []

    try:
        data = _read_yaml(path)
    except (OSError, UnicodeDecodeError):
        return [], [DependencyError(f"Unable to read dependencies file {path}", path=str(path))]
    except yaml.YAMLError as e:
        return [], [DependencyError(
            f"Unable to parse dependencies file {path}: {' '.join(str(e).split())}",
            path=str(path),
        )]

    if data is None:
        return [], []

    raw = data.get("dependencies") if isinstance(data, dict) else data
    if raw is None:
        return [], []
    if not isinstance(raw, list) or not isinstance(data, dict):
        return [], [DependencyError(
            f"Dependencies file {path} must contain a 'dependencies' list", path=str(path),
        )]

    entries: list[DependencyEntry] = []
    errors: list[BundleError] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            errors.append(DependencyError(f"Unable to decode dependency at index {i}"))
            continue
        try:
            entries.append(DependencyEntry.model_validate(item))
        except PydanticValidationError as e:
            errors.append(DependencyError(
                f"Unable to decode dependency at index {i}: {describe_decode_error(e)}"
            ))

    return entries, errors


def validate_dependencies(entries: list[DependencyEntry]) -> list[BundleError]:
    """Validate every entry; errors from all entries accumulate."""
    errors: list[BundleError] = []
    for entry in entries:
        errors.extend(validate_dependency(entry))
    return errors


def validate_dependency(entry: DependencyEntry) -> list[BundleError]:
    """Validate one entry according to its type."""
    try:
        if entry.type == GVK_TYPE:
            return _validate_gvk(_decode_value(entry, GVKDependency))
        elif entry.type == PACKAGE_TYPE:
            return _validate_package(_decode_value(entry, PackageDependency))
        elif entry.type == LABEL_TYPE:
            return _validate_label(_decode_value(entry, LabelDependency))
        else:
            return [DependencyError(f"Unsupported dependency type {entry.type}")]
    except DependencyError as e:
        return [e]


def _decode_value(entry: DependencyEntry, model: type[T]) -> T:
    """Typed value of ``entry``.

    Raises:
        DependencyError: If the value does not fit ``model``.
    """
    value = entry.value if entry.value is not None else {}
    if not isinstance(value, dict):
        raise DependencyError(f"Unable to decode dependency value for type {entry.type}")
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        raise DependencyError(
            f"Unable to decode dependency value for type {entry.type}: {describe_decode_error(e)}"
        ) from None


def _validate_gvk(dep: GVKDependency) -> list[BundleError]:
    errors: list[BundleError] = []
    if not dep.group:
        errors.append(DependencyError("API Group is empty"))
    if not dep.version:
        errors.append(DependencyError("API Version is empty"))
    if not dep.kind:
        errors.append(DependencyError("API Kind is empty"))
    return errors


def _validate_package(dep: PackageDependency) -> list[BundleError]:
    errors: list[BundleError] = []
    if not dep.package_name:
        errors.append(DependencyError("Package name is empty"))
    if not dep.version:
        errors.append(DependencyError("Package version is empty"))
    elif not is_semver_range(dep.version):
        errors.append(DependencyError("Invalid semver format version"))
    return errors


def _validate_label(dep: LabelDependency) -> list[BundleError]:
    if not dep.label:
        return [DependencyError("Label is empty")]
    return []
