"""
Bundle content validation — CSV, CRDs and kinds, checked together.

Steps (none short-circuits another):
  1. Exactly one ClusterServiceVersion
  2. CSV required fields (install modes, name, version, CRD references)
  3. CRD integrity (unique version names, one storage version)
  4. Owned CRDs in the CSV vs CRD objects in the bundle, both directions
  5. Object kinds against the media type's allow-list
"""

from __future__ import annotations

import logging

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bundle_validator.core.errors import (
    BundleError,
    ClusterServiceVersionError,
    CustomResourceDefinitionError,
    ManifestDecodeError,
    UnsupportedKindError,
)
from bundle_validator.core.models.crd import CustomResourceDefinition
from bundle_validator.core.models.csv import ClusterServiceVersion, CRDDescription
from bundle_validator.core.models.manifest import ManifestObject, describe_decode_error
from bundle_validator.core.services.bundle_common import (
    CRD_KIND,
    CSV_KIND,
    REGISTRY_V1_TYPE,
    is_semver,
    media_type_display,
    supported_kinds,
)

logger = logging.getLogger(__name__)


def validate_content(
    objects: list[ManifestObject],
    media_type: str = REGISTRY_V1_TYPE,
) -> list[BundleError]:
    """Validate a loaded manifest set.

    Returns:
        Every error found, in discovery order. Empty when the set is valid.
    """
    errors: list[BundleError] = []

    csv_objects = [o for o in objects if o.kind == CSV_KIND]
    crd_objects = [o for o in objects if o.kind == CRD_KIND]

    # 1. Exactly one CSV
    csv: ClusterServiceVersion | None = None
    if not csv_objects:
        errors.append(ClusterServiceVersionError("no ClusterServiceVersion found in bundle"))
    elif len(csv_objects) > 1:
        errors.append(ClusterServiceVersionError(
            f"found {len(csv_objects)} ClusterServiceVersions in bundle, expected exactly one: "
            + ", ".join(o.name or o.source for o in csv_objects)
        ))
    elif csv_objects[0].metadata_valid:
        # 2. CSV fields
        csv = _project(csv_objects[0], ClusterServiceVersion, errors)
        if csv is not None:
            _validate_csv(csv, errors)

    # 3. CRD integrity
    present_keys: list[str] = []
    for obj in crd_objects:
        crd = _project(obj, CustomResourceDefinition, errors) if obj.metadata_valid else None
        if crd is not None:
            _validate_crd(crd, errors)
            keys = crd.keys()
        else:
            keys = _raw_crd_keys(obj)
        for key in keys:
            if key not in present_keys:
                present_keys.append(key)

    # 4. Owned vs present
    if csv is not None:
        _validate_owned_crds(csv, present_keys, errors)

    # 5. Kinds
    _validate_kinds(objects, media_type, errors)

    logger.debug("Content validation found %d error(s) in %d objects", len(errors), len(objects))
    return errors


# ── Projections ─────────────────────────────────────────────────


def _project(obj: ManifestObject, model: type[BaseModel], errors: list[BundleError]):
    """Typed view of ``obj``, or None after recording a decode error."""
    try:
        return model.model_validate(obj.content)
    except PydanticValidationError as e:
        errors.append(ManifestDecodeError(
            f"Unable to decode {obj.kind} {obj.name or '?'} from file {obj.source}: "
            f"{describe_decode_error(e)}",
            path=obj.source,
        ))
        return None


# ── CSV ─────────────────────────────────────────────────────────


def _validate_csv(csv: ClusterServiceVersion, errors: list[BundleError]) -> None:
    if not csv.name:
        errors.append(ClusterServiceVersionError("csv name is empty"))

    if not csv.spec.install_modes:
        errors.append(ClusterServiceVersionError("install modes not found"))

    if csv.spec.version and not is_semver(csv.spec.version):
        errors.append(ClusterServiceVersionError(
            f"csv {csv.name} has invalid semver version {csv.spec.version!r}"
        ))

    _validate_references("owned", csv.owned, errors)
    _validate_references("required", csv.required, errors)


def _validate_references(
    section: str,
    refs: list[CRDDescription],
    errors: list[BundleError],
) -> None:
    for i, ref in enumerate(refs):
        if not ref.name:
            errors.append(ClusterServiceVersionError(f"{section} CRD at index {i} is missing name"))
        if not ref.version:
            errors.append(ClusterServiceVersionError(
                f"{section} CRD {ref.name or f'at index {i}'} is missing version"
            ))


# ── CRDs ────────────────────────────────────────────────────────


def _validate_crd(crd: CustomResourceDefinition, errors: list[BundleError]) -> None:
    seen: set[str] = set()
    reported: set[str] = set()
    for version in crd.version_names():
        if version in seen and version not in reported:
            errors.append(CustomResourceDefinitionError(
                f"{crd.name} must contain unique version name {version}"
            ))
            reported.add(version)
        seen.add(version)

    if crd.spec.versions:
        storage = {v.name for v in crd.spec.versions if v.storage}
        if len(storage) != 1:
            errors.append(CustomResourceDefinitionError(
                f"{crd.name} must have exactly one storage version"
            ))


def _validate_owned_crds(
    csv: ClusterServiceVersion,
    present_keys: list[str],
    errors: list[BundleError],
) -> None:
    owned_keys: list[str] = []
    for ref in csv.owned:
        if not ref.name or not ref.version:
            continue  # already reported as a missing field
        if ref.key in owned_keys:
            errors.append(CustomResourceDefinitionError(
                f"duplicate owned CRD {ref.key} in CSV {csv.name!r}"
            ))
            continue
        owned_keys.append(ref.key)

    for key in owned_keys:
        if key not in present_keys:
            errors.append(CustomResourceDefinitionError(f"owned CRD {key} not found in bundle"))

    for key in present_keys:
        if key not in owned_keys:
            errors.append(CustomResourceDefinitionError(
                f'CRD {key} is present in bundle "{csv.name}" but not defined in CSV'
            ))


def _raw_crd_keys(obj: ManifestObject) -> list[str]:
    """CRD keys read straight from the field tree, for a CRD that failed
    its typed projection."""
    if not obj.name:
        return []
    spec = obj.spec
    versions = spec.get("versions")
    names = [
        v["name"] for v in (versions if isinstance(versions, list) else [])
        if isinstance(v, dict) and isinstance(v.get("name"), str) and v["name"]
    ]
    legacy = spec.get("version")
    if isinstance(legacy, str) and legacy and legacy not in names:
        names.insert(0, legacy)
    keys: list[str] = []
    for version in names:
        key = f"{obj.name}/{version}"
        if key not in keys:
            keys.append(key)
    return keys


# ── Kinds ───────────────────────────────────────────────────────


def _validate_kinds(
    objects: list[ManifestObject],
    media_type: str,
    errors: list[BundleError],
) -> None:
    allowed = supported_kinds(media_type)
    display = media_type_display(media_type)
    for obj in objects:
        if obj.kind not in allowed:
            errors.append(UnsupportedKindError(
                f"{obj.kind} is not supported type for {display} bundle",
                path=obj.source,
            ))
