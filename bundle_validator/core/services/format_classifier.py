"""
Bundle format classification — annotations → media type → allowed kinds.

Reads ``metadata/annotations.yaml`` at the bundle root, resolves the
declared media type, and checks the remaining labels. A bundle whose
media type cannot be resolved fails classification with exactly one
error; label problems are reported together.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from bundle_validator.core.errors import AnnotationError, BundleError
from bundle_validator.core.models.annotations import (
    CHANNEL_DEFAULT_LABEL,
    CHANNELS_LABEL,
    MANIFESTS_LABEL,
    MEDIATYPE_LABEL,
    METADATA_LABEL,
    PACKAGE_LABEL,
    BundleAnnotations,
)
from bundle_validator.core.models.manifest import describe_decode_error
from bundle_validator.core.services.bundle_common import (
    ANNOTATIONS_FILE,
    CSV_KIND,
    MANIFESTS_DIR,
    MEDIA_TYPES,
    METADATA_DIR,
    REGISTRY_V1_TYPE,
    _read_yaml,
)

logger = logging.getLogger(__name__)

# Fixed values some labels must carry
_EXPECTED_VALUES: dict[str, str] = {
    MANIFESTS_LABEL: MANIFESTS_DIR,
    METADATA_LABEL: METADATA_DIR,
}

# Labels that only need a non-empty value
_NON_EMPTY_LABELS = (PACKAGE_LABEL, CHANNELS_LABEL, CHANNEL_DEFAULT_LABEL)


def annotations_path(bundle_dir: Path) -> Path:
    return bundle_dir / METADATA_DIR / ANNOTATIONS_FILE


def load_annotations(bundle_dir: Path) -> BundleAnnotations:
    """Read and decode the annotations file of a bundle.

    Raises:
        AnnotationError: If the file is missing, unreadable or malformed.
    """
    path = annotations_path(bundle_dir)
    if not path.is_file():
        raise AnnotationError(f"Unable to locate annotations file {path}", path=str(path))

    try:
        data = _read_yaml(path)
    except (OSError, UnicodeDecodeError):
        raise AnnotationError(f"Unable to read annotations file {path}", path=str(path)) from None
    except yaml.YAMLError as e:
        raise AnnotationError(
            f"Unable to parse annotations file {path}: {' '.join(str(e).split())}",
            path=str(path),
        ) from None

    if not isinstance(data, dict) or not isinstance(data.get("annotations"), dict):
        raise AnnotationError(
            f"Annotations file {path} must contain an 'annotations' mapping",
            path=str(path),
        )

    try:
        return BundleAnnotations.model_validate({"annotations": data["annotations"]})
    except PydanticValidationError as e:
        raise AnnotationError(
            f"Unable to decode annotations file {path}: {describe_decode_error(e)}",
            path=str(path),
        ) from None


def classify(annotations: BundleAnnotations) -> str:
    """Resolve the declared media type.

    Raises:
        AnnotationError: If the label is missing or the value is not recognized.
    """
    media_type = annotations.media_type
    if media_type is None:
        raise AnnotationError(f"Missing annotation {MEDIATYPE_LABEL!r}")
    if media_type not in MEDIA_TYPES:
        raise AnnotationError(f"Unsupported media type {media_type}")
    return media_type


def validate_annotations(annotations: BundleAnnotations) -> list[BundleError]:
    """Check every label other than the media type.

    Labels are checked in a fixed order so repeated runs report the
    same messages in the same sequence.
    """
    errors: list[BundleError] = []

    for label, expected in _EXPECTED_VALUES.items():
        value = annotations.get(label)
        if value is None:
            errors.append(AnnotationError(f"Missing annotation {label!r}"))
        elif value != expected:
            errors.append(AnnotationError(
                f"Expecting annotation {label!r} to have value {expected!r} instead of {value!r}"
            ))

    for label in _NON_EMPTY_LABELS:
        value = annotations.get(label)
        if value is None:
            errors.append(AnnotationError(f"Missing annotation {label!r}"))
        elif not value.strip():
            errors.append(AnnotationError(f"Expecting annotation {label!r} to have non-empty value"))

    default = annotations.default_channel
    channels = annotations.channels
    if default and channels and default.strip() not in channels:
        errors.append(AnnotationError(
            f"Default channel {default.strip()!r} is not listed in channels {','.join(channels)!r}"
        ))

    return errors


def detect_media_type(kinds: list[str]) -> str | None:
    """Infer a media type from the kinds found in the manifests directory.

    A CSV marks a ``registry+v1`` bundle. Returns None when nothing
    identifies the format.
    """
    if CSV_KIND in kinds:
        return REGISTRY_V1_TYPE
    return None
