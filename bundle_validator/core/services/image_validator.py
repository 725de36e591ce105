"""
Bundle image validator — pull, classify, and validate in one place.

Entry points:
  - pull_bundle_image():       image → local directory (pass-through)
  - validate_bundle_format():  layout, annotations, dependencies
  - validate_bundle_content(): manifests directory, media type known
  - validate_bundle():         format and content together

Every validation entry point returns None on success and raises exactly
one ``ValidationError`` otherwise. Nothing is shared between calls.
"""

from __future__ import annotations

import logging
from pathlib import Path

from bundle_validator.adapters.base import ImageReader
from bundle_validator.core.errors import (
    AnnotationError,
    BundleError,
    BundleStructureError,
    ValidationError,
)
from bundle_validator.core.services.bundle_common import (
    MANIFESTS_DIR,
    MEDIA_TYPES,
    METADATA_DIR,
    REGISTRY_V1_TYPE,
)
from bundle_validator.core.services.content_validate import validate_content
from bundle_validator.core.services.dependency_validate import (
    load_dependencies,
    validate_dependencies,
)
from bundle_validator.core.services.format_classifier import (
    classify,
    detect_media_type,
    load_annotations,
    validate_annotations,
)
from bundle_validator.core.services.manifest_loader import load_manifests


class BundleImageValidator:
    """Validates operator bundles on disk, optionally pulling them first.

    Args:
        image_reader: Used by ``pull_bundle_image`` only. Validation
            works without one.
        logger: Destination for diagnostics (default: this module's logger).
    """

    def __init__(
        self,
        image_reader: ImageReader | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.image_reader = image_reader
        self.logger = logger or logging.getLogger(__name__)

    # ── Pull ────────────────────────────────────────────────────

    def pull_bundle_image(self, image_tag: str, directory: str | Path) -> None:
        """Unpack ``image_tag`` into ``directory``.

        Whatever the image reader raises propagates unchanged.
        """
        if self.image_reader is None:
            raise RuntimeError("No image reader configured")
        self.logger.debug("Pulling and unpacking %s into %s", image_tag, directory)
        self.image_reader.get_image_data(image_tag, str(directory))

    # ── Validate ────────────────────────────────────────────────

    def validate_bundle_format(self, directory: str | Path) -> None:
        """Check bundle layout, annotations and dependencies.

        Raises:
            ValidationError: With every error found.
        """
        errors, _, _ = self._check_format(Path(directory))
        if errors:
            raise ValidationError(errors)

    def validate_bundle_content(
        self,
        manifest_dir: str | Path,
        media_type: str = REGISTRY_V1_TYPE,
    ) -> None:
        """Check the objects in a manifests directory.

        Raises:
            ValidationError: With every error found, or with the single
                error that the directory cannot be read.
        """
        errors = self._check_content(Path(manifest_dir), media_type)
        if errors:
            raise ValidationError(errors)

    def validate_bundle(self, directory: str | Path) -> None:
        """Check format, then the content of the declared manifests directory.

        Errors from both stages are raised together.
        """
        errors, media_type, manifests_dir = self._check_format(Path(directory))
        if media_type is not None and manifests_dir is not None:
            errors.extend(self._check_content(manifests_dir, media_type))
        if errors:
            raise ValidationError(errors)

    # ── Stages ──────────────────────────────────────────────────

    def _check_format(self, root: Path) -> tuple[list[BundleError], str | None, Path | None]:
        """Returns (errors, media type, manifests dir); the last two are None
        when the stage could not resolve them."""
        if not root.is_dir():
            return [BundleStructureError(f"Unable to read bundle directory {root}",
                                         path=str(root))], None, None

        if not (root / METADATA_DIR).is_dir():
            return [BundleStructureError("Unable to locate metadata directory",
                                         path=str(root / METADATA_DIR))], None, None
        self.logger.debug("Found metadata directory")

        try:
            annotations = load_annotations(root)
            media_type = classify(annotations)
        except AnnotationError as e:
            return [e], None, None
        self.logger.debug("Bundle media type is %s", media_type)

        errors: list[BundleError] = list(validate_annotations(annotations))

        manifests_dir = self._resolve_manifests_dir(root, annotations.manifests_dir, errors)
        if manifests_dir is not None:
            try:
                objects, _ = load_manifests(manifests_dir)
            except ValidationError as e:
                errors.extend(e.errors)
                manifests_dir = None
            else:
                if detect_media_type([o.kind for o in objects]) != media_type:
                    errors.append(AnnotationError(
                        f"Media type {media_type} declared in annotations does not match "
                        f"the content of {manifests_dir.name}/"
                    ))

        entries, dep_errors = load_dependencies(root)
        errors.extend(dep_errors)
        errors.extend(validate_dependencies(entries))

        self.logger.debug("Format validation found %d error(s)", len(errors))
        return errors, media_type, manifests_dir

    def _check_content(self, manifest_dir: Path, media_type: str) -> list[BundleError]:
        if media_type not in MEDIA_TYPES:
            return [AnnotationError(f"Unsupported media type {media_type}")]

        try:
            objects, errors = load_manifests(manifest_dir)
        except ValidationError as e:
            return list(e.errors)

        errors.extend(validate_content(objects, media_type))
        self.logger.debug("Content validation of %s found %d error(s)", manifest_dir, len(errors))
        return errors

    def _resolve_manifests_dir(
        self,
        root: Path,
        declared: str | None,
        errors: list[BundleError],
    ) -> Path | None:
        path = (root / (declared or MANIFESTS_DIR)).resolve()
        if not path.is_relative_to(root.resolve()):
            errors.append(BundleStructureError(
                f"Manifests directory {declared} is outside the bundle", path=str(path),
            ))
            return None
        if not path.is_dir():
            errors.append(BundleStructureError("Unable to locate manifests directory",
                                               path=str(path)))
            return None
        self.logger.debug("Found manifest directory %s", path)
        return path


def new_image_validator(
    image_reader: ImageReader | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> BundleImageValidator:
    """Create a validator with the given image reader and logger."""
    return BundleImageValidator(image_reader=image_reader, logger=logger)
