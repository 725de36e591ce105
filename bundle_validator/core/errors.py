"""
Bundle errors — individual violations and the aggregate that carries them.

Validators never raise for a content problem. They append one of the
``BundleError`` subclasses below to a call-local list, and the entry
point wraps that list in a single ``ValidationError`` at the end.

    try:
        validator.validate_bundle_format(path)
    except ValidationError as e:
        for err in e.errors:
            print(err)
"""

from __future__ import annotations

from typing import Any


class BundleError(Exception):
    """A single violation found while validating a bundle."""

    category = "bundle"

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"category": self.category, "message": self.message}
        if self.path is not None:
            d["path"] = self.path
        return d


class BundleStructureError(BundleError):
    """A directory or file the bundle must have is missing or unreadable."""

    category = "structure"


class ManifestDecodeError(BundleError):
    """A manifest file could not be decoded into a Kubernetes object."""

    category = "decode"


class AnnotationError(BundleError):
    """The annotations file is missing, malformed, or declares bad values."""

    category = "annotations"


class DependencyError(BundleError):
    """An entry in the dependencies file is malformed or unsupported."""

    category = "dependencies"


class ClusterServiceVersionError(BundleError):
    """The CSV is missing, duplicated, or lacks required fields."""

    category = "csv"


class CustomResourceDefinitionError(BundleError):
    """A CRD is inconsistent with itself or with the CSV."""

    category = "crd"


class UnsupportedKindError(BundleError):
    """An object kind that the bundle's media type does not allow."""

    category = "kind"


class ValidationError(Exception):
    """Every violation found in one validation pass, in discovery order.

    Never constructed empty: a pass with nothing to report returns
    normally instead of raising.
    """

    def __init__(self, errors: list[BundleError]):
        if not errors:
            raise ValueError("ValidationError requires at least one error")
        self.errors: list[BundleError] = list(errors)
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return "Bundle validation errors: " + ", ".join(str(e) for e in self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def messages(self) -> list[str]:
        """Rendered message of each error, in order."""
        return [str(e) for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error_count": len(self.errors),
            "errors": [e.to_dict() for e in self.errors],
        }
