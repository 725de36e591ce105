"""
Manifest models — generic Kubernetes objects as read from a bundle.

Every file is first decoded into a plain field tree. ``ManifestObject``
wraps that tree with the identity fields every object shares, and
``ObjectMeta`` is the typed projection of ``metadata`` that catches
wrong primitive types (a number where a string belongs).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError


class ObjectMeta(BaseModel):
    """Typed view of an object's ``metadata`` block."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    namespace: str | None = None
    labels: dict[str, Any] = Field(default_factory=dict)
    annotations: dict[str, Any] = Field(default_factory=dict)

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class ManifestObject(BaseModel):
    """One decoded Kubernetes object.

    Identity within a bundle directory is ``(kind, name)``. Instances
    are frozen once loaded.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    api_version: str
    name: str = ""
    namespace: str | None = None
    source: str = ""                 # file the object was read from
    content: dict[str, Any] = Field(default_factory=dict)
    metadata_valid: bool = True      # False when ``metadata`` failed ObjectMeta

    @property
    def identity(self) -> tuple[str, str]:
        return (self.kind, self.name)

    @property
    def spec(self) -> dict[str, Any]:
        spec = self.content.get("spec")
        return spec if isinstance(spec, dict) else {}

    @classmethod
    def from_document(cls, doc: dict[str, Any], source: str = "") -> ManifestObject:
        """Build an object from a decoded document.

        Raises:
            pydantic.ValidationError: If ``metadata`` does not fit ``ObjectMeta``.
        """
        meta = ObjectMeta.model_validate(doc.get("metadata") or {})
        return cls(
            kind=str(doc.get("kind", "")),
            api_version=str(doc.get("apiVersion", "")),
            name=meta.name,
            namespace=meta.namespace,
            source=source,
            content=doc,
        )

    @classmethod
    def from_raw(cls, doc: dict[str, Any], source: str = "") -> ManifestObject:
        """Build an object without projecting ``metadata``.

        Used after a metadata decode failure so the object keeps its kind
        and, where it is a string, its name.
        """
        meta = doc.get("metadata")
        meta = meta if isinstance(meta, dict) else {}
        name = meta.get("name")
        namespace = meta.get("namespace")
        return cls(
            kind=str(doc.get("kind", "")),
            api_version=str(doc.get("apiVersion", "")),
            name=name if isinstance(name, str) else "",
            namespace=namespace if isinstance(namespace, str) else None,
            source=source,
            content=doc,
            metadata_valid=False,
        )


def describe_decode_error(exc: PydanticValidationError, prefix: str = "") -> str:
    """Render a pydantic error as ``field.path: message`` lines joined by ``; ``.

    ``prefix`` is prepended to each location, so a failure inside
    ``ObjectMeta`` reads ``metadata.namespace`` rather than ``namespace``.
    """
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        if prefix:
            loc = f"{prefix}.{loc}" if loc else prefix
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)
