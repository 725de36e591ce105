"""
CustomResourceDefinition projection.

Covers both ``apiextensions.k8s.io/v1`` (``spec.versions``) and the
legacy ``v1beta1`` single ``spec.version`` field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bundle_validator.core.models.manifest import ObjectMeta


class CRDVersion(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    served: bool = True
    storage: bool = False


class CRDNames(BaseModel):
    model_config = ConfigDict(extra="allow")

    kind: str = ""
    plural: str = ""


class CRDSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    group: str = ""
    names: CRDNames = Field(default_factory=CRDNames)
    version: str | None = None
    versions: list[CRDVersion] = Field(default_factory=list)

    @field_validator("versions", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("names", mode="before")
    @classmethod
    def _none_is_default(cls, v: Any) -> Any:
        return {} if v is None else v


class CustomResourceDefinition(BaseModel):
    """Typed projection of a CustomResourceDefinition object."""

    model_config = ConfigDict(extra="allow")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CRDSpec = Field(default_factory=CRDSpec)

    @field_validator("metadata", "spec", mode="before")
    @classmethod
    def _none_is_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def name(self) -> str:
        return self.metadata.name

    def version_names(self) -> list[str]:
        """All declared version names in declaration order, duplicates kept."""
        names = [v.name for v in self.spec.versions]
        if self.spec.version and self.spec.version not in names:
            names.insert(0, self.spec.version)
        return names

    def keys(self) -> list[str]:
        """Distinct ``<name>/<version>`` keys this CRD provides."""
        seen: list[str] = []
        for version in self.version_names():
            key = f"{self.name}/{version}"
            if key not in seen:
                seen.append(key)
        return seen
