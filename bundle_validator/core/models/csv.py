"""
ClusterServiceVersion projection — the fields the validator reads.

Only the parts of the CSV that carry bundle-level invariants are
modeled. Everything else stays in the raw field tree.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bundle_validator.core.models.manifest import ObjectMeta


class InstallMode(BaseModel):
    """One entry of ``spec.installModes``."""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    supported: bool = False


class CRDDescription(BaseModel):
    """A CRD reference in ``spec.customresourcedefinitions``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    version: str = ""
    kind: str = ""
    display_name: str = Field(default="", alias="displayName")

    @property
    def key(self) -> str:
        """``<name>/<version>`` — how CRDs are matched against the bundle."""
        return f"{self.name}/{self.version}"


class CustomResourceDefinitions(BaseModel):
    """Owned and required CRD references declared by the CSV."""

    model_config = ConfigDict(extra="allow")

    owned: list[CRDDescription] = Field(default_factory=list)
    required: list[CRDDescription] = Field(default_factory=list)

    @field_validator("owned", "required", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class CSVSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str = ""
    install_modes: list[InstallMode] = Field(default_factory=list, alias="installModes")
    customresourcedefinitions: CustomResourceDefinitions = Field(
        default_factory=CustomResourceDefinitions,
    )

    @field_validator("install_modes", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("customresourcedefinitions", mode="before")
    @classmethod
    def _none_is_default(cls, v: Any) -> Any:
        return {} if v is None else v


class ClusterServiceVersion(BaseModel):
    """Typed projection of a ClusterServiceVersion object."""

    model_config = ConfigDict(extra="allow")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CSVSpec = Field(default_factory=CSVSpec)

    @field_validator("metadata", "spec", mode="before")
    @classmethod
    def _none_is_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def owned(self) -> list[CRDDescription]:
        return self.spec.customresourcedefinitions.owned

    @property
    def required(self) -> list[CRDDescription]:
        return self.spec.customresourcedefinitions.required
