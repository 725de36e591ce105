"""
Dependency models — entries of ``metadata/dependencies.yaml``.

Each entry is ``{type, value}``. ``type`` selects one of the value
models below; the validator dispatches on it explicitly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

GVK_TYPE = "olm.gvk"
PACKAGE_TYPE = "olm.package"
LABEL_TYPE = "olm.label"


class DependencyEntry(BaseModel):
    """A raw entry before its value is decoded."""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    value: Any = None


class GVKDependency(BaseModel):
    """Requires an API (group/version/kind) to be provided."""

    model_config = ConfigDict(extra="allow")

    group: str = ""
    version: str = ""
    kind: str = ""


class PackageDependency(BaseModel):
    """Requires another package at a version or version range."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    package_name: str = Field(default="", alias="packageName")
    version: str = ""


class LabelDependency(BaseModel):
    """Requires a catalog label to be present."""

    model_config = ConfigDict(extra="allow")

    label: str = ""
