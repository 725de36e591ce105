"""
Domain models — Pydantic types for bundle content.

All models are re-exported here for convenient access:

    from bundle_validator.core.models import ManifestObject, ClusterServiceVersion
"""

from bundle_validator.core.models.annotations import BundleAnnotations
from bundle_validator.core.models.crd import (
    CRDNames,
    CRDSpec,
    CRDVersion,
    CustomResourceDefinition,
)
from bundle_validator.core.models.csv import (
    ClusterServiceVersion,
    CRDDescription,
    CSVSpec,
    CustomResourceDefinitions,
    InstallMode,
)
from bundle_validator.core.models.dependency import (
    DependencyEntry,
    GVKDependency,
    LabelDependency,
    PackageDependency,
)
from bundle_validator.core.models.manifest import ManifestObject, ObjectMeta

__all__ = [
    # annotations.py
    "BundleAnnotations",
    # crd.py
    "CRDNames",
    "CRDSpec",
    "CRDVersion",
    "CustomResourceDefinition",
    # csv.py
    "CRDDescription",
    "CSVSpec",
    "ClusterServiceVersion",
    "CustomResourceDefinitions",
    "InstallMode",
    # dependency.py
    "DependencyEntry",
    "GVKDependency",
    "LabelDependency",
    "PackageDependency",
    # manifest.py
    "ManifestObject",
    "ObjectMeta",
]
