"""
Bundle shared constants and low-level helpers.

Imported by all bundle sub-modules. Must NOT import from any sibling
service module to avoid circular imports.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════


MANIFESTS_DIR = "manifests/"
METADATA_DIR = "metadata/"
ANNOTATIONS_FILE = "annotations.yaml"
DEPENDENCIES_FILE = "dependencies.yaml"

CSV_KIND = "ClusterServiceVersion"
CRD_KIND = "CustomResourceDefinition"

REGISTRY_V1_TYPE = "registry+v1"

_REGISTRY_V1_KINDS = frozenset({
    CSV_KIND, CRD_KIND,
    "Secret", "ConfigMap", "ServiceAccount", "Service",
    "ClusterRole", "ClusterRoleBinding", "Role", "RoleBinding",
    "PrometheusRule", "ServiceMonitor",
    "PodDisruptionBudget", "PriorityClass", "VerticalPodAutoscaler",
    "ConsoleYAMLSample", "ConsoleQuickStart", "ConsoleCLIDownload", "ConsoleLink",
})

# media type -> (display name, supported kinds)
MEDIA_TYPES: dict[str, tuple[str, frozenset[str]]] = {
    REGISTRY_V1_TYPE: ("registryV1", _REGISTRY_V1_KINDS),
}

# Semantic Versioning 2.0.0, no leading "v"
_SEMVER = (
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?"
)
_SEMVER_RE = re.compile(rf"^{_SEMVER}$")
# Partial version with a wildcard: 1.x, 1.2.x, 1.x.x ("x", "X" or "*")
_WILDCARD = r"(?:0|[1-9]\d*)\.(?:[xX*](?:\.[xX*])?|(?:0|[1-9]\d*)\.[xX*])"
_COMPARATOR_RE = re.compile(rf"^(?:>=|<=|!=|==|>|<|=|!)?(?:{_SEMVER}|{_WILDCARD})$")
# Whitespace after an operator binds it to the following version
_OPERATOR_SPACE_RE = re.compile(r"([<>=!])\s+")


# ═══════════════════════════════════════════════════════════════════
#  Shared Helpers
# ═══════════════════════════════════════════════════════════════════


def media_type_display(media_type: str) -> str:
    """Name used for a media type in messages (``registry+v1`` → ``registryV1``)."""
    entry = MEDIA_TYPES.get(media_type)
    return entry[0] if entry else media_type


def supported_kinds(media_type: str) -> frozenset[str]:
    """Object kinds allowed in a bundle of this media type (empty if unknown)."""
    entry = MEDIA_TYPES.get(media_type)
    return entry[1] if entry else frozenset()


def is_semver(version: str) -> bool:
    """True for a single semantic version such as ``0.9.4`` or ``1.0.0-rc.1``."""
    return bool(_SEMVER_RE.match(version.strip()))


def is_semver_range(expr: str) -> bool:
    """True for a version or a range of comparators.

    Comparators within a clause are space separated and ANDed; clauses
    are joined by ``||``. ``>=0.9.0 <0.10.0``, ``>= 1.0.0``, ``1.2.x`` and
    ``<1.0.0 || >=2.0.0`` are all valid.
    """
    if not expr.strip():
        return False
    for clause in expr.split("||"):
        parts = _OPERATOR_SPACE_RE.sub(r"\1", clause).split()
        if not parts:
            return False
        for part in parts:
            if not _COMPARATOR_RE.match(part):
                return False
    return True


def _read_yaml(path: Path) -> Any:
    """Read and decode one YAML (or JSON) document.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the content is not valid YAML.
    """
    content = path.read_text(encoding="utf-8")
    return yaml.safe_load(content)
