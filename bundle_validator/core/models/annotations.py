"""
Bundle annotations — the labels in ``metadata/annotations.yaml``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

MEDIATYPE_LABEL = "operators.operatorframework.io.bundle.mediatype.v1"
MANIFESTS_LABEL = "operators.operatorframework.io.bundle.manifests.v1"
METADATA_LABEL = "operators.operatorframework.io.bundle.metadata.v1"
PACKAGE_LABEL = "operators.operatorframework.io.bundle.package.v1"
CHANNELS_LABEL = "operators.operatorframework.io.bundle.channels.v1"
CHANNEL_DEFAULT_LABEL = "operators.operatorframework.io.bundle.channel.default.v1"


class BundleAnnotations(BaseModel):
    """Decoded annotations file.

    The file wraps the labels under a top-level ``annotations`` key;
    values must be strings.
    """

    annotations: dict[str, str] = Field(default_factory=dict)

    def get(self, label: str) -> str | None:
        return self.annotations.get(label)

    @property
    def media_type(self) -> str | None:
        return self.annotations.get(MEDIATYPE_LABEL)

    @property
    def manifests_dir(self) -> str | None:
        return self.annotations.get(MANIFESTS_LABEL)

    @property
    def metadata_dir(self) -> str | None:
        return self.annotations.get(METADATA_LABEL)

    @property
    def package(self) -> str | None:
        return self.annotations.get(PACKAGE_LABEL)

    @property
    def channels(self) -> list[str]:
        raw = self.annotations.get(CHANNELS_LABEL) or ""
        return [c.strip() for c in raw.split(",") if c.strip()]

    @property
    def default_channel(self) -> str | None:
        return self.annotations.get(CHANNEL_DEFAULT_LABEL)
