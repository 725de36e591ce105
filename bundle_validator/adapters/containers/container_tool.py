"""
Container tool image reader — pulls and unpacks images with a CLI.

Uses the docker (or podman) CLI, never a registry API directly:

    <tool> pull <image>
    <tool> create <image>
    <tool> cp <container>:/. <destination>
    <tool> rm <container>
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from bundle_validator.adapters.base import ImageReader, ImageReaderError

logger = logging.getLogger(__name__)

SUPPORTED_TOOLS = ("docker", "podman")


class ContainerToolImageReader(ImageReader):
    """Image reader backed by the docker or podman CLI."""

    def __init__(self, tool: str = "docker"):
        if tool not in SUPPORTED_TOOLS:
            raise ValueError(
                f"Unknown container tool '{tool}'. Valid: {', '.join(SUPPORTED_TOOLS)}"
            )
        self._tool = tool

    @property
    def name(self) -> str:
        return self._tool

    def is_available(self) -> bool:
        return shutil.which(self._tool) is not None

    def get_image_data(self, image: str, destination: str) -> None:
        if not self.is_available():
            raise ImageReaderError(f"{self._tool} CLI not found on PATH")

        dest = Path(destination)
        dest.mkdir(parents=True, exist_ok=True)

        logger.info("Pulling %s with %s", image, self._tool)
        self._run(["pull", image])

        container_id = self._run(["create", image, "true"])
        try:
            logger.debug("Copying %s:/ to %s", container_id[:12], dest)
            self._run(["cp", f"{container_id}:/.", str(dest)])
        finally:
            try:
                self._run(["rm", container_id])
            except ImageReaderError as e:
                logger.warning("Failed to remove container %s: %s", container_id[:12], e)

    # ── Helpers ─────────────────────────────────────────────────

    def _run(self, args: list[str]) -> str:
        """Run a tool command and return stdout."""
        try:
            result = subprocess.run(
                [self._tool, *args],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ImageReaderError(f"{self._tool} {args[0]} failed: {e}") from e
        if result.returncode != 0:
            raise ImageReaderError(
                result.stderr.strip() or f"{self._tool} {args[0]} failed"
            )
        return result.stdout.strip()
