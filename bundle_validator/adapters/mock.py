"""
Mock image reader — test double for the image pull step.

Records every call and optionally raises a configured exception, so
pass-through behavior can be checked without a container runtime.
"""

from __future__ import annotations

from pathlib import Path

from bundle_validator.adapters.base import ImageReader


class MockImageReader(ImageReader):
    """In-memory image reader.

    By default succeeds without touching the filesystem. ``files`` maps
    relative paths to contents written under the destination on each
    call, to simulate an unpacked bundle image.
    """

    def __init__(
        self,
        reader_name: str = "mock",
        error: Exception | None = None,
        files: dict[str, str] | None = None,
    ):
        self._name = reader_name
        self._error = error
        self._files = dict(files or {})
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """All (image, destination) pairs this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_error(self, error: Exception | None) -> None:
        """Raise ``error`` from every following call (None to clear)."""
        self._error = error

    def reset(self) -> None:
        self._call_log.clear()
        self._error = None

    def get_image_data(self, image: str, destination: str) -> None:
        self._call_log.append((image, destination))
        if self._error is not None:
            raise self._error
        for rel, content in self._files.items():
            path = Path(destination) / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
