"""
Image reader base — the contract between the validator and container tools.

The validator never talks to a registry or a container runtime itself.
It asks an ``ImageReader`` to materialize an image's filesystem in a
local directory and forwards whatever the reader raises, unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ImageReaderError(Exception):
    """Raised when an image cannot be pulled or unpacked."""


class ImageReader(ABC):
    """Abstract base class for image readers.

    To create a new reader:
        1. Subclass ImageReader
        2. Implement name and get_image_data
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The reader identifier (e.g., 'docker', 'podman', 'mock')."""

    @abstractmethod
    def get_image_data(self, image: str, destination: str) -> None:
        """Pull ``image`` and unpack its filesystem into ``destination``.

        Blocks until done. There is no built-in timeout or retry; a
        caller that needs a deadline must impose its own.

        Raises:
            Exception: Any failure, in whatever type the reader uses.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
