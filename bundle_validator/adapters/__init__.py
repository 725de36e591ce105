"""Adapters — bindings for the image pull step.

Public re-exports for convenient access.
"""

from bundle_validator.adapters.base import ImageReader, ImageReaderError
from bundle_validator.adapters.containers.container_tool import ContainerToolImageReader
from bundle_validator.adapters.mock import MockImageReader

__all__ = [
    "ContainerToolImageReader",
    "ImageReader",
    "ImageReaderError",
    "MockImageReader",
]
