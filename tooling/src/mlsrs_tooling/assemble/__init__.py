"""Artifact assembly: merge simulator slices, create the XCFramework, zip and checksum it."""

from .archive import checksum_task, zip_task
from .slices import lipo_create_task
from .xcframework import create_xcframework_task

__all__ = [
    "checksum_task",
    "create_xcframework_task",
    "lipo_create_task",
    "zip_task",
]
