"""Zip the XCFramework and print its SwiftPM checksum.

Both tasks run with the output directory as their working directory so the
archive holds relative paths and the checksum refers to that exact file.
"""

from __future__ import annotations

from pathlib import Path

from mlsrs_tooling.process import Task


def zip_task(zip_tool: Path, output_dir: Path, archive: str, framework_dir: str) -> Task:
    """zip -r <archive> <framework_dir>, run inside output_dir."""
    return Task(zip_tool, ("-r", archive, framework_dir), cwd=output_dir)


def checksum_task(swift: Path, output_dir: Path, archive: str) -> Task:
    """swift package compute-checksum <archive>, run inside output_dir. The digest goes to stdout."""
    return Task(swift, ("package", "compute-checksum", archive), cwd=output_dir)
