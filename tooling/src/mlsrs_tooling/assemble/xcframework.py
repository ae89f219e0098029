"""Assemble the XCFramework from (library, headers) pairs with xcodebuild."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from mlsrs_tooling.process import Task


def create_xcframework_task(
    xcodebuild: Path,
    libraries: Sequence[Path],
    headers: Path,
    output: Path,
    project_root: Path,
) -> Task:
    """xcodebuild -create-xcframework (-library L -headers H)... -output O.

    Every library is paired with the same headers directory so each platform
    slot exposes the same Swift/C interface.
    """
    if not libraries:
        msg = "xcframework needs at least one library"
        raise ValueError(msg)
    args: list[str] = ["-create-xcframework"]
    for lib in libraries:
        args += ["-library", str(lib), "-headers", str(headers)]
    args += ["-output", str(output)]
    return Task(xcodebuild, args, cwd=project_root)
