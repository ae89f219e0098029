"""Combine single-architecture simulator libraries into one fat library with lipo.

xcodebuild -create-xcframework accepts one library per platform, so the arm64
and x86_64 simulator slices must be merged before packaging.
See https://forums.developer.apple.com/forums/thread/711294
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from mlsrs_tooling.process import Task


def lipo_create_task(lipo: Path, inputs: Sequence[Path], output: Path, project_root: Path) -> Task:
    """lipo -create -output <output> <inputs...>. Raises ValueError when inputs are empty or repeated."""
    if not inputs:
        msg = "lipo needs at least one input library"
        raise ValueError(msg)
    if len(set(inputs)) != len(inputs):
        msg = f"lipo inputs must be distinct: {[str(p) for p in inputs]}"
        raise ValueError(msg)
    return Task(
        lipo,
        ("-create", "-output", str(output), *(str(p) for p in inputs)),
        cwd=project_root,
    )
