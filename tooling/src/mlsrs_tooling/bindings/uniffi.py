"""uniffi-bindgen tasks: generate Swift bindings and put the module map where xcodebuild expects it."""

from __future__ import annotations

from pathlib import Path

from mlsrs_tooling.process import Task


def bindgen_task(
    cargo: Path,
    library: Path,
    out_dir: Path,
    project_root: Path,
    *,
    package: str = "uniffi-bindgen",
    binary: str = "uniffi-bindgen",
    language: str = "swift",
) -> Task:
    """cargo run -p <package> --bin <binary> generate --library <lib> --language <lang> --out-dir <dir>."""
    return Task(
        cargo,
        (
            "run",
            "-p",
            package,
            "--bin",
            binary,
            "generate",
            "--library",
            str(library),
            "--language",
            language,
            "--out-dir",
            str(out_dir),
        ),
        cwd=project_root,
    )


def relocate_modulemap_task(mv: Path, generated: Path, dest: Path, project_root: Path) -> Task:
    """mv {crate}FFI.modulemap module.modulemap. No tolerated codes: a missing source is fatal."""
    return Task(mv, (str(generated), str(dest)), cwd=project_root)
