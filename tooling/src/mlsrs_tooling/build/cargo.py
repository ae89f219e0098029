"""Cargo and rustup tasks: target registration, cache reset, debug and per-target release builds."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from mlsrs_tooling.build.targets import BuildTarget
from mlsrs_tooling.process import RUSTUP_ALREADY_INSTALLED, Task


def rustup_target_add_task(
    rustup: Path, targets: Iterable[BuildTarget], project_root: Path
) -> Task:
    """rustup target add <triples...>; exit 1 means already installed."""
    return Task(
        rustup,
        ("target", "add", *(t.triple for t in targets)),
        accepted_exit_codes=frozenset({RUSTUP_ALREADY_INSTALLED}),
        cwd=project_root,
    )


def cargo_clean_task(cargo: Path, project_root: Path) -> Task:
    return Task(cargo, ("clean",), cwd=project_root)


def cargo_debug_build_task(cargo: Path, project_root: Path) -> Task:
    """Host debug build; its dylib is what uniffi-bindgen reads."""
    return Task(cargo, ("build",), cwd=project_root)


def cargo_release_build_task(cargo: Path, target: BuildTarget, project_root: Path) -> Task:
    """cargo build --release --target=<triple> with the target's env overrides."""
    return Task(
        cargo,
        ("build", "--release", f"--target={target.triple}"),
        env=target.env,
        cwd=project_root,
    )


def release_build_tasks(
    cargo: Path, targets: Iterable[BuildTarget], project_root: Path
) -> list[Task]:
    return [cargo_release_build_task(cargo, t, project_root) for t in targets]
