"""Rust builds for iOS targets (rustup/cargo) and the BuildTarget model."""

from .cargo import (
    cargo_clean_task,
    cargo_debug_build_task,
    cargo_release_build_task,
    release_build_tasks,
    rustup_target_add_task,
)
from .targets import (
    DEFAULT_TARGETS,
    DEVICE,
    SIMULATOR,
    BuildTarget,
    device_targets,
    simulator_targets,
    target_from_dict,
    validate_targets,
)

__all__ = [
    "DEFAULT_TARGETS",
    "DEVICE",
    "SIMULATOR",
    "BuildTarget",
    "cargo_clean_task",
    "cargo_debug_build_task",
    "cargo_release_build_task",
    "device_targets",
    "release_build_tasks",
    "rustup_target_add_task",
    "simulator_targets",
    "target_from_dict",
    "validate_targets",
]
