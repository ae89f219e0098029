"""Ordered, fail-fast iOS XCFramework build pipeline.

Stages run strictly in sequence; each stage is one or more Tasks. The first
Task whose exit code is not accepted stops the pipeline with a diagnostic
naming the executable and exit code. Steps that may find their desired state
already in place (rustup target add, rm of missing outputs, mkdir of an
existing directory) carry tolerated exit codes on their Tasks, so reruns start
from a clean slate without failing.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mlsrs_tooling.assemble import (
    checksum_task,
    create_xcframework_task,
    lipo_create_task,
    zip_task,
)
from mlsrs_tooling.bindings import bindgen_task, relocate_modulemap_task
from mlsrs_tooling.build import (
    cargo_clean_task,
    cargo_debug_build_task,
    device_targets,
    release_build_tasks,
    rustup_target_add_task,
    simulator_targets,
)
from mlsrs_tooling.helpers import (
    archive_name,
    dynamic_library_name,
    generated_modulemap_name,
    relative_to_root,
    xcframework_name,
)
from mlsrs_tooling.process import MKDIR_EXISTS, RM_MISSING, Task, TaskResult

log = logging.getLogger(__name__)

PREFLIGHT = "preflight"
CLEAN = "clean"
CARGO_CLEAN = "cargo-clean"
OUTPUT_DIR = "output-dir"
DEBUG_BUILD = "debug-build"
BINDGEN = "bindgen"
RELEASE_BUILDS = "release-builds"
MODULEMAP = "modulemap"
MERGE_SLICES = "merge-slices"
XCFRAMEWORK = "xcframework"
COMPRESS = "compress"
CHECKSUM = "checksum"

# `mlsrs ios package`: clear previous outputs, then everything after per-target builds and bindings.
PACKAGE_STAGES = (CLEAN, OUTPUT_DIR, MERGE_SLICES, XCFRAMEWORK, COMPRESS, CHECKSUM)


@dataclass(frozen=True)
class Stage:
    name: str
    description: str
    tasks: tuple[Task, ...]


def run_tasks(tasks: Iterable[Task]) -> TaskResult | None:
    """Run tasks in order; return the first failed result, else the last result (None if no tasks)."""
    result: TaskResult | None = None
    for task in tasks:
        result = task.run()
        if not result.ok:
            return result
    return result


class Pipeline:
    """Named stages run in order, stopping at the first failure."""

    def __init__(self, stages: Sequence[Stage]) -> None:
        names = [s.name for s in stages]
        if len(set(names)) != len(names):
            msg = f"Duplicate stage names: {names}"
            raise ValueError(msg)
        self.stages: tuple[Stage, ...] = tuple(stages)

    def names(self) -> list[str]:
        return [s.name for s in self.stages]

    def select(self, start: str | None = None, stop: str | None = None) -> list[Stage]:
        """Contiguous stages from start through stop (inclusive). Raises ValueError on unknown or reversed names."""
        names = self.names()
        for n in (start, stop):
            if n is not None and n not in names:
                msg = f"Unknown stage: {n}. Stages: {', '.join(names)}"
                raise ValueError(msg)
        i = names.index(start) if start is not None else 0
        j = names.index(stop) if stop is not None else len(names) - 1
        if i > j:
            msg = f"Stage {start} comes after {stop}"
            raise ValueError(msg)
        return list(self.stages[i : j + 1])

    def select_named(self, names: Iterable[str]) -> list[Stage]:
        """Stages with the given names, in pipeline order. Raises ValueError on unknown names."""
        wanted = set(names)
        unknown = sorted(wanted - set(self.names()))
        if unknown:
            msg = f"Unknown stage: {', '.join(unknown)}. Stages: {', '.join(self.names())}"
            raise ValueError(msg)
        return [s for s in self.stages if s.name in wanted]

    def run(
        self,
        start: str | None = None,
        stop: str | None = None,
        *,
        dry_run: bool = False,
    ) -> int:
        """Run selected stages. Returns 0 on success, 1 at the first failed task."""
        return self.run_stages(self.select(start, stop), dry_run=dry_run)

    def run_stages(self, selected: Iterable[Stage], *, dry_run: bool = False) -> int:
        """Run the given stages in order, numbered by their position in the whole pipeline."""
        total = len(self.stages)
        positions = {name: i for i, name in enumerate(self.names(), 1)}
        for stage in selected:
            print(f"🔨 [{positions[stage.name]}/{total}] {stage.name}: {stage.description}")
            if dry_run:
                for task in stage.tasks:
                    print(f"  {task.describe()}")
                continue
            result = run_tasks(stage.tasks)
            if result is not None and not result.ok:
                print(f"❌ {result}", file=sys.stderr)
                print(f"   Pipeline stopped at stage {stage.name}", file=sys.stderr)
                return 1
            log.debug("Stage %s complete", stage.name)
        return 0


def build_ios_pipeline(cfg: dict[str, Any]) -> Pipeline:
    """Build the twelve-stage XCFramework pipeline from a resolved build config."""
    root = cfg["project_root"]
    tools = cfg["tools"]
    targets = cfg["targets"]
    crate = cfg["crate"]
    output_dir = cfg["output_dir"]
    bindings_dir = cfg["bindings_dir"]
    target_dir = cfg["target_dir"]
    merged = cfg["merged_library"]

    framework = xcframework_name(cfg["framework_name"])
    archive = archive_name(cfg["framework_name"])
    (device,) = device_targets(targets)
    simulators = simulator_targets(targets)

    def rel(p: Path) -> str:
        return relative_to_root(p, root)

    def rm(path: Path) -> Task:
        return Task(
            tools["rm"],
            ("-rv", rel(path)),
            accepted_exit_codes=frozenset({RM_MISSING}),
            cwd=root,
        )

    return Pipeline(
        [
            Stage(
                PREFLIGHT,
                "Register iOS targets with rustup",
                (rustup_target_add_task(tools["rustup"], targets, root),),
            ),
            Stage(
                CLEAN,
                "Remove previous XCFramework, archive, and merged library",
                (
                    rm(output_dir / framework),
                    rm(output_dir / archive),
                    rm(merged),
                ),
            ),
            Stage(CARGO_CLEAN, "Reset cargo build cache", (cargo_clean_task(tools["cargo"], root),)),
            Stage(
                OUTPUT_DIR,
                "Create output directory",
                (
                    Task(
                        tools["mkdir"],
                        (rel(output_dir),),
                        accepted_exit_codes=frozenset({MKDIR_EXISTS}),
                        cwd=root,
                    ),
                ),
            ),
            Stage(
                DEBUG_BUILD,
                "Debug build for binding generation",
                (cargo_debug_build_task(tools["cargo"], root),),
            ),
            Stage(
                BINDGEN,
                f"Generate {cfg['language']} bindings",
                (
                    bindgen_task(
                        tools["cargo"],
                        target_dir / "debug" / dynamic_library_name(crate),
                        bindings_dir,
                        root,
                        package=cfg["bindgen_package"],
                        binary=cfg["bindgen_bin"],
                        language=cfg["language"],
                    ),
                ),
            ),
            Stage(
                RELEASE_BUILDS,
                "Release builds: " + ", ".join(t.name for t in targets),
                tuple(release_build_tasks(tools["cargo"], targets, root)),
            ),
            Stage(
                MODULEMAP,
                f"Rename module map to {cfg['module_map_name']}",
                (
                    relocate_modulemap_task(
                        tools["mv"],
                        bindings_dir / generated_modulemap_name(crate),
                        bindings_dir / cfg["module_map_name"],
                        root,
                    ),
                ),
            ),
            Stage(
                MERGE_SLICES,
                "Combine simulator slices: " + ", ".join(t.name for t in simulators),
                (
                    lipo_create_task(
                        tools["lipo"],
                        [t.library_path(target_dir, crate) for t in simulators],
                        merged,
                        root,
                    ),
                ),
            ),
            Stage(
                XCFRAMEWORK,
                f"Create {framework}",
                (
                    create_xcframework_task(
                        tools["xcodebuild"],
                        [merged, device.library_path(target_dir, crate)],
                        bindings_dir,
                        output_dir / framework,
                        root,
                    ),
                ),
            ),
            Stage(
                COMPRESS,
                f"Zip {framework}",
                (zip_task(tools["zip"], output_dir, archive, framework),),
            ),
            Stage(
                CHECKSUM,
                f"Compute checksum of {archive}",
                (checksum_task(tools["swift"], output_dir, archive),),
            ),
        ]
    )
