"""iOS build targets: (architecture, platform) pairs and where cargo puts their libraries."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from mlsrs_tooling.helpers import static_library_name

DEVICE = "device"
SIMULATOR = "simulator"
PLATFORMS = (DEVICE, SIMULATOR)


@dataclass(frozen=True)
class BuildTarget:
    name: str
    triple: str
    platform: str
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.platform not in PLATFORMS:
            msg = f"Unknown platform for target {self.name}: {self.platform} (use device or simulator)"
            raise ValueError(msg)
        object.__setattr__(
            self, "env", MappingProxyType({str(k): str(v) for k, v in self.env.items()})
        )

    def library_path(self, target_dir: Path, crate: str, profile: str = "release") -> Path:
        """target/{triple}/{profile}/lib{crate}.a"""
        return target_dir / self.triple / profile / static_library_name(crate)


# Build order: arm64 simulator, device, x86_64 simulator.
# x86_64 simulator slices are needed by Xcode Cloud runners.
DEFAULT_TARGETS: tuple[BuildTarget, ...] = (
    BuildTarget("simulator-arm64", "aarch64-apple-ios-sim", SIMULATOR),
    BuildTarget(
        "device-arm64",
        "aarch64-apple-ios",
        DEVICE,
        {"IPHONEOS_DEPLOYMENT_TARGET": "17.0"},
    ),
    BuildTarget("simulator-x86_64", "x86_64-apple-ios", SIMULATOR),
)


def target_from_dict(data: dict[str, Any]) -> BuildTarget:
    """Build a BuildTarget from a config entry {name, triple, platform, env?}.

    env values must be YAML strings: an unquoted 17.10 would load as the float 17.1.
    """
    if not isinstance(data, dict):
        msg = f"Build target entry must be a mapping: {data!r}"
        raise ValueError(msg)
    missing = [k for k in ("name", "triple", "platform") if not data.get(k)]
    if missing:
        msg = f"Build target {data!r} missing: {', '.join(missing)}"
        raise ValueError(msg)
    env = data.get("env") or {}
    if not isinstance(env, dict):
        msg = f"Build target {data['name']}: env must be a mapping"
        raise ValueError(msg)
    not_str = sorted(str(k) for k, v in env.items() if not isinstance(v, str))
    if not_str:
        msg = f"Build target {data['name']}: env values must be quoted strings: {', '.join(not_str)}"
        raise ValueError(msg)
    return BuildTarget(str(data["name"]), str(data["triple"]), str(data["platform"]), env)


def validate_targets(targets: Iterable[BuildTarget]) -> tuple[BuildTarget, ...]:
    """Exactly one device target, at least one simulator target, unique names and triples."""
    out = tuple(targets)
    names = [t.name for t in out]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        msg = f"Duplicate build target names: {', '.join(dupes)}"
        raise ValueError(msg)
    triples = [t.triple for t in out]
    dupes = sorted({t for t in triples if triples.count(t) > 1})
    if dupes:
        msg = f"Duplicate build target triples: {', '.join(dupes)}"
        raise ValueError(msg)
    devices = device_targets(out)
    if len(devices) != 1:
        msg = f"Exactly one device target required, found {len(devices)}"
        raise ValueError(msg)
    if not simulator_targets(out):
        msg = "At least one simulator target required"
        raise ValueError(msg)
    return out


def device_targets(targets: Iterable[BuildTarget]) -> list[BuildTarget]:
    return [t for t in targets if t.platform == DEVICE]


def simulator_targets(targets: Iterable[BuildTarget]) -> list[BuildTarget]:
    return [t for t in targets if t.platform == SIMULATOR]
