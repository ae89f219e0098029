"""iOS build configuration loading.

Config YAML format (ios-build.yaml in the project root, all keys optional):
- crate, framework_name: library crate and XCFramework names
- output_dir, bindings_dir, target_dir: paths relative to the project root
- merged_library: lipo output file name inside output_dir
- module_map_name: name xcodebuild expects for the module map
- bindgen_package, bindgen_bin, language: uniffi-bindgen invocation
- tools: executable name -> absolute path (~ expanded)
- targets: list of { name, triple, platform: device|simulator, env? }
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from mlsrs_tooling.build.targets import DEFAULT_TARGETS, target_from_dict, validate_targets
from mlsrs_tooling.helpers import merged_library_name, resolve_tool_path

DEFAULT_CONFIG_FILE = "ios-build.yaml"

DEFAULT_BUILD_CONFIG: dict[str, Any] = {
    "crate": "mls_rs_uniffi_ios",
    "framework_name": "MLSrs",
    "output_dir": "buildIos",
    "bindings_dir": "bindings",
    "target_dir": "target",
    "merged_library": None,
    "module_map_name": "module.modulemap",
    "bindgen_package": "uniffi-bindgen",
    "bindgen_bin": "uniffi-bindgen",
    "language": "swift",
}

DEFAULT_TOOLS: dict[str, str] = {
    "cargo": "~/.cargo/bin/cargo",
    "rustup": "~/.cargo/bin/rustup",
    "rm": "/bin/rm",
    "mkdir": "/bin/mkdir",
    "mv": "/bin/mv",
    "lipo": "/usr/bin/lipo",
    "xcodebuild": "/usr/bin/xcodebuild",
    "zip": "/usr/bin/zip",
    "swift": "/usr/bin/swift",
}

_KNOWN_KEYS = frozenset(DEFAULT_BUILD_CONFIG) | {"tools", "targets"}


def _read_yaml(config_path: Path) -> dict[str, Any]:
    with config_path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = f"{config_path}: top level must be a mapping"
        raise ValueError(msg)
    return data


def resolve_build_config(data: dict[str, Any] | None, project_root: Path) -> dict[str, Any]:
    """Fill defaults, resolve paths under project_root, parse and validate targets.

    Returns a dict with string settings plus:
    project_root, output_dir, bindings_dir, target_dir, merged_library (Paths),
    tools (name -> absolute Path), targets (tuple of BuildTarget).
    """
    data = dict(data or {})
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown build config keys: {', '.join(unknown)}"
        raise ValueError(msg)

    root = project_root.resolve()
    out: dict[str, Any] = dict(DEFAULT_BUILD_CONFIG)
    out.update({k: v for k, v in data.items() if k in DEFAULT_BUILD_CONFIG and v is not None})
    out["project_root"] = root
    for key in ("output_dir", "bindings_dir", "target_dir"):
        out[key] = (root / str(out[key])).resolve()
    out["merged_library"] = out["output_dir"] / (
        out["merged_library"] or merged_library_name(out["crate"])
    )

    tools_in = data.get("tools") or {}
    if not isinstance(tools_in, dict):
        msg = "tools must be a mapping of tool name to path"
        raise ValueError(msg)
    tools = dict(DEFAULT_TOOLS)
    tools.update({str(k): str(v) for k, v in tools_in.items()})
    out["tools"] = {name: resolve_tool_path(p) for name, p in tools.items()}

    targets_in = data.get("targets")
    if targets_in is None:
        targets = DEFAULT_TARGETS
    elif isinstance(targets_in, list):
        targets = tuple(target_from_dict(t) for t in targets_in)
    else:
        msg = "targets must be a list"
        raise ValueError(msg)
    out["targets"] = validate_targets(targets)
    return out


def load_build_config(config_path: Path | None, project_root: Path) -> dict[str, Any]:
    """Load config from config_path, or project_root/ios-build.yaml when present, else defaults."""
    if config_path is not None:
        if not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise ValueError(msg)
        return resolve_build_config(_read_yaml(config_path), project_root)
    default_path = project_root / DEFAULT_CONFIG_FILE
    if default_path.is_file():
        return resolve_build_config(_read_yaml(default_path), project_root)
    return resolve_build_config(None, project_root)
