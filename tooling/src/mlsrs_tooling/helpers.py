"""Shared helpers for mlsrs_tooling (artifact naming, tool paths).

Used by build, bindings, assemble, and config.
"""

from __future__ import annotations

from pathlib import Path

# --- Naming ---


def static_library_name(crate: str) -> str:
    """Static library file cargo emits for a crate (e.g. mls_rs_uniffi_ios -> libmls_rs_uniffi_ios.a)."""
    return f"lib{crate}.a"


def dynamic_library_name(crate: str) -> str:
    """Apple dynamic library file cargo emits for a crate (debug build drives uniffi-bindgen)."""
    return f"lib{crate}.dylib"


def generated_modulemap_name(crate: str) -> str:
    """Module map uniffi-bindgen writes for a crate: {crate}FFI.modulemap."""
    return f"{crate}FFI.modulemap"


def merged_library_name(crate: str) -> str:
    """Default name of the lipo-combined simulator library."""
    return f"lib{crate}_sim_combined.a"


def xcframework_name(framework_name: str) -> str:
    return f"{framework_name}.xcframework"


def archive_name(framework_name: str) -> str:
    return f"{xcframework_name(framework_name)}.zip"


# --- Path ---


def resolve_tool_path(value: str | Path) -> Path:
    """Expand ~ in a tool path. Raises ValueError unless the result is absolute."""
    p = Path(value).expanduser()
    if not p.is_absolute():
        msg = f"Tool path must be absolute: {value}"
        raise ValueError(msg)
    return p


def relative_to_root(path: Path, project_root: Path) -> str:
    """Path as shown to the operator: relative to project_root when inside it."""
    try:
        return str(path.relative_to(project_root))
    except ValueError:
        return str(path)
