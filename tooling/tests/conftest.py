"""Pytest fixtures for mls-rs iOS tooling tests.

The fake_tools fixture writes small Python stand-ins for cargo, rustup, lipo,
xcodebuild, zip, and swift so the pipeline can run end to end on any host.
"""

import shutil
import stat
import sys
from pathlib import Path

import pytest

CRATE = "mls_rs_uniffi_ios"

_FAKE_RUSTUP = """
import sys
from pathlib import Path

marker = Path({marker!r})
if marker.exists():
    print("error: component already installed", file=sys.stderr)
    sys.exit(1)
marker.write_text(" ".join(sys.argv[3:]))
"""

_FAKE_CARGO = """
import os
import shutil
import sys
from pathlib import Path

ARCH = {{"aarch64-apple-ios": "arm64", "aarch64-apple-ios-sim": "arm64", "x86_64-apple-ios": "x86_64"}}
crate = {crate!r}
args = sys.argv[1:]
target = Path("target")
if args == ["clean"]:
    shutil.rmtree(target, ignore_errors=True)
elif args == ["build"]:
    (target / "debug").mkdir(parents=True, exist_ok=True)
    (target / "debug" / f"lib{{crate}}.dylib").write_bytes(b"DYLIB\\n")
elif args[:2] == ["build", "--release"]:
    triple = args[2].split("=", 1)[1]
    out = target / triple / "release"
    out.mkdir(parents=True, exist_ok=True)
    (out / f"lib{{crate}}.a").write_bytes(f"SLICE:{{ARCH[triple]}}\\n".encode())
    deployment = os.environ.get("IPHONEOS_DEPLOYMENT_TARGET")
    if deployment:
        (out / "deployment-target").write_text(deployment)
elif args[:1] == ["run"] and "generate" in args:
    lib = Path(args[args.index("--library") + 1])
    out = Path(args[args.index("--out-dir") + 1])
    if not lib.is_file():
        print(f"no library at {{lib}}", file=sys.stderr)
        sys.exit(1)
    name = lib.name[3:].rsplit(".", 1)[0]
    out.mkdir(parents=True, exist_ok=True)
    (out / f"{{name}}.swift").write_text("// swift bindings\\n")
    (out / f"{{name}}FFI.h").write_text("// header\\n")
    (out / f"{{name}}FFI.modulemap").write_text(f"module {{name}}FFI {{{{}}}}\\n")
else:
    print(f"fake cargo: unsupported {{args}}", file=sys.stderr)
    sys.exit(101)
"""

_FAKE_LIPO = """
import sys
from pathlib import Path

args = sys.argv[1:]
if args[:2] != ["-create", "-output"]:
    sys.exit(64)
out = Path(args[2])
arches = []
for p in map(Path, args[3:]):
    if not p.is_file():
        print(f"lipo: can't open input file: {p}", file=sys.stderr)
        sys.exit(1)
    first = p.read_bytes().split(b"\\n", 1)[0]
    if not first.startswith(b"SLICE:"):
        print(f"lipo: can't figure out the architecture type of: {p}", file=sys.stderr)
        sys.exit(1)
    arches.append(first[6:].decode())
if len(set(arches)) != len(arches):
    print("lipo: same architectures in more than one input", file=sys.stderr)
    sys.exit(1)
out.write_bytes(("FAT:" + ",".join(sorted(arches)) + "\\n").encode())
"""

_FAKE_XCODEBUILD = """
import shutil
import sys
from pathlib import Path

args = sys.argv[1:]
if args[:1] != ["-create-xcframework"]:
    sys.exit(64)
pairs = []
i = 1
while i < len(args) and args[i] == "-library":
    pairs.append((Path(args[i + 1]), Path(args[i + 3])))
    i += 4
out = Path(args[args.index("-output") + 1])
if out.exists():
    print(f"error: the path does not point to a valid xcframework: {out}", file=sys.stderr)
    sys.exit(70)
for lib, headers in pairs:
    first = lib.read_bytes().split(b"\\n", 1)[0].decode()
    if first.startswith("FAT:"):
        slot = "ios-" + "_".join(first[4:].split(",")) + "-simulator"
    else:
        slot = "ios-" + first[6:]
    if (out / slot).exists():
        print(f"error: duplicate platform slot {slot}", file=sys.stderr)
        sys.exit(70)
    (out / slot).mkdir(parents=True)
    shutil.copyfile(lib, out / slot / lib.name)
    shutil.copytree(headers, out / slot / "Headers")
(out / "Info.plist").write_text("<plist/>\\n")
"""

_FAKE_ZIP = """
import sys
import zipfile
from pathlib import Path

args = sys.argv[1:]
if args[:1] != ["-r"]:
    sys.exit(64)
archive, src = Path(args[1]), Path(args[2])
with zipfile.ZipFile(archive, "w") as zf:
    for p in sorted(src.rglob("*")):
        if p.is_file():
            info = zipfile.ZipInfo(p.as_posix(), date_time=(1980, 1, 1, 0, 0, 0))
            zf.writestr(info, p.read_bytes())
"""

_FAKE_SWIFT = """
import hashlib
import sys
from pathlib import Path

args = sys.argv[1:]
if args[:2] != ["package", "compute-checksum"]:
    sys.exit(64)
p = Path(args[2])
if not p.is_file():
    print(f"error: file not found: {p}", file=sys.stderr)
    sys.exit(1)
print(hashlib.sha256(p.read_bytes()).hexdigest())
"""


def _write_tool(bin_dir: Path, name: str, body: str) -> Path:
    p = bin_dir / name
    p.write_text(f"#!{sys.executable}\n{body}")
    p.chmod(p.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return p


def _system_tool(name: str) -> str:
    found = shutil.which(name)
    if found is None:
        pytest.skip(f"{name} not available")
    return found


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Crate root with a Cargo.toml."""
    root = tmp_path / "crate"
    root.mkdir()
    (root / "Cargo.toml").write_text(f'[package]\nname = "{CRATE}"\nversion = "0.1.0"\n')
    return root


@pytest.fixture
def fake_tools(tmp_path: Path) -> dict[str, str]:
    """Tool name -> absolute path: fakes for Apple/Rust tools, real rm/mkdir/mv."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    marker = tmp_path / "rustup-targets-installed"
    return {
        "rustup": str(_write_tool(bin_dir, "rustup", _FAKE_RUSTUP.format(marker=str(marker)))),
        "cargo": str(_write_tool(bin_dir, "cargo", _FAKE_CARGO.format(crate=CRATE))),
        "lipo": str(_write_tool(bin_dir, "lipo", _FAKE_LIPO)),
        "xcodebuild": str(_write_tool(bin_dir, "xcodebuild", _FAKE_XCODEBUILD)),
        "zip": str(_write_tool(bin_dir, "zip", _FAKE_ZIP)),
        "swift": str(_write_tool(bin_dir, "swift", _FAKE_SWIFT)),
        "rm": _system_tool("rm"),
        "mkdir": _system_tool("mkdir"),
        "mv": _system_tool("mv"),
    }
