"""`mlsrs ios` subcommands: build, package, stages."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from mlsrs_tooling.config import DEFAULT_CONFIG_FILE, load_build_config
from mlsrs_tooling.pipeline import PACKAGE_STAGES, build_ios_pipeline


def _parser(
    prog: str, description: str, *, stage_range: bool, dry_run: bool = False
) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=prog, description=description)
    ap.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Build config YAML (default: <project-root>/{DEFAULT_CONFIG_FILE} if present)",
    )
    ap.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Crate root containing Cargo.toml (default: cwd)",
    )
    if stage_range:
        ap.add_argument("--from", dest="start", default=None, help="First stage to run")
        ap.add_argument("--to", dest="stop", default=None, help="Last stage to run")
    if stage_range or dry_run:
        ap.add_argument("--dry-run", action="store_true", help="Print commands, run nothing")
    return ap


def _run(args: argparse.Namespace, only: tuple[str, ...] | None = None) -> int:
    try:
        cfg = load_build_config(args.config, args.project_root)
        pipeline = build_ios_pipeline(cfg)
        if only is not None:
            selected = pipeline.select_named(only)
        else:
            selected = pipeline.select(args.start, args.stop)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    rc = pipeline.run_stages(selected, dry_run=args.dry_run)
    if rc == 0 and not args.dry_run:
        print(f"🎉 XCFramework build complete: {cfg['output_dir']}")
    return rc


def run_ios_argv(argv: list[str] | None = None) -> None:
    """Parse ios subcommand from argv and run. argv defaults to sys.argv[2:] when called from main."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    if not argv:
        print("mlsrs ios: missing subcommand (build, package, stages)", file=sys.stderr)
        sys.exit(1)
    cmd = argv[0]
    rest = argv[1:]

    if cmd == "build":
        ap = _parser(
            "mlsrs ios build",
            "Build, bind, merge, package, zip, and checksum the XCFramework",
            stage_range=True,
        )
        sys.exit(_run(ap.parse_args(rest)))

    if cmd == "package":
        ap = _parser(
            "mlsrs ios package",
            "Clear previous outputs, merge simulator slices, create the XCFramework, "
            "zip, and checksum (requires existing release builds and bindings)",
            stage_range=False,
            dry_run=True,
        )
        sys.exit(_run(ap.parse_args(rest), only=PACKAGE_STAGES))

    if cmd == "stages":
        ap = _parser("mlsrs ios stages", "List pipeline stages in order", stage_range=False)
        args = ap.parse_args(rest)
        try:
            pipeline = build_ios_pipeline(load_build_config(args.config, args.project_root))
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"❌ {e}", file=sys.stderr)
            sys.exit(1)
        for i, stage in enumerate(pipeline.stages, 1):
            print(f"{i:2d}. {stage.name:<15} {stage.description}")
        sys.exit(0)

    print(f"mlsrs ios: unknown subcommand {cmd!r} (use build, package, or stages)", file=sys.stderr)
    sys.exit(1)
