"""Main CLI entry point for mls-rs iOS tooling."""

import logging
import sys

from mlsrs_tooling.cli import ios_cmd


def main() -> None:
    """Main CLI entry point."""
    args = sys.argv[1:]
    if args and args[0] in ("-v", "--verbose"):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        args = args[1:]
        sys.argv = [sys.argv[0], *args]

    if not args:
        print("Usage: mlsrs [-v] <command> [args...]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  ios build     - Full XCFramework pipeline (rustup, cargo, uniffi-bindgen, lipo, xcodebuild, zip, checksum)",
            file=sys.stderr,
        )
        print(
            "  ios package   - Clean outputs, then merge, package, zip, and checksum existing builds",
            file=sys.stderr,
        )
        print("  ios stages    - List pipeline stages", file=sys.stderr)
        sys.exit(1)

    command = args[0]
    if command == "ios":
        ios_cmd.run_ios_argv(args[1:])
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
