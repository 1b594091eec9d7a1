"""Snapstore CLI — snapstore demo / snapstore config.

Entry point for the ``snapstore`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import asdict
from pathlib import Path


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the snapstore CLI."""
    parser = argparse.ArgumentParser(
        prog="snapstore",
        description="Reactive state-container runtime.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # snapstore demo
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run the counter demo and print what the reactions observed",
    )
    demo_parser.add_argument(
        "--root", default=".", help="Directory holding snapstore.yaml/.toml",
    )
    demo_parser.add_argument("--multiplier", type=int, default=3, help="Counter multiplier")
    demo_parser.add_argument("--trace", action="store_true", help="Print event statistics")

    # snapstore config
    config_parser = subparsers.add_parser(
        "config",
        help="Print the resolved runtime configuration",
    )
    config_parser.add_argument(
        "root", nargs="?", default=".", help="Directory holding snapstore.yaml/.toml",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from snapstore import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from snapstore._errors import SnapStoreError
    from snapstore.config_loader import load_config

    try:
        if args.command == "config":
            config = load_config(Path(args.root))
            for key, value in asdict(config).items():
                print(f"{key} = {value!r}")
        elif args.command == "demo":
            from snapstore.demo import run_demo

            overrides = {"trace": True} if args.trace else {}
            config = load_config(Path(args.root), **overrides)
            result = run_demo(args.multiplier, config=config)
            for line in result.log:
                print(line)
            print(f"enabled: {result.enabled_values}")
            print(f"controllable counter: {result.controllable_values}")
            print(f"final state: {result.final_state}")
            if result.events:
                print(f"events: {result.events}")
    except SnapStoreError as exc:
        print(f"snapstore: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
