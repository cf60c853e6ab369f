"""
Command-line interface for the workspace decomposer.

Usage:
    homotopy decompose world.xml --seed 7 --output decomposition.json
    homotopy export-world world.xml --width 100 --height 100
    homotopy validate config.yml
    homotopy info
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from fractions import Fraction
from pathlib import Path
from typing import List, Optional

import numpy as np
import yaml

from homotopy import __version__
from homotopy.exceptions import ConfigurationError, HomotopyError
from homotopy.logging import LOG_ERROR, LOG_INFO, setup_logging

# -q, default, -v, -vv
VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG)


# =============================================================================
# Commands
# =============================================================================


def cmd_decompose(args: argparse.Namespace) -> int:
    """Decompose the world document and optionally save the JSON summary."""
    from homotopy.config import ConfigManager
    from homotopy.decomposer import WorkspaceDecomposer
    from homotopy.world_io import read_world

    try:
        config = ConfigManager(args.config).load(validate=False)
        if args.seed is not None:
            config.seed = args.seed
        config.validate()

        world = read_world(args.world)
        decomposer = WorkspaceDecomposer(world.width, world.height, config)
        decomposer.load_obstacles(world.polygons)
        result = decomposer.decompose(base_point=args.base_point)
    except HomotopyError as e:
        LOG_ERROR(f"Decomposition failed: {e}")
        if args.verbose >= 2:
            import traceback
            traceback.print_exc()
        return 1

    LOG_INFO(f"Base point {result.base_point} after {result.base_point_attempts} attempt(s)")
    for ray in result.rays:
        LOG_INFO(f"  {ray.name:<12} {len(ray.crossings)} crossing(s), exits at {ray.endpoint}")
    LOG_INFO(f"{len(result.regions)} region(s)")

    if args.output:
        args.output.write_text(json.dumps(result.to_dict(), indent=2))
        LOG_INFO(f"Decomposition written to {args.output}")
    return 0


def cmd_export_world(args: argparse.Namespace) -> int:
    """Write a world document holding only the workspace size."""
    from homotopy.workspace import Workspace
    from homotopy.world_io import write_world

    try:
        Workspace(args.width, args.height)
    except HomotopyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_world(args.output, args.width, args.height)
    print(f"World written to {args.output}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Check a configuration file and print the resolved settings."""
    from homotopy.config import ConfigManager

    manager = ConfigManager(args.config_file)
    try:
        config = manager.load(validate=True)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    print(f"{args.config_file} is valid (layers: {', '.join(manager.sources)})")
    print(yaml.safe_dump(config.to_dict(), sort_keys=False).rstrip())
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Print interpreter and dependency versions."""
    import platform

    rows = [
        ("homotopy", __version__),
        ("python", platform.python_version()),
        ("platform", platform.platform()),
        ("numpy", np.__version__),
        ("pyyaml", yaml.__version__),
    ]
    width = max(len(name) for name, _ in rows)
    for name, version in rows:
        print(f"{name:<{width}}  {version}")
    return 0


# =============================================================================
# Parser
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="homotopy",
        description="Homotopy-aware workspace decomposition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  homotopy decompose world.xml                 Decompose a world document
  homotopy decompose world.xml --seed 7 -o out.json
  homotopy decompose world.xml --base-point 99/2 49.5
  homotopy export-world world.xml --width 100 --height 100
  homotopy validate config.yml                 Check a configuration file
        """,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More output (-vv for debug)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only report errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    decompose = commands.add_parser("decompose", help="Decompose a world document")
    decompose.add_argument("world", type=Path, help="World XML document")
    decompose.add_argument("--config", "-f", type=Path, help="YAML settings file")
    decompose.add_argument("--seed", "-s", type=int, help="Random seed, overrides the settings")
    decompose.add_argument(
        "--base-point", type=Fraction, nargs=2, metavar=("X", "Y"),
        help="Fixed base point; coordinates may be rationals such as 99/2",
    )
    decompose.add_argument("--output", "-o", type=Path, help="JSON output file")
    decompose.set_defaults(func=cmd_decompose)

    export = commands.add_parser("export-world", help="Write an empty world document")
    export.add_argument("output", type=Path, help="Output XML file")
    export.add_argument("--width", type=int, required=True)
    export.add_argument("--height", type=int, required=True)
    export.set_defaults(func=cmd_export_world)

    validate = commands.add_parser("validate", help="Check a YAML settings file")
    validate.add_argument("config_file", type=Path)
    validate.set_defaults(func=cmd_validate)

    info = commands.add_parser("info", help="Show version information")
    info.set_defaults(func=cmd_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    verbosity = 0 if args.quiet else min(args.verbose + 1, len(VERBOSITY_LEVELS) - 1)
    setup_logging(level=VERBOSITY_LEVELS[verbosity], force=True)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
