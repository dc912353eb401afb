"""Command-line argument parsing for ogh."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

from .config import DEFAULT_REPOSITORY


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def pull_request_shortcut(argv: Sequence[str]) -> Optional[int]:
    """Return the pull request number when ``argv`` is just ``<number>``."""
    if len(argv) != 1:
        return None
    try:
        return _positive_int(argv[0])
    except argparse.ArgumentTypeError:
        return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ogh",
        description=(
            "GitHub development helper: show the pull request review queue "
            "and GitHub Actions builds. Run 'ogh <number>' to open a pull request."
        ),
    )
    parser.add_argument(
        "--repo",
        default=os.getenv("OGH_REPO", DEFAULT_REPOSITORY),
        help=f"GitHub repository as owner/name (default: $OGH_REPO or {DEFAULT_REPOSITORY}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    commands.add_parser(
        "review",
        aliases=["r"],
        help="Show the review queue (all READY pull requests).",
    )
    commands.add_parser(
        "pull-requests",
        aliases=["pr"],
        help="Show all open pull requests.",
    )

    builds = commands.add_parser(
        "builds",
        aliases=["b"],
        help="Show GitHub Actions runs.",
    )
    targets = builds.add_subparsers(dest="target", required=True, metavar="TARGET")

    master = targets.add_parser("master", help="Show runs of the upstream master branch.")
    master.add_argument(
        "--workflow",
        type=_positive_int,
        default=None,
        help="Only show runs of this workflow ID.",
    )

    fork = targets.add_parser("fork", help="Show runs from a forked repository.")
    fork.add_argument("--user", required=True, help="GitHub user owning the fork.")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments. ``command`` is normalized to its long name.
    """
    args = build_parser().parse_args(argv)
    aliases = {"r": "review", "pr": "pull-requests", "b": "builds"}
    args.command = aliases.get(args.command, args.command)
    return args
