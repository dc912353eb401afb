"""Entry point and command orchestration for ogh."""

from __future__ import annotations

import logging
import os
import sys
import webbrowser
from argparse import Namespace
from typing import List, Optional, Sequence

from rich.console import Console

from .cache import build_cache
from .cli import parse_args, pull_request_shortcut
from .config import DEFAULT_REPOSITORY, Config, load_config, split_repository
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
)
from .github_client import GitHubClient
from .payload import parse_pull_requests, parse_workflow_runs
from .report import PullRequestRow, build_row, render_pull_requests, render_workflow_runs

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4
EXIT_DATA = 5


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def open_pull_request(number: int, repository: str = DEFAULT_REPOSITORY) -> None:
    """Open a pull request of ``repository`` in the default web browser."""
    owner, repo = split_repository(repository)
    webbrowser.open(f"https://github.com/{owner}/{repo}/pull/{number}")


def collect_rows(client: GitHubClient, only_ready: bool) -> List[PullRequestRow]:
    """Fetch open pull requests and build table rows, optionally only ready ones."""
    pull_requests = parse_pull_requests(client.fetch_open_pull_requests())
    rows = [build_row(pr) for pr in pull_requests]
    if only_ready:
        rows = [row for row in rows if row.ready]

    logger.info(
        "Classified pull requests",
        extra={
            "pull_requests": len(pull_requests),
            "ready": sum(1 for row in rows if row.ready),
            "only_ready": only_ready,
        },
    )
    return rows


def run_command(args: Namespace, config: Config, console: Console) -> None:
    cache = build_cache(config.cache_prefix, config.cache_ttl_seconds)
    client = GitHubClient(config=config, cache=cache)

    if args.command in ("review", "pull-requests"):
        rows = collect_rows(client, only_ready=args.command == "review")
        render_pull_requests(rows, console)
        return

    if args.target == "master":
        payload = client.list_workflow_runs(config.owner, branch="master", workflow_id=args.workflow)
    else:
        payload = client.list_workflow_runs(args.user)
    render_workflow_runs(parse_workflow_runs(payload), console)


def orchestrate(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    """Run one ogh invocation and map failures to exit codes.

    Returns:
        ``0`` on success, ``2`` for configuration errors, ``3`` for missing
        credentials, ``4`` for API failures, ``5`` for contract violations in
        API data and ``1`` for anything unexpected.
    """
    arguments = list(sys.argv[1:] if argv is None else argv)
    console = console or Console()

    try:
        number = pull_request_shortcut(arguments)
        if number is not None:
            open_pull_request(number, os.getenv("OGH_REPO", DEFAULT_REPOSITORY))
            return EXIT_OK

        args = parse_args(arguments)
        configure_logging(args.verbose)
        config = load_config(args.repo)
        run_command(args, config, console)
        return EXIT_OK
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_API
    except DataValidationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_DATA
    except Exception:
        logger.exception("Unexpected failure")
        return EXIT_UNEXPECTED


def main() -> None:
    sys.exit(orchestrate())


if __name__ == "__main__":
    main()
