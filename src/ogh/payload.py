"""Tolerant conversion of raw GitHub API payloads into typed models.

Absent or mismatched optional fields become empty values so that the
classifier can apply its "absence means no signal" rule. Only fields the
downstream logic cannot do without raise ``DataValidationError``.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import DataValidationError
from .models import CheckRun, Commit, PullRequest, Review, WorkflowRun
from .traversal import get_int, get_list, get_node, get_str

logger = logging.getLogger(__name__)

# RFC 3339 date-time: full-date "T" full-time, offset required.
_RFC3339_RE = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into a timezone-aware datetime.

    Raises:
        DataValidationError: If ``value`` is not a valid timestamp.
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise DataValidationError(f"Malformed RFC 3339 timestamp: '{value}'")

    # fromisoformat only takes 3 or 6 fraction digits before Python 3.11.
    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"

    normalized = f"{match.group('date')}T{match.group('time')}.{fraction}{offset}"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise DataValidationError(f"Malformed RFC 3339 timestamp: '{value}'") from exc


def _parse_commit(edge: Any) -> Commit:
    commit = get_node(edge, "node", "commit")
    check_runs: List[CheckRun] = []

    for suite in get_list(commit, "checkSuites", "edges"):
        for run in get_list(suite, "node", "checkRuns", "edges"):
            check_runs.append(
                CheckRun(
                    name=get_str(run, "node", "name"),
                    status=get_str(run, "node", "status"),
                    conclusion=get_str(run, "node", "conclusion"),
                )
            )

    return Commit(check_runs=check_runs)


def _parse_review(node: Any) -> Review:
    return Review(
        author=get_str(node, "author", "login"),
        state=get_str(node, "state"),
        updated_at=get_str(node, "updatedAt"),
    )


def parse_pull_request(node: Any) -> PullRequest:
    """Build a ``PullRequest`` from one ``pullRequests.edges[].node`` object.

    Raises:
        DataValidationError: If the node carries no numeric ``number``.
    """
    number = get_int(node, "number")
    if number is None:
        raise DataValidationError(f"Pull request payload is missing its number: payload={node}")

    return PullRequest(
        number=number,
        author=get_str(node, "author", "login"),
        title=get_str(node, "title"),
        mergeable=get_str(node, "mergeable"),
        commits=[_parse_commit(edge) for edge in get_list(node, "commits", "edges")],
        reviews=[_parse_review(review) for review in get_list(node, "reviews", "nodes")],
        participants=[
            get_str(edge, "node", "login")
            for edge in get_list(node, "participants", "edges")
        ],
    )


def parse_pull_requests(payload: Dict[str, Any]) -> List[PullRequest]:
    """Build pull requests from a ``repository.pullRequests`` GraphQL response."""
    edges = get_list(payload, "data", "repository", "pullRequests", "edges")
    pull_requests = [parse_pull_request(get_node(edge, "node")) for edge in edges]

    logger.debug("Parsed pull requests", extra={"pull_requests": len(pull_requests)})
    return pull_requests


def _parse_optional_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    return parse_timestamp(value)


def parse_workflow_runs(payload: Dict[str, Any]) -> List[WorkflowRun]:
    """Build workflow runs from an Actions ``/runs`` REST response.

    Entries without an ``id`` are skipped.
    """
    runs: List[WorkflowRun] = []

    for item in get_list(payload, "workflow_runs"):
        run_id = get_int(item, "id")
        if run_id is None:
            continue

        runs.append(
            WorkflowRun(
                id=run_id,
                name=get_str(item, "name"),
                event=get_str(item, "event"),
                status=get_str(item, "status"),
                conclusion=get_str(item, "conclusion"),
                head_branch=get_str(item, "head_branch"),
                created_at=_parse_optional_timestamp(get_str(item, "created_at")),
                html_url=get_str(item, "html_url"),
            )
        )

    return runs
