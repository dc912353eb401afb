"""Table rendering for the review queue and build listings.

This module turns classified pull requests and workflow runs into ``rich``
tables. It holds no decision logic of its own:
- ``build_row`` combines the readiness verdict and participant list.
- ``build_status`` summarizes the head commit's check runs, one mark per run.
- ``render_pull_requests`` and ``render_workflow_runs`` draw the tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import CONCLUSION_CANCELLED, CONCLUSION_FAILURE, CONCLUSION_SUCCESS, PullRequest, WorkflowRun
from .readiness import get_participants, is_ready

AUTHOR_WIDTH = 12
TITLE_WIDTH = 50
PARTICIPANTS_WIDTH = 35
CONFLICT_MARK = "[C] "

CHECK_MARKS = {
    CONCLUSION_SUCCESS: "✓",
    CONCLUSION_FAILURE: "✕",
    CONCLUSION_CANCELLED: "C",
    "SKIPPED": "-",
    "NEUTRAL": "N",
    "TIMED_OUT": "T",
    "ACTION_REQUIRED": "A",
    "STALE": "S",
}
PENDING_MARK = "."
UNKNOWN_MARK = "?"


@dataclass(slots=True)
class PullRequestRow:
    """One review-queue table row."""

    number: int
    author: str
    title: str
    participants: List[str]
    ready: bool
    status: str


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to at most ``width`` characters."""
    return text[:width]


def build_status(pr: PullRequest) -> str:
    """Summarize the head commit's check runs as one mark per run."""
    commit = pr.head_commit
    if commit is None:
        return ""

    marks = []
    for run in commit.check_runs:
        if not run.conclusion:
            marks.append(PENDING_MARK)
        else:
            marks.append(CHECK_MARKS.get(run.conclusion, UNKNOWN_MARK))
    return "".join(marks)


def build_row(pr: PullRequest) -> PullRequestRow:
    """Classify a pull request and collect everything its table row shows."""
    title = CONFLICT_MARK + pr.title if pr.is_conflicting else pr.title
    return PullRequestRow(
        number=pr.number,
        author=pr.author,
        title=title,
        participants=get_participants(pr, pr.author),
        ready=is_ready(pr),
        status=build_status(pr),
    )


def render_pull_requests(rows: Iterable[PullRequestRow], console: Console) -> None:
    table = Table(box=box.MINIMAL_HEAVY_HEAD, header_style="bold")
    for header in ("ID", "Author", "Summary", "Participants", "Check"):
        table.add_column(header, no_wrap=True)

    for row in rows:
        cells = (
            str(row.number),
            ">" + truncate(row.author, AUTHOR_WIDTH),
            truncate(row.title, TITLE_WIDTH),
            truncate(",".join(row.participants), PARTICIPANTS_WIDTH),
            row.status,
        )
        table.add_row(*(Text(cell) for cell in cells))

    console.print(table)


def render_workflow_runs(runs: Iterable[WorkflowRun], console: Console) -> None:
    table = Table(box=box.MINIMAL_HEAVY_HEAD, header_style="bold")
    for header in ("ID", "Workflow", "Event", "Branch", "Status", "Created"):
        table.add_column(header, no_wrap=True)

    for run in runs:
        status = run.conclusion or run.status
        created = run.created_at.strftime("%Y-%m-%d %H:%M") if run.created_at else ""
        cells = (str(run.id), run.name, run.event, run.head_branch, status, created)
        table.add_row(*(Text(cell) for cell in cells))

    console.print(table)
