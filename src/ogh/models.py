"""Domain models for GitHub pull request and build data.

These dataclasses model only the subset of API payload fields that the review
queue and build listing need. They are built once per run and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

MERGEABLE_CONFLICTING = "CONFLICTING"
MERGEABLE_MERGEABLE = "MERGEABLE"
MERGEABLE_UNKNOWN = "UNKNOWN"

REVIEW_APPROVED = "APPROVED"
REVIEW_CHANGES_REQUESTED = "CHANGES_REQUESTED"
REVIEW_COMMENTED = "COMMENTED"

CONCLUSION_SUCCESS = "SUCCESS"
CONCLUSION_FAILURE = "FAILURE"
CONCLUSION_CANCELLED = "CANCELLED"

BLOCKING_CONCLUSIONS = frozenset({CONCLUSION_FAILURE, CONCLUSION_CANCELLED})


@dataclass(slots=True)
class CheckRun:
    """Represents a single automated check tied to a commit."""

    name: str
    status: str
    conclusion: str


@dataclass(slots=True)
class Commit:
    """Represents a pull request commit with its flattened check runs."""

    check_runs: List[CheckRun] = field(default_factory=list)


@dataclass(slots=True)
class Review:
    """Represents one review event; ``updated_at`` is the raw RFC 3339 string."""

    author: str
    state: str
    updated_at: str


@dataclass(slots=True)
class PullRequest:
    """Represents an open pull request as needed for readiness classification."""

    number: int
    author: str
    title: str
    mergeable: str
    commits: List[Commit] = field(default_factory=list)
    reviews: List[Review] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)

    @property
    def is_conflicting(self) -> bool:
        return self.mergeable == MERGEABLE_CONFLICTING

    @property
    def head_commit(self) -> Optional[Commit]:
        """The most recent commit; the query returns it first."""
        return self.commits[0] if self.commits else None


@dataclass(slots=True)
class WorkflowRun:
    """Represents a GitHub Actions workflow run."""

    id: int
    name: str
    event: str
    status: str
    conclusion: str
    head_branch: str
    created_at: Optional[datetime]
    html_url: str
