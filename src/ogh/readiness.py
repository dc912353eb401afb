"""Pull request readiness classification and participant aggregation.

A pull request is ready for review when:
- it has no merge conflict,
- no check run on its most recent commit failed or was cancelled,
- no reviewer's latest review requests changes.

The participant list shows reviewers grouped by their latest verdict
(changes requested, approved, commented) followed by everyone else who took
part in the discussion, excluding the author.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from .models import (
    BLOCKING_CONCLUSIONS,
    REVIEW_APPROVED,
    REVIEW_CHANGES_REQUESTED,
    REVIEW_COMMENTED,
    PullRequest,
    Review,
)
from .payload import parse_timestamp

logger = logging.getLogger(__name__)

REVIEWER_WIDTH = 4
PARTICIPANT_WIDTH = 5

# Display order of reviewer groups and the mark prefixed to each login.
REVIEW_GROUPS = (
    (REVIEW_CHANGES_REQUESTED, "✕"),
    (REVIEW_APPROVED, "✓"),
    (REVIEW_COMMENTED, ""),
)


def last_reviews_per_user(pr: PullRequest) -> Dict[str, Review]:
    """Reduce the review history to the latest review of each reviewer.

    Reviews are processed in their given order. A later review replaces the
    stored one only when its ``updatedAt`` is strictly later, so on a tie the
    first-seen review wins. The mapping keeps first-seen login order.

    Raises:
        DataValidationError: If a compared ``updatedAt`` is not RFC 3339.
    """
    reviewers: Dict[str, Review] = {}

    for review in pr.reviews:
        last_review = reviewers.get(review.author)
        if last_review is None:
            reviewers[review.author] = review
            continue

        old_record = parse_timestamp(last_review.updated_at)
        new_record = parse_timestamp(review.updated_at)
        if old_record < new_record:
            reviewers[review.author] = review

    return reviewers


def has_blocking_check(pr: PullRequest) -> bool:
    """Return True if a check run on the head commit failed or was cancelled.

    Only the first commit is examined. Older commits never block.
    """
    commit = pr.head_commit
    if commit is None:
        return False
    return any(run.conclusion in BLOCKING_CONCLUSIONS for run in commit.check_runs)


def is_ready(pr: PullRequest) -> bool:
    """Classify a pull request as ready for review."""
    if pr.is_conflicting:
        logger.debug("Pull request has a merge conflict", extra={"pr_number": pr.number})
        return False

    if has_blocking_check(pr):
        logger.debug("Pull request has a failed check run", extra={"pr_number": pr.number})
        return False

    for reviewer, review in last_reviews_per_user(pr).items():
        if review.state == REVIEW_CHANGES_REQUESTED:
            logger.debug(
                "Pull request has requested changes",
                extra={"pr_number": pr.number, "reviewer": reviewer},
            )
            return False

    return True


def _filter_reviews(reviews: Dict[str, Review], state: str, mark: str, author: str) -> List[str]:
    return [
        mark + login.upper()[:REVIEWER_WIDTH]
        for login, review in reviews.items()
        if login and review.state == state and login != author
    ]


def get_participants(pr: PullRequest, author: str) -> List[str]:
    """Build the ordered participant display tokens for a pull request.

    Args:
        pr: Pull request to summarize.
        author: Login of the pull request author, never listed.

    Returns:
        Reviewer tokens grouped as changes requested, approved, commented,
        then the remaining participants in upstream order.
    """
    reviews = last_reviews_per_user(pr)

    participants: List[str] = []
    for state, mark in REVIEW_GROUPS:
        participants.extend(_filter_reviews(reviews, state, mark, author))

    listed = set(reviews)
    for login in pr.participants:
        if not login or login in listed or login == author:
            continue
        listed.add(login)
        participants.append(login.upper()[:PARTICIPANT_WIDTH])

    return participants
