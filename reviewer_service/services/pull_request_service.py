# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Pull request lifecycle.
Creation with automatic reviewer assignment, merge, reviewer reassignment,
and per-reviewer listing.
"""

import random
from datetime import datetime, timezone
from typing import Optional

from reviewer_service.core.config import settings
from reviewer_service.core.logging import get_logger
from reviewer_service.metrics.prometheus import (
    PULL_REQUESTS_CREATED,
    PULL_REQUESTS_MERGED,
    REASSIGNMENTS,
    REVIEWERS_ASSIGNED,
)
from reviewer_service.models.domain import PRStatus, PullRequest
from reviewer_service.models.errors import DomainError, ErrorCode
from reviewer_service.repositories.pull_request_repository import PullRequestRepository
from reviewer_service.repositories.user_repository import UserRepository
from reviewer_service.services.selector import select_reviewers

logger = get_logger(__name__)


class PullRequestService:
    """Business logic for the pull request lifecycle."""

    def __init__(
        self,
        pr_repo: PullRequestRepository,
        user_repo: UserRepository,
        max_reviewers: int | None = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._prs = pr_repo
        self._users = user_repo
        self._max_reviewers = (
            settings.MAX_REVIEWERS if max_reviewers is None else max_reviewers
        )
        self._rng = rng

    # ── Create ──

    def create_pull_request(self, pr_id: str, name: str, author_id: str) -> PullRequest:
        """
        Open a PR and assign up to ``max_reviewers`` active teammates of the
        author. Raises PR_EXISTS or NOT_FOUND (author).
        """
        if self._prs.exists(pr_id):
            raise DomainError(ErrorCode.PR_EXISTS, "PR id already exists")

        author = self._users.get_by_id(author_id)
        if author is None:
            raise DomainError(ErrorCode.NOT_FOUND, "author not found")

        candidates = self._users.get_active_by_team_excluding(author.team_name, [author_id])
        reviewers = select_reviewers(candidates, self._max_reviewers, self._rng)

        pr = PullRequest(
            pull_request_id=pr_id,
            pull_request_name=name,
            author_id=author_id,
            status=PRStatus.OPEN,
            assigned_reviewers=reviewers,
            created_at=datetime.now(timezone.utc),
        )
        self._prs.create(pr)

        PULL_REQUESTS_CREATED.inc()
        REVIEWERS_ASSIGNED.observe(len(reviewers))
        logger.info(
            "Pull request created id=%s author=%s reviewers=%s",
            pr_id, author_id, reviewers,
        )
        return pr

    # ── Merge ──

    def merge_pull_request(self, pr_id: str) -> PullRequest:
        """Mark a PR merged. Merging an already merged PR changes nothing."""
        pr = self._prs.get_by_id(pr_id)
        if pr is None:
            raise DomainError(ErrorCode.NOT_FOUND, "pull request not found")
        if pr.status is PRStatus.MERGED:
            return pr

        if self._prs.set_merged(pr_id, datetime.now(timezone.utc)):
            PULL_REQUESTS_MERGED.inc()
            logger.info("Pull request merged id=%s", pr_id)
        return self._require(pr_id)

    # ── Reassign ──

    def reassign_reviewer(self, pr_id: str, old_reviewer_id: str) -> tuple[PullRequest, str]:
        """
        Replace one reviewer with a random active member of that reviewer's
        team. Never picks the author or anyone already assigned.
        Returns the refreshed PR and the new reviewer's id.
        """
        try:
            pr = self._require(pr_id)
            if pr.status is PRStatus.MERGED:
                raise DomainError(ErrorCode.PR_MERGED, "cannot reassign on merged PR")
            if old_reviewer_id not in pr.assigned_reviewers:
                raise DomainError(ErrorCode.NOT_ASSIGNED, "reviewer is not assigned to this PR")

            old_reviewer = self._users.get_by_id(old_reviewer_id)
            if old_reviewer is None:
                raise DomainError(ErrorCode.NOT_FOUND, "reviewer not found")

            excluded = [*pr.assigned_reviewers, pr.author_id]
            candidates = self._users.get_active_by_team_excluding(old_reviewer.team_name, excluded)
            if not candidates:
                raise DomainError(ErrorCode.NO_CANDIDATE, "no active replacement candidate in team")
            picked = select_reviewers(candidates, 1, self._rng)
            if not picked:
                raise DomainError(ErrorCode.NO_CANDIDATE, "no active replacement candidate in team")
            new_reviewer_id = picked[0]

            self._prs.replace_reviewer(pr_id, old_reviewer_id, new_reviewer_id)
        except DomainError as exc:
            REASSIGNMENTS.labels(outcome=exc.code.value).inc()
            raise

        REASSIGNMENTS.labels(outcome="reassigned").inc()
        logger.info(
            "Reviewer reassigned pr=%s old=%s new=%s",
            pr_id, old_reviewer_id, new_reviewer_id,
        )
        return self._require(pr_id), new_reviewer_id

    # ── Reviews by user ──

    def get_user_reviews(self, user_id: str) -> list[PullRequest]:
        """PRs the user currently reviews, newest first."""
        if not self._users.exists(user_id):
            raise DomainError(ErrorCode.NOT_FOUND, "user not found")
        pr_ids = self._prs.get_pr_ids_by_reviewer(user_id)
        if not pr_ids:
            return []
        return self._prs.get_by_ids(pr_ids)

    # ── Internal ──

    def _require(self, pr_id: str) -> PullRequest:
        pr = self._prs.get_by_id(pr_id)
        if pr is None:
            raise DomainError(ErrorCode.NOT_FOUND, "pull request not found")
        return pr
