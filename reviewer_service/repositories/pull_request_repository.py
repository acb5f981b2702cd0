# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Pull request and reviewer-assignment data access.

A pull request and its reviewer set are always read in a single statement
and mutated inside a single transaction, so callers never observe one
without the other.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, exists, insert, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from reviewer_service.core.database import pr_reviewers, pull_requests
from reviewer_service.models.domain import PRStatus, PullRequest
from reviewer_service.models.errors import DomainError, ErrorCode
from reviewer_service.repositories.base import BaseRepository, insert_ignoring_conflicts

REVIEWER_KEY = ["pull_request_id", "user_id"]


def _select_with_reviewers():
    return select(
        pull_requests.c.pull_request_id,
        pull_requests.c.pull_request_name,
        pull_requests.c.author_id,
        pull_requests.c.status,
        pull_requests.c.created_at,
        pull_requests.c.merged_at,
        pr_reviewers.c.user_id.label("reviewer_id"),
    ).select_from(
        pull_requests.outerjoin(
            pr_reviewers,
            pr_reviewers.c.pull_request_id == pull_requests.c.pull_request_id,
        )
    )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands timestamps back naive; they are always stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _rows_to_pull_requests(rows) -> list[PullRequest]:
    """Fold joined (pr, reviewer) rows into PRs, keeping row order."""
    by_id: dict[str, PullRequest] = {}
    for row in rows:
        pr = by_id.get(row.pull_request_id)
        if pr is None:
            pr = PullRequest(
                pull_request_id=row.pull_request_id,
                pull_request_name=row.pull_request_name,
                author_id=row.author_id,
                status=PRStatus(row.status),
                created_at=_as_utc(row.created_at),
                merged_at=_as_utc(row.merged_at),
            )
            by_id[row.pull_request_id] = pr
        if row.reviewer_id is not None:
            pr.assigned_reviewers.append(row.reviewer_id)
    return list(by_id.values())


class PullRequestRepository(BaseRepository):

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, pr: PullRequest) -> None:
        """Insert the PR and its initial reviewers. Raises PR_EXISTS on a duplicate id."""
        with self._transaction("creating pull request") as conn:
            try:
                conn.execute(
                    insert(pull_requests).values(
                        pull_request_id=pr.pull_request_id,
                        pull_request_name=pr.pull_request_name,
                        author_id=pr.author_id,
                        status=pr.status.value,
                        created_at=pr.created_at,
                        merged_at=pr.merged_at,
                    )
                )
            except IntegrityError as exc:
                raise DomainError(ErrorCode.PR_EXISTS, "PR id already exists") from exc
            if pr.assigned_reviewers:
                conn.execute(
                    insert(pr_reviewers),
                    [
                        {"pull_request_id": pr.pull_request_id, "user_id": reviewer_id}
                        for reviewer_id in pr.assigned_reviewers
                    ],
                )

    def add_reviewer(self, pr_id: str, user_id: str) -> None:
        """Assign a reviewer; assigning an existing reviewer is a no-op."""
        with self._transaction("adding reviewer") as conn:
            insert_ignoring_conflicts(
                conn, pr_reviewers,
                [{"pull_request_id": pr_id, "user_id": user_id}], REVIEWER_KEY,
            )

    def remove_reviewer(self, pr_id: str, user_id: str) -> None:
        with self._transaction("removing reviewer") as conn:
            self._delete_reviewer(conn, pr_id, user_id)

    def replace_reviewer(self, pr_id: str, old_user_id: str, new_user_id: str) -> None:
        """
        Swap one reviewer for another as a single unit.

        The PR row is locked first so a concurrent merge or reassignment
        serialises behind this one. Raises NOT_FOUND, PR_MERGED,
        NO_CANDIDATE (replacement already assigned) or NOT_ASSIGNED, and in
        each case nothing is written.
        """
        with self._transaction("replacing reviewer") as conn:
            status = conn.execute(
                select(pull_requests.c.status)
                .where(pull_requests.c.pull_request_id == pr_id)
                .with_for_update()
            ).scalar()
            if status is None:
                raise DomainError(ErrorCode.NOT_FOUND, "pull request not found")
            if status == PRStatus.MERGED.value:
                raise DomainError(ErrorCode.PR_MERGED, "cannot reassign on merged PR")
            already_assigned = conn.execute(
                select(exists().where(
                    pr_reviewers.c.pull_request_id == pr_id,
                    pr_reviewers.c.user_id == new_user_id,
                ))
            ).scalar()
            if already_assigned:
                raise DomainError(
                    ErrorCode.NO_CANDIDATE, "replacement reviewer is already assigned"
                )
            self._delete_reviewer(conn, pr_id, old_user_id)
            conn.execute(
                insert(pr_reviewers).values(pull_request_id=pr_id, user_id=new_user_id)
            )

    def set_merged(self, pr_id: str, merged_at: datetime) -> bool:
        """
        Move an OPEN PR to MERGED. Returns False when it was already merged,
        in which case merged_at is left untouched.
        """
        with self._transaction("merging pull request") as conn:
            result = conn.execute(
                update(pull_requests)
                .where(
                    pull_requests.c.pull_request_id == pr_id,
                    pull_requests.c.status == PRStatus.OPEN.value,
                )
                .values(status=PRStatus.MERGED.value, merged_at=merged_at)
            )
            if result.rowcount:
                return True
            found = conn.execute(
                select(exists().where(pull_requests.c.pull_request_id == pr_id))
            ).scalar()
        if not found:
            raise DomainError(ErrorCode.NOT_FOUND, "pull request not found")
        return False

    # ── Read ───────────────────────────────────────────────────────────

    def get_by_id(self, pr_id: str) -> Optional[PullRequest]:
        with self._connection("fetching pull request") as conn:
            rows = conn.execute(
                _select_with_reviewers()
                .where(pull_requests.c.pull_request_id == pr_id)
                .order_by(pr_reviewers.c.user_id)
            ).fetchall()
        prs = _rows_to_pull_requests(rows)
        return prs[0] if prs else None

    def get_by_ids(self, pr_ids: list[str]) -> list[PullRequest]:
        """Newest first."""
        if not pr_ids:
            return []
        with self._connection("fetching pull requests") as conn:
            rows = conn.execute(
                _select_with_reviewers()
                .where(pull_requests.c.pull_request_id.in_(pr_ids))
                .order_by(
                    pull_requests.c.created_at.desc(),
                    pull_requests.c.pull_request_id.desc(),
                    pr_reviewers.c.user_id,
                )
            ).fetchall()
        return _rows_to_pull_requests(rows)

    def get_reviewers(self, pr_id: str) -> list[str]:
        with self._connection("fetching reviewers") as conn:
            rows = conn.execute(
                select(pr_reviewers.c.user_id)
                .where(pr_reviewers.c.pull_request_id == pr_id)
                .order_by(pr_reviewers.c.user_id)
            ).fetchall()
        return [r.user_id for r in rows]

    def get_pr_ids_by_reviewer(self, user_id: str) -> list[str]:
        with self._connection("fetching reviewer assignments") as conn:
            rows = conn.execute(
                select(pr_reviewers.c.pull_request_id)
                .where(pr_reviewers.c.user_id == user_id)
                .order_by(pr_reviewers.c.pull_request_id)
            ).fetchall()
        return [r.pull_request_id for r in rows]

    def exists(self, pr_id: str) -> bool:
        with self._connection("checking pull request existence") as conn:
            return bool(
                conn.execute(
                    select(exists().where(pull_requests.c.pull_request_id == pr_id))
                ).scalar()
            )

    # ── Private ────────────────────────────────────────────────────────

    def _delete_reviewer(self, conn: Connection, pr_id: str, user_id: str) -> None:
        result = conn.execute(
            delete(pr_reviewers).where(
                pr_reviewers.c.pull_request_id == pr_id,
                pr_reviewers.c.user_id == user_id,
            )
        )
        if result.rowcount == 0:
            raise DomainError(ErrorCode.NOT_ASSIGNED, "reviewer is not assigned to this PR")
