# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: User data access.
NO business rules here — pure CRUD.
"""

from typing import Iterable, Optional

from sqlalchemy import exists, select, update

from reviewer_service.core.database import users
from reviewer_service.models.domain import User, UserPatch
from reviewer_service.repositories.base import BaseRepository, insert_ignoring_conflicts

USER_COLS = (users.c.user_id, users.c.username, users.c.team_name, users.c.is_active)


def _row_to_user(row) -> User:
    return User(
        user_id=row.user_id,
        username=row.username,
        team_name=row.team_name,
        is_active=bool(row.is_active),
    )


class UserRepository(BaseRepository):

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, user: User) -> bool:
        """Insert a user. Returns False when the id is already taken."""
        with self._transaction("creating user") as conn:
            result = insert_ignoring_conflicts(
                conn, users,
                [{
                    "user_id": user.user_id,
                    "username": user.username,
                    "team_name": user.team_name,
                    "is_active": user.is_active,
                }],
                ["user_id"],
            )
        return result.rowcount == 1

    def update(self, user_id: str, patch: UserPatch) -> Optional[User]:
        """Apply only the fields set on the patch; None if the user is absent."""
        changes = patch.changes()
        with self._transaction("updating user") as conn:
            if changes:
                result = conn.execute(
                    update(users).where(users.c.user_id == user_id).values(**changes)
                )
                if result.rowcount == 0:
                    return None
            row = conn.execute(
                select(*USER_COLS).where(users.c.user_id == user_id)
            ).first()
        return _row_to_user(row) if row else None

    def set_is_active(self, user_id: str, is_active: bool) -> Optional[User]:
        return self.update(user_id, UserPatch(is_active=is_active))

    # ── Read ───────────────────────────────────────────────────────────

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._connection("fetching user") as conn:
            row = conn.execute(
                select(*USER_COLS).where(users.c.user_id == user_id)
            ).first()
        return _row_to_user(row) if row else None

    def get_by_team(self, team_name: str) -> list[User]:
        with self._connection("fetching team users") as conn:
            rows = conn.execute(
                select(*USER_COLS)
                .where(users.c.team_name == team_name)
                .order_by(users.c.user_id)
            ).fetchall()
        return [_row_to_user(r) for r in rows]

    def get_active_by_team_excluding(
        self, team_name: Optional[str], exclude_user_ids: Iterable[str]
    ) -> list[User]:
        if team_name is None:
            return []
        excluded = list(exclude_user_ids)
        query = (
            select(*USER_COLS)
            .where(users.c.team_name == team_name, users.c.is_active.is_(True))
            .order_by(users.c.user_id)
        )
        if excluded:
            query = query.where(users.c.user_id.not_in(excluded))
        with self._connection("fetching review candidates") as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_user(r) for r in rows]

    def exists(self, user_id: str) -> bool:
        with self._connection("checking user existence") as conn:
            return bool(
                conn.execute(select(exists().where(users.c.user_id == user_id))).scalar()
            )
