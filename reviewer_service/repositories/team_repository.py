# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Team data access.
Only the team name is stored; rosters live on the users table.
"""

from typing import Optional

from sqlalchemy import exists, insert, select
from sqlalchemy.exc import IntegrityError

from reviewer_service.core.database import teams
from reviewer_service.models.domain import Team
from reviewer_service.models.errors import DomainError, ErrorCode
from reviewer_service.repositories.base import BaseRepository


class TeamRepository(BaseRepository):

    def create(self, team_name: str) -> None:
        """Insert a team. Raises TEAM_EXISTS if the name is already taken."""
        with self._transaction("creating team") as conn:
            try:
                conn.execute(insert(teams).values(team_name=team_name))
            except IntegrityError as exc:
                raise DomainError(ErrorCode.TEAM_EXISTS, f"team '{team_name}' already exists") from exc

    def get_by_name(self, team_name: str) -> Optional[Team]:
        with self._connection("fetching team") as conn:
            row = conn.execute(
                select(teams.c.team_name).where(teams.c.team_name == team_name)
            ).first()
        return Team(team_name=row.team_name) if row else None

    def exists(self, team_name: str) -> bool:
        with self._connection("checking team existence") as conn:
            return bool(
                conn.execute(select(exists().where(teams.c.team_name == team_name))).scalar()
            )
