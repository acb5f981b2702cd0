# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Team roster reconciliation.

Adding a team that already exists syncs its membership instead of failing:
current members are kept and payload members are upserted into the team.
"""

from reviewer_service.core.logging import get_logger
from reviewer_service.metrics.prometheus import TEAM_SYNCS
from reviewer_service.models.domain import Team, TeamMember, User, UserPatch
from reviewer_service.models.errors import DomainError, ErrorCode
from reviewer_service.repositories.team_repository import TeamRepository
from reviewer_service.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class TeamService:
    """Business logic for teams and their rosters."""

    def __init__(self, team_repo: TeamRepository, user_repo: UserRepository) -> None:
        self._teams = team_repo
        self._users = user_repo

    def create_team(self, team: Team) -> Team:
        members: dict[str, TeamMember] = {}
        mode = "created"

        if self._teams.exists(team.team_name):
            mode = "synced"
        else:
            try:
                self._teams.create(team.team_name)
            except DomainError as exc:
                if exc.code is not ErrorCode.TEAM_EXISTS:
                    raise
                mode = "synced"

        if mode == "synced":
            for user in self._users.get_by_team(team.team_name):
                members[user.user_id] = TeamMember.from_user(user)

        for member in team.members:
            members[member.user_id] = self._upsert_member(team.team_name, member)

        TEAM_SYNCS.labels(mode=mode).inc()
        logger.info(
            "Team %s name=%s members=%d", mode, team.team_name, len(members),
        )
        return Team(team_name=team.team_name, members=list(members.values()))

    def get_team(self, team_name: str) -> Team:
        team = self._teams.get_by_name(team_name)
        if team is None:
            raise DomainError(ErrorCode.NOT_FOUND, "team not found")
        team.members = [TeamMember.from_user(u) for u in self._users.get_by_team(team_name)]
        return team

    # ── Internal ──

    def _upsert_member(self, team_name: str, member: TeamMember) -> TeamMember:
        """Move an existing user into the team, or create them there."""
        if not self._users.exists(member.user_id):
            user = User(
                user_id=member.user_id,
                username=member.username,
                team_name=team_name,
                is_active=member.is_active,
            )
            if self._users.create(user):
                return TeamMember.from_user(user)
            logger.info("User %s created concurrently, updating instead", member.user_id)

        user = self._users.update(
            member.user_id,
            UserPatch(
                username=member.username,
                team_name=team_name,
                is_active=member.is_active,
            ),
        )
        if user is None:
            raise DomainError(ErrorCode.NOT_FOUND, f"user '{member.user_id}' not found")
        return TeamMember.from_user(user)
