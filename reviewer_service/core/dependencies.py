# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repositories and services.
"""

from reviewer_service.core.database import engine
from reviewer_service.repositories.pull_request_repository import PullRequestRepository
from reviewer_service.repositories.team_repository import TeamRepository
from reviewer_service.repositories.user_repository import UserRepository
from reviewer_service.services.pull_request_service import PullRequestService
from reviewer_service.services.team_service import TeamService
from reviewer_service.services.user_service import UserService

# ── Singleton repository instances ──
_user_repo = UserRepository(engine)
_team_repo = TeamRepository(engine)
_pull_request_repo = PullRequestRepository(engine)

# ── Service instances (with injected dependencies) ──
_user_service = UserService(user_repo=_user_repo)
_team_service = TeamService(team_repo=_team_repo, user_repo=_user_repo)
_pull_request_service = PullRequestService(
    pr_repo=_pull_request_repo,
    user_repo=_user_repo,
)


# ── FastAPI dependency functions ──
def get_user_service() -> UserService:
    return _user_service


def get_team_service() -> TeamService:
    return _team_service


def get_pull_request_service() -> PullRequestService:
    return _pull_request_service
