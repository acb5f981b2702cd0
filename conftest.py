# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared fixtures. The service reads DATABASE_URL at import time, so it is
pointed at an in-memory SQLite database before anything imports it.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from reviewer_service.core.database import engine, metadata  # noqa: E402
from reviewer_service.models.domain import Team, TeamMember  # noqa: E402
from reviewer_service.repositories import (  # noqa: E402
    PullRequestRepository,
    TeamRepository,
    UserRepository,
)


@pytest.fixture(autouse=True)
def fresh_schema():
    """Drop and recreate every table before each test."""
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield


@pytest.fixture
def user_repo():
    return UserRepository(engine)


@pytest.fixture
def team_repo():
    return TeamRepository(engine)


@pytest.fixture
def pr_repo():
    return PullRequestRepository(engine)


def make_team(name: str, *members: tuple) -> Team:
    """Build a Team payload from (user_id, username, is_active) tuples."""
    return Team(
        team_name=name,
        members=[TeamMember(user_id=u, username=n, is_active=a) for u, n, a in members],
    )
