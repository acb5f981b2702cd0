# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PRStatus(str, Enum):
    OPEN = "OPEN"
    MERGED = "MERGED"


class User(BaseModel):
    """A user; eligible to review while active."""
    user_id: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., max_length=255)
    team_name: Optional[str] = None
    is_active: bool = True


class TeamMember(BaseModel):
    """Lightweight view of a user inside a team roster."""
    user_id: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., max_length=255)
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> "TeamMember":
        return cls(user_id=user.user_id, username=user.username, is_active=user.is_active)


class Team(BaseModel):
    """A team; members are always derived from user records."""
    team_name: str = Field(..., min_length=1, max_length=255)
    members: list[TeamMember] = Field(default_factory=list)


class PullRequest(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PRStatus = PRStatus.OPEN
    assigned_reviewers: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None


class UserPatch(BaseModel):
    """
    Partial user update. Only fields explicitly passed are applied, so
    ``UserPatch(is_active=False)`` and ``UserPatch()`` differ.
    """
    username: Optional[str] = None
    team_name: Optional[str] = None
    is_active: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
