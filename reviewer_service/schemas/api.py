# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from reviewer_service.models.domain import PRStatus, PullRequest, Team, User


# ── Requests ──────────────────────────────────────────────────────────────

class SetIsActiveRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    is_active: bool


class PullRequestCreate(BaseModel):
    pull_request_id: str = Field(..., min_length=1, max_length=255)
    pull_request_name: str = Field(..., min_length=1, max_length=500)
    author_id: str = Field(..., min_length=1)


class PullRequestMerge(BaseModel):
    pull_request_id: str = Field(..., min_length=1)


class PullRequestReassign(BaseModel):
    pull_request_id: str = Field(..., min_length=1)
    old_user_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("old_user_id", "old_reviewer_id"),
    )


# ── Responses ─────────────────────────────────────────────────────────────

class PullRequestOut(BaseModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PRStatus
    assigned_reviewers: List[str]
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    merged_at: Optional[datetime] = Field(None, serialization_alias="mergedAt")

    @classmethod
    def from_domain(cls, pr: PullRequest) -> "PullRequestOut":
        return cls(**pr.model_dump())


class PullRequestEnvelope(BaseModel):
    pr: PullRequestOut


class ReassignResponse(BaseModel):
    pr: PullRequestOut
    replaced_by: str


class UserReviewsResponse(BaseModel):
    user_id: str
    pull_requests: List[PullRequestOut]


class UserEnvelope(BaseModel):
    user: User


class TeamEnvelope(BaseModel):
    team: Team


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
