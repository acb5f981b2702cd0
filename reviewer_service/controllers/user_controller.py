# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: User activity flag, lookup, and review listing."""

from fastapi import APIRouter, Depends, Query

from reviewer_service.core.dependencies import get_pull_request_service, get_user_service
from reviewer_service.schemas.api import (
    PullRequestOut,
    SetIsActiveRequest,
    UserEnvelope,
    UserReviewsResponse,
)
from reviewer_service.services.pull_request_service import PullRequestService
from reviewer_service.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/setIsActive", response_model=UserEnvelope)
def set_is_active(
    payload: SetIsActiveRequest,
    service: UserService = Depends(get_user_service),
):
    return UserEnvelope(user=service.set_is_active(payload.user_id, payload.is_active))


@router.get("/get", response_model=UserEnvelope)
def get_user(
    user_id: str = Query(..., min_length=1),
    service: UserService = Depends(get_user_service),
):
    return UserEnvelope(user=service.get_user(user_id))


@router.get("/getReview", response_model=UserReviewsResponse)
def get_user_reviews(
    user_id: str = Query(..., min_length=1),
    service: PullRequestService = Depends(get_pull_request_service),
):
    """PRs where the user is currently assigned as a reviewer."""
    prs = service.get_user_reviews(user_id)
    return UserReviewsResponse(
        user_id=user_id,
        pull_requests=[PullRequestOut.from_domain(pr) for pr in prs],
    )
