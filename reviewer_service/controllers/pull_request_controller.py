# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Pull request create / merge / reassign endpoints.
Thin HTTP layer — delegates ALL logic to PullRequestService.
Domain errors propagate to the handlers registered in main.
"""

from fastapi import APIRouter, Depends

from reviewer_service.core.dependencies import get_pull_request_service
from reviewer_service.schemas.api import (
    PullRequestCreate,
    PullRequestEnvelope,
    PullRequestMerge,
    PullRequestOut,
    PullRequestReassign,
    ReassignResponse,
)
from reviewer_service.services.pull_request_service import PullRequestService

router = APIRouter(prefix="/pullRequest", tags=["PullRequests"])


@router.post("/create", status_code=201, response_model=PullRequestEnvelope)
def create_pull_request(
    body: PullRequestCreate,
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Create a PR and auto-assign reviewers from the author's team."""
    pr = service.create_pull_request(body.pull_request_id, body.pull_request_name, body.author_id)
    return PullRequestEnvelope(pr=PullRequestOut.from_domain(pr))


@router.post("/merge", response_model=PullRequestEnvelope)
def merge_pull_request(
    body: PullRequestMerge,
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Mark a PR as MERGED (idempotent)."""
    pr = service.merge_pull_request(body.pull_request_id)
    return PullRequestEnvelope(pr=PullRequestOut.from_domain(pr))


@router.post("/reassign", response_model=ReassignResponse)
def reassign_reviewer(
    body: PullRequestReassign,
    service: PullRequestService = Depends(get_pull_request_service),
):
    """Replace one reviewer with another active member of their team."""
    pr, replaced_by = service.reassign_reviewer(body.pull_request_id, body.old_user_id)
    return ReassignResponse(pr=PullRequestOut.from_domain(pr), replaced_by=replaced_by)
