# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Team add / get."""

from fastapi import APIRouter, Depends, Query

from reviewer_service.core.dependencies import get_team_service
from reviewer_service.models.domain import Team
from reviewer_service.schemas.api import TeamEnvelope
from reviewer_service.services.team_service import TeamService

router = APIRouter(prefix="/team", tags=["Teams"])


@router.post("/add", status_code=201, response_model=TeamEnvelope)
def add_team(
    payload: Team,
    service: TeamService = Depends(get_team_service),
):
    """Create a team, or sync members into an existing one."""
    return TeamEnvelope(team=service.create_team(payload))


@router.get("/get", response_model=Team)
def get_team(
    team_name: str = Query(..., min_length=1, description="Team name to query"),
    service: TeamService = Depends(get_team_service),
):
    return service.get_team(team_name)
