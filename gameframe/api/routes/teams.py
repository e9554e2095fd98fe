"""
Teams API routes.
"""
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, Response, status

from gameframe.api.deps import (
    get_coached_team,
    get_current_user_id,
    get_member_team,
    get_roster_workflow,
    http_error,
)
from gameframe.schemas import JoinTeamRequest, Team, TeamCreate, TeamUpdate
from gameframe.services import TeamRosterWorkflow

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.get("/", response_model=List[Team])
async def list_teams(
    user_id: str = Depends(get_current_user_id),
    workflow: TeamRosterWorkflow = Depends(get_roster_workflow),
):
    """
    List the teams the current user coaches or plays in.
    """
    try:
        return await workflow.load_all_teams(user_id)
    except Exception as e:
        raise http_error(e)


@router.post("/", response_model=Team, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_data: TeamCreate,
    user_id: str = Depends(get_current_user_id),
    workflow: TeamRosterWorkflow = Depends(get_roster_workflow),
):
    """
    Create a new team coached by the current user.
    """
    try:
        return await workflow.create_team(user_id, team_data)
    except Exception as e:
        raise http_error(e)


@router.post("/join", response_model=Team)
async def join_team(
    request: JoinTeamRequest,
    user_id: str = Depends(get_current_user_id),
    workflow: TeamRosterWorkflow = Depends(get_roster_workflow),
):
    """
    Join a team with its access code.
    """
    try:
        return await workflow.join_team_with_access_code(request.access_code, user_id)
    except Exception as e:
        raise http_error(e)


@router.get("/{team_doc_id}", response_model=Team)
async def get_team(team: Team = Depends(get_member_team)):
    """
    Get a team the current user coaches or plays in.
    """
    return team


@router.patch("/{team_doc_id}", response_model=Team)
async def update_team(
    team_data: TeamUpdate,
    team: Team = Depends(get_coached_team),
    workflow: TeamRosterWorkflow = Depends(get_roster_workflow),
):
    """
    Update a team's settings. Only provided fields change.
    """
    try:
        return await workflow.update_team_settings(
            team.id,
            name=team_data.name,
            nickname=team_data.team_nickname,
            age_grp=team_data.age_grp,
            gender=team_data.gender,
        )
    except Exception as e:
        raise http_error(e)


@router.delete("/{team_doc_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(
    background_tasks: BackgroundTasks,
    team: Team = Depends(get_coached_team),
    workflow: TeamRosterWorkflow = Depends(get_roster_workflow),
):
    """
    Delete a team with its games and unlink its coaches, players and invites.

    Audio files are removed in the background once the response is sent.
    """
    try:
        await workflow.delete_team(team.id, background_tasks)
    except Exception as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
