"""
Team API Routes

Teams and team membership. Every /teams/{team_id} route resolves the
caller's membership first (see src.depends.get_team_context).
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.teams import (
    AddTeamMemberCommand,
    AddTeamMemberUseCase,
    CreateTeamCommand,
    CreateTeamUseCase,
    DeleteTeamUseCase,
    GetTeamUseCase,
    ListAvailableUsersUseCase,
    ListMyTeamsUseCase,
    ListTeamMembersUseCase,
    RemoveTeamMemberUseCase,
    UpdateTeamCommand,
    UpdateTeamMemberCommand,
    UpdateTeamMemberUseCase,
    UpdateTeamUseCase,
)
from src.depends import current_user_id, get_current_user, get_team_context, get_unit_of_work

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_team(
    request: CreateTeamCommand,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Team

    Only system administrators can create teams. The creator becomes the
    owner and an admin member.

    Raises:
        - 403 Forbidden: SYSTEM_ADMIN_REQUIRED
    """
    result = await CreateTeamUseCase(uow).execute(
        current_user_id(current_user), current_user.get("role", ""), request
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("")
async def list_my_teams(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListMyTeamsUseCase(uow).execute(current_user_id(current_user))
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{team_id}")
async def get_team(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetTeamUseCase(uow).execute(context)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{team_id}")
async def update_team(
    request: UpdateTeamCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateTeamUseCase(uow).execute(context, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{team_id}")
async def delete_team(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Team

    Runs the cascade step by step. A failing step stops it and the
    partial report is returned in error.details; calling again resumes.

    Raises:
        - 403 Forbidden: INSUFFICIENT_PERMISSION (owner or team admin only)
        - 500 Internal Server Error: TEAM_DELETE_INCOMPLETE
    """
    result = await DeleteTeamUseCase(uow).execute(context)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{team_id}/members")
async def list_team_members(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListTeamMembersUseCase(uow).execute(context)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{team_id}/available-users")
async def list_available_users(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=100),
):
    result = await ListAvailableUsersUseCase(uow).execute(context, search, limit)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{team_id}/members", status_code=status.HTTP_201_CREATED)
async def add_team_member(
    request: AddTeamMemberCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Add Team Member

    Raises:
        - 400 Bad Request: INVALID_ROLE, INVALID_REPORTING_MANAGER
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 404 Not Found: USER_NOT_FOUND
        - 409 Conflict: ALREADY_TEAM_MEMBER
    """
    result = await AddTeamMemberUseCase(uow).execute(context, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{team_id}/members/{user_id}")
async def update_team_member(
    user_id: UUID,
    request: UpdateTeamMemberCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateTeamMemberUseCase(uow).execute(context, user_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{team_id}/members/{user_id}")
async def remove_team_member(
    user_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await RemoveTeamMemberUseCase(uow).execute(context, user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
