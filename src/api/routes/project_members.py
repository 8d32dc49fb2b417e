"""
Project Member API Routes
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.projects import (
    AddProjectMemberCommand,
    AddProjectMemberUseCase,
    BulkAddProjectMembersCommand,
    BulkAddProjectMembersUseCase,
    GetMyProjectMembershipUseCase,
    ListProjectMembersUseCase,
    RemoveProjectMemberUseCase,
    UpdateProjectMemberCommand,
    UpdateProjectMemberUseCase,
)
from src.depends import get_team_context, get_unit_of_work

router = APIRouter(
    prefix="/teams/{team_id}/projects/{project_id}/members", tags=["Project Members"]
)


@router.get("")
async def list_project_members(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListProjectMembersUseCase(uow).execute(context, project_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/me")
async def get_my_project_membership(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetMyProjectMembershipUseCase(uow).execute(context, project_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_project_member(
    project_id: UUID,
    request: AddProjectMemberCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Add Project Member

    Raises:
        - 400 Bad Request: INVALID_ROLE, USER_NOT_IN_TEAM
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 409 Conflict: ALREADY_PROJECT_MEMBER
    """
    result = await AddProjectMemberUseCase(uow).execute(context, project_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/bulk")
async def bulk_add_project_members(
    project_id: UUID,
    request: BulkAddProjectMembersCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await BulkAddProjectMembersUseCase(uow).execute(context, project_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{user_id}")
async def update_project_member(
    project_id: UUID,
    user_id: UUID,
    request: UpdateProjectMemberCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateProjectMemberUseCase(uow).execute(context, project_id, user_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{user_id}")
async def remove_project_member(
    project_id: UUID,
    user_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await RemoveProjectMemberUseCase(uow).execute(context, project_id, user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
