"""
Project API Routes
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.projects import (
    ArchiveProjectUseCase,
    CreateProjectCommand,
    CreateProjectUseCase,
    DeleteProjectUseCase,
    GetProjectUseCase,
    ListProjectsUseCase,
    UpdateProjectCommand,
    UpdateProjectUseCase,
)
from src.app.use_cases.sprints import BACKLOG_CARRY_OVER, GetBacklogUseCase
from src.depends import get_team_context, get_unit_of_work

router = APIRouter(prefix="/teams/{team_id}/projects", tags=["Projects"])


class ArchiveProjectRequest(BaseModel):
    archived: bool = True


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: CreateProjectCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Project

    Raises:
        - 400 Bad Request: INVALID_TEAM_LEAD
        - 403 Forbidden: INSUFFICIENT_PERMISSION (CREATE_PROJECTS)
    """
    result = await CreateProjectUseCase(uow).execute(context, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("")
async def list_projects(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    include_archived: bool = Query(False),
):
    result = await ListProjectsUseCase(uow).execute(context, include_archived)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{project_id}")
async def get_project(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetProjectUseCase(uow).execute(context, project_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{project_id}")
async def update_project(
    project_id: UUID,
    request: UpdateProjectCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateProjectUseCase(uow).execute(context, project_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{project_id}/archive")
async def archive_project(
    project_id: UUID,
    request: ArchiveProjectRequest,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ArchiveProjectUseCase(uow).execute(context, project_id, request.archived)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{project_id}")
async def delete_project(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Project

    Removes tasks, sprints and memberships before the project itself and
    reports how many of each were deleted.

    Raises:
        - 403 Forbidden: INSUFFICIENT_PERMISSION (DELETE_PROJECT)
        - 404 Not Found: PROJECT_NOT_FOUND
    """
    result = await DeleteProjectUseCase(uow).execute(context, project_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{project_id}/backlog")
async def get_backlog(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mode: str = Query(BACKLOG_CARRY_OVER),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    sort: str = Query("-priority"),
):
    result = await GetBacklogUseCase(uow).execute(context, project_id, mode, page, limit, sort)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
