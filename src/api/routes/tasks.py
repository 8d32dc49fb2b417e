"""
Task API Routes
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tasks import (
    ChangeTaskStatusCommand,
    CreateTaskCommand,
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskUseCase,
    ListTasksUseCase,
    UpdateTaskCommand,
    UpdateTaskUseCase,
)
from src.depends import get_team_context, get_unit_of_work
from src.domain.entities import TaskStatus

router = APIRouter(prefix="/teams/{team_id}", tags=["Tasks"])


@router.post("/projects/{project_id}/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    project_id: UUID,
    request: CreateTaskCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Task

    Raises:
        - 400 Bad Request: PARENT_REQUIRED, INVALID_PARENT, INVALID_HIERARCHY,
                           ASSIGNEE_NOT_MEMBER
        - 403 Forbidden: INSUFFICIENT_PERMISSION
        - 404 Not Found: PROJECT_NOT_FOUND, PARENT_NOT_FOUND, SPRINT_NOT_FOUND
        - 409 Conflict: SPRINT_CLOSED
    """
    result = await CreateTaskUseCase(uow).execute(context, project_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/projects/{project_id}/tasks")
async def list_tasks(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    sprint_id: Optional[UUID] = Query(None),
    assigned_to: Optional[UUID] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
):
    result = await ListTasksUseCase(uow).execute(
        context, project_id, task_status, sprint_id, assigned_to, page, limit
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetTaskUseCase(uow).execute(context, task_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: UUID,
    request: UpdateTaskCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateTaskUseCase(uow).execute(context, task_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/tasks/{task_id}/status")
async def change_task_status(
    task_id: UUID,
    request: ChangeTaskStatusCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    command = UpdateTaskCommand(status=request.status)
    result = await UpdateTaskUseCase(uow).execute(context, task_id, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await DeleteTaskUseCase(uow).execute(context, task_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
