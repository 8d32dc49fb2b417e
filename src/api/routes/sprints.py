"""
Sprint API Routes

Sprint lifecycle (planning -> active -> completed, or cancelled), task
movement between sprints and the backlog, burndown and retrospectives.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import ClientError, raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sprints import (
    AddTasksToSprintCommand,
    AddTasksToSprintUseCase,
    CancelSprintUseCase,
    CompleteSprintCommand,
    CompleteSprintUseCase,
    CreateSprintCommand,
    CreateSprintUseCase,
    DeleteSprintUseCase,
    GetBurndownUseCase,
    GetSprintUseCase,
    ListSprintsUseCase,
    RemoveTaskFromSprintUseCase,
    RetrospectiveCommand,
    StartSprintUseCase,
    SubmitRetrospectiveUseCase,
    UpdateSprintCommand,
    UpdateSprintUseCase,
)
from src.depends import get_team_context, get_unit_of_work
from src.domain.entities import SprintStatus
from src.libs.result import Error

router = APIRouter(prefix="/teams/{team_id}", tags=["Sprints"])

BACKLOG_TARGET = "backlog"


def _parse_target(value: Optional[str]) -> Optional[UUID]:
    if value is None or value.strip().lower() == BACKLOG_TARGET:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise ClientError(
            Error(
                "INVALID_TARGET_SPRINT",
                "move_incomplete_to must be a sprint id or 'backlog'",
            ),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


@router.post("/projects/{project_id}/sprints", status_code=status.HTTP_201_CREATED)
async def create_sprint(
    project_id: UUID,
    request: CreateSprintCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Sprint

    Raises:
        - 400 Bad Request: INVALID_SPRINT_DATES
        - 403 Forbidden: INSUFFICIENT_PERMISSION (CREATE_SPRINT)
        - 404 Not Found: PROJECT_NOT_FOUND
    """
    result = await CreateSprintUseCase(uow).execute(context, project_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/projects/{project_id}/sprints")
async def list_sprints(
    project_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    sprint_status: Optional[SprintStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort: str = Query("-start_date"),
):
    result = await ListSprintsUseCase(uow).execute(
        context, project_id, sprint_status, page, limit, sort
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/sprints/{sprint_id}")
async def get_sprint(
    sprint_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetSprintUseCase(uow).execute(context, sprint_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/sprints/{sprint_id}")
async def update_sprint(
    sprint_id: UUID,
    request: UpdateSprintCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateSprintUseCase(uow).execute(context, sprint_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/sprints/{sprint_id}")
async def delete_sprint(
    sprint_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Sprint

    Only planning and cancelled sprints can be deleted; their tasks go
    back to the backlog.

    Raises:
        - 409 Conflict: SPRINT_DELETE_FORBIDDEN
    """
    result = await DeleteSprintUseCase(uow).execute(context, sprint_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/sprints/{sprint_id}/start")
async def start_sprint(
    sprint_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Start Sprint

    Raises:
        - 409 Conflict: SPRINT_NOT_PLANNING, ACTIVE_SPRINT_EXISTS
    """
    result = await StartSprintUseCase(uow).execute(context, sprint_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/sprints/{sprint_id}/complete")
async def complete_sprint(
    sprint_id: UUID,
    request: Optional[CompleteSprintCommand] = None,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Complete Sprint

    move_incomplete_to: a planning/active sprint of the same project, or
    "backlog" (default) to leave incomplete tasks for the carry-over backlog.

    Raises:
        - 400 Bad Request: INVALID_TARGET_SPRINT
        - 409 Conflict: SPRINT_NOT_ACTIVE
    """
    target = _parse_target(request.move_incomplete_to if request else None)
    result = await CompleteSprintUseCase(uow).execute(context, sprint_id, target)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/sprints/{sprint_id}/cancel")
async def cancel_sprint(
    sprint_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await CancelSprintUseCase(uow).execute(context, sprint_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/sprints/{sprint_id}/tasks")
async def add_tasks_to_sprint(
    sprint_id: UUID,
    request: AddTasksToSprintCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await AddTasksToSprintUseCase(uow).execute(context, sprint_id, request.task_ids)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/sprints/{sprint_id}/tasks/{task_id}")
async def remove_task_from_sprint(
    sprint_id: UUID,
    task_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await RemoveTaskFromSprintUseCase(uow).execute(context, sprint_id, task_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/sprints/{sprint_id}/burndown")
async def get_burndown(
    sprint_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetBurndownUseCase(uow).execute(context, sprint_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/sprints/{sprint_id}/retrospective")
async def submit_retrospective(
    sprint_id: UUID,
    request: RetrospectiveCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await SubmitRetrospectiveUseCase(uow).execute(context, sprint_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
