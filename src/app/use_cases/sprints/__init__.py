"""Sprint lifecycle and task movement use cases."""

from .cancel_sprint_use_case import CancelSprintUseCase, DeleteSprintUseCase
from .complete_sprint_use_case import CompleteSprintUseCase
from .create_sprint_use_case import CreateSprintUseCase
from .dtos import (
    AddTasksToSprintCommand,
    CompleteSprintCommand,
    CreateSprintCommand,
    RetrospectiveCommand,
    UpdateSprintCommand,
)
from .list_sprints_use_case import GetSprintUseCase, ListSprintsUseCase
from .move_tasks_use_case import (
    BACKLOG_CARRY_OVER,
    BACKLOG_UNASSIGNED,
    AddTasksToSprintUseCase,
    GetBacklogUseCase,
    RemoveTaskFromSprintUseCase,
)
from .sprint_reports_use_case import GetBurndownUseCase, SubmitRetrospectiveUseCase
from .start_sprint_use_case import StartSprintUseCase
from .update_sprint_use_case import UpdateSprintUseCase

__all__ = [
    "AddTasksToSprintCommand",
    "CompleteSprintCommand",
    "CreateSprintCommand",
    "RetrospectiveCommand",
    "UpdateSprintCommand",
    "CreateSprintUseCase",
    "ListSprintsUseCase",
    "GetSprintUseCase",
    "UpdateSprintUseCase",
    "StartSprintUseCase",
    "CompleteSprintUseCase",
    "CancelSprintUseCase",
    "DeleteSprintUseCase",
    "GetBurndownUseCase",
    "SubmitRetrospectiveUseCase",
    "AddTasksToSprintUseCase",
    "RemoveTaskFromSprintUseCase",
    "GetBacklogUseCase",
    "BACKLOG_CARRY_OVER",
    "BACKLOG_UNASSIGNED",
]
