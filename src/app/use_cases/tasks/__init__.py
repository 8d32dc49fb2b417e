"""Task use cases."""

from .create_task_use_case import CreateTaskUseCase
from .dtos import ChangeTaskStatusCommand, CreateTaskCommand, UpdateTaskCommand
from .task_queries_use_case import DeleteTaskUseCase, GetTaskUseCase, ListTasksUseCase
from .update_task_use_case import UpdateTaskUseCase

__all__ = [
    "ChangeTaskStatusCommand",
    "CreateTaskCommand",
    "UpdateTaskCommand",
    "CreateTaskUseCase",
    "UpdateTaskUseCase",
    "ListTasksUseCase",
    "GetTaskUseCase",
    "DeleteTaskUseCase",
]
