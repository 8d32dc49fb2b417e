"""
Task read and delete use cases
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.sprint_metrics import refresh_sprint_metrics_by_id
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import pagination, to_dict
from src.domain.entities import TaskStatus, WorkItemType
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return


class ListTasksUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        project_id: UUID,
        status: Optional[TaskStatus] = None,
        sprint_id: Optional[UUID] = None,
        assigned_to: Optional[UUID] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.VIEW_PROJECT
            )
            if authorized.is_err():
                return authorized

            tasks, total = await self.uow.tasks.list_by_project(
                project_id,
                status=status,
                sprint_id=sprint_id,
                assigned_to=assigned_to,
                offset=(page - 1) * limit,
                limit=limit,
            )
            return Return.ok(
                {
                    "tasks": [to_dict(task) for task in tasks],
                    "pagination": pagination(page, limit, total),
                }
            )


class GetTaskUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, task_id: UUID) -> Result[dict]:
        async with self.uow:
            task = await self.uow.tasks.get(context.team_id, task_id)
            if task is None:
                return Return.err(Error("TASK_NOT_FOUND", "Task not found"))

            authorized = await authorize_project_action(
                self.uow, context, task.project_id, ProjectAction.VIEW_PROJECT
            )
            if authorized.is_err():
                return authorized

            return Return.ok(to_dict(task))


class DeleteTaskUseCase:
    """
    Business Rules:
    - Subtasks cannot exist without a parent, so they are deleted with it
    - Any other child is detached and stays in the project
    - Metrics are recomputed for every sprint that lost a task
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, task_id: UUID) -> Result[dict]:
        async with self.uow:
            task = await self.uow.tasks.get(context.team_id, task_id)
            if task is None:
                return Return.err(Error("TASK_NOT_FOUND", "Task not found"))

            authorized = await authorize_project_action(
                self.uow, context, task.project_id, ProjectAction.DELETE_TASK
            )
            if authorized.is_err():
                return authorized

            touched_sprints = {task.sprint_id}
            deleted_subtasks = []
            for child in await self.uow.tasks.list_children(task.id):
                if child.work_item_type == WorkItemType.subtask:
                    touched_sprints.add(child.sprint_id)
                    deleted_subtasks.append(str(child.id))
                    await self.uow.tasks.delete(child)
            detached = await self.uow.tasks.detach_children(task.id)
            await self.uow.tasks.delete(task)

            now = datetime.utcnow()
            for sprint_id in touched_sprints - {None}:
                await refresh_sprint_metrics_by_id(self.uow, context.team_id, sprint_id, now)
            await self.uow.commit()

            return Return.ok(
                {
                    "id": str(task_id),
                    "deleted": True,
                    "deleted_subtasks": deleted_subtasks,
                    "detached_children": detached,
                }
            )
