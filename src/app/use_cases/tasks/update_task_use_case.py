"""
Update Task Use Case

Covers field edits, status changes, reassignment and sprint moves.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.sprint_metrics import refresh_sprint_metrics_by_id
from src.app.services.team_context import (
    TeamContext,
    authorize_project_action,
    resolve_project_membership,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain import sprint_lifecycle, work_items
from src.domain.entities import NotificationType, Task, TaskStatus
from src.domain.permissions import ProjectAction, check_project_permission
from src.libs.result import Error, Result, Return

from .create_task_use_case import check_assignee
from .dtos import UpdateTaskCommand

NULLABLE_FIELDS = {"parent_task_id", "sprint_id", "assigned_to", "due_date", "description"}


async def authorize_task_edit(uow: UnitOfWork, context: TeamContext, task: Task) -> Result[None]:
    """EDIT_ANY_TASK, or EDIT_OWN_TASK for the task's assignee or creator"""
    membership = None
    if not context.is_admin:
        membership = await resolve_project_membership(uow, task.project_id, context.user_id)
    if check_project_permission(context, membership, ProjectAction.EDIT_ANY_TASK):
        return Return.ok(None)
    owns_task = context.user_id in (task.assigned_to, task.created_by)
    if owns_task and check_project_permission(context, membership, ProjectAction.EDIT_OWN_TASK):
        return Return.ok(None)
    return Return.err(
        Error("INSUFFICIENT_PERMISSION", "You do not have permission to edit this task")
    )


class UpdateTaskUseCase:
    """
    Business Rules:
    - Hierarchy is re-validated when the type or parent changes
    - Moving between sprints obeys the same rules as the sprint endpoints
      and recomputes both sprints
    - completed_at follows the status
    - The new assignee is notified; the creator is notified on completion
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self, context: TeamContext, task_id: UUID, command: UpdateTaskCommand
    ) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            task = await self.uow.tasks.get(context.team_id, task_id)
            if task is None:
                return Return.err(Error("TASK_NOT_FOUND", "Task not found"))

            project = await self.uow.projects.get(context.team_id, task.project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            allowed = await authorize_task_edit(self.uow, context, task)
            if allowed.is_err():
                return allowed

            changes = {
                name: value
                for name, value in command.model_dump(exclude_unset=True).items()
                if value is not None or name in NULLABLE_FIELDS
            }

            if "work_item_type" in changes or "parent_task_id" in changes:
                parent_id = changes.get("parent_task_id", task.parent_task_id)
                parent = None
                if parent_id is not None:
                    parent = await self.uow.tasks.get(context.team_id, parent_id)
                    if parent is None:
                        return Return.err(Error("PARENT_NOT_FOUND", "Parent task not found"))
                hierarchy = work_items.validate_hierarchy(
                    task.project_id,
                    changes.get("work_item_type", task.work_item_type),
                    parent,
                    task_id=task.id,
                )
                if hierarchy.is_err():
                    return hierarchy

            old_sprint_id = task.sprint_id
            if "sprint_id" in changes and changes["sprint_id"] != old_sprint_id:
                if old_sprint_id is not None:
                    old_sprint = await self.uow.sprints.get(context.team_id, old_sprint_id)
                    if old_sprint is not None:
                        releases = sprint_lifecycle.ensure_releases_tasks(old_sprint)
                        if releases.is_err():
                            return releases
                if changes["sprint_id"] is not None:
                    new_sprint = await self.uow.sprints.get(context.team_id, changes["sprint_id"])
                    if new_sprint is None or new_sprint.project_id != task.project_id:
                        return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))
                    accepts = sprint_lifecycle.ensure_accepts_tasks(new_sprint)
                    if accepts.is_err():
                        return accepts

            old_assignee = task.assigned_to
            new_assignee = changes.get("assigned_to", old_assignee)
            if new_assignee is not None and new_assignee != old_assignee:
                assignable = await check_assignee(
                    self.uow, context, task.project_id, new_assignee
                )
                if assignable.is_err():
                    return assignable
                task.assigned_by = context.user_id

            status = changes.pop("status", None)
            for field_name, value in changes.items():
                setattr(task, field_name, value)
            metrics_stale = "story_points" in changes or "sprint_id" in changes
            became_completed = False
            if status is not None:
                was_completed = TaskStatus(task.status).is_completed
                metrics_stale = work_items.apply_status(task, status, now) or metrics_stale
                became_completed = not was_completed and TaskStatus(task.status).is_completed
            task = await self.uow.tasks.update(task)

            if metrics_stale:
                for sprint_id in {old_sprint_id, task.sprint_id}:
                    await refresh_sprint_metrics_by_id(self.uow, context.team_id, sprint_id, now)

            notifier = Notifier(self.uow, self.bus)
            if new_assignee is not None and new_assignee != old_assignee:
                await notifier.notify(
                    team_id=context.team_id,
                    recipient_id=new_assignee,
                    actor_id=context.user_id,
                    type=NotificationType.task_assigned,
                    title="New task assigned",
                    message=f'You were assigned "{task.title}" in {project.name}',
                    related_task_id=task.id,
                    related_project_id=project.id,
                )
            if became_completed:
                await notifier.notify(
                    team_id=context.team_id,
                    recipient_id=task.created_by,
                    actor_id=context.user_id,
                    type=NotificationType.task_completed,
                    title="Task completed",
                    message=f'"{task.title}" was marked as completed',
                    related_task_id=task.id,
                    related_project_id=project.id,
                )

            await self.uow.commit()
            notifier.publish()

            return Return.ok(to_dict(task))
