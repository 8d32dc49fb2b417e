"""
Create Task Use Case
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.sprint_metrics import refresh_sprint_metrics
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain import sprint_lifecycle, work_items
from src.domain.entities import NotificationType, Task, TaskStatus
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return

from .dtos import CreateTaskCommand


class CreateTaskUseCase:
    """
    Business Rules:
    - Requires CREATE_TASK; assigning requires ASSIGN_TASKS and an active
      team member as assignee
    - Hierarchy is validated before anything is written
    - A sprint given at creation must belong to the project and accept tasks
    - completed_at follows the initial status
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self, context: TeamContext, project_id: UUID, command: CreateTaskCommand
    ) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.CREATE_TASK
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            parent = None
            if command.parent_task_id is not None:
                parent = await self.uow.tasks.get(context.team_id, command.parent_task_id)
                if parent is None:
                    return Return.err(Error("PARENT_NOT_FOUND", "Parent task not found"))
            hierarchy = work_items.validate_hierarchy(project_id, command.work_item_type, parent)
            if hierarchy.is_err():
                return hierarchy

            sprint = None
            if command.sprint_id is not None:
                sprint = await self.uow.sprints.get(context.team_id, command.sprint_id)
                if sprint is None or sprint.project_id != project_id:
                    return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))
                accepts = sprint_lifecycle.ensure_accepts_tasks(sprint)
                if accepts.is_err():
                    return accepts

            if command.assigned_to is not None:
                assignable = await check_assignee(
                    self.uow, context, project_id, command.assigned_to
                )
                if assignable.is_err():
                    return assignable

            task = Task(
                project_id=project_id,
                team_id=context.team_id,
                sprint_id=command.sprint_id,
                title=command.title,
                description=command.description,
                priority=command.priority,
                work_item_type=command.work_item_type,
                parent_task_id=command.parent_task_id,
                assigned_to=command.assigned_to,
                assigned_by=context.user_id if command.assigned_to else None,
                created_by=context.user_id,
                story_points=command.story_points,
                due_date=command.due_date,
                position=command.position,
            )
            work_items.apply_status(task, command.status or TaskStatus.todo, now)
            task = await self.uow.tasks.create(task)

            if sprint is not None:
                await refresh_sprint_metrics(self.uow, sprint, now)

            notifier = Notifier(self.uow, self.bus)
            if task.assigned_to is not None:
                await notifier.notify(
                    team_id=context.team_id,
                    recipient_id=task.assigned_to,
                    actor_id=context.user_id,
                    type=NotificationType.task_assigned,
                    title="New task assigned",
                    message=f'You were assigned "{task.title}" in {project.name}',
                    related_task_id=task.id,
                    related_project_id=project_id,
                )

            await self.uow.commit()
            notifier.publish()

            return Return.ok(to_dict(task))


async def check_assignee(
    uow: UnitOfWork, context: TeamContext, project_id: UUID, assignee_id: UUID
) -> Result[None]:
    """Assigning needs ASSIGN_TASKS and an assignee who is an active team member"""
    allowed = await authorize_project_action(uow, context, project_id, ProjectAction.ASSIGN_TASKS)
    if allowed.is_err():
        return allowed
    membership = await uow.team_memberships.get_active(context.team_id, assignee_id)
    if membership is None:
        return Return.err(
            Error("ASSIGNEE_NOT_MEMBER", "Assignee must be an active member of the team")
        )
    return Return.ok(None)
