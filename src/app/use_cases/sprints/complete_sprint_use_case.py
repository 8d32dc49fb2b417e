"""
Complete Sprint Use Case

active -> completed, optionally carrying incomplete tasks into another sprint.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.sprint_metrics import refresh_sprint_metrics
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import sprint_to_dict
from src.domain import sprint_lifecycle
from src.domain.entities import NotificationType, SprintStatus, TaskStatus
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

BACKLOG = "backlog"


class CompleteSprintUseCase:
    """
    Business Rules:
    - Only active sprints can be completed (SPRINT_NOT_ACTIVE)
    - Final metrics are recomputed, velocity = completed story points and a
      closing burndown point is appended
    - The project's active-sprint slot is released
    - move_incomplete_to: None/"backlog" keeps incomplete tasks attached to
      this sprint (they surface in the carry-over backlog); a sprint id moves
      them to that planning/active sprint of the same project
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self,
        context: TeamContext,
        sprint_id: UUID,
        move_incomplete_to: Optional[UUID] = None,
    ) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.COMPLETE_SPRINT
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            if sprint.status != SprintStatus.active:
                return sprint_lifecycle.complete(sprint, now)

            target = None
            if move_incomplete_to is not None:
                target = await self.uow.sprints.get(context.team_id, move_incomplete_to)
                if (
                    target is None
                    or target.id == sprint.id
                    or target.project_id != sprint.project_id
                    or target.status not in sprint_lifecycle.RECOMPUTABLE_STATUSES
                ):
                    return Return.err(
                        Error(
                            "INVALID_TARGET_SPRINT",
                            "Target sprint must be a planning or active sprint of the same project",
                        )
                    )

            tasks = await self.uow.tasks.list_by_sprint(sprint.id)
            sprint_lifecycle.update_metrics(sprint, tasks, now)
            completed = sprint_lifecycle.complete(sprint, now)
            if completed.is_err():
                return completed
            sprint = await self.uow.sprints.update(sprint)
            await self.uow.projects.release_active_sprint(project.id, sprint.id)

            moved = 0
            if target is not None:
                for task in tasks:
                    if not TaskStatus(task.status).is_completed:
                        task.sprint_id = target.id
                        await self.uow.tasks.update(task)
                        moved += 1
                target = await refresh_sprint_metrics(self.uow, target, now)

            notifier = Notifier(self.uow, self.bus)
            for member in await self.uow.project_memberships.list_by_project(project.id):
                await notifier.notify(
                    team_id=context.team_id,
                    recipient_id=member.user_id,
                    actor_id=context.user_id,
                    type=NotificationType.sprint_completed,
                    title="Sprint completed",
                    message=(
                        f'Sprint "{sprint.name}" completed with velocity {sprint.velocity}'
                    ),
                    related_project_id=project.id,
                    related_sprint_id=sprint.id,
                )

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "sprint_completed",
                {
                    "sprint_id": str(sprint.id),
                    "velocity": sprint.velocity,
                    "moved_tasks": moved,
                    "moved_to": str(target.id) if target else BACKLOG,
                },
            )
            await self.uow.commit()
            notifier.publish()

            logger.info(f"Sprint {sprint.id} completed, {moved} incomplete tasks moved")
            return Return.ok(
                {
                    "sprint": sprint_to_dict(sprint, now),
                    "moved_tasks": moved,
                    "target_sprint": sprint_to_dict(target, now) if target else None,
                }
            )
