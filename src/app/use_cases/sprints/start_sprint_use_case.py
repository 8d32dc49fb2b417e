"""
Start Sprint Use Case

planning -> active, guarded by the project's single active-sprint slot.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import sprint_to_dict
from src.domain import sprint_lifecycle
from src.domain.entities import NotificationType, SprintStatus
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class StartSprintUseCase:
    """
    Business Rules:
    - Only planning sprints can start (SPRINT_NOT_PLANNING)
    - A project has at most one active sprint (ACTIVE_SPRINT_EXISTS); the
      slot is claimed with a conditional update so concurrent starts cannot
      both succeed
    - Metrics are recomputed and the burndown series restarts at today
    - Project members are notified
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(self, context: TeamContext, sprint_id: UUID) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.START_SPRINT
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            if sprint.status != SprintStatus.planning:
                return sprint_lifecycle.start(sprint, now)

            claimed = await self.uow.projects.claim_active_sprint(project.id, sprint.id)
            if not claimed:
                return Return.err(
                    Error(
                        "ACTIVE_SPRINT_EXISTS",
                        "Another sprint is already active in this project",
                    )
                )

            tasks = await self.uow.tasks.list_by_sprint(sprint.id)
            sprint_lifecycle.update_metrics(sprint, tasks, now)
            started = sprint_lifecycle.start(sprint, now)
            if started.is_err():
                return started
            sprint = await self.uow.sprints.update(sprint)

            notifier = Notifier(self.uow, self.bus)
            for member in await self.uow.project_memberships.list_by_project(project.id):
                await notifier.notify(
                    team_id=context.team_id,
                    recipient_id=member.user_id,
                    actor_id=context.user_id,
                    type=NotificationType.sprint_started,
                    title="Sprint started",
                    message=f'Sprint "{sprint.name}" has started in {project.name}',
                    related_project_id=project.id,
                    related_sprint_id=sprint.id,
                )

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "sprint_started",
                {"sprint_id": str(sprint.id), "project_id": str(project.id)},
            )
            await self.uow.commit()
            notifier.publish()

            logger.info(f"Sprint {sprint.id} started in project {project.id}")
            return Return.ok(sprint_to_dict(sprint, now))
