"""
Sprint burndown and retrospective use cases
"""

from datetime import datetime
from uuid import UUID

from src.app.services.sprint_metrics import refresh_sprint_metrics
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import sprint_to_dict
from src.domain import sprint_lifecycle
from src.domain.entities import SprintStatus
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return

from .dtos import RetrospectiveCommand


class GetBurndownUseCase:
    """Actual burndown series, the ideal line and a metrics summary"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, sprint_id: UUID) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.VIEW_SPRINT
            )
            if authorized.is_err():
                return authorized

            if sprint.status == SprintStatus.active:
                sprint = await refresh_sprint_metrics(self.uow, sprint, now)
                await self.uow.commit()

            return Return.ok(
                {
                    "sprint_id": str(sprint.id),
                    "name": sprint.name,
                    "status": sprint.status.value,
                    "start_date": sprint.start_date.isoformat(),
                    "end_date": sprint.end_date.isoformat(),
                    "actual": list(sprint.burndown_data or []),
                    "ideal": sprint_lifecycle.ideal_burndown(sprint),
                    "metrics": {
                        "total_story_points": sprint.total_story_points,
                        "completed_story_points": sprint.completed_story_points,
                        "total_tasks": sprint.total_tasks,
                        "completed_tasks": sprint.completed_tasks,
                        "velocity": sprint.velocity,
                        "progress": sprint_lifecycle.progress(sprint),
                    },
                }
            )


class SubmitRetrospectiveUseCase:
    """Retrospectives are recorded on completed sprints only"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, sprint_id: UUID, command: RetrospectiveCommand
    ) -> Result[dict]:
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.MANAGE_SPRINTS
            )
            if authorized.is_err():
                return authorized

            if sprint.status != SprintStatus.completed:
                return Return.err(
                    Error(
                        "SPRINT_NOT_COMPLETED",
                        "Retrospectives can only be submitted for completed sprints",
                    )
                )

            sprint.retrospective = {
                "what_went_well": command.what_went_well,
                "what_needs_improvement": command.what_needs_improvement,
                "action_items": command.action_items,
                "completed_at": datetime.utcnow().isoformat(),
                "completed_by": str(context.user_id),
            }
            sprint = await self.uow.sprints.update(sprint)
            await self.uow.commit()

            return Return.ok(sprint_to_dict(sprint))
