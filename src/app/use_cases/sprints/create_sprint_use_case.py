"""
Create Sprint Use Case
"""

from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import sprint_to_dict
from src.domain import sprint_lifecycle
from src.domain.entities import Sprint, SprintStatus
from src.domain.permissions import ProjectAction
from src.libs.result import Result, Return

from .dtos import CreateSprintCommand


class CreateSprintUseCase:
    """
    Business Rules:
    - Requires CREATE_SPRINT on the project
    - end_date must be after start_date
    - New sprints always start in planning
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, project_id: UUID, command: CreateSprintCommand
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.CREATE_SPRINT
            )
            if authorized.is_err():
                return authorized

            dates = sprint_lifecycle.validate_dates(command.start_date, command.end_date)
            if dates.is_err():
                return dates

            sprint = Sprint(
                project_id=project_id,
                team_id=context.team_id,
                created_by=context.user_id,
                name=command.name,
                goal=command.goal,
                start_date=command.start_date,
                end_date=command.end_date,
                capacity=command.capacity,
                status=SprintStatus.planning,
            )
            sprint = await self.uow.sprints.create(sprint)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "sprint_created",
                {"sprint_id": str(sprint.id), "project_id": str(project_id)},
            )
            await self.uow.commit()

            return Return.ok(sprint_to_dict(sprint))
