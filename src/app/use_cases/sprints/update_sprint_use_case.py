"""
Update Sprint Use Case
"""

from uuid import UUID

from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import sprint_to_dict
from src.domain import sprint_lifecycle
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return

from .dtos import UpdateSprintCommand


class UpdateSprintUseCase:
    """
    Business Rules:
    - Completed sprints are read-only
    - The resulting dates must still satisfy end_date > start_date
    - Status only changes through start/complete/cancel
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, sprint_id: UUID, command: UpdateSprintCommand
    ) -> Result[dict]:
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.EDIT_SPRINT
            )
            if authorized.is_err():
                return authorized

            editable = sprint_lifecycle.ensure_editable(sprint)
            if editable.is_err():
                return editable

            changes = command.model_dump(exclude_unset=True, exclude_none=True)
            dates = sprint_lifecycle.validate_dates(
                changes.get("start_date") or sprint.start_date,
                changes.get("end_date") or sprint.end_date,
            )
            if dates.is_err():
                return dates

            for field_name, value in changes.items():
                setattr(sprint, field_name, value)
            sprint = await self.uow.sprints.update(sprint)
            await self.uow.commit()

            return Return.ok(sprint_to_dict(sprint))
