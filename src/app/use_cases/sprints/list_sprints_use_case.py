"""
List / Get Sprint Use Cases
"""

from typing import Optional
from uuid import UUID

from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import pagination, sprint_to_dict, to_dict
from src.domain.entities import SprintStatus
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return


class ListSprintsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        project_id: UUID,
        status: Optional[SprintStatus] = None,
        page: int = 1,
        limit: int = 20,
        sort: str = "-start_date",
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.VIEW_SPRINT
            )
            if authorized.is_err():
                return authorized

            sprints, total = await self.uow.sprints.list_by_project(
                project_id, status=status, offset=(page - 1) * limit, limit=limit, sort=sort
            )
            return Return.ok(
                {
                    "sprints": [sprint_to_dict(sprint) for sprint in sprints],
                    "pagination": pagination(page, limit, total),
                }
            )


class GetSprintUseCase:
    """Sprint with its tasks"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, sprint_id: UUID) -> Result[dict]:
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.VIEW_SPRINT
            )
            if authorized.is_err():
                return authorized

            tasks = await self.uow.tasks.list_by_sprint(sprint.id)
            data = sprint_to_dict(sprint)
            data["tasks"] = [to_dict(task) for task in tasks]
            return Return.ok(data)
