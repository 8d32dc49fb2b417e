"""
Cancel / Delete Sprint Use Cases
"""

from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import sprint_to_dict
from src.domain import sprint_lifecycle
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return


class CancelSprintUseCase:
    """
    Business Rules:
    - Completed sprints cannot be cancelled (SPRINT_COMPLETED)
    - Cancelling twice is a conflict (SPRINT_ALREADY_CANCELLED)
    - Every task is detached from the sprint
    - The active-sprint slot is released if this sprint held it
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, sprint_id: UUID) -> Result[dict]:
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.MANAGE_SPRINTS
            )
            if authorized.is_err():
                return authorized

            cancelled = sprint_lifecycle.cancel(sprint)
            if cancelled.is_err():
                return cancelled

            detached = await self.uow.tasks.detach_from_sprint(sprint.id)
            sprint = await self.uow.sprints.update(sprint)
            await self.uow.projects.release_active_sprint(sprint.project_id, sprint.id)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "sprint_cancelled",
                {"sprint_id": str(sprint.id), "detached_tasks": detached},
            )
            await self.uow.commit()

            data = sprint_to_dict(sprint)
            data["detached_tasks"] = detached
            return Return.ok(data)


class DeleteSprintUseCase:
    """
    Business Rules:
    - Only planning or cancelled sprints can be deleted
      (SPRINT_DELETE_FORBIDDEN otherwise)
    - Tasks are detached, never deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, sprint_id: UUID) -> Result[dict]:
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.MANAGE_SPRINTS
            )
            if authorized.is_err():
                return authorized

            deletable = sprint_lifecycle.ensure_deletable(sprint)
            if deletable.is_err():
                return deletable

            detached = await self.uow.tasks.detach_from_sprint(sprint.id)
            await self.uow.projects.release_active_sprint(sprint.project_id, sprint.id)
            await self.uow.sprints.delete(sprint.id)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "sprint_deleted",
                {"sprint_id": str(sprint_id), "name": sprint.name},
            )
            await self.uow.commit()

            return Return.ok({"id": str(sprint_id), "deleted": True, "detached_tasks": detached})
