"""
Delete Team Use Case

Removes a team and everything that belongs to it, one step at a time.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class DeleteTeamUseCase:
    """
    Business Rules:
    - Only the team owner or a team admin can delete the team
    - Ordered cascade: tasks, sprints, project memberships, projects,
      notifications, bandwidth reports, audit events, team memberships, team
    - Each step is committed on its own and reported; the first failing step
      stops the cascade (TEAM_DELETE_INCOMPLETE with the partial report).
      Every step is idempotent, so deleting again resumes the cascade.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext) -> Result[dict]:
        if not (context.is_owner or context.is_admin):
            return Return.err(
                Error(
                    "INSUFFICIENT_PERMISSION",
                    "Only the team owner or a team admin can delete the team",
                )
            )

        team_id = context.team_id
        async with self.uow:
            project_ids = await self.uow.projects.list_ids_by_team(team_id)
            steps = [
                ("tasks", lambda: self.uow.tasks.delete_by_projects(project_ids)),
                ("sprints", lambda: self.uow.sprints.delete_by_projects(project_ids)),
                (
                    "project_memberships",
                    lambda: self.uow.project_memberships.delete_by_projects(project_ids),
                ),
                ("newsletters", lambda: self.uow.newsletters.delete_by_team(team_id)),
                ("projects", lambda: self.uow.projects.delete_by_team(team_id)),
                ("notifications", lambda: self.uow.notifications.delete_by_team(team_id)),
                ("bandwidth_reports", lambda: self.uow.bandwidth_reports.delete_by_team(team_id)),
                ("audit_events", lambda: self.uow.audit_events.delete_by_team(team_id)),
                ("team_memberships", lambda: self.uow.team_memberships.delete_by_team(team_id)),
                ("team", lambda: self.uow.teams.delete(team_id)),
            ]

            report = []
            for name, step in steps:
                try:
                    deleted = await step()
                    await self.uow.commit()
                except SQLAlchemyError as e:
                    await self.uow.rollback()
                    logger.error(f"Team {team_id} deletion stopped at step '{name}': {e}")
                    return Return.err(
                        Error(
                            "TEAM_DELETE_INCOMPLETE",
                            f"Team deletion stopped at step '{name}'",
                            details={"completed_steps": report, "failed_step": name},
                        )
                    )
                report.append({"step": name, "deleted": deleted})

            logger.info(f"Team {team_id} deleted by {context.user_id}")
            return Return.ok({"id": str(team_id), "deleted": True, "steps": report})
