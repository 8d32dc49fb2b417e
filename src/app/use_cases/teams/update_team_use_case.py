"""
Update Team Use Case
"""

from src.app.services.audit import record_event
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain.permissions import TeamAction
from src.libs.result import Error, Result, Return

from .dtos import UpdateTeamCommand


class UpdateTeamUseCase:
    """
    Business Rules:
    - Requires MANAGE_SETTINGS
    - Settings are merged key by key into the existing settings
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, command: UpdateTeamCommand) -> Result[dict]:
        if not context.can(TeamAction.MANAGE_SETTINGS):
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "Only team admins can update the team")
            )

        async with self.uow:
            team = await self.uow.teams.get_by_id(context.team_id)
            if team is None:
                return Return.err(Error("TEAM_NOT_FOUND", "Team not found"))

            changes = command.model_dump(exclude_unset=True, exclude_none=True)
            settings = changes.pop("settings", None)
            for field_name, value in changes.items():
                setattr(team, field_name, value)
            if settings:
                # New dict so the JSON column is flagged dirty
                team.settings = {**(team.settings or {}), **settings}

            team = await self.uow.teams.update(team)
            await record_event(
                self.uow,
                team.id,
                context.user_id,
                "team_updated",
                {"fields": sorted(changes) + (["settings"] if settings else [])},
            )
            await self.uow.commit()

            return Return.ok(to_dict(team))
