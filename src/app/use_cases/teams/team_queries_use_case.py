"""
Team read use cases
"""

from uuid import UUID

from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain.permissions import team_permissions_for
from src.libs.result import Error, Result, Return


class ListMyTeamsUseCase:
    """Active memberships in active teams, with role, flags and member count"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[list]:
        async with self.uow:
            memberships = await self.uow.team_memberships.list_active_by_user(user_id)
            roles = {membership.team_id: membership.role for membership in memberships}
            teams = await self.uow.teams.get_by_ids(roles.keys())

            result = []
            for team in teams:
                if not team.is_active:
                    continue
                data = to_dict(team)
                data["role"] = roles[team.id].value
                data["permissions"] = team_permissions_for(roles[team.id]).to_dict()
                data["member_count"] = await self.uow.team_memberships.count_active(team.id)
                result.append(data)
            return Return.ok(result)


class GetTeamUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext) -> Result[dict]:
        async with self.uow:
            team = await self.uow.teams.get_by_id(context.team_id)
            if team is None:
                return Return.err(Error("TEAM_NOT_FOUND", "Team not found"))

            data = to_dict(team)
            data["role"] = context.role.value
            data["is_owner"] = context.is_owner
            data["permissions"] = context.permissions.to_dict()
            data["member_count"] = await self.uow.team_memberships.count_active(team.id)
            return Return.ok(data)
