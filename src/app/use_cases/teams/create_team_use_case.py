"""
Create Team Use Case
"""

import logging
import re
import secrets
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain.entities import SystemRole, Team, TeamMembership, TeamMembershipStatus, TeamRole
from src.domain.entities.team import DEFAULT_TEAM_SETTINGS
from src.domain.permissions import team_permissions_for
from src.libs.result import Error, Result, Return

from .dtos import CreateTeamCommand

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "team"


class CreateTeamUseCase:
    """
    Business Rules:
    - Only system admins create teams
    - The creator owns the team and joins it as an active admin
    - Slugs are unique; a random suffix is added on collision
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, system_role: str, command: CreateTeamCommand
    ) -> Result[dict]:
        if str(system_role or "").strip().lower() != SystemRole.admin.value:
            return Return.err(
                Error("SYSTEM_ADMIN_REQUIRED", "Only system administrators can create teams")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            slug = slugify(command.name)
            while await self.uow.teams.get_by_slug(slug) is not None:
                slug = f"{slugify(command.name)}-{secrets.token_hex(3)}"

            settings = dict(DEFAULT_TEAM_SETTINGS)
            if command.settings is not None:
                settings.update(command.settings.model_dump(exclude_none=True))

            team = Team(
                name=command.name,
                slug=slug,
                description=command.description,
                logo=command.logo,
                owner_id=user_id,
                settings=settings,
            )
            team = await self.uow.teams.create(team)

            membership = TeamMembership(
                team_id=team.id,
                user_id=user_id,
                role=TeamRole.admin,
                status=TeamMembershipStatus.active,
            )
            await self.uow.team_memberships.create(membership)

            await record_event(self.uow, team.id, user_id, "team_created", {"name": team.name})
            await self.uow.commit()

            logger.info(f"Team {team.id} created by {user_id}")
            data = to_dict(team)
            data["role"] = TeamRole.admin.value
            data["permissions"] = team_permissions_for(TeamRole.admin).to_dict()
            return Return.ok(data)
