"""
Team Member Use Cases

Listing, adding, updating and removing team members.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.security_logger import PRIVILEGE_ESCALATION_ATTEMPT, log_security_event
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import team_member_to_dict, user_summary, users_by_id
from src.domain.entities import NotificationType, TeamMembership, TeamMembershipStatus, TeamRole
from src.domain.permissions import TeamAction, parse_team_role
from src.libs.result import Error, Result, Return

from .dtos import AddTeamMemberCommand, UpdateTeamMemberCommand

logger = logging.getLogger(__name__)


def _invalid_role(role: str) -> Result:
    return Return.err(
        Error(
            "INVALID_ROLE",
            f"Invalid role '{role}'. Must be one of: admin, manager, member, viewer",
        )
    )


class ListTeamMembersUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext) -> Result[list]:
        async with self.uow:
            memberships = await self.uow.team_memberships.list_active(context.team_id)
            users = users_by_id(
                await self.uow.users.get_by_ids(m.user_id for m in memberships)
            )
            return Return.ok(
                [team_member_to_dict(m, users.get(m.user_id)) for m in memberships]
            )


class ListAvailableUsersUseCase:
    """Users that could be added: everyone without an active membership"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, search: Optional[str] = None, limit: int = 50
    ) -> Result[list]:
        async with self.uow:
            memberships = await self.uow.team_memberships.list_active(context.team_id)
            users = await self.uow.users.list_excluding(
                [m.user_id for m in memberships], search=search, limit=limit
            )
            return Return.ok([user_summary(user) for user in users])


class AddTeamMemberUseCase:
    """
    Business Rules:
    - Requires INVITE_MEMBERS
    - Managers cannot grant the admin role
    - A second active membership is a conflict (ALREADY_TEAM_MEMBER); an
      invited or suspended membership is reactivated instead
    - The reporting manager must be an active member
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(self, context: TeamContext, command: AddTeamMemberCommand) -> Result[dict]:
        if not context.can(TeamAction.INVITE_MEMBERS):
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "You do not have permission to add members")
            )

        role = parse_team_role(command.role)
        if role is None:
            return _invalid_role(command.role)
        if role == TeamRole.admin and not context.is_admin:
            log_security_event(
                PRIVILEGE_ESCALATION_ATTEMPT,
                user_id=str(context.user_id),
                team_id=str(context.team_id),
                attempted_role=role.value,
            )
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "Only team admins can grant the admin role")
            )

        async with self.uow:
            if command.user_id is not None:
                user = await self.uow.users.get_by_id(command.user_id)
            else:
                user = await self.uow.users.get_by_email(command.email)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if command.reporting_manager_id is not None:
                manager = await self.uow.team_memberships.get_active(
                    context.team_id, command.reporting_manager_id
                )
                if manager is None or command.reporting_manager_id == user.id:
                    return Return.err(
                        Error(
                            "INVALID_REPORTING_MANAGER",
                            "Reporting manager must be another active team member",
                        )
                    )

            membership = await self.uow.team_memberships.get(context.team_id, user.id)
            if membership is not None and membership.status == TeamMembershipStatus.active:
                return Return.err(
                    Error("ALREADY_TEAM_MEMBER", "User is already a member of this team")
                )

            if membership is None:
                membership = TeamMembership(
                    team_id=context.team_id,
                    user_id=user.id,
                    role=role,
                    status=TeamMembershipStatus.active,
                    reporting_manager_id=command.reporting_manager_id,
                    custom_title=command.custom_title,
                    invited_by=context.user_id,
                )
                membership = await self.uow.team_memberships.create(membership)
            else:
                membership.role = role
                membership.status = TeamMembershipStatus.active
                membership.reporting_manager_id = command.reporting_manager_id
                membership.custom_title = command.custom_title
                membership.invited_by = context.user_id
                membership = await self.uow.team_memberships.update(membership)

            notifier = Notifier(self.uow, self.bus)
            await notifier.notify(
                team_id=context.team_id,
                recipient_id=user.id,
                actor_id=context.user_id,
                type=NotificationType.team_invite,
                title="Added to team",
                message=f"You were added to {context.team_name} as {role.value}",
            )
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "member_added",
                {"member_id": str(user.id), "role": role.value},
            )
            await self.uow.commit()
            notifier.publish()

            return Return.ok(team_member_to_dict(membership, user))


class UpdateTeamMemberUseCase:
    """
    Business Rules:
    - Team admins only
    - Only the owner may change the owner's membership
    - A member cannot report to themselves
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self, context: TeamContext, user_id: UUID, command: UpdateTeamMemberCommand
    ) -> Result[dict]:
        if not context.is_admin:
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "Only team admins can update members")
            )
        if user_id == context.owner_id and not context.is_owner:
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "Only the team owner can change the owner")
            )

        role = None
        if command.role is not None:
            role = parse_team_role(command.role)
            if role is None:
                return _invalid_role(command.role)

        async with self.uow:
            membership = await self.uow.team_memberships.get_active(context.team_id, user_id)
            if membership is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Team member not found"))

            changes = command.model_dump(exclude_unset=True)
            if "reporting_manager_id" in changes and command.reporting_manager_id is not None:
                manager = await self.uow.team_memberships.get_active(
                    context.team_id, command.reporting_manager_id
                )
                if manager is None or command.reporting_manager_id == user_id:
                    return Return.err(
                        Error(
                            "INVALID_REPORTING_MANAGER",
                            "Reporting manager must be another active team member",
                        )
                    )
                membership.reporting_manager_id = command.reporting_manager_id
            elif "reporting_manager_id" in changes:
                membership.reporting_manager_id = None
            if "custom_title" in changes:
                membership.custom_title = command.custom_title

            old_role = membership.role
            if role is not None:
                membership.role = role
            membership = await self.uow.team_memberships.update(membership)

            notifier = Notifier(self.uow, self.bus)
            if role is not None and role != old_role:
                await notifier.notify(
                    team_id=context.team_id,
                    recipient_id=user_id,
                    actor_id=context.user_id,
                    type=NotificationType.role_changed,
                    title="Role changed",
                    message=f"Your role in {context.team_name} is now {role.value}",
                )
                await record_event(
                    self.uow,
                    context.team_id,
                    context.user_id,
                    "member_role_changed",
                    {"member_id": str(user_id), "old_role": old_role.value, "new_role": role.value},
                )
            await self.uow.commit()
            notifier.publish()

            user = await self.uow.users.get_by_id(user_id)
            return Return.ok(team_member_to_dict(membership, user))


class RemoveTeamMemberUseCase:
    """
    Business Rules:
    - Requires REMOVE_MEMBERS
    - The team owner cannot be removed
    - Hard delete, together with the user's project memberships in the team
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, user_id: UUID) -> Result[dict]:
        if not context.can(TeamAction.REMOVE_MEMBERS):
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "You do not have permission to remove members")
            )
        if user_id == context.owner_id:
            return Return.err(Error("CANNOT_REMOVE_OWNER", "The team owner cannot be removed"))

        async with self.uow:
            membership = await self.uow.team_memberships.get(context.team_id, user_id)
            if membership is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Team member not found"))

            project_ids = await self.uow.projects.list_ids_by_team(context.team_id)
            removed_projects = await self.uow.project_memberships.delete_for_user(
                user_id, project_ids
            )
            removed_role = membership.role.value
            await self.uow.team_memberships.delete(membership)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "member_removed",
                {
                    "member_id": str(user_id),
                    "role": removed_role,
                    "project_memberships_removed": removed_projects,
                },
            )
            await self.uow.commit()

            logger.info(f"User {user_id} removed from team {context.team_id}")
            return Return.ok(
                {
                    "user_id": str(user_id),
                    "removed": True,
                    "project_memberships_removed": removed_projects,
                }
            )
