"""
Project Member Use Cases
"""

from typing import List, Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.team_context import (
    TeamContext,
    authorize_project_action,
    resolve_project_membership,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import project_member_to_dict, users_by_id
from src.domain.entities import NotificationType, Project, ProjectMembership, ProjectRole
from src.domain.permissions import ProjectAction, parse_project_role, project_permissions_for
from src.libs.result import Error, Result, Return

from .dtos import AddProjectMemberCommand, BulkAddProjectMembersCommand, UpdateProjectMemberCommand


def _invalid_role(role: str) -> Result:
    return Return.err(
        Error(
            "INVALID_ROLE",
            f"Invalid role '{role}'. Must be one of: owner, manager, contributor, viewer",
        )
    )


async def _may_grant_owner(uow: UnitOfWork, context: TeamContext, project_id: UUID) -> bool:
    """Only team admins and existing owners hand out the owner role"""
    if context.is_admin:
        return True
    membership = await resolve_project_membership(uow, project_id, context.user_id)
    return membership is not None and membership.role == ProjectRole.owner


class ListProjectMembersUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, project_id: UUID) -> Result[list]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.VIEW_PROJECT
            )
            if authorized.is_err():
                return authorized

            memberships = await self.uow.project_memberships.list_by_project(project_id)
            users = users_by_id(await self.uow.users.get_by_ids(m.user_id for m in memberships))
            return Return.ok(
                [project_member_to_dict(m, users.get(m.user_id)) for m in memberships]
            )


class GetMyProjectMembershipUseCase:
    """The actor's own role and permission flags in a project"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, project_id: UUID) -> Result[dict]:
        async with self.uow:
            project = await self.uow.projects.get(context.team_id, project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            membership = await resolve_project_membership(self.uow, project_id, context.user_id)
            if context.is_admin:
                flags = project_permissions_for(ProjectRole.owner)
            elif membership is not None:
                flags = project_permissions_for(membership.role)
            else:
                flags = project_permissions_for("")

            return Return.ok(
                {
                    "project_id": str(project_id),
                    "is_member": membership is not None,
                    "role": membership.role.value if membership else None,
                    "is_team_admin": context.is_admin,
                    "is_team_lead": project.team_lead_id == context.user_id,
                    "permissions": flags.to_dict(),
                }
            )


class AddProjectMemberUseCase:
    """
    Business Rules:
    - Requires INVITE_MEMBERS (the project's team lead always may)
    - The user must be an active team member
    - Duplicate membership is a conflict (ALREADY_PROJECT_MEMBER)
    - The new member is notified with project_added
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self, context: TeamContext, project_id: UUID, command: AddProjectMemberCommand
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.INVITE_MEMBERS
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            notifier = Notifier(self.uow, self.bus)
            added = await _add_member(self.uow, notifier, context, project, command)
            if added.is_err():
                return added

            await self.uow.commit()
            notifier.publish()

            membership = added.value
            user = await self.uow.users.get_by_id(membership.user_id)
            return Return.ok(project_member_to_dict(membership, user))


class BulkAddProjectMembersUseCase:
    """Best effort per item: {added: [...], errors: [{id, code, message}]}"""

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self, context: TeamContext, project_id: UUID, command: BulkAddProjectMembersCommand
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.INVITE_MEMBERS
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            notifier = Notifier(self.uow, self.bus)
            added: List[dict] = []
            errors: List[dict] = []
            for item in command.members:
                result = await _add_member(self.uow, notifier, context, project, item)
                if result.is_err():
                    errors.append(
                        {
                            "id": str(item.user_id),
                            "code": result.error.code,
                            "message": result.error.message,
                        }
                    )
                    continue
                added.append(project_member_to_dict(result.value))

            await self.uow.commit()
            notifier.publish()

            return Return.ok({"added": added, "errors": errors})


async def _add_member(
    uow: UnitOfWork,
    notifier: Notifier,
    context: TeamContext,
    project: Project,
    command: AddProjectMemberCommand,
) -> Result[ProjectMembership]:
    role = parse_project_role(command.role)
    if role is None:
        return _invalid_role(command.role)
    if role == ProjectRole.owner and not await _may_grant_owner(uow, context, project.id):
        return Return.err(
            Error("INSUFFICIENT_PERMISSION", "Only project owners can grant the owner role")
        )

    if await uow.team_memberships.get_active(context.team_id, command.user_id) is None:
        return Return.err(
            Error("USER_NOT_IN_TEAM", "User must be an active member of the team")
        )
    if await uow.project_memberships.get(project.id, command.user_id) is not None:
        return Return.err(
            Error("ALREADY_PROJECT_MEMBER", "User is already a member of this project")
        )

    membership = ProjectMembership(
        project_id=project.id,
        user_id=command.user_id,
        role=role,
        workload=command.workload,
        added_by=context.user_id,
    )
    membership = await uow.project_memberships.create(membership)

    await notifier.notify(
        team_id=context.team_id,
        recipient_id=command.user_id,
        actor_id=context.user_id,
        type=NotificationType.project_added,
        title="Added to project",
        message=f"You were added to {project.name} as {role.value}",
        related_project_id=project.id,
    )
    await record_event(
        uow,
        context.team_id,
        context.user_id,
        "project_member_added",
        {"project_id": str(project.id), "member_id": str(command.user_id), "role": role.value},
    )
    return Return.ok(membership)


class UpdateProjectMemberUseCase:
    """
    Business Rules:
    - Requires INVITE_MEMBERS (membership management)
    - Only owners/team admins grant the owner role
    - The last owner cannot be demoted (LAST_PROJECT_OWNER)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        project_id: UUID,
        user_id: UUID,
        command: UpdateProjectMemberCommand,
    ) -> Result[dict]:
        role = None
        if command.role is not None:
            role = parse_project_role(command.role)
            if role is None:
                return _invalid_role(command.role)

        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.INVITE_MEMBERS
            )
            if authorized.is_err():
                return authorized

            membership = await self.uow.project_memberships.get(project_id, user_id)
            if membership is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Project member not found"))

            if role is not None and role != membership.role:
                if role == ProjectRole.owner and not await _may_grant_owner(
                    self.uow, context, project_id
                ):
                    return Return.err(
                        Error(
                            "INSUFFICIENT_PERMISSION",
                            "Only project owners can grant the owner role",
                        )
                    )
                if membership.role == ProjectRole.owner:
                    if await self.uow.project_memberships.count_owners(project_id) <= 1:
                        return Return.err(
                            Error("LAST_PROJECT_OWNER", "The last project owner cannot be demoted")
                        )
                membership.role = role
            if command.workload is not None:
                membership.workload = command.workload

            membership = await self.uow.project_memberships.update(membership)
            await self.uow.commit()

            user = await self.uow.users.get_by_id(user_id)
            return Return.ok(project_member_to_dict(membership, user))


class RemoveProjectMemberUseCase:
    """The project owner cannot be removed"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, project_id: UUID, user_id: UUID) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.REMOVE_MEMBERS
            )
            if authorized.is_err():
                return authorized

            membership = await self.uow.project_memberships.get(project_id, user_id)
            if membership is None:
                return Return.err(Error("MEMBER_NOT_FOUND", "Project member not found"))
            if membership.role == ProjectRole.owner:
                return Return.err(
                    Error("CANNOT_REMOVE_OWNER", "The project owner cannot be removed")
                )

            await self.uow.project_memberships.delete(membership)
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "project_member_removed",
                {"project_id": str(project_id), "member_id": str(user_id)},
            )
            await self.uow.commit()

            return Return.ok({"user_id": str(user_id), "removed": True})
