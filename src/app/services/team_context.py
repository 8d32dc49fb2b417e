"""
Membership Resolver

Resolves who the actor is inside a team once per request and answers
project-scoped permission questions against that snapshot.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Project, ProjectMembership, TeamRole
from src.domain.permissions import (
    TEAM_LEAD_ACTIONS,
    TeamPermissionFlags,
    check_project_permission,
    check_team_permission,
    team_permissions_for,
)
from src.libs.result import Error, Result, Return


@dataclass(frozen=True)
class TeamContext:
    """
    Immutable snapshot of the actor's team membership.

    Built from the database once and reused by every permission check in
    the same request, so it never goes stale when the session expires
    loaded rows.
    """

    team_id: UUID
    team_name: str
    owner_id: UUID
    user_id: UUID
    role: TeamRole
    reporting_manager_id: Optional[UUID] = None

    @property
    def is_owner(self) -> bool:
        return self.owner_id == self.user_id

    @property
    def is_admin(self) -> bool:
        return self.role == TeamRole.admin

    @property
    def permissions(self) -> TeamPermissionFlags:
        return team_permissions_for(self.role)

    def can(self, action: str) -> bool:
        return check_team_permission(self, action)


async def resolve_team_context(
    uow: UnitOfWork, team_id: UUID, user_id: UUID
) -> Result[TeamContext]:
    """Must be called inside an entered unit of work"""
    team = await uow.teams.get_by_id(team_id)
    if team is None:
        return Return.err(Error("TEAM_NOT_FOUND", "Team not found"))
    if not team.is_active:
        return Return.err(Error("TEAM_INACTIVE", "Team is inactive"))

    membership = await uow.team_memberships.get_active(team_id, user_id)
    if membership is None:
        return Return.err(Error("NOT_A_TEAM_MEMBER", "You are not a member of this team"))

    return Return.ok(
        TeamContext(
            team_id=team.id,
            team_name=team.name,
            owner_id=team.owner_id,
            user_id=user_id,
            role=TeamRole(membership.role),
            reporting_manager_id=membership.reporting_manager_id,
        )
    )


async def resolve_project_membership(
    uow: UnitOfWork, project_id: UUID, user_id: UUID
) -> Optional[ProjectMembership]:
    return await uow.project_memberships.get(project_id, user_id)


async def authorize_project_action(
    uow: UnitOfWork, context: TeamContext, project_id: UUID, action: str
) -> Result[Project]:
    """
    Load the project within the actor's team and check a project action.

    The project's team lead may always manage project membership; every
    other case goes through the permission matrix (team admins pass).
    """
    project = await uow.projects.get(context.team_id, project_id)
    if project is None:
        return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

    if action in TEAM_LEAD_ACTIONS and project.team_lead_id == context.user_id:
        return Return.ok(project)

    membership = None
    if not context.is_admin:
        membership = await resolve_project_membership(uow, project_id, context.user_id)

    if not check_project_permission(context, membership, action):
        return Return.err(
            Error("INSUFFICIENT_PERMISSION", f"You do not have permission to {action}")
        )
    return Return.ok(project)
