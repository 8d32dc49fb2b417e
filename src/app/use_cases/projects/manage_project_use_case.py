"""
Project Use Cases

Create, read, update, archive and delete projects.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.team_context import (
    TeamContext,
    authorize_project_action,
    resolve_project_membership,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain.entities import Project, ProjectMembership, ProjectRole, ProjectVisibility
from src.domain.permissions import (
    ProjectAction,
    ProjectPermissionFlags,
    TeamAction,
    project_permissions_for,
)
from src.libs.result import Error, Result, Return

from .dtos import CreateProjectCommand, UpdateProjectCommand

logger = logging.getLogger(__name__)

FULL_ACCESS = project_permissions_for(ProjectRole.owner)


def project_to_dict(
    project: Project, membership: Optional[ProjectMembership], context: TeamContext
) -> dict:
    data = to_dict(project)
    data["my_role"] = membership.role.value if membership else None
    if context.is_admin:
        flags = FULL_ACCESS
    elif membership is not None:
        flags = project_permissions_for(membership.role)
    else:
        flags = ProjectPermissionFlags()
    data["permissions"] = flags.to_dict()
    return data


async def _check_team_lead(uow: UnitOfWork, context: TeamContext, user_id: UUID) -> Result[None]:
    if await uow.team_memberships.get_active(context.team_id, user_id) is None:
        return Return.err(
            Error("INVALID_TEAM_LEAD", "Team lead must be an active member of the team")
        )
    return Return.ok(None)


class CreateProjectUseCase:
    """
    Business Rules:
    - Requires CREATE_PROJECTS
    - The creator becomes the project owner
    - A team lead must be an active team member
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, command: CreateProjectCommand) -> Result[dict]:
        if not context.can(TeamAction.CREATE_PROJECTS):
            return Return.err(
                Error("INSUFFICIENT_PERMISSION", "You do not have permission to create projects")
            )

        async with self.uow:
            if command.team_lead_id is not None:
                lead = await _check_team_lead(self.uow, context, command.team_lead_id)
                if lead.is_err():
                    return lead

            project = Project(
                team_id=context.team_id,
                created_by=context.user_id,
                **command.model_dump(),
            )
            project = await self.uow.projects.create(project)

            membership = ProjectMembership(
                project_id=project.id,
                user_id=context.user_id,
                role=ProjectRole.owner,
                added_by=context.user_id,
            )
            membership = await self.uow.project_memberships.create(membership)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "project_created",
                {"project_id": str(project.id), "name": project.name},
            )
            await self.uow.commit()

            return Return.ok(project_to_dict(project, membership, context))


class ListProjectsUseCase:
    """
    VIEW_ALL_PROJECTS sees every project; everybody else sees team-visible
    projects and the ones they are a member of.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, include_archived: bool = False) -> Result[list]:
        async with self.uow:
            projects = await self.uow.projects.list_by_team(context.team_id, include_archived)
            member_of = set(
                await self.uow.project_memberships.list_project_ids_for_user(
                    context.user_id, [project.id for project in projects]
                )
            )
            sees_all = context.can(TeamAction.VIEW_ALL_PROJECTS)

            result = []
            for project in projects:
                visible = (
                    sees_all
                    or project.id in member_of
                    or project.visibility == ProjectVisibility.team
                )
                if not visible:
                    continue
                membership = None
                if project.id in member_of:
                    membership = await resolve_project_membership(
                        self.uow, project.id, context.user_id
                    )
                result.append(project_to_dict(project, membership, context))
            return Return.ok(result)


class GetProjectUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, project_id: UUID) -> Result[dict]:
        async with self.uow:
            project = await self.uow.projects.get(context.team_id, project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            membership = await resolve_project_membership(self.uow, project.id, context.user_id)
            visible = (
                membership is not None
                or context.can(TeamAction.VIEW_ALL_PROJECTS)
                or project.visibility == ProjectVisibility.team
            )
            if not visible:
                return Return.err(
                    Error("INSUFFICIENT_PERMISSION", "You do not have access to this project")
                )

            data = project_to_dict(project, membership, context)
            data["member_count"] = len(
                await self.uow.project_memberships.list_by_project(project.id)
            )
            return Return.ok(data)


class UpdateProjectUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, project_id: UUID, command: UpdateProjectCommand
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.EDIT_PROJECT
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            changes = command.model_dump(exclude_unset=True)
            if changes.get("team_lead_id") is not None:
                lead = await _check_team_lead(self.uow, context, changes["team_lead_id"])
                if lead.is_err():
                    return lead

            for field_name, value in changes.items():
                if value is None and field_name not in ("team_lead_id", "description"):
                    continue
                setattr(project, field_name, value)
            project = await self.uow.projects.update(project)
            await self.uow.commit()

            membership = await resolve_project_membership(self.uow, project.id, context.user_id)
            return Return.ok(project_to_dict(project, membership, context))


class ArchiveProjectUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, project_id: UUID, archived: bool = True
    ) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.ARCHIVE_PROJECT
            )
            if authorized.is_err():
                return authorized
            project = authorized.value

            project.is_archived = archived
            project.archived_at = datetime.utcnow() if archived else None
            project.archived_by = context.user_id if archived else None
            project = await self.uow.projects.update(project)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "project_archived" if archived else "project_unarchived",
                {"project_id": str(project.id)},
            )
            await self.uow.commit()

            return Return.ok(to_dict(project))


class DeleteProjectUseCase:
    """
    Business Rules:
    - Requires DELETE_PROJECT (project owner, or team admin)
    - Ordered cascade: tasks, sprints, memberships, project
    - Newsletters about the project stay with the team, detached
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, project_id: UUID) -> Result[dict]:
        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.DELETE_PROJECT
            )
            if authorized.is_err():
                return authorized
            project = authorized.value
            name = project.name

            report = {
                "tasks": await self.uow.tasks.delete_by_projects([project.id]),
                "sprints": await self.uow.sprints.delete_by_projects([project.id]),
                "memberships": await self.uow.project_memberships.delete_by_projects(
                    [project.id]
                ),
                "newsletters_detached": await self.uow.newsletters.detach_from_projects(
                    [project.id]
                ),
                "project": await self.uow.projects.delete(project.id),
            }

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "project_deleted",
                {"project_id": str(project_id), "name": name, "deleted": report},
            )
            await self.uow.commit()

            logger.info(f"Project {project_id} deleted by {context.user_id}")
            return Return.ok({"id": str(project_id), "deleted": True, "cascade": report})
