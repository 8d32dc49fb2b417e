"""
Newsletter Use Cases

Team-wide announcements. Members read and publish; the author, team
admins and managers edit or delete.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.newsletters.dtos import CreateNewsletterCommand, UpdateNewsletterCommand
from src.app.use_cases.serializers import pagination, to_dict, user_summary, users_by_id
from src.domain.entities import Newsletter, TeamRole
from src.libs.result import Error, Result, Return

MAX_LIMIT = 100
EDITOR_ROLES = (TeamRole.admin, TeamRole.manager)


def can_manage(context: TeamContext, newsletter: Newsletter) -> bool:
    return (
        context.is_owner
        or context.role in EDITOR_ROLES
        or newsletter.created_by == context.user_id
    )


async def _serialize_many(uow: UnitOfWork, context: TeamContext, newsletters) -> list:
    user_ids = {n.created_by for n in newsletters} | {
        n.updated_by for n in newsletters if n.updated_by
    }
    users = users_by_id(await uow.users.get_by_ids(user_ids)) if user_ids else {}
    project_ids = {n.project_id for n in newsletters if n.project_id}
    projects = (
        {p.id: p for p in await uow.projects.get_by_ids(context.team_id, project_ids)}
        if project_ids
        else {}
    )

    items = []
    for newsletter in newsletters:
        data = to_dict(newsletter)
        data["created_by_user"] = user_summary(users.get(newsletter.created_by))
        data["updated_by_user"] = user_summary(users.get(newsletter.updated_by))
        project = projects.get(newsletter.project_id)
        data["project"] = {"id": str(project.id), "name": project.name} if project else None
        data["can_edit"] = can_manage(context, newsletter)
        items.append(data)
    return items


async def _get_newsletter(
    uow: UnitOfWork, context: TeamContext, newsletter_id: UUID
) -> Result[Newsletter]:
    newsletter = await uow.newsletters.get(context.team_id, newsletter_id)
    if newsletter is None:
        return Return.err(Error("NEWSLETTER_NOT_FOUND", "Newsletter not found"))
    return Return.ok(newsletter)


async def _check_project(
    uow: UnitOfWork, context: TeamContext, project_id: UUID
) -> Optional[Error]:
    project = await uow.projects.get(context.team_id, project_id)
    if project is None:
        return Error("INVALID_PROJECT", "Project does not belong to this team")
    return None


class ListNewslettersUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        project_id: Optional[UUID] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Result[dict]:
        page = max(1, page)
        limit = max(1, min(limit, MAX_LIMIT))
        async with self.uow:
            newsletters, total = await self.uow.newsletters.list_by_team(
                context.team_id,
                project_id=project_id,
                tag=tag.strip() if tag else None,
                search=search.strip() if search else None,
                offset=(page - 1) * limit,
                limit=limit,
            )
            return Return.ok(
                {
                    "newsletters": await _serialize_many(self.uow, context, newsletters),
                    "pagination": pagination(page, limit, total),
                }
            )


class GetNewsletterUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, newsletter_id: UUID) -> Result[dict]:
        async with self.uow:
            found = await _get_newsletter(self.uow, context, newsletter_id)
            if found.is_err():
                return found
            items = await _serialize_many(self.uow, context, [found.value])
            return Return.ok(items[0])


class CreateNewsletterUseCase:
    """
    Publish a newsletter.

    Business Rules:
    - Viewers are read-only
    - project_id, when given, must be a project of the same team
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, command: CreateNewsletterCommand) -> Result[dict]:
        async with self.uow:
            if context.role == TeamRole.viewer and not context.is_owner:
                return Return.err(
                    Error("INSUFFICIENT_PERMISSION", "Viewers cannot publish newsletters")
                )

            if command.project_id is not None:
                error = await _check_project(self.uow, context, command.project_id)
                if error:
                    return Return.err(error)

            newsletter = await self.uow.newsletters.create(
                Newsletter(
                    team_id=context.team_id,
                    project_id=command.project_id,
                    title=command.title,
                    summary=command.summary,
                    content=command.content,
                    tags=command.tags,
                    is_pinned=command.is_pinned,
                    created_by=context.user_id,
                )
            )
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "newsletter_created",
                {"newsletter_id": str(newsletter.id), "title": newsletter.title},
            )
            await self.uow.commit()

            items = await _serialize_many(self.uow, context, [newsletter])
            return Return.ok(items[0])


class UpdateNewsletterUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        newsletter_id: UUID,
        command: UpdateNewsletterCommand,
        now: Optional[datetime] = None,
    ) -> Result[dict]:
        async with self.uow:
            found = await _get_newsletter(self.uow, context, newsletter_id)
            if found.is_err():
                return found
            newsletter = found.value

            if not can_manage(context, newsletter):
                return Return.err(
                    Error("INSUFFICIENT_PERMISSION", "Only the author or a team lead can edit")
                )

            changes = command.model_dump(exclude_unset=True)
            # Only project_id may be cleared
            changes = {k: v for k, v in changes.items() if v is not None or k == "project_id"}

            if changes.get("project_id") is not None:
                error = await _check_project(self.uow, context, changes["project_id"])
                if error:
                    return Return.err(error)

            for field, value in changes.items():
                setattr(newsletter, field, value)
            newsletter.updated_by = context.user_id
            newsletter.updated_at = now or datetime.utcnow()
            newsletter = await self.uow.newsletters.update(newsletter)

            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "newsletter_updated",
                {"newsletter_id": str(newsletter.id), "fields": sorted(changes)},
            )
            await self.uow.commit()

            items = await _serialize_many(self.uow, context, [newsletter])
            return Return.ok(items[0])


class DeleteNewsletterUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, newsletter_id: UUID) -> Result[dict]:
        async with self.uow:
            found = await _get_newsletter(self.uow, context, newsletter_id)
            if found.is_err():
                return found
            newsletter = found.value

            if not can_manage(context, newsletter):
                return Return.err(
                    Error("INSUFFICIENT_PERMISSION", "Only the author or a team lead can delete")
                )

            await self.uow.newsletters.delete(newsletter)
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "newsletter_deleted",
                {"newsletter_id": str(newsletter_id), "title": newsletter.title},
            )
            await self.uow.commit()
            return Return.ok({"id": str(newsletter_id), "deleted": True})
