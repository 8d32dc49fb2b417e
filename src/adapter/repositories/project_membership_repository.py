from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.project_membership_repository import IProjectMembershipRepository
from src.domain.entities import ProjectMembership, ProjectRole


class ProjectMembershipRepository(IProjectMembershipRepository):
    """ProjectMembership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, project_id: UUID, user_id: UUID) -> Optional[ProjectMembership]:
        stmt = select(ProjectMembership).where(
            ProjectMembership.project_id == project_id, ProjectMembership.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_project(self, project_id: UUID) -> List[ProjectMembership]:
        stmt = (
            select(ProjectMembership)
            .where(ProjectMembership.project_id == project_id)
            .order_by(ProjectMembership.added_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_project_ids_for_user(
        self, user_id: UUID, project_ids: Iterable[UUID]
    ) -> List[UUID]:
        ids = list(project_ids)
        if not ids:
            return []
        stmt = select(ProjectMembership.project_id).where(
            ProjectMembership.user_id == user_id, ProjectMembership.project_id.in_(ids)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_owners(self, project_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(ProjectMembership)
            .where(
                ProjectMembership.project_id == project_id,
                ProjectMembership.role == ProjectRole.owner,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, membership: ProjectMembership) -> ProjectMembership:
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: ProjectMembership) -> ProjectMembership:
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: ProjectMembership) -> None:
        await self.session.delete(membership)
        await self.session.flush()

    async def delete_by_projects(self, project_ids: Iterable[UUID]) -> int:
        ids = list(project_ids)
        if not ids:
            return 0
        result = await self.session.execute(
            delete(ProjectMembership).where(ProjectMembership.project_id.in_(ids))
        )
        return result.rowcount

    async def delete_for_user(self, user_id: UUID, project_ids: Iterable[UUID]) -> int:
        ids = list(project_ids)
        if not ids:
            return 0
        result = await self.session.execute(
            delete(ProjectMembership).where(
                ProjectMembership.user_id == user_id, ProjectMembership.project_id.in_(ids)
            )
        )
        return result.rowcount
