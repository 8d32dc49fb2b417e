from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.project_repository import IProjectRepository
from src.domain.entities import Project


class ProjectRepository(IProjectRepository):
    """Project repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, team_id: UUID, project_id: UUID) -> Optional[Project]:
        stmt = select(Project).where(Project.id == project_id, Project.team_id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_team(self, team_id: UUID, include_archived: bool = False) -> List[Project]:
        stmt = select(Project).where(Project.team_id == team_id)
        if not include_archived:
            stmt = stmt.where(Project.is_archived == False)  # noqa: E712
        stmt = stmt.order_by(Project.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_ids_by_team(self, team_id: UUID) -> List[UUID]:
        result = await self.session.execute(select(Project.id).where(Project.team_id == team_id))
        return list(result.scalars().all())

    async def list_led_by(self, team_id: UUID, user_id: UUID) -> List[Project]:
        stmt = select(Project).where(
            Project.team_id == team_id,
            Project.team_lead_id == user_id,
            Project.is_archived == False,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_ids(self, team_id: UUID, project_ids: Iterable[UUID]) -> List[Project]:
        ids = list(project_ids)
        if not ids:
            return []
        stmt = select(Project).where(Project.team_id == team_id, Project.id.in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, project: Project) -> Project:
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def update(self, project: Project) -> Project:
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def delete(self, project_id: UUID) -> int:
        result = await self.session.execute(delete(Project).where(Project.id == project_id))
        return result.rowcount

    async def delete_by_team(self, team_id: UUID) -> int:
        result = await self.session.execute(delete(Project).where(Project.team_id == team_id))
        return result.rowcount

    async def claim_active_sprint(self, project_id: UUID, sprint_id: UUID) -> bool:
        stmt = (
            update(Project)
            .where(Project.id == project_id, Project.current_sprint_id.is_(None))
            .values(current_sprint_id=sprint_id)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_active_sprint(self, project_id: UUID, sprint_id: UUID) -> bool:
        stmt = (
            update(Project)
            .where(Project.id == project_id, Project.current_sprint_id == sprint_id)
            .values(current_sprint_id=None)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
