from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.sprint_repository import ISprintRepository
from src.domain.entities import Sprint, SprintStatus

SORTABLE_FIELDS = {
    "start_date": Sprint.start_date,
    "end_date": Sprint.end_date,
    "created_at": Sprint.created_at,
    "name": Sprint.name,
}


class SprintRepository(ISprintRepository):
    """Sprint repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, team_id: UUID, sprint_id: UUID) -> Optional[Sprint]:
        stmt = select(Sprint).where(Sprint.id == sprint_id, Sprint.team_id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_project(
        self,
        project_id: UUID,
        status: Optional[SprintStatus] = None,
        offset: int = 0,
        limit: int = 20,
        sort: str = "-start_date",
    ) -> Tuple[List[Sprint], int]:
        conditions = [Sprint.project_id == project_id]
        if status is not None:
            conditions.append(Sprint.status == status)

        count_stmt = select(func.count()).select_from(Sprint).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        column = SORTABLE_FIELDS.get(sort.lstrip("-"), Sprint.start_date)
        order = column.desc() if sort.startswith("-") else column.asc()
        stmt = select(Sprint).where(*conditions).order_by(order).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_latest_completed(self, project_id: UUID) -> Optional[Sprint]:
        stmt = (
            select(Sprint)
            .where(Sprint.project_id == project_id, Sprint.status == SprintStatus.completed)
            .order_by(Sprint.actual_end_date.desc(), Sprint.end_date.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_completed_by_team(self, team_id: UUID, limit: int = 10) -> List[Sprint]:
        stmt = (
            select(Sprint)
            .where(Sprint.team_id == team_id, Sprint.status == SprintStatus.completed)
            .order_by(Sprint.actual_end_date.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_active(self, team_id: UUID, project_ids: Optional[Iterable[UUID]] = None) -> int:
        stmt = (
            select(func.count())
            .select_from(Sprint)
            .where(Sprint.team_id == team_id, Sprint.status == SprintStatus.active)
        )
        if project_ids is not None:
            stmt = stmt.where(Sprint.project_id.in_(list(project_ids)))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, sprint: Sprint) -> Sprint:
        self.session.add(sprint)
        await self.session.flush()
        await self.session.refresh(sprint)
        return sprint

    async def update(self, sprint: Sprint) -> Sprint:
        self.session.add(sprint)
        await self.session.flush()
        await self.session.refresh(sprint)
        return sprint

    async def delete(self, sprint_id: UUID) -> int:
        result = await self.session.execute(delete(Sprint).where(Sprint.id == sprint_id))
        return result.rowcount

    async def delete_by_projects(self, project_ids: Iterable[UUID]) -> int:
        ids = list(project_ids)
        if not ids:
            return 0
        result = await self.session.execute(delete(Sprint).where(Sprint.project_id.in_(ids)))
        return result.rowcount
