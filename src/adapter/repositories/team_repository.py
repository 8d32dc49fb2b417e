from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.team_repository import ITeamRepository
from src.domain.entities import Team


class TeamRepository(ITeamRepository):
    """Team repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        """Get team by ID"""
        stmt = select(Team).where(Team.id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Team]:
        stmt = select(Team).where(Team.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, team_ids: Iterable[UUID]) -> List[Team]:
        ids = list(team_ids)
        if not ids:
            return []
        stmt = select(Team).where(Team.id.in_(ids)).order_by(Team.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active(self) -> List[Team]:
        stmt = select(Team).where(Team.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, team: Team) -> Team:
        """Create a new team"""
        self.session.add(team)
        await self.session.flush()
        await self.session.refresh(team)
        return team

    async def update(self, team: Team) -> Team:
        """Update existing team"""
        self.session.add(team)
        await self.session.flush()
        await self.session.refresh(team)
        return team

    async def delete(self, team_id: UUID) -> int:
        result = await self.session.execute(delete(Team).where(Team.id == team_id))
        return result.rowcount
