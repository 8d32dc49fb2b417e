from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.team_membership_repository import ITeamMembershipRepository
from src.domain.entities import TeamMembership, TeamMembershipStatus


class TeamMembershipRepository(ITeamMembershipRepository):
    """TeamMembership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, team_id: UUID, user_id: UUID) -> Optional[TeamMembership]:
        stmt = select(TeamMembership).where(
            TeamMembership.team_id == team_id, TeamMembership.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active(self, team_id: UUID, user_id: UUID) -> Optional[TeamMembership]:
        stmt = select(TeamMembership).where(
            TeamMembership.team_id == team_id,
            TeamMembership.user_id == user_id,
            TeamMembership.status == TeamMembershipStatus.active,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self, team_id: UUID) -> List[TeamMembership]:
        stmt = (
            select(TeamMembership)
            .where(
                TeamMembership.team_id == team_id,
                TeamMembership.status == TeamMembershipStatus.active,
            )
            .order_by(TeamMembership.joined_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_by_user(self, user_id: UUID) -> List[TeamMembership]:
        stmt = select(TeamMembership).where(
            TeamMembership.user_id == user_id,
            TeamMembership.status == TeamMembershipStatus.active,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_direct_reports(self, team_id: UUID, manager_id: UUID) -> List[TeamMembership]:
        stmt = select(TeamMembership).where(
            TeamMembership.team_id == team_id,
            TeamMembership.reporting_manager_id == manager_id,
            TeamMembership.status == TeamMembershipStatus.active,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_active(self, team_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(TeamMembership)
            .where(
                TeamMembership.team_id == team_id,
                TeamMembership.status == TeamMembershipStatus.active,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, membership: TeamMembership) -> TeamMembership:
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: TeamMembership) -> TeamMembership:
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: TeamMembership) -> None:
        await self.session.delete(membership)
        await self.session.flush()

    async def delete_by_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(TeamMembership).where(TeamMembership.team_id == team_id)
        )
        return result.rowcount
