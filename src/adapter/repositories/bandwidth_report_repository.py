from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.bandwidth_report_repository import IBandwidthReportRepository
from src.domain.entities import BandwidthReport, BandwidthStatus


class BandwidthReportRepository(IBandwidthReportRepository):
    """BandwidthReport repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, team_id: UUID, report_id: UUID) -> Optional[BandwidthReport]:
        stmt = select(BandwidthReport).where(
            BandwidthReport.id == report_id, BandwidthReport.team_id == team_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_period(
        self, team_id: UUID, user_id: UUID, year: int, month: int
    ) -> Optional[BandwidthReport]:
        stmt = select(BandwidthReport).where(
            BandwidthReport.team_id == team_id,
            BandwidthReport.user_id == user_id,
            BandwidthReport.year == year,
            BandwidthReport.month == month,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(
        self,
        team_id: UUID,
        user_ids: Optional[Iterable[UUID]] = None,
        status: Optional[BandwidthStatus] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[BandwidthReport]:
        stmt = select(BandwidthReport).where(BandwidthReport.team_id == team_id)
        if user_ids is not None:
            stmt = stmt.where(BandwidthReport.user_id.in_(list(user_ids)))
        if status is not None:
            stmt = stmt.where(BandwidthReport.status == status)
        if year is not None:
            stmt = stmt.where(BandwidthReport.year == year)
        if month is not None:
            stmt = stmt.where(BandwidthReport.month == month)
        stmt = stmt.order_by(BandwidthReport.year.desc(), BandwidthReport.month.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_user_ids_for_period(self, team_id: UUID, year: int, month: int) -> List[UUID]:
        stmt = select(BandwidthReport.user_id).where(
            BandwidthReport.team_id == team_id,
            BandwidthReport.year == year,
            BandwidthReport.month == month,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, report: BandwidthReport) -> BandwidthReport:
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        return report

    async def update(self, report: BandwidthReport) -> BandwidthReport:
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        return report

    async def delete(self, report: BandwidthReport) -> None:
        await self.session.delete(report)
        await self.session.flush()

    async def delete_by_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(BandwidthReport).where(BandwidthReport.team_id == team_id)
        )
        return result.rowcount
