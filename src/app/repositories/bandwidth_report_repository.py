from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import BandwidthReport, BandwidthStatus


class IBandwidthReportRepository(ABC):
    """BandwidthReport repository interface - application layer"""

    @abstractmethod
    async def get(self, team_id: UUID, report_id: UUID) -> Optional[BandwidthReport]:
        pass

    @abstractmethod
    async def get_for_period(
        self, team_id: UUID, user_id: UUID, year: int, month: int
    ) -> Optional[BandwidthReport]:
        pass

    @abstractmethod
    async def list(
        self,
        team_id: UUID,
        user_ids: Optional[Iterable[UUID]] = None,
        status: Optional[BandwidthStatus] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[BandwidthReport]:
        pass

    @abstractmethod
    async def list_user_ids_for_period(self, team_id: UUID, year: int, month: int) -> List[UUID]:
        """Users of the team that already have a report for the period"""
        pass

    @abstractmethod
    async def create(self, report: BandwidthReport) -> BandwidthReport:
        pass

    @abstractmethod
    async def update(self, report: BandwidthReport) -> BandwidthReport:
        pass

    @abstractmethod
    async def delete(self, report: BandwidthReport) -> None:
        pass

    @abstractmethod
    async def delete_by_team(self, team_id: UUID) -> int:
        pass
