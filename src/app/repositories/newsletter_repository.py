from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Newsletter


class INewsletterRepository(ABC):
    """Newsletter repository interface - application layer"""

    @abstractmethod
    async def get(self, team_id: UUID, newsletter_id: UUID) -> Optional[Newsletter]:
        pass

    @abstractmethod
    async def list_by_team(
        self,
        team_id: UUID,
        project_id: Optional[UUID] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Newsletter], int]:
        """Pinned first, then newest first; returns (page, total)"""
        pass

    @abstractmethod
    async def create(self, newsletter: Newsletter) -> Newsletter:
        pass

    @abstractmethod
    async def update(self, newsletter: Newsletter) -> Newsletter:
        pass

    @abstractmethod
    async def delete(self, newsletter: Newsletter) -> None:
        pass

    @abstractmethod
    async def detach_from_projects(self, project_ids: Iterable[UUID]) -> int:
        """Clear project_id on newsletters about the given projects"""
        pass

    @abstractmethod
    async def delete_by_team(self, team_id: UUID) -> int:
        pass
