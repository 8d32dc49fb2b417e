from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import Team


class ITeamRepository(ABC):
    """Team repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        """Get team by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Team]:
        pass

    @abstractmethod
    async def get_by_ids(self, team_ids: Iterable[UUID]) -> List[Team]:
        pass

    @abstractmethod
    async def list_active(self) -> List[Team]:
        pass

    @abstractmethod
    async def create(self, team: Team) -> Team:
        """Create a new team"""
        pass

    @abstractmethod
    async def update(self, team: Team) -> Team:
        """Update existing team"""
        pass

    @abstractmethod
    async def delete(self, team_id: UUID) -> int:
        """Delete the team row; returns number of rows removed"""
        pass
