from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import Project


class IProjectRepository(ABC):
    """Project repository interface - application layer"""

    @abstractmethod
    async def get(self, team_id: UUID, project_id: UUID) -> Optional[Project]:
        """Get a project only if it belongs to the team"""
        pass

    @abstractmethod
    async def list_by_team(self, team_id: UUID, include_archived: bool = False) -> List[Project]:
        pass

    @abstractmethod
    async def list_ids_by_team(self, team_id: UUID) -> List[UUID]:
        pass

    @abstractmethod
    async def list_led_by(self, team_id: UUID, user_id: UUID) -> List[Project]:
        """Non-archived projects whose team lead is user_id"""
        pass

    @abstractmethod
    async def get_by_ids(self, team_id: UUID, project_ids: Iterable[UUID]) -> List[Project]:
        pass

    @abstractmethod
    async def create(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def update(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def delete(self, project_id: UUID) -> int:
        pass

    @abstractmethod
    async def delete_by_team(self, team_id: UUID) -> int:
        pass

    @abstractmethod
    async def claim_active_sprint(self, project_id: UUID, sprint_id: UUID) -> bool:
        """
        Atomically point the project at sprint_id.

        Succeeds only while the project has no active sprint; returns False
        when another sprint already holds the slot.
        """
        pass

    @abstractmethod
    async def release_active_sprint(self, project_id: UUID, sprint_id: UUID) -> bool:
        """Clear the active-sprint pointer if it still points at sprint_id"""
        pass
