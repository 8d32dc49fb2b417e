from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Sprint, SprintStatus


class ISprintRepository(ABC):
    """Sprint repository interface - application layer"""

    @abstractmethod
    async def get(self, team_id: UUID, sprint_id: UUID) -> Optional[Sprint]:
        """Get a sprint only if it belongs to the team"""
        pass

    @abstractmethod
    async def list_by_project(
        self,
        project_id: UUID,
        status: Optional[SprintStatus] = None,
        offset: int = 0,
        limit: int = 20,
        sort: str = "-start_date",
    ) -> Tuple[List[Sprint], int]:
        """Page of sprints plus the total count"""
        pass

    @abstractmethod
    async def get_latest_completed(self, project_id: UUID) -> Optional[Sprint]:
        """Most recently completed sprint of a project"""
        pass

    @abstractmethod
    async def list_completed_by_team(self, team_id: UUID, limit: int = 10) -> List[Sprint]:
        pass

    @abstractmethod
    async def count_active(self, team_id: UUID, project_ids: Optional[Iterable[UUID]] = None) -> int:
        pass

    @abstractmethod
    async def create(self, sprint: Sprint) -> Sprint:
        pass

    @abstractmethod
    async def update(self, sprint: Sprint) -> Sprint:
        pass

    @abstractmethod
    async def delete(self, sprint_id: UUID) -> int:
        pass

    @abstractmethod
    async def delete_by_projects(self, project_ids: Iterable[UUID]) -> int:
        pass
