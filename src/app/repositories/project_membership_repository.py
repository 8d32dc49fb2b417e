from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import ProjectMembership


class IProjectMembershipRepository(ABC):
    """ProjectMembership repository interface - application layer"""

    @abstractmethod
    async def get(self, project_id: UUID, user_id: UUID) -> Optional[ProjectMembership]:
        pass

    @abstractmethod
    async def list_by_project(self, project_id: UUID) -> List[ProjectMembership]:
        pass

    @abstractmethod
    async def list_project_ids_for_user(
        self, user_id: UUID, project_ids: Iterable[UUID]
    ) -> List[UUID]:
        """Subset of project_ids the user is a member of"""
        pass

    @abstractmethod
    async def count_owners(self, project_id: UUID) -> int:
        pass

    @abstractmethod
    async def create(self, membership: ProjectMembership) -> ProjectMembership:
        pass

    @abstractmethod
    async def update(self, membership: ProjectMembership) -> ProjectMembership:
        pass

    @abstractmethod
    async def delete(self, membership: ProjectMembership) -> None:
        pass

    @abstractmethod
    async def delete_by_projects(self, project_ids: Iterable[UUID]) -> int:
        pass

    @abstractmethod
    async def delete_for_user(self, user_id: UUID, project_ids: Iterable[UUID]) -> int:
        """Remove the user's memberships in the given projects"""
        pass
