from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import TeamMembership


class ITeamMembershipRepository(ABC):
    """TeamMembership repository interface - application layer"""

    @abstractmethod
    async def get(self, team_id: UUID, user_id: UUID) -> Optional[TeamMembership]:
        """Get membership regardless of status"""
        pass

    @abstractmethod
    async def get_active(self, team_id: UUID, user_id: UUID) -> Optional[TeamMembership]:
        """Get membership only when its status is active"""
        pass

    @abstractmethod
    async def list_active(self, team_id: UUID) -> List[TeamMembership]:
        """All active memberships of a team"""
        pass

    @abstractmethod
    async def list_active_by_user(self, user_id: UUID) -> List[TeamMembership]:
        """All active memberships of a user across teams"""
        pass

    @abstractmethod
    async def list_direct_reports(self, team_id: UUID, manager_id: UUID) -> List[TeamMembership]:
        """Active members whose reporting manager is manager_id"""
        pass

    @abstractmethod
    async def count_active(self, team_id: UUID) -> int:
        pass

    @abstractmethod
    async def create(self, membership: TeamMembership) -> TeamMembership:
        pass

    @abstractmethod
    async def update(self, membership: TeamMembership) -> TeamMembership:
        pass

    @abstractmethod
    async def delete(self, membership: TeamMembership) -> None:
        """Hard delete"""
        pass

    @abstractmethod
    async def delete_by_team(self, team_id: UUID) -> int:
        pass
