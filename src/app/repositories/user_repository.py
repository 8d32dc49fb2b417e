from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_ids(self, user_ids: Iterable[UUID]) -> List[User]:
        pass

    @abstractmethod
    async def list_excluding(
        self, excluded_ids: Iterable[UUID], search: Optional[str] = None, limit: int = 50
    ) -> List[User]:
        """Users whose id is not in excluded_ids, optionally filtered by name/email"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass
