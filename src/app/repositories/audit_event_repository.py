from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        pass

    @abstractmethod
    async def list_for_users(
        self,
        team_id: UUID,
        user_ids: Iterable[UUID],
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[AuditEvent]:
        """Events by the given users, newest first"""
        pass

    @abstractmethod
    async def count_for_users(
        self, team_id: UUID, user_ids: Iterable[UUID], since: datetime
    ) -> int:
        pass

    @abstractmethod
    async def delete_by_team(self, team_id: UUID) -> int:
        pass
