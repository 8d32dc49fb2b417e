from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def list_for_users(
        self,
        team_id: UUID,
        user_ids: Iterable[UUID],
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[AuditEvent]:
        ids = list(user_ids)
        if not ids:
            return []

        stmt = select(AuditEvent).where(
            AuditEvent.team_id == team_id, AuditEvent.user_id.in_(ids)
        )
        if since is not None:
            stmt = stmt.where(AuditEvent.created_at >= since)
        if until is not None:
            stmt = stmt.where(AuditEvent.created_at <= until)

        # Newest first
        stmt = stmt.order_by(AuditEvent.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_users(
        self, team_id: UUID, user_ids: Iterable[UUID], since: datetime
    ) -> int:
        ids = list(user_ids)
        if not ids:
            return 0
        stmt = (
            select(func.count())
            .select_from(AuditEvent)
            .where(
                AuditEvent.team_id == team_id,
                AuditEvent.user_id.in_(ids),
                AuditEvent.created_at >= since,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def delete_by_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(AuditEvent).where(AuditEvent.team_id == team_id)
        )
        return result.rowcount
