from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent


async def record_event(
    uow: UnitOfWork,
    team_id: UUID,
    user_id: Optional[UUID],
    action: str,
    metadata: Optional[dict] = None,
) -> AuditEvent:
    """Append an audit event to the current transaction"""
    event = AuditEvent(
        team_id=team_id, user_id=user_id, action=action, event_metadata=metadata or {}
    )
    return await uow.audit_events.create(event)
