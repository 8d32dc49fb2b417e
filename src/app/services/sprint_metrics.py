from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain import sprint_lifecycle
from src.domain.entities import Sprint


async def refresh_sprint_metrics(
    uow: UnitOfWork, sprint: Sprint, now: Optional[datetime] = None
) -> Sprint:
    """Recompute and persist sprint metrics; frozen sprints are returned as-is"""
    tasks = await uow.tasks.list_by_sprint(sprint.id)
    if sprint_lifecycle.update_metrics(sprint, tasks, now or datetime.utcnow()):
        sprint = await uow.sprints.update(sprint)
    return sprint


async def refresh_sprint_metrics_by_id(
    uow: UnitOfWork, team_id: UUID, sprint_id: Optional[UUID], now: Optional[datetime] = None
) -> Optional[Sprint]:
    if sprint_id is None:
        return None
    sprint = await uow.sprints.get(team_id, sprint_id)
    if sprint is None:
        return None
    return await refresh_sprint_metrics(uow, sprint, now)
