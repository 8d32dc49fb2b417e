from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.task_repository import ITaskRepository
from src.domain.entities import Task, TaskPriority, TaskStatus
from src.domain.entities.enums import COMPLETED_TASK_STATUSES, PRIORITY_WEIGHTS

PRIORITY_ORDER = case(
    *[(Task.priority == priority, weight) for priority, weight in PRIORITY_WEIGHTS.items()],
    else_=0,
)

SORTABLE_FIELDS = {
    "priority": PRIORITY_ORDER,
    "created_at": Task.created_at,
    "due_date": Task.due_date,
    "position": Task.position,
    "story_points": Task.story_points,
    "title": Task.title,
}


def _ordering(sort: str):
    column = SORTABLE_FIELDS.get(sort.lstrip("-"), PRIORITY_ORDER)
    return column.desc() if sort.startswith("-") else column.asc()


class TaskRepository(ITaskRepository):
    """Task repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, team_id: UUID, task_id: UUID) -> Optional[Task]:
        stmt = select(Task).where(Task.id == task_id, Task.team_id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, project_id: UUID, task_ids: Iterable[UUID]) -> List[Task]:
        ids = list(task_ids)
        if not ids:
            return []
        stmt = select(Task).where(Task.project_id == project_id, Task.id.in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_sprint(self, sprint_id: UUID) -> List[Task]:
        stmt = select(Task).where(Task.sprint_id == sprint_id).order_by(Task.position)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_project(
        self,
        project_id: UUID,
        status: Optional[TaskStatus] = None,
        sprint_id: Optional[UUID] = None,
        assigned_to: Optional[UUID] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Task], int]:
        conditions = [Task.project_id == project_id]
        if status is not None:
            conditions.append(Task.status == status)
        if sprint_id is not None:
            conditions.append(Task.sprint_id == sprint_id)
        if assigned_to is not None:
            conditions.append(Task.assigned_to == assigned_to)

        count_stmt = select(func.count()).select_from(Task).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Task)
            .where(*conditions)
            .order_by(Task.position, Task.created_at)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_backlog(
        self,
        project_id: UUID,
        sprint_id: Optional[UUID],
        incomplete_only: bool,
        offset: int = 0,
        limit: int = 50,
        sort: str = "-priority",
    ) -> Tuple[List[Task], int]:
        conditions = [Task.project_id == project_id]
        if sprint_id is None:
            conditions.append(Task.sprint_id.is_(None))
        else:
            conditions.append(Task.sprint_id == sprint_id)
        if incomplete_only:
            conditions.append(Task.status.not_in(list(COMPLETED_TASK_STATUSES)))

        count_stmt = select(func.count()).select_from(Task).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Task)
            .where(*conditions)
            .order_by(_ordering(sort), Task.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_by_assignees(self, team_id: UUID, user_ids: Iterable[UUID]) -> List[Task]:
        ids = list(user_ids)
        if not ids:
            return []
        stmt = select(Task).where(Task.team_id == team_id, Task.assigned_to.in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_overdue(self, cutoff: datetime) -> List[Task]:
        stmt = select(Task).where(
            Task.assigned_to.is_not(None),
            Task.due_date.is_not(None),
            Task.due_date <= cutoff,
            Task.status.not_in(list(COMPLETED_TASK_STATUSES)),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def detach_from_sprint(self, sprint_id: UUID) -> int:
        result = await self.session.execute(
            update(Task).where(Task.sprint_id == sprint_id).values(sprint_id=None)
        )
        return result.rowcount

    async def list_children(self, parent_task_id: UUID) -> List[Task]:
        stmt = select(Task).where(Task.parent_task_id == parent_task_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def detach_children(self, parent_task_id: UUID) -> int:
        result = await self.session.execute(
            update(Task).where(Task.parent_task_id == parent_task_id).values(parent_task_id=None)
        )
        return result.rowcount

    async def create(self, task: Task) -> Task:
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def update(self, task: Task) -> Task:
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def delete(self, task: Task) -> None:
        await self.session.delete(task)
        await self.session.flush()

    async def delete_by_projects(self, project_ids: Iterable[UUID]) -> int:
        ids = list(project_ids)
        if not ids:
            return 0
        result = await self.session.execute(delete(Task).where(Task.project_id.in_(ids)))
        return result.rowcount
