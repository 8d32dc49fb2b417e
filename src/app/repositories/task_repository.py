from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Task, TaskStatus


class ITaskRepository(ABC):
    """Task repository interface - application layer"""

    @abstractmethod
    async def get(self, team_id: UUID, task_id: UUID) -> Optional[Task]:
        """Get a task only if it belongs to the team"""
        pass

    @abstractmethod
    async def get_many(self, project_id: UUID, task_ids: Iterable[UUID]) -> List[Task]:
        """Tasks among task_ids that belong to the project"""
        pass

    @abstractmethod
    async def list_by_sprint(self, sprint_id: UUID) -> List[Task]:
        pass

    @abstractmethod
    async def list_by_project(
        self,
        project_id: UUID,
        status: Optional[TaskStatus] = None,
        sprint_id: Optional[UUID] = None,
        assigned_to: Optional[UUID] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Task], int]:
        pass

    @abstractmethod
    async def list_backlog(
        self,
        project_id: UUID,
        sprint_id: Optional[UUID],
        incomplete_only: bool,
        offset: int = 0,
        limit: int = 50,
        sort: str = "-priority",
    ) -> Tuple[List[Task], int]:
        """
        Tasks of a project attached to sprint_id (None = no sprint).

        sort is a field name with an optional leading "-" for descending;
        "priority" sorts by priority weight.
        """
        pass

    @abstractmethod
    async def list_by_assignees(self, team_id: UUID, user_ids: Iterable[UUID]) -> List[Task]:
        pass

    @abstractmethod
    async def list_overdue(self, cutoff: datetime) -> List[Task]:
        """Incomplete, assigned tasks due on or before cutoff, across all teams"""
        pass

    @abstractmethod
    async def detach_from_sprint(self, sprint_id: UUID) -> int:
        """Clear sprint_id on every task of the sprint"""
        pass

    @abstractmethod
    async def list_children(self, parent_task_id: UUID) -> List[Task]:
        pass

    @abstractmethod
    async def detach_children(self, parent_task_id: UUID) -> int:
        pass

    @abstractmethod
    async def create(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def update(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def delete(self, task: Task) -> None:
        pass

    @abstractmethod
    async def delete_by_projects(self, project_ids: Iterable[UUID]) -> int:
        pass
