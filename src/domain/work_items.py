"""
Work item hierarchy rules

epic > feature > story > task|bug > subtask. A parent must sit strictly
higher than its child, belong to the same project and not be the item
itself. Subtasks always need a parent.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return

from .entities import Task, TaskStatus, WorkItemType


def validate_hierarchy(
    project_id: UUID,
    work_item_type: WorkItemType,
    parent: Optional[Task],
    task_id: Optional[UUID] = None,
) -> Result[None]:
    """
    Check the parent link of a task being created or updated.

    parent is the already-loaded parent task, or None when no parent is
    requested. task_id is the id of the task being updated (None on create).
    """
    item_type = WorkItemType(work_item_type)

    if parent is None:
        if item_type == WorkItemType.subtask:
            return Return.err(Error("PARENT_REQUIRED", "Subtasks must have a parent task"))
        return Return.ok(None)

    if task_id is not None and parent.id == task_id:
        return Return.err(Error("INVALID_PARENT", "A task cannot be its own parent"))

    if parent.project_id != project_id:
        return Return.err(
            Error("INVALID_PARENT", "Parent task must belong to the same project")
        )

    parent_type = WorkItemType(parent.work_item_type)
    if parent_type.rank >= item_type.rank:
        return Return.err(
            Error(
                "INVALID_HIERARCHY",
                f"A {parent_type.value} cannot be the parent of a {item_type.value}",
            )
        )
    return Return.ok(None)


def apply_status(task: Task, status: TaskStatus, now: datetime) -> bool:
    """
    Set the task status and keep completed_at in sync.

    Returns True when the completed category changed, i.e. sprint metrics
    depending on this task are stale.
    """
    new_status = TaskStatus(status)
    was_completed = TaskStatus(task.status).is_completed

    task.status = new_status
    if new_status.is_completed and not was_completed:
        task.completed_at = now
    elif not new_status.is_completed:
        task.completed_at = None
    return was_completed != new_status.is_completed
