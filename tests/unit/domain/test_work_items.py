from datetime import datetime
from uuid import uuid4

from src.domain import work_items
from src.domain.entities import Task, TaskStatus, WorkItemType

PROJECT_ID = uuid4()


def make_task(work_item_type, project_id=PROJECT_ID, status=TaskStatus.todo):
    return Task(
        id=uuid4(),
        project_id=project_id,
        team_id=uuid4(),
        created_by=uuid4(),
        title="Item",
        work_item_type=work_item_type,
        status=status,
    )


def test_subtask_without_parent_is_rejected():
    result = work_items.validate_hierarchy(PROJECT_ID, WorkItemType.subtask, None)

    assert result.error.code == "PARENT_REQUIRED"


def test_top_level_items_need_no_parent():
    for item_type in (WorkItemType.epic, WorkItemType.story, WorkItemType.bug):
        assert work_items.validate_hierarchy(PROJECT_ID, item_type, None).is_ok()


def test_parent_must_rank_strictly_higher():
    story = make_task(WorkItemType.story)
    assert work_items.validate_hierarchy(PROJECT_ID, WorkItemType.task, story).is_ok()

    task = make_task(WorkItemType.task)
    result = work_items.validate_hierarchy(PROJECT_ID, WorkItemType.bug, task)
    assert result.error.code == "INVALID_HIERARCHY"

    result = work_items.validate_hierarchy(PROJECT_ID, WorkItemType.epic, story)
    assert result.error.code == "INVALID_HIERARCHY"


def test_parent_from_another_project_is_rejected():
    parent = make_task(WorkItemType.epic, project_id=uuid4())

    result = work_items.validate_hierarchy(PROJECT_ID, WorkItemType.story, parent)

    assert result.error.code == "INVALID_PARENT"


def test_task_cannot_be_its_own_parent():
    task = make_task(WorkItemType.story)

    result = work_items.validate_hierarchy(
        PROJECT_ID, WorkItemType.subtask, task, task_id=task.id
    )

    assert result.error.code == "INVALID_PARENT"


def test_apply_status_tracks_completed_at():
    task = make_task(WorkItemType.task)
    now = datetime(2026, 5, 1, 9, 0)

    assert work_items.apply_status(task, TaskStatus.completed, now) is True
    assert task.completed_at == now

    assert work_items.apply_status(task, TaskStatus.completed, datetime(2026, 5, 2)) is False
    assert task.completed_at == now

    assert work_items.apply_status(task, TaskStatus.review, now) is True
    assert task.completed_at is None

    assert work_items.apply_status(task, TaskStatus.inprogress, now) is False
