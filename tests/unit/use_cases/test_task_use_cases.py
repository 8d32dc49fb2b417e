from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.use_cases.tasks import (
    CreateTaskCommand,
    CreateTaskUseCase,
    DeleteTaskUseCase,
    UpdateTaskCommand,
    UpdateTaskUseCase,
)
from src.domain.entities import (
    Project,
    ProjectMembership,
    ProjectRole,
    Sprint,
    Task,
    TaskStatus,
    TeamMembership,
    TeamRole,
    WorkItemType,
)


def _echo(entity, *args, **kwargs):
    return entity


@pytest.fixture
def contributor(make_context):
    return make_context(TeamRole.member)


@pytest.fixture
def project(contributor):
    return Project(id=uuid4(), team_id=contributor.team_id, name="Web", created_by=uuid4())


@pytest.fixture
def task_uow(mock_uow, contributor, project):
    mock_uow.projects = MagicMock()
    mock_uow.projects.get = AsyncMock(return_value=project)

    mock_uow.project_memberships = MagicMock()
    mock_uow.project_memberships.get = AsyncMock(
        return_value=ProjectMembership(
            project_id=project.id, user_id=contributor.user_id, role=ProjectRole.contributor
        )
    )

    mock_uow.team_memberships = MagicMock()
    mock_uow.team_memberships.get_active = AsyncMock(return_value=None)

    mock_uow.tasks = MagicMock()
    mock_uow.tasks.get = AsyncMock()
    mock_uow.tasks.create = AsyncMock(side_effect=_echo)
    mock_uow.tasks.update = AsyncMock(side_effect=_echo)
    mock_uow.tasks.list_by_sprint = AsyncMock(return_value=[])

    mock_uow.sprints = MagicMock()
    mock_uow.sprints.get = AsyncMock(return_value=None)
    return mock_uow


def _task(project, **fields):
    defaults = dict(
        id=uuid4(),
        project_id=project.id,
        team_id=project.team_id,
        title="Fix login redirect",
        created_by=uuid4(),
    )
    defaults.update(fields)
    return Task(**defaults)


@pytest.mark.asyncio
async def test_create_task_defaults(task_uow, contributor, project):
    result = await CreateTaskUseCase(task_uow).execute(
        contributor, project.id, CreateTaskCommand(title="Add search")
    )

    assert result.is_ok()
    assert result.value["status"] == "todo"
    assert result.value["work_item_type"] == "task"
    assert result.value["created_by"] == str(contributor.user_id)
    assert result.value["completed_at"] is None
    task_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_subtask_without_parent_fails(task_uow, contributor, project):
    result = await CreateTaskUseCase(task_uow).execute(
        contributor,
        project.id,
        CreateTaskCommand(title="Write copy", work_item_type=WorkItemType.subtask),
    )

    assert result.error.code == "PARENT_REQUIRED"
    task_uow.tasks.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_task_with_missing_parent(task_uow, contributor, project):
    task_uow.tasks.get.return_value = None

    result = await CreateTaskUseCase(task_uow).execute(
        contributor, project.id, CreateTaskCommand(title="Child", parent_task_id=uuid4())
    )

    assert result.error.code == "PARENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_create_task_completed_sets_completed_at(task_uow, contributor, project):
    result = await CreateTaskUseCase(task_uow).execute(
        contributor,
        project.id,
        CreateTaskCommand(title="Already done", status=TaskStatus.completed),
    )

    assert result.value["completed_at"] is not None


@pytest.mark.asyncio
async def test_assignee_must_be_team_member(task_uow, contributor, project):
    result = await CreateTaskUseCase(task_uow).execute(
        contributor, project.id, CreateTaskCommand(title="Audit logs", assigned_to=uuid4())
    )

    assert result.error.code == "ASSIGNEE_NOT_MEMBER"


@pytest.mark.asyncio
async def test_assigned_user_is_notified(task_uow, contributor, project, bus):
    assignee = uuid4()
    task_uow.team_memberships.get_active.return_value = TeamMembership(
        team_id=contributor.team_id, user_id=assignee
    )
    subscription = bus.subscribe(contributor.team_id, assignee)

    result = await CreateTaskUseCase(task_uow, bus).execute(
        contributor, project.id, CreateTaskCommand(title="Audit logs", assigned_to=assignee)
    )

    assert result.value["assigned_by"] == str(contributor.user_id)
    payload = subscription.queue.get_nowait()
    assert payload["type"] == "task_assigned"
    assert payload["related_task_id"] == result.value["id"]


@pytest.mark.asyncio
async def test_viewer_cannot_create_tasks(task_uow, contributor, project):
    task_uow.project_memberships.get.return_value = ProjectMembership(
        project_id=project.id, user_id=contributor.user_id, role=ProjectRole.viewer
    )

    result = await CreateTaskUseCase(task_uow).execute(
        contributor, project.id, CreateTaskCommand(title="Nope")
    )

    assert result.error.code == "INSUFFICIENT_PERMISSION"


@pytest.mark.asyncio
async def test_completing_task_notifies_creator(task_uow, contributor, project, bus):
    # Arrange
    creator = uuid4()
    task = _task(project, created_by=creator, assigned_to=contributor.user_id)
    task_uow.tasks.get.return_value = task
    subscription = bus.subscribe(contributor.team_id, creator)

    # Act
    result = await UpdateTaskUseCase(task_uow, bus).execute(
        contributor, task.id, UpdateTaskCommand(status=TaskStatus.completed)
    )

    # Assert
    assert result.value["status"] == "completed"
    assert task.completed_at is not None
    assert subscription.queue.get_nowait()["type"] == "task_completed"


@pytest.mark.asyncio
async def test_reopening_task_clears_completed_at(task_uow, contributor, project):
    task = _task(project, created_by=contributor.user_id)
    task_uow.tasks.get.return_value = task
    await UpdateTaskUseCase(task_uow).execute(
        contributor, task.id, UpdateTaskCommand(status=TaskStatus.completed)
    )

    result = await UpdateTaskUseCase(task_uow).execute(
        contributor, task.id, UpdateTaskCommand(status=TaskStatus.inprogress)
    )

    assert result.value["completed_at"] is None


@pytest.mark.asyncio
async def test_contributor_cannot_edit_others_tasks(task_uow, contributor, project):
    task_uow.tasks.get.return_value = _task(project, assigned_to=uuid4())

    result = await UpdateTaskUseCase(task_uow).execute(
        contributor, uuid4(), UpdateTaskCommand(title="Renamed")
    )

    assert result.error.code == "INSUFFICIENT_PERMISSION"
    task_uow.tasks.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_can_clear_due_date(task_uow, contributor, project):
    task = _task(project, created_by=contributor.user_id, due_date=datetime(2026, 6, 1))
    task_uow.tasks.get.return_value = task

    result = await UpdateTaskUseCase(task_uow).execute(
        contributor, task.id, UpdateTaskCommand.model_validate({"due_date": None})
    )

    assert result.value["due_date"] is None


@pytest.mark.asyncio
async def test_delete_task_takes_subtasks_and_detaches_other_children(
    task_uow, make_context, project
):
    # Arrange
    admin = make_context(TeamRole.admin)
    sprint = Sprint(
        id=uuid4(),
        project_id=project.id,
        team_id=project.team_id,
        name="Sprint 4",
        start_date=datetime(2026, 4, 1),
        end_date=datetime(2026, 4, 14),
        created_by=admin.user_id,
    )
    story = _task(project, work_item_type=WorkItemType.story)
    subtask = _task(
        project,
        work_item_type=WorkItemType.subtask,
        parent_task_id=story.id,
        sprint_id=sprint.id,
    )
    bug = _task(project, work_item_type=WorkItemType.bug, parent_task_id=story.id)
    task_uow.tasks.get.return_value = story
    task_uow.tasks.list_children = AsyncMock(return_value=[subtask, bug])
    task_uow.tasks.detach_children = AsyncMock(return_value=1)
    task_uow.tasks.delete = AsyncMock()
    task_uow.sprints.get.return_value = sprint
    task_uow.sprints.update = AsyncMock(side_effect=_echo)

    # Act
    result = await DeleteTaskUseCase(task_uow).execute(admin, story.id)

    # Assert
    assert result.value["deleted_subtasks"] == [str(subtask.id)]
    assert result.value["detached_children"] == 1
    deleted = [c.args[0] for c in task_uow.tasks.delete.await_args_list]
    assert deleted == [subtask, story]
    task_uow.tasks.detach_children.assert_awaited_once_with(story.id)
    task_uow.tasks.list_by_sprint.assert_awaited_once_with(sprint.id)
    task_uow.commit.assert_awaited_once()
