from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.use_cases.sprints import (
    BACKLOG_CARRY_OVER,
    BACKLOG_UNASSIGNED,
    AddTasksToSprintUseCase,
    CancelSprintUseCase,
    CompleteSprintUseCase,
    GetBacklogUseCase,
    RemoveTaskFromSprintUseCase,
    StartSprintUseCase,
)
from src.domain.entities import (
    Project,
    ProjectMembership,
    ProjectRole,
    Sprint,
    SprintStatus,
    Task,
    TaskStatus,
    TeamRole,
)


def _echo(entity, *args, **kwargs):
    return entity


@pytest.fixture
def admin(make_context):
    return make_context(TeamRole.admin)


@pytest.fixture
def project(admin):
    return Project(id=uuid4(), team_id=admin.team_id, name="Checkout", created_by=admin.user_id)


def _sprint(project, status=SprintStatus.planning):
    start = datetime(2026, 3, 2)
    return Sprint(
        id=uuid4(),
        project_id=project.id,
        team_id=project.team_id,
        created_by=project.created_by,
        name="Sprint 1",
        start_date=start,
        end_date=start + timedelta(days=13),
        status=status,
        burndown_data=[],
    )


def _task(project, sprint, status=TaskStatus.todo, points=3):
    return Task(
        id=uuid4(),
        project_id=project.id,
        team_id=project.team_id,
        sprint_id=sprint.id,
        title="Wire up payments",
        status=status,
        created_by=project.created_by,
        story_points=points,
    )


@pytest.fixture
def sprint_uow(mock_uow, project):
    mock_uow.projects = MagicMock()
    mock_uow.projects.get = AsyncMock(return_value=project)
    mock_uow.projects.claim_active_sprint = AsyncMock(return_value=True)
    mock_uow.projects.release_active_sprint = AsyncMock(return_value=True)

    mock_uow.sprints = MagicMock()
    mock_uow.sprints.get = AsyncMock()
    mock_uow.sprints.update = AsyncMock(side_effect=_echo)

    mock_uow.tasks = MagicMock()
    mock_uow.tasks.list_by_sprint = AsyncMock(return_value=[])
    mock_uow.tasks.update = AsyncMock(side_effect=_echo)

    mock_uow.project_memberships = MagicMock()
    mock_uow.project_memberships.get = AsyncMock(return_value=None)
    mock_uow.project_memberships.list_by_project = AsyncMock(return_value=[])
    return mock_uow


@pytest.mark.asyncio
async def test_start_sprint_activates_and_notifies_members(sprint_uow, admin, project, bus):
    # Arrange
    sprint = _sprint(project)
    member_id = uuid4()
    sprint_uow.sprints.get.return_value = sprint
    sprint_uow.tasks.list_by_sprint.return_value = [_task(project, sprint, points=5)]
    sprint_uow.project_memberships.list_by_project.return_value = [
        ProjectMembership(project_id=project.id, user_id=admin.user_id, role=ProjectRole.owner),
        ProjectMembership(project_id=project.id, user_id=member_id),
    ]
    subscription = bus.subscribe(admin.team_id, member_id)

    # Act
    result = await StartSprintUseCase(sprint_uow, bus).execute(admin, sprint.id)

    # Assert
    assert result.is_ok()
    assert result.value["status"] == "active"
    assert result.value["total_story_points"] == 5
    assert len(sprint.burndown_data) == 1
    sprint_uow.projects.claim_active_sprint.assert_awaited_once_with(project.id, sprint.id)
    sprint_uow.commit.assert_awaited_once()

    # The actor is not notified about their own action
    assert sprint_uow.notifications.create.await_count == 1
    payload = subscription.queue.get_nowait()
    assert payload["type"] == "sprint_started"
    assert sprint_uow.audit_events.create.await_args.args[0].action == "sprint_started"


@pytest.mark.asyncio
async def test_start_sprint_rejects_second_active_sprint(sprint_uow, admin, project):
    sprint = _sprint(project)
    sprint_uow.sprints.get.return_value = sprint
    sprint_uow.projects.claim_active_sprint.return_value = False

    result = await StartSprintUseCase(sprint_uow).execute(admin, sprint.id)

    assert result.is_err()
    assert result.error.code == "ACTIVE_SPRINT_EXISTS"
    assert sprint.status == SprintStatus.planning
    sprint_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_start_sprint_requires_planning_status(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.completed)
    sprint_uow.sprints.get.return_value = sprint

    result = await StartSprintUseCase(sprint_uow).execute(admin, sprint.id)

    assert result.error.code == "SPRINT_NOT_PLANNING"
    sprint_uow.projects.claim_active_sprint.assert_not_awaited()


@pytest.mark.asyncio
async def test_start_sprint_not_found(sprint_uow, admin):
    sprint_uow.sprints.get.return_value = None

    result = await StartSprintUseCase(sprint_uow).execute(admin, uuid4())

    assert result.error.code == "SPRINT_NOT_FOUND"


@pytest.mark.asyncio
async def test_viewer_cannot_start_sprint(sprint_uow, make_context, project):
    viewer = make_context(TeamRole.viewer)
    project.team_id = viewer.team_id
    sprint = _sprint(project)
    sprint_uow.sprints.get.return_value = sprint

    result = await StartSprintUseCase(sprint_uow).execute(viewer, sprint.id)

    assert result.error.code == "INSUFFICIENT_PERMISSION"


@pytest.mark.asyncio
async def test_complete_sprint_freezes_velocity_and_moves_incomplete(
    sprint_uow, admin, project
):
    # Arrange
    sprint = _sprint(project, SprintStatus.active)
    target = _sprint(project)
    done = _task(project, sprint, TaskStatus.completed, points=5)
    open_task = _task(project, sprint, TaskStatus.inprogress, points=3)
    sprint_uow.sprints.get.side_effect = [sprint, target]
    sprint_uow.tasks.list_by_sprint.side_effect = [[done, open_task], [open_task]]

    # Act
    result = await CompleteSprintUseCase(sprint_uow).execute(admin, sprint.id, target.id)

    # Assert
    assert result.is_ok()
    assert result.value["moved_tasks"] == 1
    assert result.value["sprint"]["status"] == "completed"
    assert result.value["sprint"]["velocity"] == 5
    assert result.value["target_sprint"]["total_story_points"] == 3
    assert open_task.sprint_id == target.id
    assert done.sprint_id == sprint.id
    sprint_uow.projects.release_active_sprint.assert_awaited_once_with(project.id, sprint.id)


@pytest.mark.asyncio
async def test_complete_sprint_to_backlog_keeps_tasks(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.active)
    open_task = _task(project, sprint)
    sprint_uow.sprints.get.return_value = sprint
    sprint_uow.tasks.list_by_sprint.return_value = [open_task]

    result = await CompleteSprintUseCase(sprint_uow).execute(admin, sprint.id)

    assert result.value["moved_tasks"] == 0
    assert result.value["target_sprint"] is None
    assert open_task.sprint_id == sprint.id
    sprint_uow.tasks.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_complete_sprint_rejects_target_from_other_project(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.active)
    other = _sprint(project)
    other.project_id = uuid4()
    sprint_uow.sprints.get.side_effect = [sprint, other]

    result = await CompleteSprintUseCase(sprint_uow).execute(admin, sprint.id, other.id)

    assert result.error.code == "INVALID_TARGET_SPRINT"
    assert sprint.status == SprintStatus.active
    sprint_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_complete_sprint_requires_active_status(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.planning)
    sprint_uow.sprints.get.return_value = sprint

    result = await CompleteSprintUseCase(sprint_uow).execute(admin, sprint.id)

    assert result.error.code == "SPRINT_NOT_ACTIVE"


@pytest.mark.asyncio
async def test_cancel_completed_sprint_fails(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.completed)
    sprint_uow.sprints.get.return_value = sprint

    result = await CancelSprintUseCase(sprint_uow).execute(admin, sprint.id)

    assert result.error.code == "SPRINT_COMPLETED"


@pytest.mark.asyncio
async def test_add_tasks_moves_found_tasks_and_reports_missing(sprint_uow, admin, project):
    # Arrange
    target = _sprint(project)
    source = _sprint(project, SprintStatus.active)
    from_backlog = _task(project, target, points=3)
    from_backlog.sprint_id = None
    from_source = _task(project, source, points=5)
    missing_id = uuid4()
    sprint_uow.sprints.get.side_effect = [target, source]
    sprint_uow.tasks.get_many = AsyncMock(return_value=[from_backlog, from_source])
    sprint_uow.tasks.list_by_sprint.side_effect = [[from_backlog, from_source], []]

    # Act
    result = await AddTasksToSprintUseCase(sprint_uow).execute(
        admin, target.id, [from_backlog.id, missing_id, from_source.id]
    )

    # Assert
    assert result.is_ok()
    assert result.value["added"] == [str(from_backlog.id), str(from_source.id)]
    assert result.value["errors"] == [
        {
            "id": str(missing_id),
            "code": "TASK_NOT_FOUND",
            "message": "Task not found in this project",
        }
    ]
    assert from_backlog.sprint_id == target.id
    assert from_source.sprint_id == target.id
    assert result.value["sprint"]["total_story_points"] == 8
    # The source sprint is recomputed after losing its task
    assert [c.args[0] for c in sprint_uow.tasks.list_by_sprint.await_args_list] == [
        target.id,
        source.id,
    ]
    assert source.total_story_points == 0
    sprint_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [SprintStatus.completed, SprintStatus.cancelled])
async def test_add_tasks_to_closed_sprint_fails(sprint_uow, admin, project, status):
    sprint_uow.sprints.get.return_value = _sprint(project, status)
    sprint_uow.tasks.get_many = AsyncMock()

    result = await AddTasksToSprintUseCase(sprint_uow).execute(admin, uuid4(), [uuid4()])

    assert result.error.code == "SPRINT_CLOSED"
    sprint_uow.tasks.get_many.assert_not_awaited()
    sprint_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_remove_task_returns_it_to_backlog(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.active)
    task = _task(project, sprint)
    sprint_uow.sprints.get.return_value = sprint
    sprint_uow.tasks.get = AsyncMock(return_value=task)

    result = await RemoveTaskFromSprintUseCase(sprint_uow).execute(admin, sprint.id, task.id)

    assert result.is_ok()
    assert task.sprint_id is None
    assert result.value["task"]["sprint_id"] is None
    assert result.value["sprint"]["total_tasks"] == 0


@pytest.mark.asyncio
async def test_remove_task_from_completed_sprint_fails(sprint_uow, admin, project):
    sprint_uow.sprints.get.return_value = _sprint(project, SprintStatus.completed)
    sprint_uow.tasks.get = AsyncMock()

    result = await RemoveTaskFromSprintUseCase(sprint_uow).execute(admin, uuid4(), uuid4())

    assert result.error.code == "SPRINT_COMPLETED"
    sprint_uow.tasks.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_remove_task_in_another_sprint_fails(sprint_uow, admin, project):
    sprint = _sprint(project, SprintStatus.active)
    elsewhere = _task(project, _sprint(project))
    sprint_uow.sprints.get.return_value = sprint
    sprint_uow.tasks.get = AsyncMock(return_value=elsewhere)

    result = await RemoveTaskFromSprintUseCase(sprint_uow).execute(admin, sprint.id, elsewhere.id)

    assert result.error.code == "TASK_NOT_IN_SPRINT"
    sprint_uow.tasks.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_carry_over_backlog_reads_latest_completed_sprint(sprint_uow, admin, project):
    last = _sprint(project, SprintStatus.completed)
    leftover = _task(project, last)
    sprint_uow.sprints.get_latest_completed = AsyncMock(return_value=last)
    sprint_uow.tasks.list_backlog = AsyncMock(return_value=([leftover], 1))

    result = await GetBacklogUseCase(sprint_uow).execute(admin, project.id, BACKLOG_CARRY_OVER)

    assert result.value["source_sprint"] == {"id": str(last.id), "name": last.name}
    assert [t["id"] for t in result.value["tasks"]] == [str(leftover.id)]
    sprint_uow.tasks.list_backlog.assert_awaited_once_with(
        project.id, last.id, True, 0, 50, "-priority"
    )


@pytest.mark.asyncio
async def test_carry_over_backlog_is_empty_without_completed_sprint(sprint_uow, admin, project):
    sprint_uow.sprints.get_latest_completed = AsyncMock(return_value=None)
    sprint_uow.tasks.list_backlog = AsyncMock()

    result = await GetBacklogUseCase(sprint_uow).execute(admin, project.id)

    assert result.value["tasks"] == []
    assert result.value["source_sprint"] is None
    assert result.value["pagination"]["total"] == 0
    sprint_uow.tasks.list_backlog.assert_not_awaited()


@pytest.mark.asyncio
async def test_unassigned_backlog_lists_tasks_without_sprint(sprint_uow, admin, project):
    loose = _task(project, _sprint(project))
    loose.sprint_id = None
    sprint_uow.tasks.list_backlog = AsyncMock(return_value=([loose], 1))

    result = await GetBacklogUseCase(sprint_uow).execute(
        admin, project.id, BACKLOG_UNASSIGNED, page=2, limit=10
    )

    assert result.value["mode"] == "unassigned"
    assert result.value["source_sprint"] is None
    sprint_uow.tasks.list_backlog.assert_awaited_once_with(
        project.id, None, False, 10, 10, "-priority"
    )


@pytest.mark.asyncio
async def test_unknown_backlog_mode(sprint_uow, admin, project):
    result = await GetBacklogUseCase(sprint_uow).execute(admin, project.id, "everything")

    assert result.error.code == "INVALID_BACKLOG_MODE"
