from datetime import datetime, timedelta
from uuid import uuid4

from src.domain import sprint_lifecycle
from src.domain.entities import Sprint, SprintStatus, Task, TaskStatus

NOW = datetime(2026, 3, 10, 14, 30)


def make_sprint(status=SprintStatus.planning, **kwargs):
    defaults = dict(
        id=uuid4(),
        project_id=uuid4(),
        team_id=uuid4(),
        created_by=uuid4(),
        name="Sprint 1",
        start_date=datetime(2026, 3, 9),
        end_date=datetime(2026, 3, 22),
        status=status,
    )
    defaults.update(kwargs)
    return Sprint(**defaults)


def make_task(points, status=TaskStatus.todo):
    return Task(
        id=uuid4(),
        project_id=uuid4(),
        team_id=uuid4(),
        created_by=uuid4(),
        title="Task",
        story_points=points,
        status=status,
    )


def test_compute_metrics_counts_missing_points_as_zero():
    tasks = [
        make_task(5, TaskStatus.completed),
        make_task(3),
        make_task(None, TaskStatus.completed),
    ]

    metrics = sprint_lifecycle.compute_metrics(tasks)

    assert metrics.total_tasks == 3
    assert metrics.completed_tasks == 2
    assert metrics.total_story_points == 8
    assert metrics.completed_story_points == 5


def test_start_moves_planning_to_active_and_seeds_burndown():
    sprint = make_sprint(total_story_points=13, completed_story_points=0)

    result = sprint_lifecycle.start(sprint, NOW)

    assert result.is_ok()
    assert sprint.status == SprintStatus.active
    assert sprint.actual_start_date == NOW
    assert sprint.burndown_data == [
        {"date": "2026-03-10T00:00:00", "remaining_points": 13, "completed_points": 0}
    ]


def test_start_rejects_non_planning_sprint():
    sprint = make_sprint(status=SprintStatus.active)

    result = sprint_lifecycle.start(sprint, NOW)

    assert result.is_err()
    assert result.error.code == "SPRINT_NOT_PLANNING"


def test_complete_records_velocity_and_closing_point():
    sprint = make_sprint(
        status=SprintStatus.active, total_story_points=10, completed_story_points=7
    )

    result = sprint_lifecycle.complete(sprint, NOW)

    assert result.is_ok()
    assert sprint.status == SprintStatus.completed
    assert sprint.velocity == 7
    assert sprint.actual_end_date == NOW
    assert sprint.burndown_data[-1]["remaining_points"] == 3


def test_complete_requires_active_sprint():
    result = sprint_lifecycle.complete(make_sprint(), NOW)

    assert result.error.code == "SPRINT_NOT_ACTIVE"


def test_cancel_rules():
    assert sprint_lifecycle.cancel(make_sprint()).is_ok()
    assert sprint_lifecycle.cancel(make_sprint(status=SprintStatus.active)).is_ok()

    completed = sprint_lifecycle.cancel(make_sprint(status=SprintStatus.completed))
    assert completed.error.code == "SPRINT_COMPLETED"

    cancelled = sprint_lifecycle.cancel(make_sprint(status=SprintStatus.cancelled))
    assert cancelled.error.code == "SPRINT_ALREADY_CANCELLED"


def test_only_planning_and_cancelled_sprints_are_deletable():
    assert sprint_lifecycle.ensure_deletable(make_sprint()).is_ok()
    assert sprint_lifecycle.ensure_deletable(make_sprint(status=SprintStatus.cancelled)).is_ok()
    for status in (SprintStatus.active, SprintStatus.completed):
        result = sprint_lifecycle.ensure_deletable(make_sprint(status=status))
        assert result.error.code == "SPRINT_DELETE_FORBIDDEN"


def test_update_metrics_is_idempotent_within_a_day():
    sprint = make_sprint(status=SprintStatus.active)
    tasks = [make_task(5, TaskStatus.completed), make_task(8)]

    assert sprint_lifecycle.update_metrics(sprint, tasks, NOW)
    assert sprint_lifecycle.update_metrics(sprint, tasks, NOW + timedelta(hours=2))

    assert len(sprint.burndown_data) == 1
    assert sprint.burndown_data[0]["remaining_points"] == 8
    assert sprint.burndown_data[0]["completed_points"] == 5


def test_update_metrics_appends_a_point_per_new_day():
    sprint = make_sprint(status=SprintStatus.active)
    tasks = [make_task(5)]

    sprint_lifecycle.update_metrics(sprint, tasks, NOW)
    sprint_lifecycle.update_metrics(sprint, tasks, NOW + timedelta(days=1))

    assert [p["date"][:10] for p in sprint.burndown_data] == ["2026-03-10", "2026-03-11"]


def test_metrics_are_frozen_once_sprint_is_closed():
    for status in (SprintStatus.completed, SprintStatus.cancelled):
        sprint = make_sprint(status=status, total_story_points=20, completed_story_points=20)

        changed = sprint_lifecycle.update_metrics(sprint, [make_task(3)], NOW)

        assert changed is False
        assert sprint.total_story_points == 20


def test_planning_sprint_metrics_do_not_touch_burndown():
    sprint = make_sprint()

    sprint_lifecycle.update_metrics(sprint, [make_task(3)], NOW)

    assert sprint.total_story_points == 3
    assert sprint.burndown_data == []


def test_closed_sprints_take_no_tasks():
    assert sprint_lifecycle.ensure_accepts_tasks(make_sprint(status=SprintStatus.active)).is_ok()
    for status in (SprintStatus.completed, SprintStatus.cancelled):
        result = sprint_lifecycle.ensure_accepts_tasks(make_sprint(status=status))
        assert result.error.code == "SPRINT_CLOSED"


def test_validate_dates():
    assert sprint_lifecycle.validate_dates(NOW, NOW + timedelta(days=1)).is_ok()
    assert sprint_lifecycle.validate_dates(NOW, NOW).error.code == "INVALID_SPRINT_DATES"


def test_derived_fields():
    sprint = make_sprint(
        status=SprintStatus.active, total_story_points=20, completed_story_points=5
    )

    assert sprint_lifecycle.duration_days(sprint) == 14
    assert sprint_lifecycle.progress(sprint) == 25
    assert sprint_lifecycle.is_overdue(sprint, NOW) is False
    assert sprint_lifecycle.is_overdue(sprint, datetime(2026, 3, 23)) is True
    assert sprint_lifecycle.days_remaining(sprint, datetime(2026, 3, 21)) == 1
    assert sprint_lifecycle.days_remaining(make_sprint(), NOW) == 0


def test_ideal_burndown_is_a_straight_line_to_zero():
    sprint = make_sprint(
        start_date=datetime(2026, 3, 1), end_date=datetime(2026, 3, 4), total_story_points=8
    )

    line = sprint_lifecycle.ideal_burndown(sprint)

    assert [p["remaining_points"] for p in line] == [8, 6, 4, 2, 0]
