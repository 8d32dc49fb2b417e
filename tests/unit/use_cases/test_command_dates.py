from datetime import datetime

from src.app.use_cases.sprints import CreateSprintCommand, UpdateSprintCommand
from src.app.use_cases.tasks import CreateTaskCommand, UpdateTaskCommand


def test_sprint_dates_are_stored_as_naive_utc():
    command = CreateSprintCommand(
        name="Sprint 1",
        start_date="2026-03-02T09:00:00+02:00",
        end_date="2026-03-15T00:00:00Z",
    )

    assert command.start_date == datetime(2026, 3, 2, 7, 0)
    assert command.end_date == datetime(2026, 3, 15)
    assert command.end_date > command.start_date


def test_partial_sprint_update_keeps_missing_dates_unset():
    command = UpdateSprintCommand(end_date="2026-03-20T00:00:00Z")

    assert command.end_date == datetime(2026, 3, 20)
    assert command.end_date.tzinfo is None
    assert "start_date" not in command.model_fields_set


def test_task_due_date_is_naive_utc():
    created = CreateTaskCommand(title="Ship", due_date="2026-05-01T18:30:00-04:00")
    cleared = UpdateTaskCommand.model_validate({"due_date": None})

    assert created.due_date == datetime(2026, 5, 1, 22, 30)
    assert cleared.due_date is None
    assert "due_date" in cleared.model_fields_set
