"""
Sprint State Machine

Lifecycle transitions, metrics recomputation and burndown bookkeeping for
a single Sprint. Functions mutate the sprint in memory and report
precondition failures as Result errors; persisting the sprint and
coordinating with the project's active-sprint pointer is the caller's job.

    planning --start--> active --complete--> completed
        |                  |
        +-----cancel-------+------------> cancelled
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List

from src.libs.result import Error, Result, Return

from .entities import Sprint, SprintStatus, Task, TaskStatus

# Sprints whose metrics still follow their tasks
RECOMPUTABLE_STATUSES = frozenset({SprintStatus.planning, SprintStatus.active})


@dataclass(frozen=True)
class SprintMetrics:
    total_story_points: int = 0
    completed_story_points: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0


def normalize_day(moment: datetime) -> datetime:
    """Truncate a timestamp to midnight of the same calendar day"""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _is_completed(task: Task) -> bool:
    return TaskStatus(task.status).is_completed


def compute_metrics(tasks: Iterable[Task]) -> SprintMetrics:
    """Count tasks and sum story points; missing story points count as 0"""
    total_points = completed_points = total = completed = 0
    for task in tasks:
        points = task.story_points or 0
        total += 1
        total_points += points
        if _is_completed(task):
            completed += 1
            completed_points += points
    return SprintMetrics(
        total_story_points=total_points,
        completed_story_points=completed_points,
        total_tasks=total,
        completed_tasks=completed,
    )


def _burndown_point(date: datetime, remaining: int, completed: int) -> dict:
    return {
        "date": date.isoformat(),
        "remaining_points": max(0, remaining),
        "completed_points": completed,
    }


def upsert_burndown_point(sprint: Sprint, now: datetime) -> None:
    """Record today's remaining/completed points, one point per calendar day"""
    today = normalize_day(now)
    remaining = sprint.total_story_points - sprint.completed_story_points
    point = _burndown_point(today, remaining, sprint.completed_story_points)

    data: List[dict] = list(sprint.burndown_data or [])
    for index, existing in enumerate(data):
        if normalize_day(datetime.fromisoformat(existing["date"])) == today:
            data[index] = point
            break
    else:
        data.append(point)
    # Reassign so the JSON column is flagged dirty
    sprint.burndown_data = data


def update_metrics(sprint: Sprint, tasks: Iterable[Task], now: datetime) -> bool:
    """
    Recompute sprint metrics from the tasks referencing it.

    Completed and cancelled sprints are frozen and left untouched (returns
    False). Active sprints also get today's burndown point upserted, so
    calling this repeatedly on the same day is idempotent.
    """
    if SprintStatus(sprint.status) not in RECOMPUTABLE_STATUSES:
        return False

    metrics = compute_metrics(tasks)
    sprint.total_story_points = metrics.total_story_points
    sprint.completed_story_points = metrics.completed_story_points
    sprint.total_tasks = metrics.total_tasks
    sprint.completed_tasks = metrics.completed_tasks

    if sprint.status == SprintStatus.active:
        upsert_burndown_point(sprint, now)
    return True


def start(sprint: Sprint, now: datetime) -> Result[Sprint]:
    """planning -> active; seeds the burndown series with today's point"""
    if sprint.status != SprintStatus.planning:
        return Return.err(
            Error(
                "SPRINT_NOT_PLANNING",
                f"Only sprints in planning status can be started (current: {sprint.status.value})",
            )
        )

    sprint.status = SprintStatus.active
    sprint.actual_start_date = now
    sprint.burndown_data = [
        _burndown_point(
            normalize_day(now), sprint.total_story_points, sprint.completed_story_points
        )
    ]
    return Return.ok(sprint)


def complete(sprint: Sprint, now: datetime) -> Result[Sprint]:
    """active -> completed; freezes velocity and appends the closing burndown point"""
    if sprint.status != SprintStatus.active:
        return Return.err(
            Error(
                "SPRINT_NOT_ACTIVE",
                f"Only active sprints can be completed (current: {sprint.status.value})",
            )
        )

    sprint.status = SprintStatus.completed
    sprint.actual_end_date = now
    sprint.velocity = sprint.completed_story_points
    sprint.burndown_data = list(sprint.burndown_data or []) + [
        _burndown_point(
            now,
            sprint.total_story_points - sprint.completed_story_points,
            sprint.completed_story_points,
        )
    ]
    return Return.ok(sprint)


def cancel(sprint: Sprint) -> Result[Sprint]:
    """planning|active -> cancelled"""
    if sprint.status == SprintStatus.completed:
        return Return.err(Error("SPRINT_COMPLETED", "Cannot cancel a completed sprint"))
    if sprint.status == SprintStatus.cancelled:
        return Return.err(Error("SPRINT_ALREADY_CANCELLED", "Sprint is already cancelled"))

    sprint.status = SprintStatus.cancelled
    return Return.ok(sprint)


def ensure_deletable(sprint: Sprint) -> Result[Sprint]:
    """Active and completed sprints are protected from deletion"""
    if sprint.status in (SprintStatus.active, SprintStatus.completed):
        return Return.err(
            Error(
                "SPRINT_DELETE_FORBIDDEN",
                "Cannot delete an active or completed sprint. Cancel or complete it first.",
            )
        )
    return Return.ok(sprint)


def ensure_editable(sprint: Sprint) -> Result[Sprint]:
    if sprint.status == SprintStatus.completed:
        return Return.err(Error("SPRINT_COMPLETED", "Cannot update a completed sprint"))
    return Return.ok(sprint)


def ensure_accepts_tasks(sprint: Sprint) -> Result[Sprint]:
    """Completed and cancelled sprints take no new tasks"""
    if SprintStatus(sprint.status).is_terminal:
        return Return.err(
            Error("SPRINT_CLOSED", "Cannot add tasks to a completed or cancelled sprint")
        )
    return Return.ok(sprint)


def ensure_releases_tasks(sprint: Sprint) -> Result[Sprint]:
    if sprint.status == SprintStatus.completed:
        return Return.err(
            Error("SPRINT_COMPLETED", "Cannot remove tasks from a completed sprint")
        )
    return Return.ok(sprint)


def validate_dates(start_date: datetime, end_date: datetime) -> Result[None]:
    if end_date <= start_date:
        return Return.err(Error("INVALID_SPRINT_DATES", "End date must be after start date"))
    return Return.ok(None)


# Derived, read-only fields


def duration_days(sprint: Sprint) -> int:
    """Calendar days between start and end, both inclusive"""
    if not sprint.start_date or not sprint.end_date:
        return 0
    return (sprint.end_date.date() - sprint.start_date.date()).days + 1


def progress(sprint: Sprint) -> int:
    if sprint.total_story_points <= 0:
        return 0
    return round(100 * sprint.completed_story_points / sprint.total_story_points)


def is_overdue(sprint: Sprint, now: datetime) -> bool:
    return sprint.status == SprintStatus.active and now > sprint.end_date


def days_remaining(sprint: Sprint, now: datetime) -> int:
    if sprint.status != SprintStatus.active:
        return 0
    seconds = (sprint.end_date - now).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def ideal_burndown(sprint: Sprint) -> List[dict]:
    """Straight line from total story points on day one down to zero"""
    duration = duration_days(sprint)
    if duration <= 0:
        return []

    total = sprint.total_story_points
    per_day = total / duration
    start_day = normalize_day(sprint.start_date)
    return [
        {
            "date": (start_day + timedelta(days=day)).isoformat(),
            "remaining_points": max(0.0, round(total - per_day * day, 2)),
        }
        for day in range(duration + 1)
    ]
