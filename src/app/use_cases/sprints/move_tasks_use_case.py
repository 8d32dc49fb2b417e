"""
Task Movement Use Cases

Moving tasks between the backlog and sprints, and reading the backlog.
Every move recomputes the metrics of the sprints it touched.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.app.services.sprint_metrics import refresh_sprint_metrics, refresh_sprint_metrics_by_id
from src.app.services.team_context import TeamContext, authorize_project_action
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import pagination, sprint_to_dict, to_dict
from src.domain import sprint_lifecycle
from src.domain.permissions import ProjectAction
from src.libs.result import Error, Result, Return

BACKLOG_CARRY_OVER = "carry_over"
BACKLOG_UNASSIGNED = "unassigned"
BACKLOG_MODES = (BACKLOG_CARRY_OVER, BACKLOG_UNASSIGNED)


class AddTasksToSprintUseCase:
    """
    Business Rules:
    - Completed and cancelled sprints take no tasks (SPRINT_CLOSED)
    - Best effort per task: ids not found in the sprint's project are
      reported in errors, the rest are moved
    - Metrics are recomputed once for the target and once per source sprint
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, sprint_id: UUID, task_ids: List[UUID]
    ) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.MANAGE_SPRINTS
            )
            if authorized.is_err():
                return authorized

            accepts = sprint_lifecycle.ensure_accepts_tasks(sprint)
            if accepts.is_err():
                return accepts

            requested = list(dict.fromkeys(task_ids))
            tasks = await self.uow.tasks.get_many(sprint.project_id, requested)
            found = {task.id: task for task in tasks}

            added, errors, source_sprints = [], [], set()
            for task_id in requested:
                task = found.get(task_id)
                if task is None:
                    errors.append(
                        {
                            "id": str(task_id),
                            "code": "TASK_NOT_FOUND",
                            "message": "Task not found in this project",
                        }
                    )
                    continue
                if task.sprint_id == sprint.id:
                    added.append(str(task.id))
                    continue
                if task.sprint_id is not None:
                    source_sprints.add(task.sprint_id)
                task.sprint_id = sprint.id
                await self.uow.tasks.update(task)
                added.append(str(task.id))

            sprint = await refresh_sprint_metrics(self.uow, sprint, now)
            for source_id in source_sprints:
                await refresh_sprint_metrics_by_id(self.uow, context.team_id, source_id, now)
            await self.uow.commit()

            return Return.ok(
                {"added": added, "errors": errors, "sprint": sprint_to_dict(sprint, now)}
            )


class RemoveTaskFromSprintUseCase:
    """
    Business Rules:
    - Completed sprints keep their tasks (SPRINT_COMPLETED)
    - The task must currently be in this sprint (TASK_NOT_IN_SPRINT)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, sprint_id: UUID, task_id: UUID) -> Result[dict]:
        now = datetime.utcnow()
        async with self.uow:
            sprint = await self.uow.sprints.get(context.team_id, sprint_id)
            if sprint is None:
                return Return.err(Error("SPRINT_NOT_FOUND", "Sprint not found"))

            authorized = await authorize_project_action(
                self.uow, context, sprint.project_id, ProjectAction.MANAGE_SPRINTS
            )
            if authorized.is_err():
                return authorized

            releases = sprint_lifecycle.ensure_releases_tasks(sprint)
            if releases.is_err():
                return releases

            task = await self.uow.tasks.get(context.team_id, task_id)
            if task is None or task.project_id != sprint.project_id:
                return Return.err(Error("TASK_NOT_FOUND", "Task not found"))
            if task.sprint_id != sprint.id:
                return Return.err(
                    Error("TASK_NOT_IN_SPRINT", "Task does not belong to this sprint")
                )

            task.sprint_id = None
            task = await self.uow.tasks.update(task)
            sprint = await refresh_sprint_metrics(self.uow, sprint, now)
            await self.uow.commit()

            return Return.ok({"task": to_dict(task), "sprint": sprint_to_dict(sprint, now)})


class GetBacklogUseCase:
    """
    Backlog of a project.

    carry_over: incomplete tasks still attached to the most recently
    completed sprint (empty when no sprint was completed yet).
    unassigned: tasks that are not in any sprint.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        project_id: UUID,
        mode: str = BACKLOG_CARRY_OVER,
        page: int = 1,
        limit: int = 50,
        sort: str = "-priority",
    ) -> Result[dict]:
        if mode not in BACKLOG_MODES:
            return Return.err(
                Error("INVALID_BACKLOG_MODE", f"mode must be one of {', '.join(BACKLOG_MODES)}")
            )

        async with self.uow:
            authorized = await authorize_project_action(
                self.uow, context, project_id, ProjectAction.VIEW_PROJECT
            )
            if authorized.is_err():
                return authorized

            source: Optional[dict] = None
            tasks, total = [], 0
            offset = (page - 1) * limit
            if mode == BACKLOG_CARRY_OVER:
                last_sprint = await self.uow.sprints.get_latest_completed(project_id)
                if last_sprint is not None:
                    source = {"id": str(last_sprint.id), "name": last_sprint.name}
                    tasks, total = await self.uow.tasks.list_backlog(
                        project_id, last_sprint.id, True, offset, limit, sort
                    )
            else:
                tasks, total = await self.uow.tasks.list_backlog(
                    project_id, None, False, offset, limit, sort
                )

            return Return.ok(
                {
                    "mode": mode,
                    "source_sprint": source,
                    "tasks": [to_dict(task) for task in tasks],
                    "pagination": pagination(page, limit, total),
                }
            )
