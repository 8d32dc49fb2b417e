"""
Team Analytics Use Cases

Dashboards for team leads and managers. Every figure is limited to the
members the requester may see (see scoped_query): admins and managers
see the whole team, everybody else sees themselves and their direct
reports.
"""

from collections import Counter, OrderedDict
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from src.app.services.scoped_query import get_scoped_user_ids, is_privileged
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import user_summary, users_by_id
from src.domain import sprint_lifecycle
from src.domain.entities import BandwidthStatus, Project, Task, TaskPriority, TaskStatus
from src.libs.result import Result, Return
from src.libs.timestamps import naive_utc

RECENT_ACTIVITY_DAYS = 7
MEMBER_ACTIVITY_DAYS = 30
DEFAULT_FEED_DAYS = 30


def completion_rate(tasks: List[Task]) -> int:
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.status.is_completed)
    return round(100 * completed / len(tasks))


async def _visible_projects(uow: UnitOfWork, context: TeamContext) -> List[Project]:
    if is_privileged(context.role):
        return await uow.projects.list_by_team(context.team_id)
    return await uow.projects.list_led_by(context.team_id, context.user_id)


class GetDashboardUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, now: Optional[datetime] = None) -> Result[dict]:
        now = now or datetime.utcnow()
        async with self.uow:
            scoped = await get_scoped_user_ids(
                self.uow, context.team_id, context.user_id, context.role
            )
            privileged = is_privileged(context.role)

            if privileged:
                total_members = await self.uow.team_memberships.count_active(context.team_id)
            else:
                total_members = max(0, len(scoped) - 1)

            projects = await _visible_projects(self.uow, context)
            project_ids = [project.id for project in projects]
            active_sprints = (
                await self.uow.sprints.count_active(context.team_id, project_ids)
                if project_ids
                else 0
            )

            tasks = await self.uow.tasks.list_by_assignees(context.team_id, scoped)
            completed = sum(1 for task in tasks if task.status.is_completed)

            pending = await self.uow.bandwidth_reports.list(
                context.team_id, user_ids=scoped, status=BandwidthStatus.submitted
            )
            recent = await self.uow.audit_events.count_for_users(
                context.team_id, scoped, now - timedelta(days=RECENT_ACTIVITY_DAYS)
            )

            project_health = []
            for project in projects:
                sprint = None
                if project.current_sprint_id is not None:
                    sprint = await self.uow.sprints.get(context.team_id, project.current_sprint_id)
                project_health.append(
                    {
                        "id": str(project.id),
                        "name": project.name,
                        "has_active_sprint": sprint is not None,
                        "progress": sprint_lifecycle.progress(sprint) if sprint else 0,
                    }
                )

            return Return.ok(
                {
                    "stats": {
                        "total_members": total_members,
                        "total_projects": len(projects),
                        "active_sprints": active_sprints,
                        "total_tasks": len(tasks),
                        "completed_tasks": completed,
                        "completion_rate": completion_rate(tasks),
                        "pending_bandwidth": len(pending),
                        "recent_activities": recent,
                    },
                    "project_health": project_health,
                }
            )


class GetMembersOverviewUseCase:
    """Scoped members with their task and activity figures"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, search: Optional[str] = None, now: Optional[datetime] = None
    ) -> Result[list]:
        now = now or datetime.utcnow()
        async with self.uow:
            scoped = await get_scoped_user_ids(
                self.uow, context.team_id, context.user_id, context.role
            )
            memberships = [
                m for m in await self.uow.team_memberships.list_active(context.team_id)
                if m.user_id in scoped
            ]
            users = users_by_id(await self.uow.users.get_by_ids(scoped))
            tasks = await self.uow.tasks.list_by_assignees(context.team_id, scoped)
            reports = await self.uow.bandwidth_reports.list(context.team_id, user_ids=scoped)
            since = now - timedelta(days=MEMBER_ACTIVITY_DAYS)

            needle = (search or "").strip().lower()
            overview = []
            for membership in memberships:
                user = users.get(membership.user_id)
                if needle and not any(
                    needle in (value or "").lower()
                    for value in (
                        user.name if user else None,
                        user.email if user else None,
                        membership.role.value,
                    )
                ):
                    continue

                assigned = [t for t in tasks if t.assigned_to == membership.user_id]
                latest = next((r for r in reports if r.user_id == membership.user_id), None)
                activities = await self.uow.audit_events.count_for_users(
                    context.team_id, [membership.user_id], since
                )
                overview.append(
                    {
                        "user": user_summary(user),
                        "role": membership.role.value,
                        "custom_title": membership.custom_title,
                        "joined_at": membership.joined_at.isoformat()
                        if membership.joined_at
                        else None,
                        "stats": {
                            "assigned_tasks": len(assigned),
                            "completed_tasks": sum(
                                1 for t in assigned if t.status.is_completed
                            ),
                            "completion_rate": completion_rate(assigned),
                            "recent_activities": activities,
                            "latest_bandwidth": {
                                "year": latest.year,
                                "month": latest.month,
                                "status": latest.status.value,
                            }
                            if latest
                            else None,
                        },
                    }
                )
            return Return.ok(overview)


class GetActivityFeedUseCase:
    """Audit events of scoped users in a date window, grouped by day (newest first)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        user_id: Optional[UUID] = None,
        limit: int = 100,
    ) -> Result[dict]:
        end = naive_utc(end) or datetime.utcnow()
        start = naive_utc(start) or end - timedelta(days=DEFAULT_FEED_DAYS)
        async with self.uow:
            scoped = await get_scoped_user_ids(
                self.uow, context.team_id, context.user_id, context.role
            )
            if user_id is not None:
                scoped = scoped & {user_id}

            events = await self.uow.audit_events.list_for_users(
                context.team_id, scoped, since=start, until=end, limit=limit
            )
            users = users_by_id(await self.uow.users.get_by_ids({e.user_id for e in events}))

            activities = []
            grouped: "OrderedDict[str, list]" = OrderedDict()
            for event in events:
                item = {
                    "id": str(event.id),
                    "action": event.action,
                    "metadata": event.event_metadata or {},
                    "user": user_summary(users.get(event.user_id)),
                    "created_at": event.created_at.isoformat(),
                }
                activities.append(item)
                grouped.setdefault(event.created_at.date().isoformat(), []).append(item)

            return Return.ok(
                {
                    "start": start.isoformat(),
                    "end": end.isoformat(),
                    "count": len(activities),
                    "activities": activities,
                    "grouped_by_date": grouped,
                }
            )


class GetTeamStatisticsUseCase:
    """Task breakdown for scoped users plus velocity of recent completed sprints"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, sprint_limit: int = 10) -> Result[dict]:
        async with self.uow:
            scoped = await get_scoped_user_ids(
                self.uow, context.team_id, context.user_id, context.role
            )
            tasks = await self.uow.tasks.list_by_assignees(context.team_id, scoped)
            by_status = Counter(task.status.value for task in tasks)
            by_priority = Counter(task.priority.value for task in tasks)

            sprints = await self.uow.sprints.list_completed_by_team(
                context.team_id, limit=sprint_limit
            )
            velocity = [
                {
                    "sprint_id": str(sprint.id),
                    "project_id": str(sprint.project_id),
                    "name": sprint.name,
                    "completed_at": sprint.actual_end_date.isoformat()
                    if sprint.actual_end_date
                    else None,
                    "committed_points": sprint.total_story_points,
                    "velocity": sprint.velocity,
                }
                for sprint in sprints
            ]
            velocities = [item["velocity"] or 0 for item in velocity]

            return Return.ok(
                {
                    "total_tasks": len(tasks),
                    "completion_rate": completion_rate(tasks),
                    "tasks_by_status": {s.value: by_status.get(s.value, 0) for s in TaskStatus},
                    "tasks_by_priority": {
                        p.value: by_priority.get(p.value, 0) for p in TaskPriority
                    },
                    "velocity_history": velocity,
                    "average_velocity": (
                        round(sum(velocities) / len(velocities), 1) if velocities else 0
                    ),
                }
            )
