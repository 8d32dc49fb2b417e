"""
Bandwidth report reads and the team capacity summary
"""

from collections import defaultdict
from typing import List, Optional
from uuid import UUID

from src.app.services.scoped_query import get_scoped_user_ids
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict, user_summary, users_by_id
from src.domain.entities import BandwidthReport, BandwidthStatus
from src.domain.permissions import TeamAction
from src.libs.result import Error, Result, Return

from .manage_report_use_case import total_allocated

SUMMARY_STATUSES = (BandwidthStatus.submitted, BandwidthStatus.approved)


def _forbidden() -> Result:
    return Return.err(Error("INSUFFICIENT_PERMISSION", "You cannot view team reports"))


async def _with_users(uow: UnitOfWork, reports: List[BandwidthReport]) -> List[dict]:
    users = users_by_id(await uow.users.get_by_ids({report.user_id for report in reports}))
    result = []
    for report in reports:
        data = to_dict(report)
        data["user"] = user_summary(users.get(report.user_id))
        result.append(data)
    return result


class ListMyBandwidthReportsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, year: Optional[int] = None) -> Result[list]:
        async with self.uow:
            reports = await self.uow.bandwidth_reports.list(
                context.team_id, user_ids=[context.user_id], year=year
            )
            return Return.ok([to_dict(report) for report in reports])


class GetBandwidthReportUseCase:
    """Visible to its owner and to reviewers who have the owner in scope"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, report_id: UUID) -> Result[dict]:
        async with self.uow:
            report = await self.uow.bandwidth_reports.get(context.team_id, report_id)
            if report is None:
                return Return.err(Error("REPORT_NOT_FOUND", "Bandwidth report not found"))

            if report.user_id != context.user_id:
                if not context.can(TeamAction.APPROVE_BANDWIDTH):
                    return Return.err(Error("REPORT_NOT_FOUND", "Bandwidth report not found"))

            data = (await _with_users(self.uow, [report]))[0]
            return Return.ok(data)


class ListBandwidthReportsUseCase:
    """All reports of the members the requester may see (VIEW_REPORTS)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        context: TeamContext,
        status: Optional[BandwidthStatus] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Result[list]:
        if not context.can(TeamAction.VIEW_REPORTS):
            return _forbidden()

        async with self.uow:
            scoped = await get_scoped_user_ids(
                self.uow, context.team_id, context.user_id, context.role
            )
            reports = await self.uow.bandwidth_reports.list(
                context.team_id, user_ids=scoped, status=status, year=year, month=month
            )
            return Return.ok(await _with_users(self.uow, reports))


class ListPendingBandwidthReportsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext) -> Result[list]:
        return await ListBandwidthReportsUseCase(self.uow).execute(
            context, status=BandwidthStatus.submitted
        )


class GetBandwidthSummaryUseCase:
    """
    Team capacity for one month, over submitted and approved reports of
    the scoped members: available, allocated and unallocated days, average
    utilization and per-project totals.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, year: int, month: int) -> Result[dict]:
        if not context.can(TeamAction.VIEW_REPORTS):
            return _forbidden()

        async with self.uow:
            scoped = await get_scoped_user_ids(
                self.uow, context.team_id, context.user_id, context.role
            )
            reports = [
                report
                for report in await self.uow.bandwidth_reports.list(
                    context.team_id, user_ids=scoped, year=year, month=month
                )
                if report.status in SUMMARY_STATUSES
            ]

            available = sum(report.available_days for report in reports)
            allocated = sum(total_allocated(report) for report in reports)
            utilizations = [
                100 * total_allocated(report) / report.available_days
                for report in reports
                if report.available_days
            ]

            per_project = defaultdict(lambda: {"allocated_days": 0.0, "members": 0})
            for report in reports:
                for item in report.allocations or []:
                    totals = per_project[item["project_id"]]
                    totals["allocated_days"] += float(item.get("allocated_days", 0))
                    totals["members"] += 1

            projects = {}
            if per_project:
                found = await self.uow.projects.get_by_ids(
                    context.team_id, [UUID(project_id) for project_id in per_project]
                )
                projects = {str(project.id): project.name for project in found}

            return Return.ok(
                {
                    "year": year,
                    "month": month,
                    "reports": len(reports),
                    "members_in_scope": len(scoped),
                    "total_available_days": available,
                    "total_allocated_days": allocated,
                    "unallocated_days": max(available - allocated, 0),
                    "average_utilization": (
                        round(sum(utilizations) / len(utilizations), 1) if utilizations else 0
                    ),
                    "projects": [
                        {
                            "project_id": project_id,
                            "name": projects.get(project_id),
                            "allocated_days": totals["allocated_days"],
                            "members": totals["members"],
                        }
                        for project_id, totals in sorted(per_project.items())
                    ],
                }
            )
