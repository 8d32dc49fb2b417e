"""
Bandwidth Report Use Cases (owner side)

A member declares their capacity for a month, edits it while it is a
draft (or after a rejection), and submits it for review.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain.entities import BandwidthReport, BandwidthStatus
from src.libs.result import Error, Result, Return

from .dtos import AllocationItem, CreateBandwidthReportCommand, UpdateBandwidthReportCommand

EDITABLE_STATUSES = (BandwidthStatus.draft, BandwidthStatus.rejected)


def allocated_percentage(allocated_days: float, available_days: float) -> int:
    if not available_days:
        return 0
    return round(100 * allocated_days / available_days)


def total_allocated(report: BandwidthReport) -> float:
    return sum(float(item.get("allocated_days", 0)) for item in report.allocations or [])


def _derive_allocations(items: Iterable[AllocationItem], available_days: float) -> List[dict]:
    return [
        {
            "project_id": str(item.project_id),
            "allocated_days": item.allocated_days,
            "allocated_percentage": allocated_percentage(item.allocated_days, available_days),
        }
        for item in items
    ]


def _recompute_percentages(allocations: List[dict], available_days: float) -> List[dict]:
    return [
        dict(
            item,
            allocated_percentage=allocated_percentage(
                float(item.get("allocated_days", 0)), available_days
            ),
        )
        for item in allocations
    ]


def _check_days(total_working_days: float, available_days: float) -> Result[None]:
    if available_days > total_working_days:
        return Return.err(
            Error(
                "INVALID_AVAILABLE_DAYS",
                "available_days cannot exceed total_working_days",
            )
        )
    return Return.ok(None)


async def _check_projects(
    uow: UnitOfWork, team_id: UUID, items: Iterable[AllocationItem]
) -> Result[None]:
    project_ids = {item.project_id for item in items}
    if not project_ids:
        return Return.ok(None)
    found = {project.id for project in await uow.projects.get_by_ids(team_id, project_ids)}
    missing = project_ids - found
    if missing:
        return Return.err(
            Error(
                "INVALID_PROJECT",
                "Allocations reference projects outside this team",
                details={"project_ids": sorted(str(project_id) for project_id in missing)},
            )
        )
    return Return.ok(None)


class CreateBandwidthReportUseCase:
    """
    Business Rules:
    - One report per user and month (REPORT_EXISTS)
    - available_days cannot exceed total_working_days
    - Allocations must reference projects of the team
    - Reports start as draft
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, command: CreateBandwidthReportCommand
    ) -> Result[dict]:
        days = _check_days(command.total_working_days, command.available_days)
        if days.is_err():
            return days

        async with self.uow:
            existing = await self.uow.bandwidth_reports.get_for_period(
                context.team_id, context.user_id, command.year, command.month
            )
            if existing is not None:
                return Return.err(
                    Error(
                        "REPORT_EXISTS",
                        f"A report for {command.year}-{command.month:02d} already exists",
                    )
                )

            projects = await _check_projects(self.uow, context.team_id, command.allocations)
            if projects.is_err():
                return projects

            report = BandwidthReport(
                team_id=context.team_id,
                user_id=context.user_id,
                month=command.month,
                year=command.year,
                total_working_days=command.total_working_days,
                available_days=command.available_days,
                allocations=_derive_allocations(command.allocations, command.available_days),
                planned_leave=[leave.model_dump(mode="json") for leave in command.planned_leave],
                notes=command.notes,
                status=BandwidthStatus.draft,
            )
            report = await self.uow.bandwidth_reports.create(report)
            await self.uow.commit()

            return Return.ok(to_dict(report))


class UpdateBandwidthReportUseCase:
    """Owner only, while draft or rejected; a rejected report goes back to draft"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, report_id: UUID, command: UpdateBandwidthReportCommand
    ) -> Result[dict]:
        async with self.uow:
            found = await _get_own_report(self.uow, context, report_id)
            if found.is_err():
                return found
            report = found.value

            if report.status not in EDITABLE_STATUSES:
                return Return.err(
                    Error(
                        "REPORT_NOT_EDITABLE",
                        f"Report cannot be edited while {report.status.value}",
                    )
                )

            total_working_days = (
                command.total_working_days
                if command.total_working_days is not None
                else report.total_working_days
            )
            available_days = (
                command.available_days
                if command.available_days is not None
                else report.available_days
            )
            days = _check_days(total_working_days, available_days)
            if days.is_err():
                return days

            if command.allocations is not None:
                projects = await _check_projects(self.uow, context.team_id, command.allocations)
                if projects.is_err():
                    return projects
                report.allocations = _derive_allocations(command.allocations, available_days)
            else:
                report.allocations = _recompute_percentages(report.allocations, available_days)

            if command.planned_leave is not None:
                report.planned_leave = [
                    leave.model_dump(mode="json") for leave in command.planned_leave
                ]
            if command.notes is not None:
                report.notes = command.notes

            report.total_working_days = total_working_days
            report.available_days = available_days
            if report.status == BandwidthStatus.rejected:
                report.status = BandwidthStatus.draft
                report.rejection_reason = None

            report = await self.uow.bandwidth_reports.update(report)
            await self.uow.commit()

            return Return.ok(to_dict(report))


class DeleteBandwidthReportUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, report_id: UUID) -> Result[dict]:
        async with self.uow:
            found = await _get_own_report(self.uow, context, report_id)
            if found.is_err():
                return found
            report = found.value

            if report.status == BandwidthStatus.approved:
                return Return.err(
                    Error("REPORT_NOT_EDITABLE", "Approved reports cannot be deleted")
                )

            await self.uow.bandwidth_reports.delete(report)
            await self.uow.commit()

            return Return.ok({"id": str(report_id), "deleted": True})


class SubmitBandwidthReportUseCase:
    """
    Business Rules:
    - Only drafts are submitted (REPORT_NOT_DRAFT)
    - Allocated days must fit in available days (OVER_ALLOCATED)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, report_id: UUID, now: Optional[datetime] = None
    ) -> Result[dict]:
        now = now or datetime.utcnow()
        async with self.uow:
            found = await _get_own_report(self.uow, context, report_id)
            if found.is_err():
                return found
            report = found.value

            if report.status != BandwidthStatus.draft:
                return Return.err(
                    Error("REPORT_NOT_DRAFT", "Only draft reports can be submitted")
                )

            allocated = total_allocated(report)
            if allocated > report.available_days:
                return Return.err(
                    Error(
                        "OVER_ALLOCATED",
                        f"Allocated {allocated:g} days but only "
                        f"{report.available_days:g} are available",
                    )
                )

            report.status = BandwidthStatus.submitted
            report.submitted_at = now
            report = await self.uow.bandwidth_reports.update(report)
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "bandwidth_submitted",
                {"report_id": str(report.id), "year": report.year, "month": report.month},
            )
            await self.uow.commit()

            return Return.ok(to_dict(report))


async def _get_own_report(
    uow: UnitOfWork, context: TeamContext, report_id: UUID
) -> Result[BandwidthReport]:
    report = await uow.bandwidth_reports.get(context.team_id, report_id)
    if report is None:
        return Return.err(Error("REPORT_NOT_FOUND", "Bandwidth report not found"))
    if report.user_id != context.user_id:
        return Return.err(
            Error("INSUFFICIENT_PERMISSION", "Only the report owner can change it")
        )
    return Return.ok(report)
