"""
Bandwidth Report Review Use Cases
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.audit import record_event
from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.scoped_query import get_scoped_user_ids
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.serializers import to_dict
from src.domain.entities import BandwidthReport, BandwidthStatus, NotificationType
from src.domain.permissions import TeamAction
from src.libs.result import Error, Result, Return


def _period(report: BandwidthReport) -> str:
    return f"{report.year}-{report.month:02d}"


async def _get_reviewable(
    uow: UnitOfWork, context: TeamContext, report_id: UUID
) -> Result[BandwidthReport]:
    if not context.can(TeamAction.APPROVE_BANDWIDTH):
        return Return.err(
            Error("INSUFFICIENT_PERMISSION", "You cannot review bandwidth reports")
        )

    report = await uow.bandwidth_reports.get(context.team_id, report_id)
    if report is None:
        return Return.err(Error("REPORT_NOT_FOUND", "Bandwidth report not found"))

    scoped = await get_scoped_user_ids(uow, context.team_id, context.user_id, context.role)
    if report.user_id not in scoped:
        return Return.err(Error("REPORT_NOT_FOUND", "Bandwidth report not found"))

    if report.status != BandwidthStatus.submitted:
        return Return.err(
            Error("REPORT_NOT_SUBMITTED", "Only submitted reports can be reviewed")
        )
    return Return.ok(report)


class ApproveBandwidthReportUseCase:
    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(
        self, context: TeamContext, report_id: UUID, now: Optional[datetime] = None
    ) -> Result[dict]:
        now = now or datetime.utcnow()
        async with self.uow:
            found = await _get_reviewable(self.uow, context, report_id)
            if found.is_err():
                return found
            report = found.value

            report.status = BandwidthStatus.approved
            report.approved_by = context.user_id
            report.approved_at = now
            report.rejection_reason = None
            report = await self.uow.bandwidth_reports.update(report)

            notifier = Notifier(self.uow, self.bus)
            await notifier.notify(
                team_id=context.team_id,
                recipient_id=report.user_id,
                actor_id=context.user_id,
                type=NotificationType.bandwidth_approved,
                title="Bandwidth report approved",
                message=f"Your bandwidth report for {_period(report)} was approved",
            )
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "bandwidth_approved",
                {"report_id": str(report.id), "owner_id": str(report.user_id)},
            )
            await self.uow.commit()
            notifier.publish()

            return Return.ok(to_dict(report))


class RejectBandwidthReportUseCase:
    """A rejection needs a non-blank reason; the owner may then edit and resubmit"""

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(self, context: TeamContext, report_id: UUID, reason: str) -> Result[dict]:
        reason = (reason or "").strip()
        if not reason:
            return Return.err(
                Error("REJECTION_REASON_REQUIRED", "A reason is required to reject a report")
            )

        async with self.uow:
            found = await _get_reviewable(self.uow, context, report_id)
            if found.is_err():
                return found
            report = found.value

            report.status = BandwidthStatus.rejected
            report.rejection_reason = reason
            report.approved_by = None
            report.approved_at = None
            report = await self.uow.bandwidth_reports.update(report)

            notifier = Notifier(self.uow, self.bus)
            await notifier.notify(
                team_id=context.team_id,
                recipient_id=report.user_id,
                actor_id=context.user_id,
                type=NotificationType.bandwidth_rejected,
                title="Bandwidth report rejected",
                message=f"Your bandwidth report for {_period(report)} was rejected: {reason}",
            )
            await record_event(
                self.uow,
                context.team_id,
                context.user_id,
                "bandwidth_rejected",
                {"report_id": str(report.id), "owner_id": str(report.user_id)},
            )
            await self.uow.commit()
            notifier.publish()

            return Return.ok(to_dict(report))
