from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.use_cases.bandwidth import (
    AllocationItem,
    ApproveBandwidthReportUseCase,
    CreateBandwidthReportCommand,
    CreateBandwidthReportUseCase,
    DeleteBandwidthReportUseCase,
    GetBandwidthSummaryUseCase,
    RejectBandwidthReportUseCase,
    SubmitBandwidthReportUseCase,
    UpdateBandwidthReportCommand,
    UpdateBandwidthReportUseCase,
    allocated_percentage,
)
from src.domain.entities import (
    BandwidthReport,
    BandwidthStatus,
    Project,
    TeamMembership,
    TeamRole,
)


def _echo(entity, *args, **kwargs):
    return entity


@pytest.fixture
def report_uow(mock_uow):
    mock_uow.bandwidth_reports = MagicMock()
    mock_uow.bandwidth_reports.get = AsyncMock()
    mock_uow.bandwidth_reports.get_for_period = AsyncMock(return_value=None)
    mock_uow.bandwidth_reports.list = AsyncMock(return_value=[])
    mock_uow.bandwidth_reports.create = AsyncMock(side_effect=_echo)
    mock_uow.bandwidth_reports.update = AsyncMock(side_effect=_echo)
    mock_uow.bandwidth_reports.delete = AsyncMock()

    mock_uow.projects = MagicMock()
    mock_uow.projects.get_by_ids = AsyncMock(return_value=[])

    mock_uow.team_memberships = MagicMock()
    mock_uow.team_memberships.list_active = AsyncMock(return_value=[])
    mock_uow.team_memberships.list_direct_reports = AsyncMock(return_value=[])
    return mock_uow


def _report(context, user_id=None, status=BandwidthStatus.draft, allocated=10.0, available=18.0):
    return BandwidthReport(
        id=uuid4(),
        team_id=context.team_id,
        user_id=user_id or context.user_id,
        month=5,
        year=2026,
        total_working_days=21,
        available_days=available,
        allocations=[
            {
                "project_id": str(uuid4()),
                "allocated_days": allocated,
                "allocated_percentage": allocated_percentage(allocated, available),
            }
        ],
        planned_leave=[],
        status=status,
    )


def test_allocated_percentage_rounds_and_handles_zero():
    assert allocated_percentage(5, 20) == 25
    assert allocated_percentage(1, 3) == 33
    assert allocated_percentage(4, 0) == 0


@pytest.mark.asyncio
async def test_create_report_starts_as_draft_with_percentages(report_uow, make_context):
    # Arrange
    member = make_context(TeamRole.member)
    project = Project(id=uuid4(), team_id=member.team_id, name="Billing", created_by=uuid4())
    report_uow.projects.get_by_ids.return_value = [project]
    command = CreateBandwidthReportCommand(
        month=6,
        year=2026,
        total_working_days=22,
        available_days=20,
        allocations=[AllocationItem(project_id=project.id, allocated_days=5)],
    )

    # Act
    result = await CreateBandwidthReportUseCase(report_uow).execute(member, command)

    # Assert
    assert result.is_ok()
    assert result.value["status"] == "draft"
    assert result.value["allocations"] == [
        {"project_id": str(project.id), "allocated_days": 5.0, "allocated_percentage": 25}
    ]
    report_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_report_twice_for_same_month_conflicts(report_uow, make_context):
    member = make_context()
    report_uow.bandwidth_reports.get_for_period.return_value = _report(member)

    result = await CreateBandwidthReportUseCase(report_uow).execute(
        member,
        CreateBandwidthReportCommand(month=5, year=2026, total_working_days=21, available_days=18),
    )

    assert result.error.code == "REPORT_EXISTS"
    report_uow.bandwidth_reports.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_report_rejects_foreign_projects(report_uow, make_context):
    member = make_context()
    foreign = uuid4()

    result = await CreateBandwidthReportUseCase(report_uow).execute(
        member,
        CreateBandwidthReportCommand(
            month=5,
            year=2026,
            total_working_days=21,
            available_days=18,
            allocations=[AllocationItem(project_id=foreign, allocated_days=3)],
        ),
    )

    assert result.error.code == "INVALID_PROJECT"
    assert result.error.details == {"project_ids": [str(foreign)]}


@pytest.mark.asyncio
async def test_available_days_cannot_exceed_working_days(report_uow, make_context):
    result = await CreateBandwidthReportUseCase(report_uow).execute(
        make_context(),
        CreateBandwidthReportCommand(month=5, year=2026, total_working_days=10, available_days=12),
    )

    assert result.error.code == "INVALID_AVAILABLE_DAYS"
    report_uow.__aenter__.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_over_allocated_report_fails(report_uow, make_context):
    member = make_context()
    report = _report(member, allocated=20, available=18)
    report_uow.bandwidth_reports.get.return_value = report

    result = await SubmitBandwidthReportUseCase(report_uow).execute(member, report.id)

    assert result.error.code == "OVER_ALLOCATED"
    assert report.status == BandwidthStatus.draft


@pytest.mark.asyncio
async def test_submit_draft_report(report_uow, make_context):
    member = make_context()
    report = _report(member)
    report_uow.bandwidth_reports.get.return_value = report
    now = datetime(2026, 5, 27, 10, 0)

    result = await SubmitBandwidthReportUseCase(report_uow).execute(member, report.id, now)

    assert result.value["status"] == "submitted"
    assert report.submitted_at == now
    assert report_uow.audit_events.create.await_args.args[0].action == "bandwidth_submitted"


@pytest.mark.asyncio
async def test_submit_someone_elses_report_is_forbidden(report_uow, make_context):
    member = make_context()
    report_uow.bandwidth_reports.get.return_value = _report(member, user_id=uuid4())

    result = await SubmitBandwidthReportUseCase(report_uow).execute(member, uuid4())

    assert result.error.code == "INSUFFICIENT_PERMISSION"


@pytest.mark.asyncio
async def test_submitted_report_is_not_editable(report_uow, make_context):
    member = make_context()
    report_uow.bandwidth_reports.get.return_value = _report(
        member, status=BandwidthStatus.submitted
    )

    result = await UpdateBandwidthReportUseCase(report_uow).execute(
        member, uuid4(), UpdateBandwidthReportCommand(notes="later")
    )

    assert result.error.code == "REPORT_NOT_EDITABLE"


@pytest.mark.asyncio
async def test_editing_rejected_report_returns_it_to_draft(report_uow, make_context):
    # Arrange
    member = make_context()
    report = _report(member, status=BandwidthStatus.rejected, allocated=9, available=18)
    report.rejection_reason = "Missing leave"
    report_uow.bandwidth_reports.get.return_value = report

    # Act
    result = await UpdateBandwidthReportUseCase(report_uow).execute(
        member, report.id, UpdateBandwidthReportCommand(available_days=12)
    )

    # Assert
    assert result.value["status"] == "draft"
    assert report.rejection_reason is None
    assert report.allocations[0]["allocated_percentage"] == 75


@pytest.mark.asyncio
async def test_approved_report_cannot_be_deleted(report_uow, make_context):
    member = make_context()
    report_uow.bandwidth_reports.get.return_value = _report(
        member, status=BandwidthStatus.approved
    )

    result = await DeleteBandwidthReportUseCase(report_uow).execute(member, uuid4())

    assert result.error.code == "REPORT_NOT_EDITABLE"
    report_uow.bandwidth_reports.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_manager_approves_submitted_report(report_uow, make_context, bus):
    # Arrange
    manager = make_context(TeamRole.manager)
    owner_id = uuid4()
    report = _report(manager, user_id=owner_id, status=BandwidthStatus.submitted)
    report_uow.bandwidth_reports.get.return_value = report
    report_uow.team_memberships.list_active.return_value = [
        TeamMembership(team_id=manager.team_id, user_id=owner_id)
    ]
    subscription = bus.subscribe(manager.team_id, owner_id)

    # Act
    result = await ApproveBandwidthReportUseCase(report_uow, bus).execute(manager, report.id)

    # Assert
    assert result.value["status"] == "approved"
    assert report.approved_by == manager.user_id
    assert subscription.queue.get_nowait()["type"] == "bandwidth_approved"


@pytest.mark.asyncio
async def test_member_cannot_approve_reports(report_uow, make_context):
    result = await ApproveBandwidthReportUseCase(report_uow).execute(
        make_context(TeamRole.member), uuid4()
    )

    assert result.error.code == "INSUFFICIENT_PERMISSION"


@pytest.mark.asyncio
async def test_approving_draft_report_fails(report_uow, make_context):
    manager = make_context(TeamRole.manager)
    report = _report(manager, user_id=uuid4())
    report_uow.bandwidth_reports.get.return_value = report
    report_uow.team_memberships.list_active.return_value = [
        TeamMembership(team_id=manager.team_id, user_id=report.user_id)
    ]

    result = await ApproveBandwidthReportUseCase(report_uow).execute(manager, report.id)

    assert result.error.code == "REPORT_NOT_SUBMITTED"


@pytest.mark.asyncio
async def test_reject_requires_reason(report_uow, make_context):
    result = await RejectBandwidthReportUseCase(report_uow).execute(
        make_context(TeamRole.admin), uuid4(), "   "
    )

    assert result.error.code == "REJECTION_REASON_REQUIRED"
    report_uow.bandwidth_reports.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_reject_stores_reason(report_uow, make_context):
    admin = make_context(TeamRole.admin)
    report = _report(admin, user_id=uuid4(), status=BandwidthStatus.submitted)
    report_uow.bandwidth_reports.get.return_value = report
    report_uow.team_memberships.list_active.return_value = [
        TeamMembership(team_id=admin.team_id, user_id=report.user_id)
    ]

    result = await RejectBandwidthReportUseCase(report_uow).execute(
        admin, report.id, " Allocations do not match the roadmap "
    )

    assert result.value["status"] == "rejected"
    assert report.rejection_reason == "Allocations do not match the roadmap"


@pytest.mark.asyncio
async def test_summary_counts_only_submitted_and_approved(report_uow, make_context):
    # Arrange
    manager = make_context(TeamRole.manager)
    approved = _report(manager, uuid4(), BandwidthStatus.approved, allocated=10, available=20)
    submitted = _report(manager, uuid4(), BandwidthStatus.submitted, allocated=15, available=20)
    draft = _report(manager, uuid4(), BandwidthStatus.draft, allocated=5, available=20)
    report_uow.team_memberships.list_active.return_value = [
        TeamMembership(team_id=manager.team_id, user_id=r.user_id)
        for r in (approved, submitted, draft)
    ]
    report_uow.bandwidth_reports.list.return_value = [approved, submitted, draft]

    # Act
    result = await GetBandwidthSummaryUseCase(report_uow).execute(manager, 2026, 5)

    # Assert
    summary = result.value
    assert summary["reports"] == 2
    assert summary["members_in_scope"] == 3
    assert summary["total_available_days"] == 40
    assert summary["total_allocated_days"] == 25
    assert summary["unallocated_days"] == 15
    assert summary["average_utilization"] == 62.5
    assert len(summary["projects"]) == 2
