"""
Bandwidth Report API Routes
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.bandwidth import (
    ApproveBandwidthReportUseCase,
    CreateBandwidthReportCommand,
    CreateBandwidthReportUseCase,
    DeleteBandwidthReportUseCase,
    GetBandwidthReportUseCase,
    GetBandwidthSummaryUseCase,
    ListBandwidthReportsUseCase,
    ListMyBandwidthReportsUseCase,
    ListPendingBandwidthReportsUseCase,
    RejectBandwidthReportCommand,
    RejectBandwidthReportUseCase,
    SubmitBandwidthReportUseCase,
    UpdateBandwidthReportCommand,
    UpdateBandwidthReportUseCase,
)
from src.depends import get_team_context, get_unit_of_work
from src.domain.entities import BandwidthStatus

router = APIRouter(prefix="/teams/{team_id}/bandwidth", tags=["Bandwidth"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(
    request: CreateBandwidthReportCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Bandwidth Report (draft)

    Raises:
        - 400 Bad Request: INVALID_AVAILABLE_DAYS, INVALID_PROJECT
        - 409 Conflict: REPORT_EXISTS
    """
    result = await CreateBandwidthReportUseCase(uow).execute(context, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/me")
async def list_my_reports(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    year: Optional[int] = Query(None, ge=2020),
):
    result = await ListMyBandwidthReportsUseCase(uow).execute(context, year)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/pending")
async def list_pending_reports(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListPendingBandwidthReportsUseCase(uow).execute(context)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/summary")
async def get_summary(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    year: int = Query(..., ge=2020),
    month: int = Query(..., ge=1, le=12),
):
    result = await GetBandwidthSummaryUseCase(uow).execute(context, year, month)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("")
async def list_reports(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    report_status: Optional[BandwidthStatus] = Query(None, alias="status"),
    year: Optional[int] = Query(None, ge=2020),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    result = await ListBandwidthReportsUseCase(uow).execute(context, report_status, year, month)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{report_id}")
async def get_report(
    report_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetBandwidthReportUseCase(uow).execute(context, report_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{report_id}")
async def update_report(
    report_id: UUID,
    request: UpdateBandwidthReportCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UpdateBandwidthReportUseCase(uow).execute(context, report_id, request)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{report_id}")
async def delete_report(
    report_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await DeleteBandwidthReportUseCase(uow).execute(context, report_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{report_id}/submit")
async def submit_report(
    report_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Submit Bandwidth Report

    Raises:
        - 400 Bad Request: OVER_ALLOCATED
        - 409 Conflict: REPORT_NOT_DRAFT
    """
    result = await SubmitBandwidthReportUseCase(uow).execute(context, report_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{report_id}/approve")
async def approve_report(
    report_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ApproveBandwidthReportUseCase(uow).execute(context, report_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{report_id}/reject")
async def reject_report(
    report_id: UUID,
    request: RejectBandwidthReportCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await RejectBandwidthReportUseCase(uow).execute(context, report_id, request.reason)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
