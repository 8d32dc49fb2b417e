"""
Admin Analytics API Routes

Dashboards scoped to the members the caller may see.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.analytics import (
    GetActivityFeedUseCase,
    GetDashboardUseCase,
    GetMembersOverviewUseCase,
    GetTeamStatisticsUseCase,
)
from src.depends import get_team_context, get_unit_of_work, require_team_permission
from src.domain.permissions import TeamAction

router = APIRouter(prefix="/teams/{team_id}/admin", tags=["Analytics"])


@router.get("/dashboard")
async def get_dashboard(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetDashboardUseCase(uow).execute(context)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/members")
async def get_members_overview(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    search: Optional[str] = Query(None, max_length=100),
):
    result = await GetMembersOverviewUseCase(uow).execute(context, search)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/activity")
async def get_activity_feed(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    user_id: Optional[UUID] = Query(None),
    limit: int = Query(100, ge=1, le=500),
):
    result = await GetActivityFeedUseCase(uow).execute(context, start, end, user_id, limit)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/statistics")
async def get_team_statistics(
    context: TeamContext = Depends(require_team_permission(TeamAction.VIEW_TEAM_REPORTS)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    sprint_limit: int = Query(10, ge=1, le=50),
):
    """
    Team Statistics

    Tasks by status and priority for the scoped members, plus the velocity
    history of the team's completed sprints.

    Raises:
        - 403 Forbidden: INSUFFICIENT_PERMISSION (VIEW_TEAM_REPORTS)
    """
    result = await GetTeamStatisticsUseCase(uow).execute(context, sprint_limit)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
