"""
Notification API Routes

Listing and housekeeping of the caller's notifications, plus a Server-Sent
Events stream that pushes new ones as they are created.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from src.api.error import raise_for_error
from src.app.services.notification_bus import notification_bus
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.notifications import (
    DeleteNotificationUseCase,
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from src.depends import get_team_context, get_unit_of_work

router = APIRouter(prefix="/teams/{team_id}/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
):
    result = await ListNotificationsUseCase(uow).execute(context, unread_only, limit)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/stream")
async def stream_notifications(
    request: Request,
    context: TeamContext = Depends(get_team_context),
):
    """
    Notification Stream (text/event-stream)

    Events: "connected" once, "notification" per new notification and
    "ping" as heartbeat while idle.
    """
    heartbeat = request.app.state.config.NOTIFICATION_HEARTBEAT_SECONDS
    return StreamingResponse(
        notification_bus.stream(context.team_id, context.user_id, heartbeat),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.patch("/read-all")
async def mark_all_notifications_read(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await MarkAllNotificationsReadUseCase(uow).execute(context)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await MarkNotificationReadUseCase(uow).execute(context, notification_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await DeleteNotificationUseCase(uow).execute(context, notification_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
