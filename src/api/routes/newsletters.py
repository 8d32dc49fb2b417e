"""
Newsletter API Routes
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.newsletters import (
    CreateNewsletterCommand,
    CreateNewsletterUseCase,
    DeleteNewsletterUseCase,
    GetNewsletterUseCase,
    ListNewslettersUseCase,
    UpdateNewsletterCommand,
    UpdateNewsletterUseCase,
)
from src.depends import get_team_context, get_unit_of_work

router = APIRouter(prefix="/teams/{team_id}/newsletters", tags=["Newsletters"])


@router.get("")
async def list_newsletters(
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    project_id: Optional[UUID] = Query(None),
    tag: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Pinned newsletters first, then newest first"""
    result = await ListNewslettersUseCase(uow).execute(
        context, project_id=project_id, tag=tag, search=search, page=page, limit=limit
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_newsletter(
    command: CreateNewsletterCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await CreateNewsletterUseCase(uow).execute(context, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{newsletter_id}")
async def get_newsletter(
    newsletter_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetNewsletterUseCase(uow).execute(context, newsletter_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{newsletter_id}")
async def update_newsletter(
    newsletter_id: UUID,
    command: UpdateNewsletterCommand,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Author, team admin or manager only"""
    result = await UpdateNewsletterUseCase(uow).execute(context, newsletter_id, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/{newsletter_id}")
async def delete_newsletter(
    newsletter_id: UUID,
    context: TeamContext = Depends(get_team_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await DeleteNewsletterUseCase(uow).execute(context, newsletter_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
