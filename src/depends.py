from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError, raise_for_error
from src.api.utils.jwt import verify_jwt
from src.app.services.team_context import TeamContext, resolve_team_context
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@asynccontextmanager
async def unit_of_work_scope():
    """Unit of work for code running outside a request (reminder jobs)"""
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Returns:
        Decoded JWT payload containing user_id and the system role

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    payload = verify_jwt(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload


def current_user_id(current_user: dict) -> UUID:
    try:
        return UUID(current_user["user_id"])
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject",
        )


async def get_team_context(
    team_id: UUID,
    request: Request,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> TeamContext:
    """
    Resolve the caller's membership in the team from the path, once per
    request. Later dependencies and the handler reuse the cached snapshot.
    """
    cached = getattr(request.state, "team_context", None)
    if cached is not None and cached.team_id == team_id:
        return cached

    user_id = current_user_id(current_user)
    async with uow:
        result = await resolve_team_context(uow, team_id, user_id)
    if result.is_err():
        raise_for_error(result.error)

    request.state.team_context = result.value
    return result.value


def require_team_permission(action: str):
    """Dependency factory: 403 unless the caller's team role allows action"""

    async def check(context: TeamContext = Depends(get_team_context)) -> TeamContext:
        if not context.can(action):
            raise ClientError(
                Error("INSUFFICIENT_PERMISSION", f"Your team role does not allow {action}"),
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return context

    return check
