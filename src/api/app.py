import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from starlette.middleware.base import BaseHTTPMiddleware

import src.domain.entities  # noqa: F401  registers every table on SQLModel.metadata
from src.app.services.notification_bus import notification_bus
from src.app.services.reminder_scheduler import ReminderScheduler
from src.app.services.security_logger import (
    SUSPICIOUS_REQUEST,
    UNAUTHORIZED_ACCESS,
    configure_security_logging,
    is_suspicious,
    log_security_event,
)
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class SecurityLoggingMiddleware(BaseHTTPMiddleware):
    """
    Flags requests whose path or query values look like injection or
    traversal attempts, and records every 401/403 response.
    """

    async def dispatch(self, request: Request, call_next):
        ip = _client_ip(request)
        query_values = [value for _, value in request.query_params.multi_items()]
        if is_suspicious(request.url.path, *query_values):
            log_security_event(
                SUSPICIOUS_REQUEST,
                ip=ip,
                method=request.method,
                path=request.url.path,
                query=str(request.query_params),
                user_agent=request.headers.get("user-agent"),
            )

        response = await call_next(request)

        if response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            context = getattr(request.state, "team_context", None)
            log_security_event(
                UNAUTHORIZED_ACCESS,
                ip=ip,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                user_id=str(context.user_id) if context else None,
            )
        return response


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    if exc.base_error.details:
        error_dict["details"] = exc.base_error.details
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    if exc.base_error.details:
        error_dict["details"] = exc.base_error.details
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    error_dict = {
        "code": "VALIDATION_ERROR",
        "message": "Request validation failed",
        "details": {"errors": exc.errors()},
    }
    logger.warning(f"Validation error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": jsonable_encoder(error_dict)},
    )


def create_app(ApplicationConfig) -> FastAPI:
    level = getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=level)
    configure_security_logging(
        enabled=ApplicationConfig.ENABLE_SECURITY_LOGGING,
        log_file=ApplicationConfig.SECURITY_LOG_FILE or None,
    )
    notification_bus.max_queue_size = ApplicationConfig.NOTIFICATION_QUEUE_SIZE

    from src.depends import engine, unit_of_work_scope

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        scheduler = None
        if ApplicationConfig.ENABLE_SCHEDULERS:
            scheduler = ReminderScheduler(
                unit_of_work_scope,
                notification_bus,
                bandwidth_day=ApplicationConfig.BANDWIDTH_REMINDER_DAY,
                bandwidth_hour=ApplicationConfig.BANDWIDTH_REMINDER_HOUR,
                task_hour=ApplicationConfig.TASK_REMINDER_HOUR,
            )
            await scheduler.start()

        yield

        if scheduler is not None:
            await scheduler.stop()
        await engine.dispose()

    app = FastAPI(title="Workboard API", version="0.1.0", lifespan=lifespan)
    app.state.config = ApplicationConfig

    app.add_middleware(SecurityLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import (
        analytics,
        bandwidth,
        health_check,
        newsletters,
        notifications,
        project_members,
        projects,
        sprints,
        tasks,
        teams,
    )

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(teams.router, prefix=prefix, tags=["Teams"])
    app.include_router(projects.router, prefix=prefix, tags=["Projects"])
    app.include_router(project_members.router, prefix=prefix, tags=["Project Members"])
    app.include_router(sprints.router, prefix=prefix, tags=["Sprints"])
    app.include_router(tasks.router, prefix=prefix, tags=["Tasks"])
    app.include_router(bandwidth.router, prefix=prefix, tags=["Bandwidth"])
    app.include_router(notifications.router, prefix=prefix, tags=["Notifications"])
    app.include_router(newsletters.router, prefix=prefix, tags=["Newsletters"])
    app.include_router(analytics.router, prefix=prefix, tags=["Analytics"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app
