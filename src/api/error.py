from typing import NoReturn

from fastapi import status

from src.libs.result import Error

NOT_FOUND_CODES = frozenset(
    {
        "USER_NOT_FOUND",
        "TEAM_NOT_FOUND",
        "PROJECT_NOT_FOUND",
        "SPRINT_NOT_FOUND",
        "TASK_NOT_FOUND",
        "PARENT_NOT_FOUND",
        "MEMBER_NOT_FOUND",
        "REPORT_NOT_FOUND",
        "NOTIFICATION_NOT_FOUND",
        "NEWSLETTER_NOT_FOUND",
    }
)

FORBIDDEN_CODES = frozenset(
    {
        "INSUFFICIENT_PERMISSION",
        "NOT_A_TEAM_MEMBER",
        "TEAM_INACTIVE",
        "SYSTEM_ADMIN_REQUIRED",
        "CANNOT_REMOVE_OWNER",
    }
)

CONFLICT_CODES = frozenset(
    {
        "ACTIVE_SPRINT_EXISTS",
        "ALREADY_TEAM_MEMBER",
        "ALREADY_PROJECT_MEMBER",
        "REPORT_EXISTS",
        "LAST_PROJECT_OWNER",
        "SPRINT_NOT_PLANNING",
        "SPRINT_NOT_ACTIVE",
        "SPRINT_NOT_COMPLETED",
        "SPRINT_COMPLETED",
        "SPRINT_ALREADY_CANCELLED",
        "SPRINT_CLOSED",
        "SPRINT_DELETE_FORBIDDEN",
        "REPORT_NOT_EDITABLE",
        "REPORT_NOT_DRAFT",
        "REPORT_NOT_SUBMITTED",
    }
)

VALIDATION_CODES = frozenset(
    {
        "INVALID_ROLE",
        "INVALID_SPRINT_DATES",
        "INVALID_TARGET_SPRINT",
        "INVALID_BACKLOG_MODE",
        "INVALID_PARENT",
        "INVALID_HIERARCHY",
        "PARENT_REQUIRED",
        "INVALID_TEAM_LEAD",
        "INVALID_REPORTING_MANAGER",
        "ASSIGNEE_NOT_MEMBER",
        "USER_NOT_IN_TEAM",
        "TASK_NOT_IN_SPRINT",
        "INVALID_AVAILABLE_DAYS",
        "INVALID_PROJECT",
        "OVER_ALLOCATED",
        "REJECTION_REASON_REQUIRED",
        "INVALID_ID",
    }
)


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def status_for(code: str) -> int:
    """HTTP status of a client error code; 500 for anything unknown"""
    if code in NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if code in FORBIDDEN_CODES:
        return status.HTTP_403_FORBIDDEN
    if code in CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    if code in VALIDATION_CODES:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def raise_for_error(error: Error) -> NoReturn:
    status_code = status_for(error.code)
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
