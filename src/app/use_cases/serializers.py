"""
Entity -> response dict conversion shared by use cases.

Use cases build their responses while the unit of work is still open;
these helpers keep the JSON shape of each entity in one place.
"""

from datetime import datetime
from typing import Iterable, Optional

from sqlmodel import SQLModel

from src.domain import sprint_lifecycle
from src.domain.entities import ProjectMembership, Sprint, TeamMembership, User
from src.domain.permissions import project_permissions_for, team_permissions_for


def to_dict(entity: SQLModel) -> dict:
    return entity.model_dump(mode="json")


def user_summary(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {"id": str(user.id), "name": user.name, "email": user.email}


def sprint_to_dict(sprint: Sprint, now: Optional[datetime] = None) -> dict:
    """Sprint fields plus the derived, never-persisted ones"""
    now = now or datetime.utcnow()
    data = to_dict(sprint)
    data.update(
        duration=sprint_lifecycle.duration_days(sprint),
        progress=sprint_lifecycle.progress(sprint),
        is_overdue=sprint_lifecycle.is_overdue(sprint, now),
        days_remaining=sprint_lifecycle.days_remaining(sprint, now),
    )
    return data


def team_member_to_dict(membership: TeamMembership, user: Optional[User] = None) -> dict:
    data = to_dict(membership)
    data["permissions"] = team_permissions_for(membership.role).to_dict()
    data["user"] = user_summary(user)
    return data


def project_member_to_dict(membership: ProjectMembership, user: Optional[User] = None) -> dict:
    data = to_dict(membership)
    data["permissions"] = project_permissions_for(membership.role).to_dict()
    data["user"] = user_summary(user)
    return data


def users_by_id(users: Iterable[User]) -> dict:
    return {user.id: user for user in users}


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit if limit else 0,
    }
