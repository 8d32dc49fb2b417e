"""
Scoped Query Builder

Decides which team members' data a requester may see on dashboards and
in reports.
"""

from typing import Set, Union
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TeamRole

# "project_manager" is a legacy role label still present on old accounts
PRIVILEGED_ROLES = frozenset({TeamRole.admin.value, TeamRole.manager.value, "project_manager"})


def is_privileged(role: Union[str, TeamRole]) -> bool:
    value = role.value if isinstance(role, TeamRole) else str(role)
    return value.strip().lower() in PRIVILEGED_ROLES


async def get_scoped_user_ids(
    uow: UnitOfWork, team_id: UUID, requester_id: UUID, role: Union[str, TeamRole]
) -> Set[UUID]:
    """
    Admins and managers see every active member. Everybody else sees
    themselves and their direct reports (one level, not transitive).
    """
    if is_privileged(role):
        members = await uow.team_memberships.list_active(team_id)
        return {member.user_id for member in members}

    reports = await uow.team_memberships.list_direct_reports(team_id, requester_id)
    return {requester_id} | {member.user_id for member in reports}
