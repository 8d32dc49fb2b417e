from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.scoped_query import get_scoped_user_ids, is_privileged
from src.domain.entities import TeamMembership, TeamRole


@pytest.mark.parametrize(
    "role,expected",
    [
        (TeamRole.admin, True),
        (TeamRole.manager, True),
        ("Project_Manager", True),
        (" manager ", True),
        (TeamRole.member, False),
        ("viewer", False),
    ],
)
def test_is_privileged(role, expected):
    assert is_privileged(role) is expected


@pytest.fixture
def scope_uow(mock_uow):
    mock_uow.team_memberships = MagicMock()
    mock_uow.team_memberships.list_active = AsyncMock(return_value=[])
    mock_uow.team_memberships.list_direct_reports = AsyncMock(return_value=[])
    return mock_uow


@pytest.mark.asyncio
async def test_managers_see_every_active_member(scope_uow):
    team_id = uuid4()
    members = [TeamMembership(team_id=team_id, user_id=uuid4()) for _ in range(3)]
    scope_uow.team_memberships.list_active.return_value = members

    scoped = await get_scoped_user_ids(scope_uow, team_id, uuid4(), TeamRole.manager)

    assert scoped == {m.user_id for m in members}
    scope_uow.team_memberships.list_direct_reports.assert_not_awaited()


@pytest.mark.asyncio
async def test_members_see_themselves_and_direct_reports(scope_uow):
    team_id = uuid4()
    lead_id = uuid4()
    reports = [
        TeamMembership(team_id=team_id, user_id=uuid4(), reporting_manager_id=lead_id)
        for _ in range(2)
    ]
    scope_uow.team_memberships.list_direct_reports.return_value = reports

    scoped = await get_scoped_user_ids(scope_uow, team_id, lead_id, TeamRole.member)

    assert scoped == {lead_id} | {r.user_id for r in reports}
    scope_uow.team_memberships.list_direct_reports.assert_awaited_once_with(team_id, lead_id)


@pytest.mark.asyncio
async def test_member_without_reports_sees_only_themselves(scope_uow):
    user_id = uuid4()

    scoped = await get_scoped_user_ids(scope_uow, uuid4(), user_id, "viewer")

    assert scoped == {user_id}
