from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.notification_bus import NotificationBus
from src.app.services.team_context import TeamContext
from src.domain.entities import TeamRole


def _passthrough(entity, *args, **kwargs):
    return entity


@pytest.fixture
def mock_uow():
    """UnitOfWork double whose repository writes echo the entity back"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=_passthrough)

    uow.notifications = MagicMock()
    uow.notifications.create = AsyncMock(side_effect=_passthrough)
    uow.notifications.exists_since = AsyncMock(return_value=False)

    return uow


@pytest.fixture
def bus():
    return NotificationBus(max_queue_size=10)


@pytest.fixture
def make_context():
    team_id = uuid4()

    def _make(role: TeamRole = TeamRole.member, user_id=None, owner_id=None) -> TeamContext:
        user_id = user_id or uuid4()
        return TeamContext(
            team_id=team_id,
            team_name="Platform",
            owner_id=owner_id or uuid4(),
            user_id=user_id,
            role=role,
        )

    return _make
