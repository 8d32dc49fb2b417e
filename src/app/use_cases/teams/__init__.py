"""Team and team member use cases."""

from .create_team_use_case import CreateTeamUseCase
from .delete_team_use_case import DeleteTeamUseCase
from .dtos import (
    AddTeamMemberCommand,
    CreateTeamCommand,
    TeamSettings,
    UpdateTeamCommand,
    UpdateTeamMemberCommand,
)
from .team_members_use_case import (
    AddTeamMemberUseCase,
    ListAvailableUsersUseCase,
    ListTeamMembersUseCase,
    RemoveTeamMemberUseCase,
    UpdateTeamMemberUseCase,
)
from .team_queries_use_case import GetTeamUseCase, ListMyTeamsUseCase
from .update_team_use_case import UpdateTeamUseCase

__all__ = [
    "AddTeamMemberCommand",
    "CreateTeamCommand",
    "TeamSettings",
    "UpdateTeamCommand",
    "UpdateTeamMemberCommand",
    "CreateTeamUseCase",
    "ListMyTeamsUseCase",
    "GetTeamUseCase",
    "UpdateTeamUseCase",
    "DeleteTeamUseCase",
    "ListTeamMembersUseCase",
    "ListAvailableUsersUseCase",
    "AddTeamMemberUseCase",
    "UpdateTeamMemberUseCase",
    "RemoveTeamMemberUseCase",
]
