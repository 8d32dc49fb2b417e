from types import SimpleNamespace

import pytest

from src.domain.entities import ProjectRole, TeamRole
from src.domain.permissions import (
    ProjectAction,
    TeamAction,
    check_project_permission,
    check_team_permission,
    parse_project_role,
    parse_team_role,
    project_permissions_for,
    team_permissions_for,
)


def member(role):
    return SimpleNamespace(role=role)


@pytest.mark.parametrize(
    "role, allowed",
    [
        (TeamRole.admin, True),
        (TeamRole.manager, True),
        (TeamRole.member, False),
        (TeamRole.viewer, False),
    ],
)
def test_create_projects_is_admin_and_manager_only(role, allowed):
    assert check_team_permission(member(role), TeamAction.CREATE_PROJECTS) is allowed


def test_manage_settings_is_admin_only():
    assert check_team_permission(member(TeamRole.admin), TeamAction.MANAGE_SETTINGS)
    assert not check_team_permission(member(TeamRole.manager), TeamAction.MANAGE_SETTINGS)


def test_missing_membership_has_no_permissions():
    assert check_team_permission(None, TeamAction.VIEW_REPORTS) is False
    assert check_project_permission(None, None, ProjectAction.VIEW_PROJECT) is False


def test_unknown_action_is_denied():
    assert check_team_permission(member(TeamRole.admin), "LAUNCH_ROCKETS") is False


def test_role_strings_are_normalized():
    assert parse_team_role(" Manager ") == TeamRole.manager
    assert parse_project_role("OWNER") == ProjectRole.owner
    assert parse_team_role("superuser") is None
    assert check_team_permission(member("ADMIN"), TeamAction.MANAGE_TEAM)


def test_team_admin_passes_project_checks_without_membership():
    assert check_project_permission(
        member(TeamRole.admin), None, ProjectAction.DELETE_PROJECT
    )


def test_project_role_decides_for_non_admins():
    team = member(TeamRole.member)

    assert check_project_permission(team, member(ProjectRole.owner), ProjectAction.DELETE_PROJECT)
    assert not check_project_permission(
        team, member(ProjectRole.manager), ProjectAction.DELETE_PROJECT
    )
    assert check_project_permission(
        team, member(ProjectRole.contributor), ProjectAction.EDIT_OWN_TASK
    )
    assert not check_project_permission(
        team, member(ProjectRole.contributor), ProjectAction.EDIT_ANY_TASK
    )
    assert check_project_permission(team, member(ProjectRole.viewer), ProjectAction.VIEW_SPRINT)
    assert not check_project_permission(
        team, member(ProjectRole.viewer), ProjectAction.CREATE_TASK
    )


def test_permission_flags_follow_role():
    assert team_permissions_for(TeamRole.manager).to_dict() == {
        "can_create_projects": True,
        "can_manage_team": False,
        "can_view_reports": True,
        "can_manage_sprints": True,
    }
    assert project_permissions_for("contributor").can_assign_tasks is True
    assert project_permissions_for("contributor").can_delete_tasks is False
    assert project_permissions_for("nobody").to_dict() == {
        "can_edit_project": False,
        "can_manage_sprints": False,
        "can_assign_tasks": False,
        "can_delete_tasks": False,
        "can_invite_members": False,
    }
