"""
Permission Matrix

Static role -> action tables for team and project scope, plus the
role -> permission-flag derivation used for fast reads.

Everything here is pure: no storage access, no side effects. Unknown
actions resolve to an empty role list, so checks fail closed.
"""

from dataclasses import asdict, dataclass
from typing import Dict, FrozenSet, Optional, Protocol, Union

from .entities.enums import ProjectRole, TeamRole


class TeamAction:
    MANAGE_TEAM = "MANAGE_TEAM"
    INVITE_MEMBERS = "INVITE_MEMBERS"
    REMOVE_MEMBERS = "REMOVE_MEMBERS"
    CREATE_PROJECTS = "CREATE_PROJECTS"
    VIEW_ALL_PROJECTS = "VIEW_ALL_PROJECTS"
    DELETE_PROJECTS = "DELETE_PROJECTS"
    VIEW_TEAM_REPORTS = "VIEW_TEAM_REPORTS"
    VIEW_REPORTS = "VIEW_REPORTS"
    APPROVE_BANDWIDTH = "APPROVE_BANDWIDTH"
    VIEW_ALL_ACTIVITIES = "VIEW_ALL_ACTIVITIES"
    MANAGE_SETTINGS = "MANAGE_SETTINGS"


class ProjectAction:
    EDIT_PROJECT = "EDIT_PROJECT"
    DELETE_PROJECT = "DELETE_PROJECT"
    ARCHIVE_PROJECT = "ARCHIVE_PROJECT"
    INVITE_MEMBERS = "INVITE_MEMBERS"
    REMOVE_MEMBERS = "REMOVE_MEMBERS"
    ASSIGN_TASKS = "ASSIGN_TASKS"
    MANAGE_SPRINTS = "MANAGE_SPRINTS"
    CREATE_SPRINT = "CREATE_SPRINT"
    START_SPRINT = "START_SPRINT"
    COMPLETE_SPRINT = "COMPLETE_SPRINT"
    EDIT_SPRINT = "EDIT_SPRINT"
    CREATE_TASK = "CREATE_TASK"
    EDIT_OWN_TASK = "EDIT_OWN_TASK"
    EDIT_ANY_TASK = "EDIT_ANY_TASK"
    DELETE_TASK = "DELETE_TASK"
    VIEW_PROJECT = "VIEW_PROJECT"
    VIEW_SPRINT = "VIEW_SPRINT"


_ADMIN = frozenset({TeamRole.admin})
_ADMIN_MANAGER = frozenset({TeamRole.admin, TeamRole.manager})

TEAM_PERMISSIONS: Dict[str, FrozenSet[TeamRole]] = {
    # Team management
    TeamAction.MANAGE_TEAM: _ADMIN,
    TeamAction.INVITE_MEMBERS: _ADMIN_MANAGER,
    TeamAction.REMOVE_MEMBERS: _ADMIN,
    # Project management
    TeamAction.CREATE_PROJECTS: _ADMIN_MANAGER,
    TeamAction.VIEW_ALL_PROJECTS: _ADMIN_MANAGER,
    TeamAction.DELETE_PROJECTS: _ADMIN,
    # Reports & analytics
    TeamAction.VIEW_TEAM_REPORTS: _ADMIN_MANAGER,
    TeamAction.VIEW_REPORTS: _ADMIN_MANAGER,
    TeamAction.APPROVE_BANDWIDTH: _ADMIN_MANAGER,
    TeamAction.VIEW_ALL_ACTIVITIES: _ADMIN,
    # Settings
    TeamAction.MANAGE_SETTINGS: _ADMIN,
}

_OWNER = frozenset({ProjectRole.owner})
_OWNER_MANAGER = frozenset({ProjectRole.owner, ProjectRole.manager})
_CONTRIBUTORS = frozenset({ProjectRole.owner, ProjectRole.manager, ProjectRole.contributor})
_EVERYONE = frozenset(ProjectRole)

PROJECT_PERMISSIONS: Dict[str, FrozenSet[ProjectRole]] = {
    # Project
    ProjectAction.EDIT_PROJECT: _OWNER_MANAGER,
    ProjectAction.DELETE_PROJECT: _OWNER,
    ProjectAction.ARCHIVE_PROJECT: _OWNER_MANAGER,
    # Members
    ProjectAction.INVITE_MEMBERS: _OWNER_MANAGER,
    ProjectAction.REMOVE_MEMBERS: _OWNER_MANAGER,
    ProjectAction.ASSIGN_TASKS: _CONTRIBUTORS,
    # Sprints
    ProjectAction.MANAGE_SPRINTS: _OWNER_MANAGER,
    ProjectAction.CREATE_SPRINT: _OWNER_MANAGER,
    ProjectAction.START_SPRINT: _OWNER_MANAGER,
    ProjectAction.COMPLETE_SPRINT: _OWNER_MANAGER,
    ProjectAction.EDIT_SPRINT: _OWNER_MANAGER,
    # Tasks
    ProjectAction.CREATE_TASK: _CONTRIBUTORS,
    ProjectAction.EDIT_OWN_TASK: _CONTRIBUTORS,
    ProjectAction.EDIT_ANY_TASK: _OWNER_MANAGER,
    ProjectAction.DELETE_TASK: _OWNER_MANAGER,
    # Viewing
    ProjectAction.VIEW_PROJECT: _EVERYONE,
    ProjectAction.VIEW_SPRINT: _EVERYONE,
}

# Team-lead carve-out applies only to membership management
TEAM_LEAD_ACTIONS = frozenset({ProjectAction.INVITE_MEMBERS, ProjectAction.REMOVE_MEMBERS})


class HasTeamRole(Protocol):
    role: TeamRole


class HasProjectRole(Protocol):
    role: ProjectRole


def parse_team_role(value: Union[str, TeamRole]) -> Optional[TeamRole]:
    """Normalize a team role string; None when it is not a known role"""
    try:
        return TeamRole(value)
    except ValueError:
        return None


def parse_project_role(value: Union[str, ProjectRole]) -> Optional[ProjectRole]:
    """Normalize a project role string; None when it is not a known role"""
    try:
        return ProjectRole(value)
    except ValueError:
        return None


def check_team_permission(membership: Optional[HasTeamRole], action: str) -> bool:
    """True when the membership's team role is allowed to perform action"""
    if membership is None:
        return False
    role = parse_team_role(membership.role)
    return role in TEAM_PERMISSIONS.get(action, frozenset())


def check_project_permission(
    team_membership: Optional[HasTeamRole],
    project_membership: Optional[HasProjectRole],
    action: str,
) -> bool:
    """
    True when the actor may perform a project action.

    Team admins pass every project check, with or without a project
    membership. Everybody else needs a project membership whose role is
    listed for the action.
    """
    if team_membership is not None and parse_team_role(team_membership.role) == TeamRole.admin:
        return True
    if project_membership is None:
        return False
    role = parse_project_role(project_membership.role)
    return role in PROJECT_PERMISSIONS.get(action, frozenset())


@dataclass(frozen=True)
class TeamPermissionFlags:
    can_create_projects: bool = False
    can_manage_team: bool = False
    can_view_reports: bool = False
    can_manage_sprints: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProjectPermissionFlags:
    can_edit_project: bool = False
    can_manage_sprints: bool = False
    can_assign_tasks: bool = False
    can_delete_tasks: bool = False
    can_invite_members: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


_TEAM_FLAGS: Dict[TeamRole, TeamPermissionFlags] = {
    TeamRole.admin: TeamPermissionFlags(
        can_create_projects=True,
        can_manage_team=True,
        can_view_reports=True,
        can_manage_sprints=True,
    ),
    TeamRole.manager: TeamPermissionFlags(
        can_create_projects=True,
        can_manage_team=False,
        can_view_reports=True,
        can_manage_sprints=True,
    ),
    TeamRole.member: TeamPermissionFlags(),
    TeamRole.viewer: TeamPermissionFlags(),
}

_FULL_PROJECT_FLAGS = ProjectPermissionFlags(
    can_edit_project=True,
    can_manage_sprints=True,
    can_assign_tasks=True,
    can_delete_tasks=True,
    can_invite_members=True,
)

_PROJECT_FLAGS: Dict[ProjectRole, ProjectPermissionFlags] = {
    ProjectRole.owner: _FULL_PROJECT_FLAGS,
    ProjectRole.manager: _FULL_PROJECT_FLAGS,
    ProjectRole.contributor: ProjectPermissionFlags(can_assign_tasks=True),
    ProjectRole.viewer: ProjectPermissionFlags(),
}


def team_permissions_for(role: Union[str, TeamRole]) -> TeamPermissionFlags:
    """Permission flags implied by a team role (no flags for unknown roles)"""
    parsed = parse_team_role(role)
    return _TEAM_FLAGS.get(parsed, TeamPermissionFlags())


def project_permissions_for(role: Union[str, ProjectRole]) -> ProjectPermissionFlags:
    """Permission flags implied by a project role (no flags for unknown roles)"""
    parsed = parse_project_role(role)
    return _PROJECT_FLAGS.get(parsed, ProjectPermissionFlags())
