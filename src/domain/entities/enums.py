"""
Workboard Domain Enums

All enumeration types used across domain entities.
Role enums are closed: parsing normalizes case and surrounding whitespace,
so "Manager" and " manager " both resolve to TeamRole.manager.
"""

from enum import Enum


class _NormalizedEnum(str, Enum):
    """String enum that accepts case-insensitive input"""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class SystemRole(_NormalizedEnum):
    """Platform-wide user role"""

    admin = "admin"
    user = "user"


class TeamRole(_NormalizedEnum):
    """User role within a team"""

    admin = "admin"
    manager = "manager"
    member = "member"
    viewer = "viewer"


class TeamMembershipStatus(str, Enum):
    """Team membership status"""

    active = "active"
    invited = "invited"
    suspended = "suspended"


class ProjectRole(_NormalizedEnum):
    """User role within a project"""

    owner = "owner"
    manager = "manager"
    contributor = "contributor"
    viewer = "viewer"


class ProjectType(str, Enum):
    kanban = "kanban"
    sprint = "sprint"


class ProjectVisibility(str, Enum):
    team = "team"
    restricted = "restricted"


class SprintStatus(str, Enum):
    """Sprint lifecycle state"""

    planning = "planning"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SprintStatus.completed, SprintStatus.cancelled)


class TaskStatus(_NormalizedEnum):
    """Task workflow status"""

    todo = "todo"
    inprogress = "inprogress"
    review = "review"
    completed = "completed"

    @property
    def is_completed(self) -> bool:
        return self in COMPLETED_TASK_STATUSES


COMPLETED_TASK_STATUSES = frozenset({TaskStatus.completed})


class TaskPriority(_NormalizedEnum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self]


PRIORITY_WEIGHTS = {
    TaskPriority.low: 1,
    TaskPriority.medium: 2,
    TaskPriority.high: 3,
    TaskPriority.urgent: 4,
}


class WorkItemType(_NormalizedEnum):
    """Work item kind; lower rank sits higher in the hierarchy"""

    epic = "epic"
    feature = "feature"
    story = "story"
    task = "task"
    bug = "bug"
    subtask = "subtask"

    @property
    def rank(self) -> int:
        return WORK_ITEM_RANKS[self]


WORK_ITEM_RANKS = {
    WorkItemType.epic: 0,
    WorkItemType.feature: 1,
    WorkItemType.story: 2,
    WorkItemType.task: 3,
    WorkItemType.bug: 3,
    WorkItemType.subtask: 4,
}


class BandwidthStatus(str, Enum):
    """Bandwidth report approval status"""

    draft = "draft"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"


class NotificationType(str, Enum):
    task_assigned = "task_assigned"
    task_updated = "task_updated"
    task_completed = "task_completed"
    task_reminder = "task_reminder"
    sprint_started = "sprint_started"
    sprint_completed = "sprint_completed"
    project_added = "project_added"
    bandwidth_approved = "bandwidth_approved"
    bandwidth_rejected = "bandwidth_rejected"
    bandwidth_reminder = "bandwidth_reminder"
    team_invite = "team_invite"
    role_changed = "role_changed"
