"""
Workboard Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    BandwidthStatus,
    NotificationType,
    ProjectRole,
    ProjectType,
    ProjectVisibility,
    SprintStatus,
    SystemRole,
    TaskPriority,
    TaskStatus,
    TeamMembershipStatus,
    TeamRole,
    WorkItemType,
)

# Export all entities
from .user import User
from .team import Team
from .team_membership import TeamMembership
from .project import Project
from .project_membership import ProjectMembership
from .sprint import Sprint
from .task import Task
from .bandwidth_report import BandwidthReport
from .notification import Notification
from .newsletter import Newsletter
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "BandwidthStatus",
    "NotificationType",
    "ProjectRole",
    "ProjectType",
    "ProjectVisibility",
    "SprintStatus",
    "SystemRole",
    "TaskPriority",
    "TaskStatus",
    "TeamMembershipStatus",
    "TeamRole",
    "WorkItemType",
    # Entities
    "User",
    "Team",
    "TeamMembership",
    "Project",
    "ProjectMembership",
    "Sprint",
    "Task",
    "BandwidthReport",
    "Notification",
    "Newsletter",
    "AuditEvent",
]
