from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.bandwidth_report_repository import IBandwidthReportRepository
from src.app.repositories.newsletter_repository import INewsletterRepository
from src.app.repositories.notification_repository import INotificationRepository
from src.app.repositories.project_membership_repository import IProjectMembershipRepository
from src.app.repositories.project_repository import IProjectRepository
from src.app.repositories.sprint_repository import ISprintRepository
from src.app.repositories.task_repository import ITaskRepository
from src.app.repositories.team_membership_repository import ITeamMembershipRepository
from src.app.repositories.team_repository import ITeamRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    teams: ITeamRepository
    team_memberships: ITeamMembershipRepository
    projects: IProjectRepository
    project_memberships: IProjectMembershipRepository
    sprints: ISprintRepository
    tasks: ITaskRepository
    bandwidth_reports: IBandwidthReportRepository
    notifications: INotificationRepository
    newsletters: INewsletterRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
