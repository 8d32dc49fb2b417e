from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.bandwidth_report_repository import BandwidthReportRepository
from src.adapter.repositories.newsletter_repository import NewsletterRepository
from src.adapter.repositories.notification_repository import NotificationRepository
from src.adapter.repositories.project_membership_repository import ProjectMembershipRepository
from src.adapter.repositories.project_repository import ProjectRepository
from src.adapter.repositories.sprint_repository import SprintRepository
from src.adapter.repositories.task_repository import TaskRepository
from src.adapter.repositories.team_membership_repository import TeamMembershipRepository
from src.adapter.repositories.team_repository import TeamRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.teams = TeamRepository(self.session)
        self.team_memberships = TeamMembershipRepository(self.session)
        self.projects = ProjectRepository(self.session)
        self.project_memberships = ProjectMembershipRepository(self.session)
        self.sprints = SprintRepository(self.session)
        self.tasks = TaskRepository(self.session)
        self.bandwidth_reports = BandwidthReportRepository(self.session)
        self.notifications = NotificationRepository(self.session)
        self.newsletters = NewsletterRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
