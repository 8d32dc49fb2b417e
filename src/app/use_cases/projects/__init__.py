"""Project and project member use cases."""

from .dtos import (
    AddProjectMemberCommand,
    BulkAddProjectMembersCommand,
    CreateProjectCommand,
    UpdateProjectCommand,
    UpdateProjectMemberCommand,
)
from .manage_project_use_case import (
    ArchiveProjectUseCase,
    CreateProjectUseCase,
    DeleteProjectUseCase,
    GetProjectUseCase,
    ListProjectsUseCase,
    UpdateProjectUseCase,
)
from .project_members_use_case import (
    AddProjectMemberUseCase,
    BulkAddProjectMembersUseCase,
    GetMyProjectMembershipUseCase,
    ListProjectMembersUseCase,
    RemoveProjectMemberUseCase,
    UpdateProjectMemberUseCase,
)

__all__ = [
    "AddProjectMemberCommand",
    "BulkAddProjectMembersCommand",
    "CreateProjectCommand",
    "UpdateProjectCommand",
    "UpdateProjectMemberCommand",
    "CreateProjectUseCase",
    "ListProjectsUseCase",
    "GetProjectUseCase",
    "UpdateProjectUseCase",
    "ArchiveProjectUseCase",
    "DeleteProjectUseCase",
    "ListProjectMembersUseCase",
    "GetMyProjectMembershipUseCase",
    "AddProjectMemberUseCase",
    "BulkAddProjectMembersUseCase",
    "UpdateProjectMemberUseCase",
    "RemoveProjectMemberUseCase",
]
