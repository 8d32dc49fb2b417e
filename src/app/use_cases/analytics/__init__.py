from .team_analytics_use_case import (
    GetActivityFeedUseCase,
    GetDashboardUseCase,
    GetMembersOverviewUseCase,
    GetTeamStatisticsUseCase,
)

__all__ = [
    "GetDashboardUseCase",
    "GetMembersOverviewUseCase",
    "GetActivityFeedUseCase",
    "GetTeamStatisticsUseCase",
]
