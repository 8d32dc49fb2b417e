"""Bandwidth (capacity) report use cases."""

from .dtos import (
    AllocationItem,
    CreateBandwidthReportCommand,
    PlannedLeave,
    RejectBandwidthReportCommand,
    UpdateBandwidthReportCommand,
)
from .manage_report_use_case import (
    CreateBandwidthReportUseCase,
    DeleteBandwidthReportUseCase,
    SubmitBandwidthReportUseCase,
    UpdateBandwidthReportUseCase,
    allocated_percentage,
)
from .report_queries_use_case import (
    GetBandwidthReportUseCase,
    GetBandwidthSummaryUseCase,
    ListBandwidthReportsUseCase,
    ListMyBandwidthReportsUseCase,
    ListPendingBandwidthReportsUseCase,
)
from .review_report_use_case import ApproveBandwidthReportUseCase, RejectBandwidthReportUseCase

__all__ = [
    "AllocationItem",
    "PlannedLeave",
    "CreateBandwidthReportCommand",
    "UpdateBandwidthReportCommand",
    "RejectBandwidthReportCommand",
    "CreateBandwidthReportUseCase",
    "UpdateBandwidthReportUseCase",
    "DeleteBandwidthReportUseCase",
    "SubmitBandwidthReportUseCase",
    "ApproveBandwidthReportUseCase",
    "RejectBandwidthReportUseCase",
    "ListMyBandwidthReportsUseCase",
    "GetBandwidthReportUseCase",
    "ListBandwidthReportsUseCase",
    "ListPendingBandwidthReportsUseCase",
    "GetBandwidthSummaryUseCase",
    "allocated_percentage",
]
