"""
component_report/domain package marker.
"""

from component_report.domain.components import (
    NOT_APPLICABLE,
    ActionTarget,
    AggregatedComponent,
    ComponentKeyRef,
    ComponentType,
    RawActionRow,
    RawComponent,
    RawUsageRow,
    SetKeyRef,
    TimestampPolicy,
)
from component_report.domain.report import BatchResult, FileReportResult, ReportPeriod, RunSummary

__all__ = [
    "NOT_APPLICABLE",
    "ActionTarget",
    "AggregatedComponent",
    "BatchResult",
    "ComponentKeyRef",
    "ComponentType",
    "FileReportResult",
    "RawActionRow",
    "RawComponent",
    "RawUsageRow",
    "ReportPeriod",
    "RunSummary",
    "SetKeyRef",
    "TimestampPolicy",
]
