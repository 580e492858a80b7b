"""Domain layer for ledgerview."""

from ledgerview.domain.report import ReportService, build_report_table
from ledgerview.domain.reports import get_report, list_reports

__all__ = [
    "ReportService",
    "build_report_table",
    "get_report",
    "list_reports",
]
