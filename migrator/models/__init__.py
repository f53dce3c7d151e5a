"""Pydantic models for discovery results and reports."""

from migrator.models.network_models import (
    AnalyzerOptions,
    ConnectionProfile,
    ConnectionRecord,
    NetworkInterface,
    WlanAssociation,
)
from migrator.models.report_models import AnalysisReport, OutputFormat

__all__ = [
    "AnalysisReport",
    "AnalyzerOptions",
    "ConnectionProfile",
    "ConnectionRecord",
    "NetworkInterface",
    "OutputFormat",
    "WlanAssociation",
]
