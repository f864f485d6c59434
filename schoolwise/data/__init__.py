"""Data models package."""

from .models import (
    FilterState,
    OperationStatus,
    OptionSet,
    OptionStatus,
    ReportFormat,
    ReportKind,
    ReportOutcome,
)

__all__ = [
    "FilterState",
    "OperationStatus",
    "OptionSet",
    "OptionStatus",
    "ReportFormat",
    "ReportKind",
    "ReportOutcome",
]
