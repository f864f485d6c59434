"""Backend-facing services."""

from .errors import (
    EmptyPayloadError,
    HttpStatusError,
    MalformedResponseError,
    OperationInProgressError,
    ReportGenerationError,
    SchoolReportError,
    TransportError,
    ValidationError,
)
from .options_gateway import OptionsGateway

__all__ = [
    "EmptyPayloadError",
    "HttpStatusError",
    "MalformedResponseError",
    "OperationInProgressError",
    "OptionsGateway",
    "ReportGenerationError",
    "SchoolReportError",
    "TransportError",
    "ValidationError",
]
