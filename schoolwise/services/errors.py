"""Error taxonomy shared by the gateway, the filter cascade and the report workflow."""

from typing import Optional, Sequence


class SchoolReportError(Exception):
    """Base class for every error the client surfaces to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(SchoolReportError):
    """A required filter is missing; raised before any network call."""

    def __init__(self, missing: Sequence[str], message: Optional[str] = None):
        self.missing = tuple(missing)
        super().__init__(message or "Please select Current Academic Year, Semester, and School.")


class TransportError(SchoolReportError):
    """The request could not be sent or timed out."""


class HttpStatusError(SchoolReportError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class ReportGenerationError(HttpStatusError):
    """A report endpoint answered with a non-2xx status."""


class MalformedResponseError(SchoolReportError):
    """2xx response whose payload is not the expected shape."""


class EmptyPayloadError(SchoolReportError):
    """2xx response with a zero-length binary body."""

    def __init__(self, message: str = "Received empty file from server"):
        super().__init__(message)


class OperationInProgressError(SchoolReportError):
    """The same report action is already running."""
