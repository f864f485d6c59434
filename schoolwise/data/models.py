"""Data models for the SchoolWise report client."""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class ReportFormat(str, Enum):
    """Output format of the full school report."""
    EXCEL = "excel"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return "pdf" if self is ReportFormat.PDF else "xlsx"

    @classmethod
    def parse(cls, value) -> "ReportFormat":
        """Accept an enum member or its string value; unknown values fall back to Excel."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.EXCEL


class OptionStatus(str, Enum):
    """Freshness of an option list."""
    STALE = "stale"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class OperationStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ReportKind(str, Enum):
    """The two report-producing actions; each has its own status."""
    FULL_REPORT = "full_report"
    NEGATIVE_COMMENTS_REPORT = "negative_comments_report"

    @property
    def label(self) -> str:
        if self is ReportKind.FULL_REPORT:
            return "school report"
        return "negative comments Excel"


@dataclass(frozen=True)
class FilterState:
    """
    The three cascading filters. An empty string means "not selected".

    Instances are immutable: the cascade swaps in a new value on every change
    and report actions hold on to the value they were given.
    """
    school: str = ""
    current_ay: str = ""
    semester: str = ""

    def missing_fields(self) -> Tuple[str, ...]:
        """Names of required filters that are still empty."""
        return tuple(
            name for name in ("school", "current_ay", "semester")
            if not getattr(self, name)
        )

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_payload(self) -> dict:
        """Request body fields in the backend's naming."""
        return {
            "school": self.school,
            "currentAY": self.current_ay,
            "semester": self.semester,
        }

    def with_school(self, school: str) -> "FilterState":
        return FilterState(school=school)

    def with_current_ay(self, current_ay: str) -> "FilterState":
        return replace(self, current_ay=current_ay, semester="")

    def with_semester(self, semester: str) -> "FilterState":
        return replace(self, semester=semester)


@dataclass(frozen=True)
class OptionSet:
    """
    Selectable values for one filter dimension.

    ``key`` records the upstream value the options were fetched for
    (the academic year for semesters, the school for departments).
    """
    options: Tuple[str, ...] = ()
    status: OptionStatus = OptionStatus.STALE
    key: str = ""

    @property
    def is_loading(self) -> bool:
        return self.status is OptionStatus.LOADING

    def __len__(self) -> int:
        return len(self.options)

    @classmethod
    def loading(cls, key: str = "") -> "OptionSet":
        return cls(status=OptionStatus.LOADING, key=key)

    @classmethod
    def ready(cls, options, key: str = "") -> "OptionSet":
        return cls(options=tuple(options), status=OptionStatus.READY, key=key)

    @classmethod
    def failed(cls, key: str = "") -> "OptionSet":
        return cls(status=OptionStatus.ERROR, key=key)


@dataclass
class ReportOutcome:
    """Result of one report action: either a saved path or an error."""
    kind: ReportKind
    status: OperationStatus
    path: Optional[Path] = None
    error: Optional[Exception] = None
    filters: FilterState = field(default_factory=FilterState)
    # Seconds the server took to produce the report
    elapsed: Optional[float] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OperationStatus.SUCCEEDED
