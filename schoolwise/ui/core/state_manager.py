"""
Application State Manager for the SchoolWise GUI
Holds the filter values, option lists, department badges, report format and
the status of both report actions, and tells observers when any of them change.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ...data.models import (
    FilterState,
    OperationStatus,
    OptionSet,
    ReportFormat,
    ReportKind,
)

logger = logging.getLogger(__name__)

# Option list names, in cascade order
SCHOOLS = "schools"
CURRENT_AYS = "current_ays"
SEMESTERS = "semesters"


def _default_options() -> Dict[str, OptionSet]:
    return {SCHOOLS: OptionSet(), CURRENT_AYS: OptionSet(), SEMESTERS: OptionSet()}


def _default_operations() -> Dict[ReportKind, OperationStatus]:
    return {kind: OperationStatus.IDLE for kind in ReportKind}


@dataclass
class AppState:
    """Central application state"""
    # Selected filter values (replaced as a whole, never mutated in place)
    filters: FilterState = field(default_factory=FilterState)

    # Option lists per filter dimension
    options: Dict[str, OptionSet] = field(default_factory=_default_options)

    # Read-only department badges for the selected school
    departments: OptionSet = field(default_factory=OptionSet)

    # Only affects the full report
    report_format: ReportFormat = ReportFormat.EXCEL

    # Independent status per report action
    operations: Dict[ReportKind, OperationStatus] = field(default_factory=_default_operations)

    # Internal flags
    initialized: bool = False
    shutting_down: bool = False


class StateManager:
    """Manages application state and provides state change notifications"""

    def __init__(self):
        self.state = AppState()
        self._observers: List[Callable] = []

    def add_observer(self, callback):
        """Add a callback to be notified when state changes"""
        self._observers.append(callback)

    def remove_observer(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def notify_observers(self, event_type: str, data: Optional[dict] = None):
        """Notify all observers of a state change"""
        for callback in list(self._observers):
            try:
                callback(event_type, data or {})
            except Exception as e:
                logger.warning(f"Observer callback failed: {e}")

    # ------------------------------------------------------------------
    # Filters and option lists

    def set_filters(self, filters: FilterState):
        """Replace the filter values, notifying only when they actually change."""
        if filters == self.state.filters:
            return
        previous = self.state.filters
        self.state.filters = filters
        self.notify_observers("filters_changed", {"previous": previous, "filters": filters})

    def set_options(self, name: str, option_set: OptionSet):
        if name not in self.state.options:
            raise KeyError(f"Unknown option list: {name}")
        if self.state.options[name] == option_set:
            return
        self.state.options[name] = option_set
        self.notify_observers("options_changed", {"name": name, "status": option_set.status})

    def get_options(self, name: str) -> OptionSet:
        return self.state.options[name]

    def set_departments(self, departments: OptionSet):
        if self.state.departments == departments:
            return
        self.state.departments = departments
        self.notify_observers("departments_changed", {
            "school": departments.key,
            "count": len(departments),
            "status": departments.status,
        })

    def set_report_format(self, report_format):
        report_format = ReportFormat.parse(report_format)
        if report_format is self.state.report_format:
            return
        self.state.report_format = report_format
        self.notify_observers("report_format_changed", {"format": report_format})

    # ------------------------------------------------------------------
    # Report operations

    def start_operation(self, kind: ReportKind) -> bool:
        """
        Mark a report action as in flight.

        Args:
            kind: Which report action is starting

        Returns:
            True if the action started, False if the same action is already running
        """
        if self.state.operations[kind] is OperationStatus.IN_FLIGHT:
            logger.warning(f"Cannot start '{kind.value}' - it is already in progress")
            return False

        self.state.operations[kind] = OperationStatus.IN_FLIGHT
        self.notify_observers("operation_started", {"operation": kind})
        logger.info(f"Started operation: {kind.value}")
        return True

    def end_operation(self, kind: ReportKind, succeeded: bool):
        """Record the terminal status of a report action."""
        status = OperationStatus.SUCCEEDED if succeeded else OperationStatus.FAILED
        self.state.operations[kind] = status
        self.notify_observers("operation_ended", {"operation": kind, "status": status})
        logger.info(f"Ended operation: {kind.value} ({status.value})")

    def is_operation_in_progress(self, kind: Optional[ReportKind] = None) -> bool:
        """Check whether ``kind`` (or, without an argument, any report action) is running"""
        if kind is not None:
            return self.state.operations[kind] is OperationStatus.IN_FLIGHT
        return any(status is OperationStatus.IN_FLIGHT for status in self.state.operations.values())

    def get_operation_status(self, kind: ReportKind) -> OperationStatus:
        return self.state.operations[kind]
