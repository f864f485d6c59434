"""
Unit tests for the application state manager.
"""
import pytest

from schoolwise.data.models import (
    FilterState,
    OperationStatus,
    OptionSet,
    OptionStatus,
    ReportFormat,
    ReportKind,
)
from schoolwise.ui.core.state_manager import CURRENT_AYS, SCHOOLS, SEMESTERS, StateManager


@pytest.fixture
def events(state_manager):
    recorded = []
    state_manager.add_observer(lambda event_type, data: recorded.append((event_type, data)))
    return recorded


class TestInitialState:

    def test_defaults(self, state_manager):
        """Nothing selected, every list stale, both reports idle."""
        state = state_manager.state
        assert state.filters == FilterState()
        assert set(state.options) == {SCHOOLS, CURRENT_AYS, SEMESTERS}
        assert all(len(option_set) == 0 for option_set in state.options.values())
        assert state.report_format is ReportFormat.EXCEL
        assert state.operations == {kind: OperationStatus.IDLE for kind in ReportKind}
        assert not state_manager.is_operation_in_progress()


class TestNotifications:

    def test_filter_change_notifies(self, state_manager, events):
        state_manager.set_filters(FilterState(school="School of Engineering"))
        assert events[0][0] == "filters_changed"
        assert events[0][1]["filters"].school == "School of Engineering"

    def test_unchanged_filters_do_not_notify(self, state_manager, events):
        state_manager.set_filters(FilterState())
        assert events == []

    def test_options_change(self, state_manager, events):
        state_manager.set_options(SEMESTERS, OptionSet.ready(["Odd"], key="2023-2024"))
        assert state_manager.get_options(SEMESTERS).options == ("Odd",)
        assert events == [("options_changed", {"name": SEMESTERS, "status": OptionStatus.READY})]

    def test_unknown_option_list(self, state_manager):
        with pytest.raises(KeyError):
            state_manager.set_options("departments", OptionSet())

    def test_report_format_accepts_strings(self, state_manager, events):
        state_manager.set_report_format("pdf")
        state_manager.set_report_format(ReportFormat.PDF)
        assert state_manager.state.report_format is ReportFormat.PDF
        assert [event for event, _ in events] == ["report_format_changed"]

    def test_failing_observer_does_not_block_others(self, state_manager, events):
        """One broken observer must not stop the rest from being told."""
        def broken(event_type, data):
            raise RuntimeError("boom")

        state_manager.add_observer(broken)
        state_manager.set_departments(OptionSet.ready(["CSE"], key="School of Engineering"))
        assert events[-1][0] == "departments_changed"
        assert events[-1][1]["count"] == 1

    def test_removed_observer_is_not_called(self, state_manager):
        calls = []

        def observer(event_type, data):
            calls.append(event_type)

        state_manager.add_observer(observer)
        state_manager.remove_observer(observer)
        state_manager.remove_observer(observer)
        state_manager.notify_observers("initialized")
        assert calls == []


class TestOperations:

    def test_start_and_end(self, state_manager):
        assert state_manager.start_operation(ReportKind.FULL_REPORT) is True
        assert state_manager.is_operation_in_progress(ReportKind.FULL_REPORT)
        assert not state_manager.is_operation_in_progress(ReportKind.NEGATIVE_COMMENTS_REPORT)

        state_manager.end_operation(ReportKind.FULL_REPORT, succeeded=False)
        assert state_manager.get_operation_status(ReportKind.FULL_REPORT) is OperationStatus.FAILED
        assert not state_manager.is_operation_in_progress()

    def test_same_operation_cannot_start_twice(self, state_manager):
        assert state_manager.start_operation(ReportKind.NEGATIVE_COMMENTS_REPORT)
        assert state_manager.start_operation(ReportKind.NEGATIVE_COMMENTS_REPORT) is False

    def test_operations_are_independent(self, state_manager):
        assert state_manager.start_operation(ReportKind.FULL_REPORT)
        assert state_manager.start_operation(ReportKind.NEGATIVE_COMMENTS_REPORT)
        state_manager.end_operation(ReportKind.NEGATIVE_COMMENTS_REPORT, succeeded=True)
        assert state_manager.is_operation_in_progress(ReportKind.FULL_REPORT)
        assert state_manager.get_operation_status(ReportKind.NEGATIVE_COMMENTS_REPORT) is OperationStatus.SUCCEEDED
