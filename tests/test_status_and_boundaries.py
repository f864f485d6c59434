"""
Unit tests for StatusManager and the UI error boundary decorators.
"""
import asyncio

import flet as ft
import pytest

from schoolwise.ui.core.status_manager import StatusManager
from schoolwise.ui.utils.error_boundary import safe_ui_update, with_error_boundary


@pytest.fixture
def status_controls():
    return ft.Text(""), ft.ProgressBar(visible=False)


class TestStatusManager:

    def test_update_status_sets_text_color_and_refreshes(self, status_controls):
        text, bar = status_controls
        updates = []
        manager = StatusManager(text, bar, lambda: updates.append(1))

        manager.update_status("✅ Report saved: a.xlsx", "green")

        assert text.value == "✅ Report saved: a.xlsx"
        assert text.color == "green"
        assert updates == [1]

    def test_color_resolver(self, status_controls):
        text, bar = status_controls
        manager = StatusManager(text, bar, color_resolver=lambda color: {"red": "#c62828"}.get(color))

        manager.update_status("❌ failed", "red")
        assert text.color == "#c62828"

        manager.update_status("note", "purple")
        assert text.color == "purple"

    def test_progress_stays_visible_until_all_done(self, status_controls):
        """Two overlapping report actions share the bar."""
        text, bar = status_controls
        manager = StatusManager(text, bar)

        manager.show_progress()
        manager.show_progress()
        manager.hide_progress()
        assert bar.visible is True
        manager.hide_progress()
        assert bar.visible is False
        manager.hide_progress()
        assert bar.visible is False

    def test_closed_session_during_refresh_is_ignored(self, status_controls):
        text, bar = status_controls

        def update():
            raise RuntimeError("session closed")

        manager = StatusManager(text, bar, update)
        manager.update_status("still works")
        assert text.value == "still works"


class _Handler:
    def __init__(self, status_manager):
        self.status_manager = status_manager

    @with_error_boundary(fallback_value="fallback", fallback_ui_message="Could not change the school")
    def sync_fail(self):
        raise ValueError("bad value")

    @with_error_boundary(fallback_ui_message="Report generation failed unexpectedly")
    async def async_fail(self):
        raise RuntimeError("boom")

    @with_error_boundary()
    async def async_ok(self, value):
        return value * 2


class TestErrorBoundary:

    def test_sync_handler_returns_fallback_and_reports(self, status_manager):
        handler = _Handler(status_manager)
        assert handler.sync_fail() == "fallback"
        assert status_manager.messages == [("⚠️ Could not change the school", "orange")]

    def test_async_handler_is_wrapped(self, status_manager):
        handler = _Handler(status_manager)
        assert asyncio.iscoroutinefunction(_Handler.async_fail)
        assert asyncio.run(handler.async_fail()) is None
        assert status_manager.texts == ["⚠️ Report generation failed unexpectedly"]

    def test_success_passes_through(self, status_manager):
        handler = _Handler(status_manager)
        assert asyncio.run(handler.async_ok(21)) == 42
        assert status_manager.messages == []


class TestSafeUiUpdate:

    def test_session_errors_are_swallowed(self):
        @safe_ui_update
        def render():
            raise RuntimeError("Session has been closed")

        assert render() is None

    def test_other_runtime_errors_propagate(self):
        @safe_ui_update
        def render():
            raise RuntimeError("unexpected state")

        with pytest.raises(RuntimeError, match="unexpected state"):
            render()
