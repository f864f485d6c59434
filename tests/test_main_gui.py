"""
Tests for the page wiring: rendering from state, theme colours and session cleanup.
"""
from unittest.mock import MagicMock

import pytest

from schoolwise import main as main_module
from schoolwise.data.models import FilterState, OptionSet
from schoolwise.ui.main_gui import THEME_COLORS, SchoolWiseGUI
from schoolwise.utils.thread_pool import get_thread_pool


@pytest.fixture
def gui(fake_gateway):
    page = MagicMock()
    page.overlay = []
    return SchoolWiseGUI(page, fake_gateway.config, gateway=fake_gateway)


class TestRendering:

    def test_initial_load_is_scheduled_on_the_page(self, gui):
        gui.page.run_task.assert_called_once_with(gui.filter_cascade.initialize)

    def test_buttons_follow_filter_completeness(self, gui):
        assert gui.generate_button.disabled is True
        gui.state_manager.set_filters(FilterState("School of Engineering", "2023-2024", "Odd"))
        assert gui.generate_button.disabled is False
        assert gui.negative_comments_button.disabled is False

    def test_department_badges_use_theme_colours(self, gui):
        gui.state_manager.set_filters(FilterState(school="School of Engineering"))
        gui.state_manager.set_departments(OptionSet.ready(["CSE", "ECE"], key="School of Engineering"))

        badges = gui.departments_holder.content.controls
        assert [badge.bgcolor for badge in badges] == [THEME_COLORS['primary']] * 2
        assert badges[0].content.color == THEME_COLORS['on_primary']
        assert gui.departments_label.value == "Departments in School of Engineering"

    def test_schools_spinner_uses_theme_colours(self, gui):
        assert gui.schools_loading.controls[0].color == THEME_COLORS['primary']


class TestDisconnect:

    def test_disconnect_keeps_shared_worker_pool(self, gui, fake_gateway):
        pool = get_thread_pool()

        gui._handle_disconnect()

        assert fake_gateway.closed is True
        assert gui.state.shutting_down is True
        assert get_thread_pool() is pool

    def test_disconnected_session_stops_rendering(self, gui):
        gui._handle_disconnect()
        gui.page.update.reset_mock()
        gui.state_manager.set_filters(FilterState(school="School of Sciences"))
        gui.page.update.assert_not_called()


def test_worker_pool_released_when_app_exits(monkeypatch):
    calls = []
    monkeypatch.setattr(main_module, "_configure_logging", lambda verbose: None)
    monkeypatch.setattr(main_module.ft, "app", lambda **kwargs: calls.append("app"))
    monkeypatch.setattr(main_module, "shutdown_thread_pool", lambda wait=True: calls.append(("shutdown", wait)))

    main_module.run(["--port", "8551"])

    assert calls == ["app", ("shutdown", False)]
