"""
Main GUI for the SchoolWise report client.

This module builds the filter panel and wires the managers together:
StateManager holds the state, FilterCascade and ReportWorkflow change it,
and this class re-renders the controls whenever the state manager reports
a change. All handlers are coroutines, so they run on Flet's event loop
alongside the option fetches.
"""
import flet as ft
import logging
import os
from pathlib import Path
from typing import Optional

from .core.filter_cascade import FilterCascade
from .core.report_workflow import ReportWorkflow
from .core.state_manager import CURRENT_AYS, SCHOOLS, SEMESTERS, StateManager
from .core.status_manager import StatusManager
from .utils.error_boundary import safe_ui_update, with_error_boundary
from .utils.loading_states import LoadingState

from ..config.app_config import AppConfig
from ..core.telemetry import timed
from ..data.models import OptionSet, ReportFormat, ReportKind
from ..services.options_gateway import OptionsGateway
from ..utils.common import open_file_externally
from .._version import VERSION

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    'green': '#2e7d32',
    'red': '#c62828',
    'blue': '#0288d1',
    'orange': '#f57c00',
    'black': '#1f2933',
}

# Semantic tokens used by the loading indicators and department badges
THEME_COLORS = {
    'primary': '#1565c0',
    'on_primary': '#ffffff',
    'text_muted': '#6b7280',
}


def _dropdown_options(option_set: OptionSet):
    return [ft.dropdown.Option(key=value, text=value) for value in option_set.options]


class SchoolWiseGUI:
    """
    The main GUI class, responsible for building the page and coordinating managers.
    """
    def __init__(
        self,
        page: ft.Page,
        config: Optional[AppConfig] = None,
        gateway: Optional[OptionsGateway] = None,
    ):
        self.page = page
        self.config = config or AppConfig.from_env()

        logger.info("Initializing SchoolWise GUI (server: %s)", self.config.server_url)

        with timed(logger, "Manager initialization"):
            self.state_manager = StateManager()
            self.gateway = gateway or OptionsGateway(self.config)

        self._setup_page_settings()
        self._initialize_ui_components()

        self.filter_cascade = FilterCascade(self.gateway, self.state_manager, self.status_manager)
        self.report_workflow = ReportWorkflow(
            self.gateway,
            self.state_manager,
            self.status_manager,
            download_dir=self.config.download_dir,
        )
        self.state_manager.add_observer(self._on_state_changed)

        self.build_layout()
        self.render()

        self.page.run_task(self.filter_cascade.initialize)

    @property
    def state(self):
        return self.state_manager.state

    def _setup_page_settings(self):
        """Configures the main Flet page settings."""
        self.page.title = "School-wise Report Generation"
        self.page.scroll = ft.ScrollMode.ADAPTIVE
        self.page.vertical_alignment = ft.MainAxisAlignment.START
        self.page.padding = 20
        self.page.on_disconnect = self._handle_disconnect

    def _initialize_ui_components(self):
        """Initializes all UI components and controls."""
        self.school_dropdown = ft.Dropdown(
            label="School *",
            hint_text="Select School",
            width=420,
            on_change=self._on_school_changed,
        )
        self.schools_loading = LoadingState.inline_loading(
            "Loading schools...", color_resolver=self._resolve_theme_color
        )

        self.current_ay_dropdown = ft.Dropdown(
            label="Current Academic Year *",
            hint_text="Select Academic Year",
            width=420,
            on_change=self._on_current_ay_changed,
        )
        self.semester_dropdown = ft.Dropdown(
            label="Semester *",
            hint_text="Select Semester",
            width=420,
            on_change=self._on_semester_changed,
        )

        self.departments_label = ft.Text("", weight=ft.FontWeight.BOLD)
        self.departments_holder = ft.Container()
        self.departments_section = ft.Column(
            [self.departments_label, self.departments_holder], spacing=6, visible=False
        )

        self.format_dropdown = ft.Dropdown(
            label="Report Format",
            width=420,
            value=ReportFormat.EXCEL.value,
            options=[
                ft.dropdown.Option(key=ReportFormat.EXCEL.value, text="Excel (Multiple Sheets)"),
                ft.dropdown.Option(key=ReportFormat.PDF.value, text="PDF (Multiple Pages)"),
            ],
            on_change=self._on_format_changed,
        )

        self.generate_button = ft.ElevatedButton(
            "Generate School Report",
            icon=ft.Icons.TABLE_CHART,
            on_click=self._on_generate_full_report,
        )
        self.negative_comments_button = ft.ElevatedButton(
            "Generate Negative Comments Excel",
            icon=ft.Icons.COMMENT,
            bgcolor="#28a745",
            color="#ffffff",
            on_click=self._on_generate_negative_comments,
        )

        self.status_text = ft.Text("Select a school, academic year and semester.", size=13)
        self.progress_bar = ft.ProgressBar(width=420, visible=False)
        self.status_manager = StatusManager(
            self.status_text,
            self.progress_bar,
            self._safe_page_update,
            color_resolver=self._resolve_status_color,
        )

    def build_layout(self):
        """Builds the single-page filter panel."""
        header = ft.Column([
            ft.Text("School-wise Report Generation", size=24, weight=ft.FontWeight.BOLD),
            ft.Text(
                "Generate feedback analysis reports for all departments within a school. "
                "Reports can be generated in Excel (multiple sheets) or PDF (multiple pages) format.",
                size=13,
            ),
        ], spacing=4)

        self.page.add(
            header,
            ft.Divider(),
            ft.Column([
                ft.Row([self.school_dropdown, self.schools_loading], spacing=12),
                self.current_ay_dropdown,
                self.semester_dropdown,
                self.departments_section,
                self.format_dropdown,
                ft.Row([self.generate_button, self.negative_comments_button], spacing=16),
                self.progress_bar,
                self.status_text,
            ], spacing=14),
            ft.Text(f"v{VERSION}", size=10, color="grey"),
        )

    # ------------------------------------------------------------------
    # Rendering

    @safe_ui_update
    def render(self):
        """Push the current state into the controls and refresh the page."""
        with timed(logger, "render"):
            state = self.state
            filters = state.filters

            schools = state.options[SCHOOLS]
            self.school_dropdown.options = _dropdown_options(schools)
            self.school_dropdown.value = filters.school or None
            self.school_dropdown.disabled = schools.is_loading
            self.schools_loading.visible = schools.is_loading

            self.current_ay_dropdown.options = _dropdown_options(state.options[CURRENT_AYS])
            self.current_ay_dropdown.value = filters.current_ay or None

            self.semester_dropdown.options = _dropdown_options(state.options[SEMESTERS])
            self.semester_dropdown.value = filters.semester or None
            self.semester_dropdown.disabled = not filters.current_ay

            self.departments_section.visible = bool(filters.school)
            self.departments_label.value = f"Departments in {filters.school}" if filters.school else ""
            self.departments_holder.content = LoadingState.departments_view(
                state.departments, color_resolver=self._resolve_theme_color
            )

            self.format_dropdown.value = state.report_format.value

            self._render_buttons()
        self._safe_page_update()

    def _render_buttons(self):
        complete = self.state.filters.is_complete

        full_busy = self.state_manager.is_operation_in_progress(ReportKind.FULL_REPORT)
        self.generate_button.disabled = not complete or full_busy
        self.generate_button.text = "Generating Report..." if full_busy else "Generate School Report"

        negative_busy = self.state_manager.is_operation_in_progress(ReportKind.NEGATIVE_COMMENTS_REPORT)
        self.negative_comments_button.disabled = not complete or negative_busy
        self.negative_comments_button.text = (
            "Generating..." if negative_busy else "Generate Negative Comments Excel"
        )

    def _on_state_changed(self, event_type: str, data: dict):
        if self.state.shutting_down:
            return
        logger.debug("State event %s: %s", event_type, data)
        self.render()

    def _safe_page_update(self):
        """Update the page, ignoring errors from closed sessions."""
        try:
            self.page.update()
            return True
        except (RuntimeError, AttributeError, AssertionError) as e:
            if "shutdown" in str(e).lower() or "session" in str(e).lower():
                logger.debug(f"Page update skipped due to shutdown: {e}")
            else:
                logger.debug(f"Page update error: {e}")
        return False

    def _resolve_status_color(self, color: Optional[str]) -> Optional[str]:
        if not color:
            return STATUS_COLORS['black']
        return STATUS_COLORS.get(str(color).lower(), color)

    def _resolve_theme_color(self, token: str, fallback: str) -> str:
        return THEME_COLORS.get(token, fallback)

    # ------------------------------------------------------------------
    # Event handlers

    @with_error_boundary(fallback_ui_message="Could not change the school")
    async def _on_school_changed(self, e: ft.ControlEvent):
        self.filter_cascade.set_school(e.control.value or "")

    @with_error_boundary(fallback_ui_message="Could not change the academic year")
    async def _on_current_ay_changed(self, e: ft.ControlEvent):
        self.filter_cascade.set_current_ay(e.control.value or "")

    @with_error_boundary(fallback_ui_message="Could not change the semester")
    async def _on_semester_changed(self, e: ft.ControlEvent):
        self.filter_cascade.set_semester(e.control.value or "")

    @with_error_boundary()
    async def _on_format_changed(self, e: ft.ControlEvent):
        self.state_manager.set_report_format(e.control.value)

    @with_error_boundary(fallback_ui_message="Report generation failed unexpectedly")
    async def _on_generate_full_report(self, e: ft.ControlEvent):
        outcome = await self.report_workflow.generate_full_report(
            self.filter_cascade.snapshot(), self.state.report_format
        )
        if outcome.succeeded:
            self._show_download_success_dialog(outcome.path)

    @with_error_boundary(fallback_ui_message="Report generation failed unexpectedly")
    async def _on_generate_negative_comments(self, e: ft.ControlEvent):
        outcome = await self.report_workflow.generate_negative_comments_report(
            self.filter_cascade.snapshot()
        )
        if outcome.succeeded:
            self._show_download_success_dialog(outcome.path)

    # ------------------------------------------------------------------
    # Dialogs and lifecycle

    def _show_download_success_dialog(self, full_path: Path) -> None:
        def on_open_folder(_: ft.ControlEvent) -> None:
            open_file_externally(os.path.dirname(full_path))
            success_dialog.open = False
            self._safe_page_update()

        def on_close_success(_: ft.ControlEvent) -> None:
            success_dialog.open = False
            self._safe_page_update()

        success_dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text("✅ Download Complete!", weight=ft.FontWeight.BOLD, color="green"),
            content=ft.Column(
                [
                    ft.Text("📄 Filename:", size=12, weight=ft.FontWeight.BOLD),
                    ft.Text(full_path.name, size=13, selectable=True),
                    ft.Text("📁 Location:", size=12, weight=ft.FontWeight.BOLD),
                    ft.Text(str(full_path.parent), size=12, selectable=True, color="#666666"),
                ],
                spacing=4,
                tight=True,
            ),
            actions=[
                ft.TextButton("Close", on_click=on_close_success),
                ft.ElevatedButton("📂 Open Folder", on_click=on_open_folder, icon=ft.Icons.FOLDER_OPEN),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )

        self.page.overlay.append(success_dialog)
        success_dialog.open = True
        self._safe_page_update()

    def _handle_disconnect(self, e=None):
        """Release this session's resources when its page disconnects.

        The worker pool is shared by every session in the process and is shut
        down by ``main.run`` when the app exits.
        """
        logger.info("Page disconnecting, cleaning up resources...")
        self.state.shutting_down = True
        self.state_manager.remove_observer(self._on_state_changed)
        try:
            self.gateway.close()
        except Exception as ex:
            logger.error(f"Error during cleanup: {ex}")
