"""
Status Manager - Handles status text and progress display for the SchoolWise GUI.

This manager is the single place user-facing notifications go through:
- Status message updates with color coding
- Progress bar visibility control
- Safe callback execution with shutdown handling
"""

import flet as ft
import logging
from typing import Optional, Callable

logger = logging.getLogger(__name__)


class StatusManager:
    """
    Manages status text and progress display for the GUI.

    Thread Safety:
        All methods include exception handling for shutdown scenarios.
        Callbacks are executed safely with proper error handling.
    """

    def __init__(
        self,
        status_text: ft.Text,
        progress_bar: ft.ProgressBar,
        update_callback: Optional[Callable] = None,
        color_resolver: Optional[Callable[[Optional[str]], Optional[str]]] = None,
    ):
        """
        Initialize the status manager.

        Args:
            status_text: Flet Text control for status messages
            progress_bar: Flet ProgressBar control for progress indication
            update_callback: Optional callback to trigger page updates (typically _safe_page_update)
        """
        self.status_text = status_text
        self.progress_bar = progress_bar
        self.update_callback = update_callback or (lambda: None)
        self._color_resolver = color_resolver
        self._active_progress = 0

    def update_status(self, message: str, color: str = 'black'):
        """
        Update the status text with a message and color.

        Args:
            message: Status message to display
            color: Color for the status text (default: 'black')
                   Common values: 'green' (success), 'red' (error),
                   'blue' (info), 'orange' (warning)
        """
        try:
            self.status_text.value = message
            self.status_text.color = self._resolve_color(color)
            logger.info(f"GUI Status Update: {message}")
            self._run_update_callback("Status update")
        except Exception as e:
            logger.warning(f"Failed to update status: {e}")

    def show_progress(self):
        """
        Show the progress bar.

        Calls are counted so that two overlapping report actions keep the bar
        visible until both have finished.
        """
        try:
            self._active_progress += 1
            self.progress_bar.visible = True
            self._run_update_callback("Progress show")
        except Exception as e:
            logger.warning(f"Failed to show progress: {e}")

    def hide_progress(self):
        """Hide the progress bar once no operation needs it any more."""
        try:
            self._active_progress = max(0, self._active_progress - 1)
            if self._active_progress == 0:
                self.progress_bar.visible = False
            self._run_update_callback("Progress hide")
        except Exception as e:
            logger.warning(f"Failed to hide progress: {e}")

    def _resolve_color(self, color: Optional[str]) -> Optional[str]:
        if callable(self._color_resolver):
            try:
                resolved = self._color_resolver(color)
                if resolved:
                    return resolved
            except Exception:
                logger.debug("Color resolver failed for %s", color)
        return color

    def _run_update_callback(self, label: str):
        if not self.update_callback:
            return
        try:
            self.update_callback()
        except (RuntimeError, AttributeError) as e:
            if "shutdown" in str(e).lower() or "session" in str(e).lower():
                logger.debug(f"{label} callback skipped due to shutdown: {e}")
            else:
                logger.warning(f"{label} callback failed: {e}")
