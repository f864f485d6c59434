"""
Loading state components for the filter panel.

Small inline indicators shown while option lists load, and the department
badge list that is derived from the selected school.
"""
import flet as ft
import logging
from typing import Callable, Optional, Sequence

from ...data.models import OptionSet, OptionStatus

logger = logging.getLogger(__name__)

ColorResolver = Optional[Callable[[str, str], Optional[str]]]


def _color(resolver: ColorResolver, token: str, fallback: str) -> str:
    """Resolve a semantic color token via the active theme when possible."""

    if callable(resolver):
        try:
            resolved = resolver(token, fallback)
            if resolved:
                return resolved
        except Exception as exc:
            logger.debug("loading_states color fallback (%s): %s", token, exc)
    return fallback


class LoadingState:
    """
    Centralized loading state components for common operations.
    """

    @staticmethod
    def inline_loading(message: str = "Loading...", *, color_resolver: ColorResolver = None) -> ft.Row:
        """Small spinner with a muted label, e.g. "Loading schools..."."""
        return ft.Row([
            ft.ProgressRing(
                width=16,
                height=16,
                stroke_width=2,
                color=_color(color_resolver, 'primary', '#2563eb')
            ),
            ft.Text(
                message,
                size=12,
                italic=True,
                color=_color(color_resolver, 'text_muted', 'grey')
            ),
        ], spacing=8)

    @staticmethod
    def department_badges(departments: Sequence[str], *, color_resolver: ColorResolver = None) -> ft.Row:
        """One rounded badge per department, wrapping onto new lines."""
        return ft.Row(
            controls=[
                ft.Container(
                    content=ft.Text(name, size=12, color=_color(color_resolver, 'on_primary', '#ffffff')),
                    padding=ft.Padding(left=10, top=4, right=10, bottom=4),
                    bgcolor=_color(color_resolver, 'primary', '#2563eb'),
                    border_radius=12,
                )
                for name in departments
            ],
            wrap=True,
            spacing=6,
            run_spacing=6,
        )

    @staticmethod
    def departments_view(
        departments: OptionSet,
        *,
        color_resolver: ColorResolver = None,
    ) -> ft.Control:
        """
        Render the department list for the selected school.

        Args:
            departments: Department option set (its key is the school)

        Returns:
            Spinner while loading, badges when there are departments,
            otherwise a "No departments found" note
        """
        if departments.status is OptionStatus.LOADING:
            return LoadingState.inline_loading("Loading departments...", color_resolver=color_resolver)
        if departments.options:
            return LoadingState.department_badges(departments.options, color_resolver=color_resolver)
        return ft.Text(
            "No departments found",
            size=12,
            italic=True,
            color=_color(color_resolver, 'text_muted', 'grey')
        )
