"""Dependent filter controller: school -> academic year -> semester.

Selecting an upstream filter clears everything that depends on it and, in the
same call, schedules the fetch of the dependent option list. Fetches carry a
request token; a response whose token has been superseded by a newer
selection is dropped on arrival, so the lists always match the latest
selection regardless of the order in which responses come back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Dict, Optional, Set

from ...data.models import FilterState, OptionSet, OptionStatus
from .state_manager import CURRENT_AYS, SCHOOLS, SEMESTERS

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from ...services.options_gateway import OptionsGateway
    from .state_manager import StateManager
    from .status_manager import StatusManager

logger = logging.getLogger(__name__)

DEPARTMENTS = "departments"


class FilterCascade:
    """Own the filter values and option lists and keep them consistent."""

    def __init__(
        self,
        gateway: "OptionsGateway",
        state_manager: "StateManager",
        status_manager: Optional["StatusManager"] = None,
    ) -> None:
        self.gateway = gateway
        self.state_manager = state_manager
        self.status_manager = status_manager
        self._tokens: Dict[str, int] = {SEMESTERS: 0, DEPARTMENTS: 0}
        self._pending: Set[asyncio.Task] = set()

    @property
    def filters(self) -> FilterState:
        return self.state_manager.state.filters

    def snapshot(self) -> FilterState:
        """Current filter values; safe to keep, later changes do not affect it."""
        return self.state_manager.state.filters

    # ------------------------------------------------------------------
    # Lifecycle

    async def initialize(self) -> None:
        """Load the school list and the academic-year list concurrently."""
        logger.info("Loading schools and academic years")
        self.state_manager.set_options(SCHOOLS, OptionSet.loading())
        self.state_manager.set_options(CURRENT_AYS, OptionSet.loading())
        await asyncio.gather(self._load_schools(), self._load_current_ays())
        self.state_manager.state.initialized = True
        self.state_manager.notify_observers("initialized")

    async def wait_idle(self) -> None:
        """Wait until every scheduled dependent fetch has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ------------------------------------------------------------------
    # Setters, called from UI events on the event loop

    def set_school(self, value: str) -> Optional[asyncio.Task]:
        """Select a school, clear academic year and semester, fetch its departments.

        Returns the scheduled fetch task, or None when no fetch was needed
        (empty value, or the departments are already loading or loaded for
        this school). Do not await the return value directly; use
        ``wait_idle()`` to wait for whatever was scheduled.
        """
        value = value or ""
        departments = self.state_manager.state.departments
        already_loaded = (
            bool(value)
            and value == self.filters.school
            and departments.key == value
            and departments.status in (OptionStatus.LOADING, OptionStatus.READY)
        )

        self.state_manager.set_filters(self.filters.with_school(value))
        self._clear_semesters()

        if already_loaded:
            logger.debug("School %r re-selected, departments already %s", value, departments.status.value)
            return None

        if not value:
            self._next_token(DEPARTMENTS)
            self.state_manager.set_departments(OptionSet())
            return None

        token = self._next_token(DEPARTMENTS)
        self.state_manager.set_departments(OptionSet.loading(key=value))
        return self._schedule(self._load_departments(value, token))

    def set_current_ay(self, value: str) -> Optional[asyncio.Task]:
        """Select an academic year, clear the semester, fetch that year's semesters.

        Like ``set_school``, returns the fetch task or None; wait with ``wait_idle()``.
        """
        value = value or ""
        semesters = self.state_manager.get_options(SEMESTERS)
        already_loaded = (
            bool(value)
            and value == self.filters.current_ay
            and semesters.key == value
            and semesters.status in (OptionStatus.LOADING, OptionStatus.READY)
        )

        self.state_manager.set_filters(self.filters.with_current_ay(value))

        if already_loaded:
            return None

        if not value:
            self._clear_semesters()
            return None

        token = self._next_token(SEMESTERS)
        self.state_manager.set_options(SEMESTERS, OptionSet.loading(key=value))
        return self._schedule(self._load_semesters(value, token))

    def set_semester(self, value: str) -> None:
        """Select a semester. Leaf level, nothing depends on it."""
        value = value or ""
        if value and not self.filters.current_ay:
            logger.warning("Ignoring semester %r: no academic year selected", value)
            return
        self.state_manager.set_filters(self.filters.with_semester(value))

    # ------------------------------------------------------------------
    # Fetches

    async def _load_schools(self) -> None:
        try:
            schools = await self.gateway.list_schools()
        except Exception as exc:
            logger.error("Error fetching schools: %s", exc)
            self.state_manager.set_options(SCHOOLS, OptionSet.failed())
            self._notify(
                f"❌ Error fetching schools: {exc}. Please check the server console for more details.",
                "red",
            )
            return
        logger.info("Loaded %d schools", len(schools))
        self.state_manager.set_options(SCHOOLS, OptionSet.ready(schools))

    async def _load_current_ays(self) -> None:
        try:
            years = await self.gateway.list_current_ays()
        except Exception as exc:
            logger.error("Error fetching current AY: %s", exc)
            self.state_manager.set_options(CURRENT_AYS, OptionSet.failed())
            self._notify(f"⚠️ Error fetching academic years: {exc}", "orange")
            return
        self.state_manager.set_options(CURRENT_AYS, OptionSet.ready(years))

    async def _load_semesters(self, current_ay: str, token: int) -> None:
        try:
            semesters = await self.gateway.list_semesters(current_ay)
        except Exception as exc:
            if not self._is_current(SEMESTERS, token):
                logger.debug("Ignoring failed semester fetch for superseded AY %r", current_ay)
                return
            logger.error("Error fetching semesters for %s: %s", current_ay, exc)
            self.state_manager.set_options(SEMESTERS, OptionSet.failed(key=current_ay))
            self._notify(f"⚠️ Error fetching semesters: {exc}", "orange")
            return

        if not self._is_current(SEMESTERS, token):
            logger.debug("Discarding stale semesters for AY %r", current_ay)
            return
        self.state_manager.set_options(SEMESTERS, OptionSet.ready(semesters, key=current_ay))

    async def _load_departments(self, school: str, token: int) -> None:
        try:
            departments = await self.gateway.list_departments(school)
        except Exception as exc:
            if not self._is_current(DEPARTMENTS, token):
                logger.debug("Ignoring failed department fetch for superseded school %r", school)
                return
            logger.error("Error fetching departments for %s: %s", school, exc)
            self.state_manager.set_departments(OptionSet.failed(key=school))
            self._notify("❌ Error fetching departments. Please try again.", "red")
            return

        if not self._is_current(DEPARTMENTS, token):
            logger.debug("Discarding stale departments for school %r", school)
            return
        logger.info("Loaded %d departments for %s", len(departments), school)
        self.state_manager.set_departments(OptionSet.ready(departments, key=school))

    # ------------------------------------------------------------------
    # Internal helpers

    def _clear_semesters(self) -> None:
        self._next_token(SEMESTERS)
        self.state_manager.set_options(SEMESTERS, OptionSet())

    def _next_token(self, name: str) -> int:
        self._tokens[name] += 1
        return self._tokens[name]

    def _is_current(self, name: str, token: int) -> bool:
        return self._tokens[name] == token

    def _schedule(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _notify(self, message: str, color: str) -> None:
        if self.status_manager is not None:
            self.status_manager.update_status(message, color)
