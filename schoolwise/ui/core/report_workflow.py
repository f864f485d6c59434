"""Report generation workflow controller.

Validates the filter snapshot, asks the backend for a report, and saves the
returned payload into the download folder. The full report and the
negative-comments report are tracked independently, so either can run while
the other is in flight.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Union

from ...core.telemetry import timed
from ...data.models import (
    FilterState,
    OperationStatus,
    ReportFormat,
    ReportKind,
    ReportOutcome,
)
from ...services.errors import (
    EmptyPayloadError,
    OperationInProgressError,
    ValidationError,
)
from ...utils.common import sanitize_school_name, unique_path, validate_directory_path
from ...utils.thread_pool import run_blocking

if TYPE_CHECKING:  # pragma: no cover
    from ...services.options_gateway import OptionsGateway
    from .state_manager import StateManager
    from .status_manager import StatusManager

logger = logging.getLogger(__name__)


def build_report_filename(school: str, kind: ReportKind, report_format: ReportFormat = ReportFormat.EXCEL) -> str:
    """Download filename for a report, e.g. ``School_of_Engineering_school_report.xlsx``."""
    safe_school_name = sanitize_school_name(school)
    if kind is ReportKind.FULL_REPORT:
        return f"{safe_school_name}_school_report.{ReportFormat.parse(report_format).extension}"
    return f"{safe_school_name}_negative_comments_report.xlsx"


class ReportWorkflow:
    """Coordinate report requests and file-save workflows."""

    def __init__(
        self,
        gateway: "OptionsGateway",
        state_manager: "StateManager",
        status_manager: Optional["StatusManager"] = None,
        *,
        download_dir: Union[str, Path, None] = None,
    ) -> None:
        self.gateway = gateway
        self.state_manager = state_manager
        self.status_manager = status_manager
        self.download_dir = Path(download_dir or gateway.config.download_dir)
        self._save_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API used by the GUI

    async def generate_full_report(
        self,
        filters: FilterState,
        report_format: Optional[ReportFormat] = None,
    ) -> ReportOutcome:
        """Request the multi-sheet / multi-page school report and save it."""
        if report_format is None:
            report_format = self.state_manager.state.report_format
        report_format = ReportFormat.parse(report_format)

        return await self._run(
            ReportKind.FULL_REPORT,
            filters,
            lambda: self.gateway.request_full_report(filters, report_format),
            build_report_filename(filters.school, ReportKind.FULL_REPORT, report_format),
        )

    async def generate_negative_comments_report(self, filters: FilterState) -> ReportOutcome:
        """Request the negative-comments spreadsheet and save it."""
        return await self._run(
            ReportKind.NEGATIVE_COMMENTS_REPORT,
            filters,
            lambda: self.gateway.request_negative_comments_report(filters),
            build_report_filename(filters.school, ReportKind.NEGATIVE_COMMENTS_REPORT),
        )

    def save_report(self, payload: bytes, filename: str) -> Path:
        """Write ``payload`` into the download folder and return the final path.

        The bytes go to a temporary file in the same folder first and are then
        renamed into place, so a half-written report never carries the final
        name. Blocking; run it through ``run_blocking`` from the event loop.
        """
        directory = validate_directory_path(self.download_dir)
        if directory is None:
            raise OSError(f"Download folder is not usable: {self.download_dir}")

        with self._save_lock:
            final_path = unique_path(directory, filename)
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".schoolwise-", suffix=".part")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                os.replace(temp_path, final_path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise

        logger.info("Saved %d bytes to %s", len(payload), final_path)
        return final_path

    # ------------------------------------------------------------------
    # Internal helpers

    async def _run(
        self,
        kind: ReportKind,
        filters: FilterState,
        request: Callable[[], Awaitable[bytes]],
        filename: str,
    ) -> ReportOutcome:
        missing = filters.missing_fields()
        if missing:
            error = ValidationError(missing)
            logger.warning("%s blocked, missing filters: %s", kind.value, ", ".join(missing))
            self._notify(f"⚠️ {error}", "orange")
            return ReportOutcome(kind, OperationStatus.FAILED, error=error, filters=filters)

        if not self.state_manager.start_operation(kind):
            error = OperationInProgressError(f"The {kind.label} is already being generated. Please wait...")
            self._notify(f"⚠️ {error}", "orange")
            return ReportOutcome(kind, OperationStatus.FAILED, error=error, filters=filters)

        logger.info(
            "Generating %s for school=%r currentAY=%r semester=%r",
            kind.value, filters.school, filters.current_ay, filters.semester,
        )
        self._notify(f"🔄 Generating {kind.label}...", "blue")
        self._progress(show=True)

        succeeded = False
        saved_path: Optional[Path] = None
        error: Optional[Exception] = None
        elapsed: Optional[float] = None
        try:
            with timed(logger, f"{kind.value} request", level=logging.INFO) as request_timing:
                payload = await request()
            elapsed = request_timing.elapsed

            if kind is ReportKind.NEGATIVE_COMMENTS_REPORT and not payload:
                raise EmptyPayloadError()

            with timed(logger, f"save {filename}"):
                saved_path = await run_blocking(self.save_report, payload, filename)

            succeeded = True
            self._notify(f"✅ Report saved: {saved_path.name}", "green")
        except Exception as exc:
            error = exc
            logger.error("%s generation failed: %s", kind.value, exc)
            self._notify(f"❌ Error generating {kind.label}: {exc}", "red")
        finally:
            self.state_manager.end_operation(kind, succeeded)
            self._progress(show=False)

        status = OperationStatus.SUCCEEDED if succeeded else OperationStatus.FAILED
        return ReportOutcome(kind, status, path=saved_path, error=error, filters=filters, elapsed=elapsed)

    def _notify(self, message: str, color: str) -> None:
        if self.status_manager is not None:
            self.status_manager.update_status(message, color)

    def _progress(self, *, show: bool) -> None:
        if self.status_manager is None:
            return
        if show:
            self.status_manager.show_progress()
        else:
            self.status_manager.hide_progress()
