"""
Options Gateway - HTTP adapter for the school-report backend.

Performs the four read-only option fetches and the two report requests.
Every public method is a coroutine: the blocking ``requests`` call runs on
the shared worker pool and the result is parsed back on the event loop.

Failures are translated into the typed errors from ``services.errors``:
- connection problems and timeouts -> TransportError
- non-2xx answers -> HttpStatusError / ReportGenerationError
- 2xx answers with an unexpected body -> MalformedResponseError
"""
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter

from ..config.app_config import AppConfig
from ..core.telemetry import SLOW_REQUEST_SECONDS, request_label, timed
from ..data.models import FilterState, ReportFormat
from ..utils.thread_pool import run_blocking
from .errors import (
    HttpStatusError,
    MalformedResponseError,
    ReportGenerationError,
    TransportError,
)

logger = logging.getLogger(__name__)

CURRENT_AY_PATH = "/api/visualization/current-ay"
SEMESTERS_PATH = "/api/visualization/semesters"
SCHOOLS_PATH = "/api/school-reports/schools"
DEPARTMENTS_PATH = "/api/school-reports/schools/{school}/departments"
FULL_REPORT_PATH = "/api/school-reports/generate-school-report"
NEGATIVE_COMMENTS_PATH = "/api/school-reports/generate-school-negative-comments-excel"


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def _server_error_field(response: requests.Response) -> Optional[str]:
    """Return the ``error`` field of a JSON error body, if there is one."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    return None


def _extract_error_message(response: requests.Response, generic: str) -> str:
    """Best-effort error text: JSON error field, then raw body, then ``generic``."""
    message = _server_error_field(response)
    if message:
        return message
    text = (response.text or "").strip()
    return text or generic


class OptionsGateway:
    """Thin async client for the option lists and report endpoints."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        session: Optional[requests.Session] = None,
        *,
        pool_connections: int = 4,
        pool_maxsize: int = 8,
    ):
        """
        Initialize the gateway.

        Args:
            config: Application configuration (base URL and timeouts)
            session: Pre-built session, mainly for tests; created lazily otherwise
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.config = config or AppConfig()
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = session

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session.

        Retries are disabled: a failed request is reported once and the user
        decides whether to try again.
        """
        if self._session is None:
            self._session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=0,
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
            self._session.headers.update({"Accept": "application/json"})
            self._session.headers.update(self.config.extra_headers)
        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def url_for(self, path: str) -> str:
        return f"{self.config.server_url}{path}"

    # ------------------------------------------------------------------
    # Read operations

    async def list_schools(self) -> List[str]:
        response = await self._send("GET", SCHOOLS_PATH, timeout=self.config.read_timeout)
        if not _is_success(response):
            message = _server_error_field(response) or (
                f"HTTP {response.status_code}: Failed to fetch schools"
            )
            raise HttpStatusError(response.status_code, message)
        return self._parse_string_list(response, "schools")

    async def list_current_ays(self) -> List[str]:
        response = await self._send("GET", CURRENT_AY_PATH, timeout=self.config.read_timeout)
        return self._parse_string_list(response, "current academic years")

    async def list_semesters(self, current_ay: str) -> List[str]:
        params = {"currentAY": current_ay} if current_ay else None
        response = await self._send(
            "GET", SEMESTERS_PATH, params=params, timeout=self.config.read_timeout
        )
        return self._parse_string_list(response, "semesters")

    async def list_departments(self, school: str) -> List[str]:
        path = DEPARTMENTS_PATH.format(school=quote(school, safe=""))
        response = await self._send("GET", path, timeout=self.config.read_timeout)
        if not _is_success(response):
            message = _server_error_field(response) or "Failed to fetch departments"
            raise HttpStatusError(response.status_code, message)
        return self._parse_string_list(response, "departments")

    # ------------------------------------------------------------------
    # Report operations

    async def request_full_report(self, filters: FilterState, report_format: ReportFormat) -> bytes:
        """POST the filter snapshot plus format; return the raw report bytes."""
        body = dict(filters.to_payload(), format=ReportFormat.parse(report_format).value)
        return await self._request_report(
            FULL_REPORT_PATH, body, "Failed to generate school report"
        )

    async def request_negative_comments_report(self, filters: FilterState) -> bytes:
        """POST the filter snapshot; return the raw spreadsheet bytes."""
        return await self._request_report(
            NEGATIVE_COMMENTS_PATH,
            filters.to_payload(),
            "Failed to generate negative comments Excel",
        )

    async def _request_report(self, path: str, body: dict, generic_message: str) -> bytes:
        response = await self._send("POST", path, json=body, timeout=self.config.report_timeout)
        if not _is_success(response):
            message = _extract_error_message(
                response, f"HTTP {response.status_code}: {generic_message}"
            )
            logger.error("Report request %s failed with HTTP %s: %s", path, response.status_code, message)
            raise ReportGenerationError(response.status_code, message)
        payload = response.content or b""
        logger.info("Report request %s returned %d bytes", path, len(payload))
        return payload

    # ------------------------------------------------------------------
    # Internal helpers

    async def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.url_for(path)
        logger.debug("%s %s", method, url)
        try:
            with timed(logger, request_label(method, path), warn_after=SLOW_REQUEST_SECONDS):
                return await run_blocking(self.session.request, method, url, **kwargs)
        except requests.Timeout as e:
            raise TransportError(f"Request to {path} timed out: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"Could not reach server for {path}: {e}") from e

    @staticmethod
    def _parse_string_list(response: requests.Response, what: str) -> List[str]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid response format for {what}: not JSON") from e
        if not isinstance(data, list):
            raise MalformedResponseError(
                f"Invalid response format for {what}: expected a list, got {type(data).__name__}"
            )
        return [str(item) for item in data if item is not None]
