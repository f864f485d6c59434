from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests
from openpyxl import Workbook

from schoolwise.config.app_config import AppConfig
from schoolwise.ui.core.state_manager import StateManager


class DummyStatusManager:
    """Records notifications instead of drawing them."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []
        self.progress_shown = 0
        self.progress_hidden = 0

    def update_status(self, message: str, color: str = "black") -> None:
        self.messages.append((message, color))

    def show_progress(self) -> None:
        self.progress_shown += 1

    def hide_progress(self) -> None:
        self.progress_hidden += 1

    @property
    def texts(self) -> List[str]:
        return [message for message, _ in self.messages]


class FakeGateway:
    """
    In-memory stand-in for OptionsGateway.

    ``responses`` maps a method name to a value, an exception instance, or a
    callable taking the call argument. ``hold(name, arg)`` makes the matching
    call wait until ``release(name, arg)`` is called.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig(download_dir=None)
        self.calls: List[Tuple[str, Any]] = []
        self.responses: Dict[str, Any] = {}
        self._gates: Dict[Tuple[str, Any], asyncio.Event] = {}
        self.closed = False

    def hold(self, name: str, arg: Any = None) -> None:
        self._gates[(name, arg)] = asyncio.Event()

    def release(self, name: str, arg: Any = None) -> None:
        self._gates[(name, arg)].set()

    def close(self) -> None:
        self.closed = True

    def count(self, name: str) -> int:
        return sum(1 for call_name, _ in self.calls if call_name == name)

    async def _respond(self, name: str, arg: Any = None, default: Any = None) -> Any:
        self.calls.append((name, arg))
        gate = self._gates.get((name, arg))
        if gate is not None:
            await gate.wait()
        result = self.responses.get(name, default)
        if callable(result):
            result = result(arg)
        if isinstance(result, Exception):
            raise result
        return result

    async def list_schools(self):
        return await self._respond("list_schools", default=[])

    async def list_current_ays(self):
        return await self._respond("list_current_ays", default=[])

    async def list_semesters(self, current_ay):
        return await self._respond("list_semesters", current_ay, default=[])

    async def list_departments(self, school):
        return await self._respond("list_departments", school, default=[])

    async def request_full_report(self, filters, report_format):
        return await self._respond("request_full_report", (filters, report_format), default=b"report")

    async def request_negative_comments_report(self, filters):
        return await self._respond("request_negative_comments_report", filters, default=b"report")


def make_response(status_code: int = 200, body: Any = None, *, raw: Optional[bytes] = None) -> requests.Response:
    """Build a real ``requests.Response`` with a JSON (or raw) body."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if raw is not None:
        response._content = raw
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def status_manager() -> DummyStatusManager:
    return DummyStatusManager()


@pytest.fixture
def state_manager() -> StateManager:
    return StateManager()


@pytest.fixture
def fake_gateway(tmp_path: Path) -> FakeGateway:
    return FakeGateway(AppConfig(download_dir=str(tmp_path / "downloads")))


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    path = tmp_path / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def xlsx_payload() -> bytes:
    """A small two-sheet workbook, like the server's negative comments export."""
    wb = Workbook()
    ws = wb.active
    ws.title = "CSE"
    ws.append(["Course", "Faculty", "Comment"])
    ws.append(["CS101", "Dr. Rao", "Lectures are too fast"])
    other = wb.create_sheet("ECE")
    other.append(["Course", "Faculty", "Comment"])
    other.append(["EC201", "Dr. Iyer", "Lab equipment outdated"])
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
