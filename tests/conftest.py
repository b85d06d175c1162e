"""Pytest configuration for easy8cli tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`), and provides a
recording stand-in for ``requests.Session`` so no test touches the network.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@dataclass
class FakeResponse:
    status_code: int
    payload: Any = None

    def json(self) -> Any:
        if isinstance(self.payload, str):
            return json.loads(self.payload)
        return self.payload

    @property
    def text(self) -> str:
        payload = self.payload
        if payload is None:
            return ""
        if isinstance(payload, (dict, list)):
            return json.dumps(payload)
        return str(payload)


Handler = Callable[[str, str, dict[str, Any]], FakeResponse]


class FakeSession:
    """Replays queued responses (or a routing handler) and logs requests."""

    def __init__(self, responses: list[FakeResponse] | Handler | None = None):
        self._handler: Handler | None = responses if callable(responses) else None
        self._responses: list[FakeResponse] = [] if callable(responses) else list(responses or [])
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json: Any | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> FakeResponse:
        call = {"headers": headers, "json": json, "params": params, "timeout": timeout}
        self.request_log.append((method, url, call))
        if self._handler is not None:
            return self._handler(method, url, call)
        if not self._responses:
            raise AssertionError("No response queued for request")
        return self._responses.pop(0)


@pytest.fixture
def fake_session() -> Callable[..., FakeSession]:
    return FakeSession


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's real config, keys and .env files out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for var in (
        "EASY8_CONFIG",
        "EASY8_BASE_URL",
        "EASY8_API_KEY",
        "EASY8_TIMEOUT",
        "EASY8_LOG_LEVEL",
        "REDMINE_API_KEY",
        "EASY_API_KEY",
        "EASY8_DEFAULT_PROJECT_ID",
        "EASY8_DEFAULT_TRACKER_ID",
        "EASY8_DEFAULT_STATUS_ID",
        "EASY8_DEFAULT_PRIORITY_ID",
        "EASY8_DEFAULT_AUTHOR_ID",
        "EASY8_DEFAULT_ASSIGNED_TO_ID",
    ):
        monkeypatch.delenv(var, raising=False)
