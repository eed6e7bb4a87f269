import json as jsonlib
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest
import requests

from opsconsole.config import Settings
from opsconsole.context import build_context
from opsconsole.storage.session_store import MemorySessionStore

BASE_URL = "http://api.test/api"

ADMIN = {"id": "u1", "email": "admin@logistics.com", "name": "Admin", "role": "admin"}


def make_response(status: int, body: Any = None, url: str = BASE_URL) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.headers["Content-Type"] = "application/json"
    response._content = b"" if body is None else jsonlib.dumps(body).encode("utf-8")
    return response


@dataclass
class Call:
    method: str
    path: str
    json: Optional[Dict[str, Any]]
    headers: Dict[str, str]


@dataclass
class Canned:
    status: int = 200
    body: Any = None
    error: Optional[Exception] = None
    callback: Optional[Callable[[], None]] = None


class FakeHttp(requests.Session):
    """requests.Session double answering from canned responses per (method, path)."""

    def __init__(self):
        super().__init__()
        self.routes: Dict[tuple, Canned] = {}
        self.calls: List[Call] = []

    def add(self, method, path, status=200, body=None, error=None, callback=None):
        self.routes[(method, path)] = Canned(status, body, error, callback)

    def request(self, method, url, json=None, headers=None, timeout=None, **kwargs):
        path = url[len(BASE_URL):]
        self.calls.append(Call(method, path, json, dict(headers or {})))

        canned = self.routes.get((method, path))
        if canned is None:
            return make_response(404, {"error": "Not found"}, url)
        if canned.callback is not None:
            canned.callback()
        if canned.error is not None:
            raise canned.error
        return make_response(canned.status, canned.body, url)

    def calls_to(self, method, path):
        return [c for c in self.calls if c.method == method and c.path == path]


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def settings():
    return Settings(api_url=BASE_URL, api_timeout=1, order_preview_limit=2)


@pytest.fixture
def ctx(settings, store, http):
    return build_context(settings, store=store, http=http)


@pytest.fixture
def logged_in(ctx, store, http):
    """Context with a verified session for ADMIN."""
    store.write("tok-1", ADMIN)
    http.add("GET", "/auth/me", body=ADMIN)
    ctx.sessions.restore()
    http.calls.clear()
    return ctx


SIMULATION_PAYLOAD = {
    "_id": "sim-1",
    "createdAt": "2026-03-01T09:30:00Z",
    "kpis": {
        "totalProfit": 12500.4,
        "efficiency": 80,
        "totalDeliveries": 10,
        "onTimeDeliveries": 8,
        "fuelCostBreakdown": {"High": 420, "Low": 150, "Medium": 260},
    },
    "perOrder": [
        {"orderId": "O1", "valueRs": 500, "assignedDriver": "Asha", "onTime": True, "profit": 450},
        {"orderId": "O2", "valueRs": 300, "assignedDriver": "Ravi", "onTime": False, "profit": 200},
        {"orderId": "O3", "valueRs": 900, "assignedDriver": "Asha", "onTime": True, "profit": 880},
    ],
}
