"""
Global test fixtures.

The upstream Nginx Proxy Manager API is replaced by FakeNPM, an in-memory
implementation served through httpx.MockTransport, so no test touches the
network.
"""

import itertools
import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from npm_mcp.client import Gateway, Session

BASE_URL = "http://npm.test/api"
IDENTITY = "admin@example.com"
SECRET = "changeme"
TOKEN = "token-abc"

KIND_PATHS = ("proxy-hosts", "redirection-hosts", "dead-hosts", "access-lists", "certificates")


def _error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


class FakeNPM:
    """Minimal stand-in for the NPM REST API."""

    def __init__(self, expires: str | None = None):
        self.expires = expires
        self.requests: list[httpx.Request] = []
        self.records: dict[str, dict[int, dict]] = {kind: {} for kind in KIND_PATHS}
        self._ids = itertools.count(1)
        self.revoked = False

    def body(self, request: httpx.Request):
        return json.loads(request.content) if request.content else None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")

        if path == "/tokens" and request.method == "POST":
            body = self.body(request)
            if body.get("identity") != IDENTITY or body.get("secret") != SECRET:
                return _error(401, "Invalid email or password")
            data = {"token": TOKEN}
            if self.expires is not None:
                data["expires"] = self.expires
            return httpx.Response(200, json=data)

        if self.revoked or request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return _error(401, "Token has expired")

        if path == "/reports/hosts":
            return httpx.Response(200, json={"proxy": len(self.records["proxy-hosts"]), "dead": 0})
        if path == "/audit-log":
            return httpx.Response(200, json=[{"id": 1, "action": "created"}])

        parts = path.strip("/").split("/")
        if len(parts) < 2 or parts[0] != "nginx" or parts[1] not in self.records:
            return _error(404, "Not Found")
        records = self.records[parts[1]]

        if len(parts) == 2:
            if request.method == "GET":
                return httpx.Response(200, json=list(records.values()))
            if request.method == "POST":
                record = {"id": next(self._ids), **self.body(request)}
                records[record["id"]] = record
                return httpx.Response(201, json=record)

        record_id = int(parts[2])
        if record_id not in records:
            return _error(404, "Not Found")
        record = records[record_id]

        if len(parts) == 4:
            action = parts[3]
            if action in ("enable", "disable"):
                record["enabled"] = int(action == "enable")
                return httpx.Response(200, json=True)
            return httpx.Response(200, json=record)
        if request.method == "GET":
            return httpx.Response(200, json=record)
        if request.method == "PUT":
            record.update(self.body(request))
            return httpx.Response(200, json=record)
        if request.method == "DELETE":
            del records[record_id]
            return httpx.Response(200, json=True)
        return _error(405, "Method Not Allowed")


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def fake_npm():
    return FakeNPM()


@pytest.fixture
def transport(fake_npm):
    return httpx.MockTransport(fake_npm.handle)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway(transport, clock):
    """Gateway with no session."""
    return Gateway(BASE_URL, transport=transport, clock=clock)


@pytest.fixture
def authed_gateway(gateway, clock):
    """Gateway holding a valid session for FakeNPM."""
    gateway.session = Session(
        token=TOKEN,
        issued_at=clock.now,
        expires_at=clock.now + timedelta(hours=1),
        base_url=BASE_URL,
    )
    return gateway
