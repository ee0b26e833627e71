"""
Shared fixtures for CodeAuth SDK tests.
"""

import json
import threading
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from codeauth.client import CodeAuthClient


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeCodeAuthService:
    """In-memory stand-in for the CodeAuth HTTP API, served through httpx.MockTransport."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.responses: Dict[str, Callable[[Dict[str, Any]], httpx.Response]] = {}
        self.unreachable = False
        self._lock = threading.Lock()

    def respond(self, path: str, payload: Dict[str, Any], status_code: int = 200):
        """Answer every POST to ``path`` with ``payload``."""
        self.responses[path] = lambda body: httpx.Response(status_code, json=payload)

    def respond_with(self, path: str, handler: Callable[[Dict[str, Any]], httpx.Response]):
        self.responses[path] = handler

    def calls_to(self, path: str) -> List[Dict[str, Any]]:
        return [call["body"] for call in self.calls if call["path"] == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        body = json.loads(request.content)
        with self._lock:
            self.calls.append({
                "path": request.url.path,
                "url": str(request.url),
                "content_type": request.headers.get("content-type"),
                "body": body,
            })

        handler: Optional[Callable] = self.responses.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"error": "not_found"})
        return handler(body)


@pytest.fixture
def clock():
    """Controllable clock."""
    return FakeClock()


@pytest.fixture
def fake_service():
    """Fake CodeAuth service."""
    return FakeCodeAuthService()


@pytest.fixture
def http_client(fake_service):
    """httpx client routed to the fake service."""
    client = httpx.Client(transport=httpx.MockTransport(fake_service.handle))
    yield client
    client.close()


@pytest.fixture
def codeauth_client(http_client, clock):
    """Initialized client with a 30 second cache."""
    client = CodeAuthClient(http_client=http_client, clock=clock)
    client.initialize("api.example.com", "proj1", use_cache=True, cache_duration=30)
    return client


@pytest.fixture
def session_payload():
    """Successful verify response body."""
    return {
        "session_token": "tok1",
        "email": "a@b.com",
        "expiration": 1700000000,
        "refresh_left": 5,
    }
