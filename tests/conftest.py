"""Pytest configuration and fixtures for wiremock-helper tests.

This file provides:
- AdminRecorder: an in-process stand-in for the Wiremock admin API built on
  httpx.MockTransport. It records every request and serves canned replies.
- Fixtures: the recorder, and structlog state reset between tests.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Generator

import httpx
import pytest
import structlog

from wiremock_helper.client import WiremockClient

BASE_URL = "http://localhost:8080"


class AdminRecorder:
    """Records admin requests and replies from a (method, path) route table.

    Unrouted requests get an empty 200 reply. Replies are rebuilt per request
    so the same route can be hit more than once.

    Usage:
        admin = AdminRecorder()
        admin.reply("GET", "/__admin/mappings", json_body={"mappings": [], "meta": {"total": 0}})
        async with admin.client() as client:
            await client.get_mappings()
        assert admin.calls == [("GET", "/__admin/mappings")]
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def reply(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        text: str | None = None,
    ) -> None:
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
        else:
            content = (text or "").encode("utf-8")
        self._routes[(method, path)] = lambda request: httpx.Response(status_code, content=content)

    def fail(self, method: str, path: str, message: str = "Connection refused") -> None:
        """Make the route raise a transport-level connection error."""

        def raise_connect_error(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self._routes[(method, path)] = raise_connect_error

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(200, content=b"")
        return route(request)

    def client(self, **kwargs: Any) -> WiremockClient:
        return WiremockClient(BASE_URL, transport=httpx.MockTransport(self.handle), **kwargs)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(request.method, request.url.path) for request in self.requests]

    def json_body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def admin() -> AdminRecorder:
    return AdminRecorder()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()
