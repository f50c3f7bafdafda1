"""
Test configuration — sets env vars before any imports, plus a fake appliance.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable

import httpx
import pytest

# Keep Settings() deterministic; nothing here ever reaches a real appliance.
os.environ.setdefault("PIHOLE_HOSTNAME", "http://pihole.test")
os.environ.setdefault("WIDGET_REFRESH_SECONDS", "0")


class FakeAppliance:
    """Route table for httpx.MockTransport that records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status,
                content=json.dumps(body).encode(),
                headers={"Content-Type": "application/json"},
            )

        self.routes[(method, path)] = _handler

    def on_raw(self, method: str, path: str, content: bytes, status: int = 200) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, content=content)

        self.routes[(method, path)] = _handler

    def fail(self, method: str, path: str, exc: Exception) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise exc

        self.routes[(method, path)] = _handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def json_body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture()
def appliance() -> FakeAppliance:
    return FakeAppliance()
