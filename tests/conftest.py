"""
Request Orchestrator - Test Fixtures

Provides an HTTP transport backed by httpx.MockTransport and a recording
store, so requests never leave the process.
"""

import pytest
import sys
from pathlib import Path
from typing import Callable, Dict, List

import httpx

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from shared.transport import HttpTransport
from request_orchestrator import create_api_middleware, create_store, recording_reducer

BASE_URL = "https://api.example.test"


class FakeApi:
    """
    Routes requests to canned responses and records every request received.

    Routes map "METHOD /path" to an httpx.Response or to a callable taking the
    request; a route may also raise (e.g. httpx.ConnectError).
    """

    def __init__(self):
        self.routes: Dict[str, object] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, response) -> None:
        self.routes[f"{method.upper()} {path}"] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(f"{request.method} {request.url.path}")
        if route is None:
            return httpx.Response(404, json={"status_message": "not found"})
        if callable(route):
            return route(request)
        return route


@pytest.fixture
def fake_api():
    """Empty fake API; tests add routes"""
    return FakeApi()


@pytest.fixture
def transport(fake_api):
    """HttpTransport wired to the fake API"""
    return HttpTransport(
        base_url=BASE_URL,
        transport=httpx.MockTransport(fake_api.handler)
    )


@pytest.fixture
def make_store(transport) -> Callable:
    """Factory for a recording store with the API middleware applied"""
    def factory(*extra_middlewares):
        return create_store(
            recording_reducer,
            initial_state=[],
            middlewares=[*extra_middlewares, create_api_middleware(transport=transport)]
        )
    return factory


@pytest.fixture
def store(make_store):
    """Recording store with only the API middleware"""
    return make_store()
