from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from firestore_sessions.api.app import create_app
from firestore_sessions.config.settings import Settings, get_settings
from firestore_sessions.infra.session_store_memory import InMemorySessionStore


def build_request(cookies: dict[str, str] | None = None) -> Request:
    """Cria uma Request Starlette mínima, opcionalmente com cookies."""
    headers: list[tuple[bytes, bytes]] = []
    if cookies:
        cookie_header = "; ".join(f"{key}={value}" for key, value in cookies.items())
        headers.append((b"cookie", cookie_header.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": headers,
    }
    return Request(scope)


@pytest.fixture()
def make_request() -> Callable[..., Request]:
    return build_request


@pytest.fixture()
def memory_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SESSION_STORE_BACKEND", "memory")
    get_settings.cache_clear()
    app = create_app(Settings(), session_store=InMemorySessionStore(share_by_name=False))
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()
