"""Shared fixtures for the Bridggy client test suite."""

import base64
import json
import time
from unittest.mock import AsyncMock

import httpx
import pytest

from bridggy.client import Bridggy
from bridggy.clients.models import Config
from bridggy.config.settings import get_settings

SCOPE = "localhost:8787"
AUD = "http://localhost:8787"


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).decode().rstrip("=")


def make_token(claims: dict) -> str:
    """Build an unsigned three-segment token carrying *claims*."""
    return f"{_b64({'alg': 'HS256', 'typ': 'JWT'})}.{_b64(claims)}.signature"


def make_response(status_code: int = 200, headers: dict | None = None, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, headers=headers, **kwargs)


@pytest.fixture
def proxy_token() -> str:
    """Long-lived proxy token pointing at a local exchange endpoint."""
    return make_token({"sub": "test", "exp": int(time.time()) + 3600, "aud": AUD})


@pytest.fixture
def access_token() -> str:
    """Fresh access token routed to the localhost:8787 scope."""
    return make_token({"sub": "test", "exp": int(time.time()) + 3600, "scope": SCOPE})


@pytest.fixture
def mock_transport() -> AsyncMock:
    """Transport returning a plain 200 unless a test overrides send."""
    transport = AsyncMock()
    transport.send.return_value = make_response(200)
    return transport


@pytest.fixture
def client(proxy_token, access_token, mock_transport) -> Bridggy:
    """Configured client already holding a valid access token."""
    c = Bridggy(Config(token=proxy_token), transport=mock_transport)
    c._token = access_token
    return c


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(BRIDGGY_RETRY_DELAY="0", BRIDGGY_PROXY_DOMAIN="proxy.test")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()
