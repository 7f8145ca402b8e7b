"""Bridggy client: routes HTTP requests through the Bridggy proxy.

Pipeline: Configured -> Fresh access token -> Normalize input ->
Proxy URL -> Header filtering -> Dispatch (single GET retry on 502)
"""

import asyncio

import httpx

from bridggy.clients.models import Config
from bridggy.config.settings import Settings, get_settings
from bridggy.errors import NotConfiguredError
from bridggy.logging.audit import RequestTimer, get_logger, request_scope
from bridggy.proxy.exchange import exchange_token
from bridggy.proxy.handler import send_with_retry
from bridggy.proxy.request import (
    RequestInit,
    RequestInput,
    build_proxy_url,
    build_request_options,
    normalize_input,
)
from bridggy.security.headers import build_proxy_headers
from bridggy.security.tokens import decode_claims, is_expired
from bridggy.transport.base import Transport
from bridggy.transport.httpx_transport import HTTPXTransport


class Bridggy:
    """Proxy client holding one proxy token and its current access token.

    Instances are independent; create one per credential and share it
    between tasks as needed.
    """

    def __init__(self, config: Config | None = None, *, transport: Transport | None = None):
        self._proxy_token: str | None = None
        self._token: str | None = None
        self._retry: bool = True
        self._origin: str | None = None
        self._transport = transport or HTTPXTransport()
        self._exchange_lock = asyncio.Lock()
        if config:
            self.configure(config)

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, *, transport: Transport | None = None
    ) -> "Bridggy":
        """Build a client configured from BRIDGGY_* environment variables."""
        settings = settings or get_settings()
        return cls(
            Config(token=settings.token, retry=settings.retry, origin=settings.origin or None),
            transport=transport,
        )

    def configure(self, config: Config) -> None:
        """Set the proxy token and retry policy. Required before fetch()."""
        self._proxy_token = config.token
        self._retry = True if config.retry is None else config.retry
        self._origin = config.origin

    @property
    def configured(self) -> bool:
        return bool(self._proxy_token)

    @property
    def retry(self) -> bool:
        return self._retry

    def is_token_expired(self) -> bool:
        return is_expired(self._token)

    async def exchange(self) -> None:
        """Replace the access token with a freshly exchanged one."""
        if not self._proxy_token:
            raise NotConfiguredError()
        self._token = await exchange_token(self._transport, self._proxy_token)

    async def _ensure_token(self) -> str:
        if self.is_token_expired():
            async with self._exchange_lock:
                # Another task may have exchanged while we waited
                if self.is_token_expired():
                    await self.exchange()
        return self._token

    async def fetch(self, input: RequestInput, init: RequestInit | None = None) -> httpx.Response:
        """Send a request through the proxy.

        Args:
            input: Absolute URL string, httpx.URL, or httpx.Request.
            init: Optional overlay of request options (method, headers,
                content, follow_redirects, and other httpx request options).

        Returns:
            The proxied response, whatever its HTTP status, unless the proxy
            flagged an error via gg-x-error.
        """
        if not self._proxy_token:
            raise NotConfiguredError()

        with request_scope():
            return await self._send(input, init)

    async def _send(self, input: RequestInput, init: RequestInit | None) -> httpx.Response:
        token = await self._ensure_token()

        target = await normalize_input(input)

        settings = get_settings()
        proxy_url = build_proxy_url(
            decode_claims(token).scope, str(target.url), settings.proxy_domain
        )

        source_headers = target.headers if target.headers is not None else (init or {}).get("headers")
        headers = build_proxy_headers(source_headers, token, self._origin)
        options = build_request_options(target, init, headers)

        with RequestTimer() as timer:
            response = await send_with_retry(self._transport, proxy_url, options, self._retry)

        get_logger().debug(
            "Request proxied",
            extra={"audit_data": {
                "method": options.method,
                "destination_host": target.url.host,
                "status": response.status_code,
                "latency_ms": timer.elapsed_ms,
            }},
        )
        return response

    async def aclose(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "Bridggy":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
