"""httpx-backed transport implementation."""

import httpx

from bridggy.config.settings import get_settings
from bridggy.transport.base import RequestOptions, Transport


class HTTPXTransport(Transport):
    """Sends requests with a lazily created ``httpx.AsyncClient``.

    A client passed in by the caller is used as-is and left open on close().
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            settings = get_settings()
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.timeout, connect=settings.connect_timeout)
            )
            self._owns_client = True
        return self._client

    async def send(self, url: str, options: RequestOptions) -> httpx.Response:
        client = await self._get_client()
        request = client.build_request(
            options.method,
            url,
            headers=options.headers,
            content=options.content,
            **options.extras,
        )
        if options.follow_redirects is None:
            return await client.send(request)
        return await client.send(request, follow_redirects=options.follow_redirects)

    async def close(self) -> None:
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
