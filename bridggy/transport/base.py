"""Abstract base for the HTTP transport the client dispatches through."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class RequestOptions:
    method: str = "GET"
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes | None = None
    follow_redirects: bool | None = None  # None = transport default
    extras: dict[str, Any] = field(default_factory=dict)  # json, data, files, timeout, extensions


class Transport(ABC):
    """Performs a single HTTP request. No retries, no proxy awareness."""

    @abstractmethod
    async def send(self, url: str, options: RequestOptions) -> httpx.Response:
        """Send a request and return the fully read response.

        Args:
            url: Absolute URL to request.
            options: Method, headers, body and pass-through request options.
        """
        ...

    async def close(self) -> None:
        """Cleanup resources. Override if transport holds connections."""
        pass
