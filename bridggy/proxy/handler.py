"""Dispatch of proxied requests with the single GET retry.

The proxy reports its own application-level failures out-of-band via the
gg-x-error / gg-x-status response headers, independent of the HTTP status
of the proxied response itself.
"""

import asyncio

import httpx

from bridggy.config.settings import get_settings
from bridggy.errors import ProxyError
from bridggy.logging.audit import get_logger
from bridggy.security.headers import HEADER_ERROR, HEADER_STATUS
from bridggy.transport.base import RequestOptions, Transport

MAX_ATTEMPTS = 2
RETRY_STATUS = "502"


def _should_retry(attempt: int, retry: bool, method: str, proxy_status: str | None) -> bool:
    return retry and attempt == 0 and method == "GET" and proxy_status == RETRY_STATUS


async def send_with_retry(
    transport: Transport,
    proxy_url: str,
    options: RequestOptions,
    retry: bool,
) -> httpx.Response:
    """Send *options* to *proxy_url*, retrying once on a proxy 502 for GET.

    Returns the response untouched when no gg-x-error header is present,
    whatever its HTTP status.

    Raises:
        ProxyError: gg-x-error present and no retry applies.
    """
    logger = get_logger()

    for attempt in range(MAX_ATTEMPTS):
        response = await transport.send(proxy_url, options)
        proxy_error = response.headers.get(HEADER_ERROR)
        proxy_status = response.headers.get(HEADER_STATUS)

        if not proxy_error:
            return response

        if _should_retry(attempt, retry, options.method, proxy_status):
            delay = get_settings().retry_delay
            logger.warning(
                "Proxy error, retrying",
                extra={"audit_data": {
                    "proxy_status": proxy_status,
                    "proxy_error": proxy_error,
                    "attempt": attempt + 1,
                    "retry_delay": delay,
                }},
            )
            await response.aclose()
            await asyncio.sleep(delay)
            continue

        logger.warning(
            "Proxy error",
            extra={"audit_data": {
                "proxy_status": proxy_status,
                "proxy_error": proxy_error,
                "method": options.method,
                "attempt": attempt + 1,
            }},
        )
        raise ProxyError(proxy_status, proxy_error)

    # Unreachable: every iteration returns, retries or raises
    raise RuntimeError("proxy: unexpected fetch failed after retries")
