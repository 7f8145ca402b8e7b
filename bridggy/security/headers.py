"""Header assembly for proxied requests.

Injects the Bridggy identity headers and strips anything that would leak
browser fingerprinting or privacy data to the destination.
"""

import httpx

HEADER_STATUS = "gg-x-status"
HEADER_ERROR = "gg-x-error"
HEADER_TOKEN = "gg-x-token"
HEADER_TIMESTAMP = "gg-x-timestamp"
HEADER_SOURCE = "gg-x-source"
HEADER_ORIGIN = "Origin"

SOURCE_NAME = "client"

# Privacy/browser headers never forwarded to the proxy
NON_PROXY_HEADERS: frozenset[str] = frozenset(
    {
        "user-agent",
        "x-forwarded-for",
        "cookie",
        "connection",
        "keep-alive",
        "transfer-encoding",
        "upgrade-insecure-requests",
        "priority",
    }
)

# Computed by the transport for the proxy URL, stale when copied from a source request
TRANSPORT_HEADERS: frozenset[str] = frozenset({"host", "content-length"})


def is_blocked_header(name: str) -> bool:
    lower = name.lower()
    return lower in NON_PROXY_HEADERS or lower in TRANSPORT_HEADERS or lower.startswith("sec-")


def build_proxy_headers(
    source: httpx.Headers | dict | list | None,
    token: str,
    origin: str | None = None,
) -> httpx.Headers:
    """Build the outgoing header set for a proxied request.

    Args:
        source: Caller headers (from the request object or the init overlay).
        token: Current access token, sent as gg-x-token.
        origin: Caller origin, sent as Origin when set.
    """
    headers = httpx.Headers(source)

    headers[HEADER_SOURCE] = SOURCE_NAME
    headers[HEADER_TOKEN] = token
    if origin:
        headers[HEADER_ORIGIN] = origin

    # Iterate over a snapshot, deletion mutates the header list
    for key in list(headers.keys()):
        if is_blocked_header(key):
            del headers[key]

    return headers
