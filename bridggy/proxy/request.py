"""Request normalization and proxy URL rewriting.

fetch() accepts three input shapes (URL string, ``httpx.URL`` or a full
``httpx.Request``). They are normalized once into a :class:`RequestTarget`
so the rest of the pipeline never branches on the input type again.
"""

from dataclasses import dataclass
from typing import Any, TypedDict

import httpx

from bridggy.errors import InvalidInputError, MissingClaimError, UnsupportedInputTypeError
from bridggy.security.tokens import b64url_encode
from bridggy.transport.base import RequestOptions

RequestInput = str | httpx.URL | httpx.Request

# init keys that carry a request body in place of content
BODY_OPTIONS = frozenset({"json", "data", "files"})


class RequestInit(TypedDict, total=False):
    """Options overlay for fetch(). Unlisted httpx request options pass through."""

    method: str
    headers: Any
    content: bytes | str | None
    follow_redirects: bool
    json: Any
    data: Any
    files: Any
    timeout: Any
    extensions: dict


@dataclass
class RequestTarget:
    url: httpx.URL
    # Set only for httpx.Request inputs
    method: str | None = None
    headers: httpx.Headers | None = None
    content: bytes | None = None
    follow_redirects: bool | None = None


def _parse_absolute(value: str) -> httpx.URL:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise InvalidInputError(value) from e
    if not url.is_absolute_url:
        raise InvalidInputError(value)
    return url


async def _read_body(request: httpx.Request) -> bytes | None:
    try:
        content = request.content
    except httpx.RequestNotRead:
        # Generator bodies are sync streams, aread() only accepts async ones
        if isinstance(request.stream, httpx.SyncByteStream):
            content = request.read()
        else:
            content = await request.aread()
    return content or None


async def normalize_input(value: RequestInput) -> RequestTarget:
    """Resolve any supported input shape to an absolute destination."""
    if isinstance(value, str):
        return RequestTarget(url=_parse_absolute(value))

    if isinstance(value, httpx.URL):
        if not value.is_absolute_url:
            raise InvalidInputError(str(value))
        return RequestTarget(url=value)

    if isinstance(value, httpx.Request):
        return RequestTarget(
            url=value.url,
            method=value.method,
            headers=value.headers,
            content=await _read_body(value),
            follow_redirects=value.extensions.get("follow_redirects"),
        )

    raise UnsupportedInputTypeError(value)


def build_proxy_url(scope: str | None, href: str, domain: str = "bridggy.com") -> str:
    """Rewrite *href* into a proxy URL routed by the access token's scope."""
    if not scope:
        raise MissingClaimError("scope")
    return f"https://{scope}.{domain}/proxy?u={b64url_encode(href)}"


def build_request_options(
    target: RequestTarget,
    init: RequestInit | None,
    headers: httpx.Headers,
) -> RequestOptions:
    """Merge the normalized target with the init overlay.

    Method, body and redirect policy come from the request object when one
    was given; keys present in *init* override them. Any init body option
    (content, json, data, files) replaces the request's body. Everything
    else in *init* passes through untouched, except headers, which are
    always the already filtered proxy headers.
    """
    overlay = dict(init or {})
    overlay.pop("headers", None)

    method = overlay.pop("method", None) or target.method or "GET"
    if "content" in overlay:
        content = overlay.pop("content")
    elif BODY_OPTIONS & overlay.keys():
        # httpx prefers content over json/data/files, so drop the request's body
        content = None
    else:
        content = target.content
    if "follow_redirects" in overlay:
        follow_redirects = overlay.pop("follow_redirects")
    else:
        follow_redirects = target.follow_redirects

    if isinstance(content, str):
        content = content.encode("utf-8")

    return RequestOptions(
        method=method.upper(),
        headers=headers,
        content=content,
        follow_redirects=follow_redirects,
        extras=overlay,
    )
