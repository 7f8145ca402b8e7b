"""Unverified inspection of compact (JWT-style) tokens.

Only the claims segment is decoded. Signatures are never checked: the
proxy enforces trust server-side, and the client reads claims purely for
routing (``aud``, ``scope``) and expiry bookkeeping (``exp``).
"""

import base64
import json
import time

from bridggy.clients.models import TokenClaims
from bridggy.errors import InvalidTokenFormatError, MalformedTokenError

# Tokens count as expired this long before their actual exp
EXPIRY_MARGIN_MS = 60_000


def b64url_encode(text: str) -> str:
    """URL-safe base64 of the UTF-8 bytes of *text*, without padding."""
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return encoded.replace("+", "-").replace("/", "_").rstrip("=")


def b64url_decode(value: str) -> str:
    """Inverse of :func:`b64url_encode`."""
    return _b64url_to_bytes(value).decode("utf-8")


def _b64url_to_bytes(value: str) -> bytes:
    std = value.replace("-", "+").replace("_", "/")
    std += "=" * (-len(std) % 4)
    return base64.b64decode(std, validate=True)


def decode_claims(token: str) -> TokenClaims:
    """Decode the middle segment of *token* into claims.

    Raises:
        InvalidTokenFormatError: segment missing, not base64, or not a JSON object.
    """
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        raise InvalidTokenFormatError()

    try:
        data = json.loads(_b64url_to_bytes(parts[1]))
    except ValueError as e:  # binascii.Error, JSONDecodeError, UnicodeDecodeError
        raise InvalidTokenFormatError() from e

    if not isinstance(data, dict):
        raise InvalidTokenFormatError()

    return TokenClaims.from_dict(data)


def is_expired(token: str | None, now: float | None = None) -> bool:
    """Check whether *token* needs to be replaced.

    An absent token is reported as expired so callers exchange first. A
    present token that cannot be decoded or lacks a numeric ``exp`` is a
    hard failure, never silently treated as expired.

    Args:
        token: Access token, or None before the first exchange.
        now: Current time in seconds since epoch (defaults to time.time()).
    """
    if not token:
        return True

    try:
        claims = decode_claims(token)
    except InvalidTokenFormatError as e:
        raise MalformedTokenError() from e

    if claims.exp is None:
        raise MalformedTokenError()

    now_ms = (time.time() if now is None else now) * 1000
    return now_ms >= claims.exp * 1000 - EXPIRY_MARGIN_MS
