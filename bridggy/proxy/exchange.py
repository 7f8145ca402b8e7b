"""Exchange of the long-lived proxy token for a short-lived access token."""

import json
import time

import httpx

from bridggy.errors import ExchangeFailedError, MissingClaimError
from bridggy.logging.audit import get_logger
from bridggy.security.headers import HEADER_SOURCE, HEADER_TIMESTAMP, SOURCE_NAME
from bridggy.security.tokens import decode_claims
from bridggy.transport.base import RequestOptions, Transport

EXCHANGE_PATH = "/token/exchange"


def exchange_url(proxy_token: str) -> str:
    """Derive the exchange endpoint from the proxy token's ``aud`` claim.

    Raises before any network activity if the token cannot be decoded.
    """
    claims = decode_claims(proxy_token)
    if claims.aud is None:
        raise MissingClaimError("aud")
    return f"{claims.aud}{EXCHANGE_PATH}"


async def exchange_token(transport: Transport, proxy_token: str) -> str:
    """POST the proxy token to ``{aud}/token/exchange`` and return the access token.

    No retry at this layer; failures propagate to the caller of fetch().
    """
    url = exchange_url(proxy_token)
    options = RequestOptions(
        method="POST",
        headers=httpx.Headers({
            "Content-Type": "application/json",
            HEADER_TIMESTAMP: str(int(time.time() * 1000)),
            HEADER_SOURCE: SOURCE_NAME,
        }),
        content=json.dumps({"token": proxy_token}).encode(),
    )

    logger = get_logger()
    response = await transport.send(url, options)

    if not response.is_success:
        logger.warning(
            "Token exchange failed",
            extra={"audit_data": {"exchange_url": url, "status": response.status_code}},
        )
        raise ExchangeFailedError(response.status_code)

    try:
        token = response.json().get("token")
    except (ValueError, AttributeError):
        token = None

    if not isinstance(token, str) or not token:
        raise ExchangeFailedError(response.status_code, "Token exchange response missing token")

    logger.info("Token exchanged", extra={"audit_data": {"exchange_url": url}})
    return token
