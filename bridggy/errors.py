"""Exceptions raised by the Bridggy client.

Every failure is terminal for the call that raised it. The one recoverable
condition (a single retry of a GET that the proxy reports as 502) is handled
inside the dispatcher and never surfaces here.
"""


class BridggyError(Exception):
    """Base class for all client errors."""


class NotConfiguredError(BridggyError):
    def __init__(self):
        super().__init__("Config not provided")


class InvalidTokenFormatError(BridggyError, ValueError):
    """Token has no claims segment, or the segment is not base64 JSON."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class MissingClaimError(InvalidTokenFormatError):
    """A claim needed for routing or exchange is absent from the token."""

    def __init__(self, claim: str):
        self.claim = claim
        super().__init__(f"Invalid token: missing '{claim}' claim")


class MalformedTokenError(BridggyError, ValueError):
    """Held access token cannot be checked for expiry."""

    def __init__(self):
        super().__init__("invalid or malformed token")


class ExchangeFailedError(BridggyError):
    def __init__(self, status_code: int, reason: str = "Token exchange failed"):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"status: {status_code} proxy: {reason}")


class InvalidInputError(BridggyError, ValueError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f'input string must be an absolute URL, got "{value}"')


class UnsupportedInputTypeError(BridggyError, TypeError):
    def __init__(self, value: object):
        super().__init__(f"Unsupported input type: {type(value).__name__}")


class ProxyError(BridggyError):
    """The proxy answered with gg-x-error and no retry applied."""

    def __init__(self, status: str | None, error: str):
        self.status = status
        self.error = error
        super().__init__(f"status: {status} {error}")
