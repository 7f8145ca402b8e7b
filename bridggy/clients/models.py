"""Client configuration and token claim models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Config:
    token: str  # long-lived proxy token
    retry: bool | None = None  # None = enabled
    origin: str | None = None  # sent as Origin header when set


@dataclass
class TokenClaims:
    exp: float | None = None  # seconds since epoch, only when numeric
    aud: str | None = None  # exchange endpoint base URL
    scope: str | None = None  # proxy hostname label
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenClaims":
        exp = data.get("exp")
        # bool is an int subclass but never a valid expiry
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            exp = None

        aud = data.get("aud")
        scope = data.get("scope")
        return cls(
            exp=exp,
            aud=aud if isinstance(aud, str) and aud else None,
            scope=scope if isinstance(scope, str) and scope else None,
            extra={k: v for k, v in data.items() if k not in ("exp", "aud", "scope")},
        )
