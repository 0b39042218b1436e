"""Utilities for issuing and validating identity JWTs."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

import jwt

logger = logging.getLogger(__name__)

TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60
_ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Identity asserted by a verified token."""

    account_id: str
    role: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    issued_at: datetime
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        return int((self.expires_at - self.issued_at).total_seconds())


class TokenService:
    """Issue and verify signed, time-limited identity tokens.

    Parameters
    ----------
    secret:
        HMAC key used to sign tokens.
    issuer:
        Value written to and required in the ``iss`` claim.
    clock:
        Returns the current UNIX time. Both issuance and expiry checks read it.
    """

    def __init__(self, secret: str, issuer: str, clock: Callable[[], float] = time.time) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._issuer = issuer
        self._clock = clock

    def issue(self, account_id: str, role: str) -> IssuedToken:
        """Create a token for ``account_id`` acting as ``role``, valid for seven days."""
        now = int(self._clock())
        expires = now + TOKEN_TTL_SECONDS
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": account_id,
            "role": role,
            "iat": now,
            "exp": expires,
        }
        token = jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        return IssuedToken(
            token=token,
            issued_at=datetime.fromtimestamp(now, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires, tz=timezone.utc),
        )

    def verify(self, token: str) -> TokenClaims | None:
        """Return the claims of a valid token, or ``None``.

        Signature mismatches, malformed tokens, expiry and missing claims all
        collapse to ``None`` so callers cannot tell which check failed.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                issuer=self._issuer,
                options={
                    "require": ["exp", "iat", "sub", "iss"],
                    # expiry is checked below against the injected clock
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            logger.debug("token rejected: %s", type(exc).__name__)
            return None

        issued_at = payload["iat"]
        expires_at = payload["exp"]
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            return None
        if expires_at <= self._clock():
            logger.debug("token rejected: expired")
            return None

        account_id = payload.get("sub")
        role = payload.get("role")
        if not isinstance(account_id, str) or not isinstance(role, str):
            return None
        return TokenClaims(
            account_id=account_id,
            role=role,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
