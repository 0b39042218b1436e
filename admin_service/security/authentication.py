"""Resolve bearer tokens to live accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..domain.account import Account, Role, kind_for_role, parse_role
from ..domain.errors import Unauthenticated
from ..repository import AccountRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Principal:
    """The authenticated caller attached to a request.

    ``role`` comes from the token rather than the stored record, since one
    admin record kind covers both admins and super admins.
    """

    account_id: str
    role: Role
    account: Account


def bearer_token(header: str | None) -> str | None:
    """Extract the token from an ``Authorization`` header value."""
    if not header:
        return None
    value = header.strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == "bearer":
        value = credentials.strip()
    return value or None


class AuthenticationGate:
    """Turn a raw bearer token into a ``Principal`` or raise ``Unauthenticated``."""

    def __init__(self, repository: AccountRepository, tokens: TokenService) -> None:
        self._repository = repository
        self._tokens = tokens

    def authenticate(self, token: str | None) -> Principal:
        if not token:
            raise Unauthenticated("no token provided")

        claims = self._tokens.verify(token)
        if claims is None:
            raise Unauthenticated("invalid or expired token")

        account = self._load(claims.account_id, claims.role)
        if account is None:
            logger.debug("token subject %s (%s) has no account", claims.account_id, claims.role)
            raise Unauthenticated("user not found")

        # Checked on every request so deactivation applies to tokens already issued.
        if not account.is_active:
            logger.debug("inactive account %s presented a valid token", account.account_id)
            raise Unauthenticated("account inactive")

        return Principal(account_id=account.account_id, role=Role(claims.role), account=account)

    def _load(self, account_id: str, role_tag: str) -> Account | None:
        role = parse_role(role_tag)
        if role is None:
            return None
        return self._repository.find_one(kind_for_role(role), account_id=account_id)
