"""Ownership-chain filters: admin owns clients, client owns users.

Every listing and every mutation lookup goes through these criteria, so a
record outside the caller's chain is simply not found.
"""

from __future__ import annotations

from typing import Any, Iterable

from .account import Account, AccountKind, Role
from .contracts import AnyOf
from .errors import Forbidden, NotFound
from ..repository import AccountRepository
from ..security.authentication import Principal

Criteria = dict[str, Any]


def client_criteria(principal: Principal) -> Criteria:
    """Criteria restricting client records to those the caller may see."""
    if principal.role is Role.SUPER_ADMIN:
        return {}
    if principal.role is Role.ADMIN:
        return {"admin_id": principal.account_id}
    raise Forbidden("access denied, insufficient permissions")


def owned_clients(principal: Principal, repository: AccountRepository) -> list[Account]:
    return repository.find(AccountKind.CLIENT, **client_criteria(principal))


def user_criteria_for_clients(client_ids: Iterable[str]) -> Criteria:
    """Users belonging to any of ``client_ids``; admins pass the ids of clients they own."""
    return {"client_id": AnyOf.of(client_ids)}


def target_client_id(
    principal: Principal,
    requested: str | None,
    repository: AccountRepository,
) -> str:
    """Resolve which client's users a client-surface request acts on.

    A client always acts on itself. Admins and super admins may name a client
    inside their own scope; without one they fall back to their own id.
    """
    if principal.role is Role.CLIENT:
        return principal.account_id
    if principal.role not in (Role.ADMIN, Role.SUPER_ADMIN):
        raise Forbidden("access denied, insufficient permissions")
    if not requested or requested == principal.account_id:
        return principal.account_id

    client = repository.find_one(AccountKind.CLIENT, account_id=requested, **client_criteria(principal))
    if client is None:
        raise NotFound("client not found")
    return client.account_id


def user_criteria_for_client(client_id: str) -> Criteria:
    return {"client_id": client_id}
