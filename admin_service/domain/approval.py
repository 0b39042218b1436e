"""Login-approval state machine.

Every account is either pending (``login_approved`` false) or approved.
Approval gates login only; activity is a separate axis checked alongside it.
Super admins always bypass approval and clients are exempt from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .account import Account, AccountKind, AdminAccount, ClientAccount, Role, role_of
from .errors import InvalidOperation, NotFound
from ..repository import AccountRepository

logger = logging.getLogger(__name__)


class Origin(str, Enum):
    """How an account came into existence."""

    SELF_REGISTRATION = "self_registration"
    PROVISIONED = "provisioned"
    BOOTSTRAP = "bootstrap"


def initial_login_approved(kind: AccountKind, origin: Origin) -> bool:
    """Return the approval flag a new account starts with."""
    if kind is AccountKind.CLIENT:
        return True
    return origin is not Origin.SELF_REGISTRATION


def may_login(account: Account, role: Role) -> bool:
    """Return ``True`` when the approval axis lets ``account`` log in as ``role``."""
    if role is Role.SUPER_ADMIN or isinstance(account, ClientAccount):
        return True
    return account.login_approved


@dataclass(slots=True)
class PendingAccount:
    type: AccountKind
    account: Account


class ApprovalWorkflow:
    """Super-admin operations that move accounts between pending and approved."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    def approve(self, account_type: str, account_id: str) -> Account:
        return self._transition(account_type, account_id, approved=True)

    def reject(self, account_type: str, account_id: str) -> Account:
        """Revoke approval; the account is kept and may be approved again."""
        return self._transition(account_type, account_id, approved=False)

    def pending(self) -> list[PendingAccount]:
        """Return pending admins and users, newest first. Clients never appear."""
        admins = self._repository.find(AccountKind.ADMIN, login_approved=False, role=Role.ADMIN)
        users = self._repository.find(AccountKind.USER, login_approved=False)
        items = [PendingAccount(AccountKind.ADMIN, a) for a in admins]
        items.extend(PendingAccount(AccountKind.USER, u) for u in users)
        items.sort(key=lambda item: item.account.created_at, reverse=True)
        return items

    def _transition(self, account_type: str, account_id: str, *, approved: bool) -> Account:
        kind = self._resolve_kind(account_type)
        account = self._repository.find_one(kind, account_id=account_id)
        if account is None:
            raise NotFound("account not found")
        if isinstance(account, AdminAccount) and role_of(account) is Role.SUPER_ADMIN:
            raise InvalidOperation("cannot modify super admin permissions")

        account.login_approved = approved
        self._repository.save(account)
        logger.info(
            "login %s for %s %s",
            "approved" if approved else "revoked",
            kind.value,
            account.account_id,
        )
        return account

    @staticmethod
    def _resolve_kind(account_type: str) -> AccountKind:
        try:
            kind = AccountKind(account_type)
        except ValueError:
            raise InvalidOperation("invalid account type") from None
        if kind is AccountKind.CLIENT:
            raise InvalidOperation("clients do not require approval")
        return kind
