"""Provisioning and maintenance of accounts one tier below the caller."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .account import (
    Account,
    AccountKind,
    AdminAccount,
    ClientAccount,
    Role,
    UserAccount,
    normalize_email,
)
from .approval import Origin, initial_login_approved
from .contracts import (
    AdminPatch,
    ClientPatch,
    CreateAdminInput,
    CreateClientInput,
    CreateUserInput,
    UserPatch,
)
from .errors import NotFound
from .profiles import apply_profile, build_profile, client_fields
from .scoping import (
    client_criteria,
    owned_clients,
    target_client_id,
    user_criteria_for_client,
    user_criteria_for_clients,
)
from .service import AccountService, require_credentials
from ..metrics import ACCOUNTS_CREATED
from ..repository import AccountRepository
from ..security.authentication import Principal
from ..security.passwords import PasswordHasher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OwnedUser:
    """A user listed together with the client that owns it."""

    user: Account
    client: Account | None


class DirectoryService:
    """Create, list, update and deactivate admins, clients and users.

    Accounts created here come from a superior and start approved. Lookups for
    update and deactivation apply the caller's ownership criteria, so records
    outside the chain raise ``NotFound``.
    """

    def __init__(
        self,
        repository: AccountRepository,
        hasher: PasswordHasher,
        accounts: AccountService,
    ) -> None:
        self._repository = repository
        self._hasher = hasher
        self._accounts = accounts

    # -- admins (super admin only) -------------------------------------

    def list_admins(self) -> list[Account]:
        return self._repository.find(AccountKind.ADMIN, role=Role.ADMIN)

    def create_admin(self, principal: Principal, payload: CreateAdminInput) -> AdminAccount:
        email, password = require_credentials(payload.email, payload.password)
        self._accounts.ensure_email_free(AccountKind.ADMIN, email)
        admin = AdminAccount(
            account_id="",
            email=normalize_email(email),
            password_hash=self._hasher.hash(password),
            role=Role.ADMIN,
            created_by=principal.account_id,
            login_approved=initial_login_approved(AccountKind.ADMIN, Origin.PROVISIONED),
        )
        return self._created(self._repository.insert(admin), principal)

    def update_admin(self, admin_id: str, patch: AdminPatch) -> Account:
        admin = self._get(AccountKind.ADMIN, account_id=admin_id, role=Role.ADMIN)
        self._apply_credentials(admin, patch.email, patch.password)
        return self._saved(admin)

    def deactivate_admin(self, admin_id: str) -> Account:
        admin = self._get(AccountKind.ADMIN, account_id=admin_id, role=Role.ADMIN)
        return self._deactivate(admin)

    # -- clients (admin, super admin) ----------------------------------

    def list_clients(self, principal: Principal) -> list[Account]:
        return self._repository.find(AccountKind.CLIENT, **client_criteria(principal))

    def create_client(self, principal: Principal, payload: CreateClientInput) -> ClientAccount:
        email, password = require_credentials(payload.email, payload.password)
        self._accounts.ensure_email_free(AccountKind.CLIENT, email)
        client = ClientAccount(
            account_id="",
            email=normalize_email(email),
            password_hash=self._hasher.hash(password),
            admin_id=principal.account_id,
            created_by=principal.account_id,
            login_approved=initial_login_approved(AccountKind.CLIENT, Origin.PROVISIONED),
            **client_fields(payload.client_info),
        )
        return self._created(self._repository.insert(client), principal)

    def update_client(self, principal: Principal, client_id: str, patch: ClientPatch) -> Account:
        client = self._get(AccountKind.CLIENT, account_id=client_id, **client_criteria(principal))
        self._apply_credentials(client, patch.email, patch.password)
        for name in ("business_name", "business_type", "contact_number", "address"):
            value = getattr(patch, name)
            if value is not None:
                setattr(client, name, value.strip())
        return self._saved(client)

    def deactivate_client(self, principal: Principal, client_id: str) -> Account:
        client = self._get(AccountKind.CLIENT, account_id=client_id, **client_criteria(principal))
        return self._deactivate(client)

    def list_admin_users(self, principal: Principal) -> list[OwnedUser]:
        """Users under any client the calling admin owns, each with its client."""
        clients = {c.account_id: c for c in owned_clients(principal, self._repository)}
        users = self._repository.find(AccountKind.USER, **user_criteria_for_clients(clients))
        return [OwnedUser(user=u, client=clients.get(u.client_id)) for u in users]

    # -- users through the client surface ------------------------------

    def list_client_users(self, principal: Principal, client_id: str | None = None) -> list[Account]:
        owner = target_client_id(principal, client_id, self._repository)
        return self._repository.find(AccountKind.USER, **user_criteria_for_client(owner))

    def create_client_user(
        self,
        principal: Principal,
        payload: CreateUserInput,
        client_id: str | None = None,
    ) -> UserAccount:
        email, password = require_credentials(payload.email, payload.password)
        owner = target_client_id(principal, client_id, self._repository)
        self._accounts.ensure_email_free(AccountKind.USER, email)
        user = UserAccount(
            account_id="",
            email=normalize_email(email),
            password_hash=self._hasher.hash(password),
            client_id=owner,
            created_by=principal.account_id,
            login_approved=initial_login_approved(AccountKind.USER, Origin.PROVISIONED),
            profile=build_profile(payload.profile),
        )
        return self._created(self._repository.insert(user), principal)

    def update_client_user(
        self,
        principal: Principal,
        user_id: str,
        patch: UserPatch,
        client_id: str | None = None,
    ) -> Account:
        owner = target_client_id(principal, client_id, self._repository)
        user = self._get(AccountKind.USER, account_id=user_id, **user_criteria_for_client(owner))
        self._apply_credentials(user, patch.email, patch.password)
        if patch.profile is not None:
            apply_profile(user.profile, patch.profile)
        return self._saved(user)

    def deactivate_client_user(
        self,
        principal: Principal,
        user_id: str,
        client_id: str | None = None,
    ) -> Account:
        owner = target_client_id(principal, client_id, self._repository)
        user = self._get(AccountKind.USER, account_id=user_id, **user_criteria_for_client(owner))
        return self._deactivate(user)

    # -- helpers -------------------------------------------------------

    def _get(self, kind: AccountKind, **criteria) -> Account:
        account = self._repository.find_one(kind, **criteria)
        if account is None:
            raise NotFound(f"{kind.value} not found")
        return account

    def _apply_credentials(self, account: Account, email: str | None, password: str | None) -> None:
        if email is not None:
            self._accounts.change_email(account, email)
        if password:
            account.password_hash = self._hasher.hash(password)

    def _saved(self, account: Account) -> Account:
        self._repository.save(account)
        account.password_hash = None
        return account

    def _deactivate(self, account: Account) -> Account:
        account.is_active = False
        self._repository.save(account)
        logger.info("%s %s deactivated", account.kind.value, account.account_id)
        return account

    def _created(self, account, principal: Principal):
        ACCOUNTS_CREATED.labels(kind=account.kind.value, origin=Origin.PROVISIONED.value).inc()
        logger.info(
            "%s %s created by %s %s",
            account.kind.value,
            account.account_id,
            principal.role.value,
            principal.account_id,
        )
        account.password_hash = None
        return account
