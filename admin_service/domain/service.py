"""Account service orchestrating credentials, token issuance and approval."""

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
from .approval import Origin, initial_login_approved, may_login
from .contracts import CreateClientInput, CreateUserInput, Credentials, UserPatch
from .errors import DuplicateError, Forbidden, Unauthenticated, ValidationError
from .profiles import apply_profile, build_profile, client_fields
from ..metrics import ACCOUNTS_CREATED, LOGIN_ATTEMPTS
from ..repository import AccountRepository
from ..security.authentication import Principal
from ..security.passwords import PasswordHasher
from ..security.tokens import IssuedToken, TokenService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoginResult:
    """Successful login: the account, the role it logged in as, and its token."""

    account: Account
    role: Role
    token: IssuedToken


def require_credentials(email: str | None, password: str | None) -> tuple[str, str]:
    """Return the trimmed pair or raise ``ValidationError`` when either is missing."""
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("email and password are required")
    return email, password


class AccountService:
    """Registration, login and self-service workflows backed by the record store."""

    def __init__(
        self,
        repository: AccountRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        """Store dependencies used to orchestrate persistence and token issuance."""
        self._repository = repository
        self._hasher = hasher
        self._tokens = tokens

    def register_user(self, payload: CreateUserInput) -> UserAccount:
        """Self-register a user; the account stays pending until a super admin approves it."""
        email, password = require_credentials(payload.email, payload.password)
        self.ensure_email_free(AccountKind.USER, email)
        user = UserAccount(
            account_id="",
            email=normalize_email(email),
            password_hash=self._hasher.hash(password),
            login_approved=initial_login_approved(AccountKind.USER, Origin.SELF_REGISTRATION),
            profile=build_profile(payload.profile),
        )
        self._repository.insert(user)
        ACCOUNTS_CREATED.labels(kind="user", origin=Origin.SELF_REGISTRATION.value).inc()
        logger.info("user %s self-registered, awaiting approval", user.account_id)
        return user

    def register_client(self, payload: CreateClientInput) -> ClientAccount:
        """Self-register a client. Clients are exempt from approval, so it starts approved."""
        email, password = require_credentials(payload.email, payload.password)
        self.ensure_email_free(AccountKind.CLIENT, email)
        client = ClientAccount(
            account_id="",
            email=normalize_email(email),
            password_hash=self._hasher.hash(password),
            login_approved=initial_login_approved(AccountKind.CLIENT, Origin.SELF_REGISTRATION),
            **client_fields(payload.client_info),
        )
        self._repository.insert(client)
        ACCOUNTS_CREATED.labels(kind="client", origin=Origin.SELF_REGISTRATION.value).inc()
        logger.info("client %s self-registered", client.account_id)
        return client

    def login(self, role: Role, credentials: Credentials) -> LoginResult:
        """Verify credentials for an account of ``role`` and issue a token.

        Checks run in order: required fields, account lookup, credential,
        active flag, approval. An unknown email and a wrong password share
        one message and the same bcrypt work.
        """
        email, password = require_credentials(credentials.email, credentials.password)
        account = self._find_for_login(role, email)
        if account is None:
            matched = self._hasher.verify_missing(password)
        else:
            matched = self._hasher.verify(password, account.password_hash)
        if account is None or not matched:
            LOGIN_ATTEMPTS.labels(role=role.value, outcome="bad_credentials").inc()
            raise Unauthenticated("invalid credentials")
        if not account.is_active:
            LOGIN_ATTEMPTS.labels(role=role.value, outcome="inactive").inc()
            logger.info("login refused for inactive %s %s", role.value, account.account_id)
            raise Unauthenticated("account is inactive, please contact an administrator")
        if not may_login(account, role):
            LOGIN_ATTEMPTS.labels(role=role.value, outcome="not_approved").inc()
            logger.info("login refused for unapproved %s %s", role.value, account.account_id)
            raise Forbidden("login not approved, please wait for super admin approval")

        token = self._tokens.issue(account.account_id, role.value)
        account.password_hash = None
        LOGIN_ATTEMPTS.labels(role=role.value, outcome="success").inc()
        return LoginResult(account=account, role=role, token=token)

    def _find_for_login(self, role: Role, email: str) -> Account | None:
        if role in (Role.SUPER_ADMIN, Role.ADMIN):
            return self._repository.find_one(
                AccountKind.ADMIN, with_credential=True, email=email, role=role
            )
        if role is Role.CLIENT:
            return self._repository.find_one(AccountKind.CLIENT, with_credential=True, email=email)
        return self._repository.find_one(AccountKind.USER, with_credential=True, email=email)

    def get_profile(self, principal: Principal) -> UserAccount:
        user = self._repository.find_one(AccountKind.USER, account_id=principal.account_id)
        if user is None:
            raise Unauthenticated("user not found")
        return user

    def update_profile(self, principal: Principal, patch: UserPatch) -> UserAccount:
        """Apply a user's own profile changes; only email, password and profile fields move."""
        user = self.get_profile(principal)
        if patch.email is not None:
            self.change_email(user, patch.email)
        if patch.password:
            user.password_hash = self._hasher.hash(patch.password)
        if patch.profile is not None:
            apply_profile(user.profile, patch.profile)
        self._repository.save(user)
        user.password_hash = None
        return user

    def change_email(self, account: Account, email: str) -> None:
        email = normalize_email(email)
        if not email:
            raise ValidationError("email must not be empty")
        if email == account.email:
            return
        self.ensure_email_free(account.kind, email)
        account.email = email

    def ensure_email_free(self, kind: AccountKind, email: str) -> None:
        if self._repository.find_one(kind, email=normalize_email(email)) is not None:
            raise DuplicateError(f"{kind.value} already exists with this email")

    def initialize_super_admin(self, email: str, password: str) -> AdminAccount | None:
        """Create the bootstrap super admin, or resync its password when it changed."""
        if not email or not password:
            logger.warning("SUPER_ADMIN_EMAIL and SUPER_ADMIN_PASSWORD not set, skipping bootstrap")
            return None

        existing = self._repository.find_one(
            AccountKind.ADMIN, with_credential=True, email=email, role=Role.SUPER_ADMIN
        )
        if isinstance(existing, AdminAccount):
            if not self._hasher.verify(password, existing.password_hash):
                existing.password_hash = self._hasher.hash(password)
                self._repository.save(existing)
                logger.info("super admin password updated")
            logger.info("super admin already exists")
            return existing

        self.ensure_email_free(AccountKind.ADMIN, email)
        super_admin = AdminAccount(
            account_id="",
            email=normalize_email(email),
            password_hash=self._hasher.hash(password),
            role=Role.SUPER_ADMIN,
            is_active=True,
            login_approved=initial_login_approved(AccountKind.ADMIN, Origin.BOOTSTRAP),
        )
        self._repository.insert(super_admin)
        ACCOUNTS_CREATED.labels(kind="admin", origin=Origin.BOOTSTRAP.value).inc()
        logger.info("super admin created")
        return super_admin
