from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Union


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    CLIENT = "client"
    USER = "user"


class AccountKind(str, Enum):
    ADMIN = "admin"
    CLIENT = "client"
    USER = "user"


class Profession(str, Enum):
    STUDENT = "student"
    PRIVATE_JOB = "private job"
    BUSINESS = "business"
    HOME_MAKERS = "home makers"
    OTHERS = "others"


# Which store holds the account a role tag refers to.
ROLE_KINDS: dict[Role, AccountKind] = {
    Role.SUPER_ADMIN: AccountKind.ADMIN,
    Role.ADMIN: AccountKind.ADMIN,
    Role.CLIENT: AccountKind.CLIENT,
    Role.USER: AccountKind.USER,
}

_unmapped = set(Role) - set(ROLE_KINDS)
if _unmapped:
    raise RuntimeError(f"roles without an account kind: {sorted(r.value for r in _unmapped)}")


def parse_role(value: str | None) -> Role | None:
    """Return the ``Role`` for a raw tag, or ``None`` for anything unrecognised."""
    try:
        return Role(value)
    except ValueError:
        return None


def kind_for_role(role: Role) -> AccountKind:
    return ROLE_KINDS[role]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Account:
    """Fields shared by every authenticatable, approvable, soft-deletable account."""

    kind: ClassVar[AccountKind]

    account_id: str
    email: str
    password_hash: str | None = None
    is_active: bool = True
    login_approved: bool = False
    created_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass(slots=True)
class AdminAccount(Account):
    """Admin or super admin; which one is carried by ``role``."""

    kind: ClassVar[AccountKind] = AccountKind.ADMIN

    role: Role = Role.ADMIN


@dataclass(slots=True)
class ClientAccount(Account):
    kind: ClassVar[AccountKind] = AccountKind.CLIENT

    admin_id: str | None = None
    business_name: str = ""
    business_type: str = ""
    contact_number: str = ""
    address: str = ""


@dataclass(slots=True)
class UserProfile:
    name: str | None = None
    dob: date | None = None
    place_of_birth: str | None = None
    time_of_birth: str | None = None
    gowthra: str | None = None
    profession: Profession | None = None


@dataclass(slots=True)
class UserAccount(Account):
    kind: ClassVar[AccountKind] = AccountKind.USER

    client_id: str | None = None
    profile: UserProfile = field(default_factory=UserProfile)


AnyAccount = Union[AdminAccount, ClientAccount, UserAccount]

ACCOUNT_TYPES: dict[AccountKind, type[Account]] = {
    AccountKind.ADMIN: AdminAccount,
    AccountKind.CLIENT: ClientAccount,
    AccountKind.USER: UserAccount,
}


def role_of(account: Account) -> Role:
    """Return the role tag a stored account authenticates as."""
    if isinstance(account, AdminAccount):
        return account.role
    if isinstance(account, ClientAccount):
        return Role.CLIENT
    return Role.USER
