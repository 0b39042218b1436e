"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from .account import Profession


@dataclass(frozen=True, slots=True)
class AnyOf:
    """Store criterion matching a field against a set of values."""

    values: tuple[Any, ...]

    @classmethod
    def of(cls, values: Iterable[Any]) -> "AnyOf":
        return cls(tuple(values))


@dataclass(frozen=True, slots=True)
class Present:
    """Store criterion matching rows where the field is set."""


@dataclass(slots=True)
class Credentials:
    email: str | None
    password: str | None


@dataclass(slots=True)
class ProfileInput:
    """Profile fields; ``None`` means "leave unchanged" when patching."""

    name: str | None = None
    dob: date | None = None
    place_of_birth: str | None = None
    time_of_birth: str | None = None
    gowthra: str | None = None
    profession: Profession | None = None


@dataclass(slots=True)
class ClientInfoInput:
    business_name: str | None = None
    business_type: str | None = None
    contact_number: str | None = None
    address: str | None = None


@dataclass(slots=True)
class CreateAdminInput:
    email: str | None
    password: str | None


@dataclass(slots=True)
class CreateClientInput:
    email: str | None
    password: str | None
    client_info: ClientInfoInput = field(default_factory=ClientInfoInput)


@dataclass(slots=True)
class CreateUserInput:
    email: str | None
    password: str | None
    profile: ProfileInput = field(default_factory=ProfileInput)


# Patches carry only the fields a caller may change. Activity, approval,
# role and owner references are never part of a patch.


@dataclass(slots=True)
class AdminPatch:
    email: str | None = None
    password: str | None = None


@dataclass(slots=True)
class ClientPatch:
    email: str | None = None
    password: str | None = None
    business_name: str | None = None
    business_type: str | None = None
    contact_number: str | None = None
    address: str | None = None


@dataclass(slots=True)
class UserPatch:
    email: str | None = None
    password: str | None = None
    profile: ProfileInput | None = None
