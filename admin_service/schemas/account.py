"""Account views returned by the HTTP surface. Credential digests never appear here."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from ..domain.account import (
    Account,
    AccountKind,
    AdminAccount,
    ClientAccount,
    Profession,
    Role,
    UserAccount,
    role_of,
)


class AccountView(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str
    email: str
    role: Role
    is_active: bool
    login_approved: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class AdminView(AccountView):
    pass


class ClientView(AccountView):
    admin_id: str | None = None
    business_name: str = ""
    business_type: str = ""
    contact_number: str = ""
    address: str = ""


class ProfileView(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str | None = None
    dob: date | None = None
    place_of_birth: str | None = None
    time_of_birth: str | None = None
    gowthra: str | None = None
    profession: Profession | None = None


class UserView(AccountView):
    client_id: str | None = None
    profile: ProfileView


class PendingView(BaseModel):
    type: AccountKind
    account: AdminView | UserView

    model_config = ConfigDict(use_enum_values=True)


def _common(account: Account, role: Role | None) -> dict:
    return {
        "id": account.account_id,
        "email": account.email,
        "role": role or role_of(account),
        "is_active": account.is_active,
        "login_approved": account.login_approved,
        "created_by": account.created_by,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
    }


def account_view(account: Account, role: Role | None = None) -> AccountView:
    """Build the view matching the account's kind; ``role`` overrides the stored tag."""
    common = _common(account, role)
    if isinstance(account, ClientAccount):
        return ClientView(
            **common,
            admin_id=account.admin_id,
            business_name=account.business_name,
            business_type=account.business_type,
            contact_number=account.contact_number,
            address=account.address,
        )
    if isinstance(account, UserAccount):
        p = account.profile
        return UserView(
            **common,
            client_id=account.client_id,
            profile=ProfileView(
                name=p.name,
                dob=p.dob,
                place_of_birth=p.place_of_birth,
                time_of_birth=p.time_of_birth,
                gowthra=p.gowthra,
                profession=p.profession,
            ),
        )
    if isinstance(account, AdminAccount):
        return AdminView(**common)
    raise TypeError(f"unsupported account type {type(account).__name__}")


class ClientSummary(BaseModel):
    id: str
    email: str
    business_name: str = ""


class OwnedUserView(UserView):
    client: ClientSummary | None = None


def owned_user_view(user: UserAccount, client: ClientAccount | None) -> OwnedUserView:
    """User view with a short summary of the owning client embedded."""
    summary = None
    if client is not None:
        summary = ClientSummary(id=client.account_id, email=client.email, business_name=client.business_name)
    return OwnedUserView(**account_view(user).model_dump(), client=summary)
