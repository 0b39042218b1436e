"""Request bodies accepted by the HTTP surface.

Update bodies list only the fields a caller may change; anything else in the
payload (activity, approval, role, owner) is ignored.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, EmailStr

from ..domain.account import Profession
from ..domain.contracts import (
    AdminPatch,
    ClientInfoInput,
    ClientPatch,
    CreateAdminInput,
    CreateClientInput,
    CreateUserInput,
    Credentials,
    ProfileInput,
    UserPatch,
)


class ProfileRequest(BaseModel):
    name: str | None = None
    dob: date | None = None
    place_of_birth: str | None = None
    time_of_birth: str | None = None
    gowthra: str | None = None
    profession: Profession | None = None

    def to_input(self) -> ProfileInput:
        return ProfileInput(
            name=self.name,
            dob=self.dob,
            place_of_birth=self.place_of_birth,
            time_of_birth=self.time_of_birth,
            gowthra=self.gowthra,
            profession=self.profession,
        )


class ClientInfoRequest(BaseModel):
    business_name: str | None = None
    business_type: str | None = None
    contact_number: str | None = None
    address: str | None = None

    def to_input(self) -> ClientInfoInput:
        return ClientInfoInput(
            business_name=self.business_name,
            business_type=self.business_type,
            contact_number=self.contact_number,
            address=self.address,
        )


class LoginRequest(BaseModel):
    """Login body. The email is matched against stored accounts, not validated."""

    email: str | None = None
    password: str | None = None

    def to_credentials(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)


class CredentialsRequest(BaseModel):
    """Email and password; presence is checked by the service so the error is uniform."""

    email: EmailStr | None = None
    password: str | None = None


class CreateAdminRequest(CredentialsRequest):
    def to_input(self) -> CreateAdminInput:
        return CreateAdminInput(email=self.email, password=self.password)


class CreateClientRequest(CredentialsRequest):
    client_info: ClientInfoRequest | None = None

    def to_input(self) -> CreateClientInput:
        info = self.client_info.to_input() if self.client_info else ClientInfoInput()
        return CreateClientInput(email=self.email, password=self.password, client_info=info)


class CreateUserRequest(CredentialsRequest):
    profile: ProfileRequest | None = None
    client_id: str | None = None

    def to_input(self) -> CreateUserInput:
        profile = self.profile.to_input() if self.profile else ProfileInput()
        return CreateUserInput(email=self.email, password=self.password, profile=profile)


class UpdateAdminRequest(BaseModel):
    email: EmailStr | None = None
    password: str | None = None

    def to_patch(self) -> AdminPatch:
        return AdminPatch(email=self.email, password=self.password)


class UpdateClientRequest(ClientInfoRequest):
    email: EmailStr | None = None
    password: str | None = None

    def to_patch(self) -> ClientPatch:
        return ClientPatch(
            email=self.email,
            password=self.password,
            business_name=self.business_name,
            business_type=self.business_type,
            contact_number=self.contact_number,
            address=self.address,
        )


class UpdateUserRequest(BaseModel):
    email: EmailStr | None = None
    password: str | None = None
    profile: ProfileRequest | None = None

    def to_patch(self) -> UserPatch:
        return UserPatch(
            email=self.email,
            password=self.password,
            profile=self.profile.to_input() if self.profile else None,
        )
