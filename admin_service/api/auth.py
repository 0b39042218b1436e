"""Registration, login and identity routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from .deps import current_principal, get_service
from .models import CreateClientRequest, CreateUserRequest, LoginRequest
from ..domain.account import Role
from ..domain.service import AccountService, LoginResult
from ..schemas import Envelope, account_view, ok
from ..security.authentication import Principal

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _login_body(result: LoginResult) -> dict[str, Any]:
    return ok(
        "login successful",
        user=account_view(result.account, result.role),
        token=result.token.token,
        expires_at=result.token.expires_at.isoformat(),
    )


@router.post(
    "/user/register",
    response_model=Envelope,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def register_user(
    payload: CreateUserRequest,
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    """Self-register a user; login is refused until a super admin approves it."""
    user = service.register_user(payload.to_input())
    return ok(
        "user registered successfully, please wait for super admin approval to login",
        user=account_view(user),
    )


@router.post(
    "/client/register",
    response_model=Envelope,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def register_client(
    payload: CreateClientRequest,
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    client = service.register_client(payload.to_input())
    return ok("client registered successfully", client=account_view(client))


@router.post("/super-admin/login", response_model=Envelope, response_model_exclude_unset=True)
def login_super_admin(
    payload: LoginRequest,
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    return _login_body(service.login(Role.SUPER_ADMIN, payload.to_credentials()))


@router.post("/admin/login", response_model=Envelope, response_model_exclude_unset=True)
def login_admin(
    payload: LoginRequest,
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    return _login_body(service.login(Role.ADMIN, payload.to_credentials()))


@router.post("/client/login", response_model=Envelope, response_model_exclude_unset=True)
def login_client(
    payload: LoginRequest,
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    return _login_body(service.login(Role.CLIENT, payload.to_credentials()))


@router.post("/user/login", response_model=Envelope, response_model_exclude_unset=True)
def login_user(
    payload: LoginRequest,
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    return _login_body(service.login(Role.USER, payload.to_credentials()))


@router.get("/me", response_model=Envelope, response_model_exclude_unset=True)
def me(principal: Principal = Depends(current_principal)) -> dict[str, Any]:
    """Return the account behind the presented token."""
    return ok(user=account_view(principal.account, principal.role))
