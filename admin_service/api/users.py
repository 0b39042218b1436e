"""Self-service profile routes for users."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from .deps import get_service, require_roles
from .models import UpdateUserRequest
from ..domain.account import Role
from ..domain.service import AccountService
from ..schemas import Envelope, account_view, ok
from ..security.authentication import Principal

router = APIRouter(prefix="/api/users", tags=["users"])

user_principal = require_roles(Role.USER)


@router.get("/profile", response_model=Envelope, response_model_exclude_unset=True)
def get_profile(
    principal: Principal = Depends(user_principal),
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    return ok(user=account_view(service.get_profile(principal)))


@router.put("/profile", response_model=Envelope, response_model_exclude_unset=True)
def update_profile(
    payload: UpdateUserRequest,
    principal: Principal = Depends(user_principal),
    service: AccountService = Depends(get_service),
) -> dict[str, Any]:
    user = service.update_profile(principal, payload.to_patch())
    return ok("profile updated successfully", user=account_view(user))
