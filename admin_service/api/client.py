"""Client surface: users owned by a client.

Clients always act on themselves. Admins and super admins may pass
``client_id`` to act on a client inside their scope.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from .deps import get_directory, require_roles
from .models import CreateUserRequest, UpdateUserRequest
from ..domain.account import Role
from ..domain.management import DirectoryService
from ..schemas import Envelope, account_view, ok
from ..security.authentication import Principal

router = APIRouter(prefix="/api/client", tags=["client"])

client_principal = require_roles(Role.CLIENT, Role.ADMIN, Role.SUPER_ADMIN)


@router.get("/users", response_model=Envelope, response_model_exclude_unset=True)
def list_users(
    client_id: str | None = Query(default=None),
    principal: Principal = Depends(client_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    users = directory.list_client_users(principal, client_id)
    return ok(users=[account_view(u) for u in users])


@router.post(
    "/users",
    response_model=Envelope,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: CreateUserRequest,
    principal: Principal = Depends(client_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    user = directory.create_client_user(principal, payload.to_input(), payload.client_id)
    return ok("user created successfully", user=account_view(user))


@router.put("/users/{user_id}", response_model=Envelope, response_model_exclude_unset=True)
def update_user(
    user_id: str,
    payload: UpdateUserRequest,
    client_id: str | None = Query(default=None),
    principal: Principal = Depends(client_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    user = directory.update_client_user(principal, user_id, payload.to_patch(), client_id)
    return ok("user updated successfully", user=account_view(user))


@router.delete("/users/{user_id}", response_model=Envelope, response_model_exclude_unset=True)
def deactivate_user(
    user_id: str,
    client_id: str | None = Query(default=None),
    principal: Principal = Depends(client_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    directory.deactivate_client_user(principal, user_id, client_id)
    return ok("user deactivated successfully")
