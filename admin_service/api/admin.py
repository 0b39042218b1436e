"""Admin surface: clients owned by the caller and the users beneath them."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from .deps import get_directory, require_roles
from .models import CreateClientRequest, UpdateClientRequest
from ..domain.account import Role
from ..domain.management import DirectoryService
from ..schemas import Envelope, account_view, ok, owned_user_view
from ..security.authentication import Principal

router = APIRouter(prefix="/api/admin", tags=["admin"])

admin_principal = require_roles(Role.ADMIN, Role.SUPER_ADMIN)


@router.get("/clients", response_model=Envelope, response_model_exclude_unset=True)
def list_clients(
    principal: Principal = Depends(admin_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    """List clients; admins see their own, the super admin sees all."""
    return ok(clients=[account_view(c) for c in directory.list_clients(principal)])


@router.post(
    "/clients",
    response_model=Envelope,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_client(
    payload: CreateClientRequest,
    principal: Principal = Depends(admin_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    client = directory.create_client(principal, payload.to_input())
    return ok("client created successfully", client=account_view(client))


@router.put("/clients/{client_id}", response_model=Envelope, response_model_exclude_unset=True)
def update_client(
    client_id: str,
    payload: UpdateClientRequest,
    principal: Principal = Depends(admin_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    client = directory.update_client(principal, client_id, payload.to_patch())
    return ok("client updated successfully", client=account_view(client))


@router.delete("/clients/{client_id}", response_model=Envelope, response_model_exclude_unset=True)
def deactivate_client(
    client_id: str,
    principal: Principal = Depends(admin_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    directory.deactivate_client(principal, client_id)
    return ok("client deactivated successfully")


@router.get("/users", response_model=Envelope, response_model_exclude_unset=True)
def list_users(
    principal: Principal = Depends(admin_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    """List users under the caller's clients, each with a summary of its client."""
    items = directory.list_admin_users(principal)
    return ok(users=[owned_user_view(item.user, item.client) for item in items])
