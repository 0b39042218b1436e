"""Super admin surface: admin provisioning and login approvals."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from .deps import current_principal, get_approvals, get_directory, require_roles
from .models import CreateAdminRequest, UpdateAdminRequest
from ..domain.account import Role
from ..domain.approval import ApprovalWorkflow
from ..domain.management import DirectoryService
from ..schemas import Envelope, PendingView, account_view, ok
from ..security.authentication import Principal

router = APIRouter(
    prefix="/api/super-admin",
    tags=["super-admin"],
    dependencies=[Depends(require_roles(Role.SUPER_ADMIN))],
)


@router.get("/admins", response_model=Envelope, response_model_exclude_unset=True)
def list_admins(directory: DirectoryService = Depends(get_directory)) -> dict[str, Any]:
    return ok(admins=[account_view(a) for a in directory.list_admins()])


@router.post(
    "/admins",
    response_model=Envelope,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_admin(
    payload: CreateAdminRequest,
    principal: Principal = Depends(current_principal),
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    admin = directory.create_admin(principal, payload.to_input())
    return ok("admin created successfully", admin=account_view(admin))


@router.put("/admins/{admin_id}", response_model=Envelope, response_model_exclude_unset=True)
def update_admin(
    admin_id: str,
    payload: UpdateAdminRequest,
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    admin = directory.update_admin(admin_id, payload.to_patch())
    return ok("admin updated successfully", admin=account_view(admin))


@router.delete("/admins/{admin_id}", response_model=Envelope, response_model_exclude_unset=True)
def deactivate_admin(
    admin_id: str,
    directory: DirectoryService = Depends(get_directory),
) -> dict[str, Any]:
    directory.deactivate_admin(admin_id)
    return ok("admin deactivated successfully")


@router.get("/pending-approvals", response_model=Envelope, response_model_exclude_unset=True)
def pending_approvals(approvals: ApprovalWorkflow = Depends(get_approvals)) -> dict[str, Any]:
    items = [
        PendingView(type=item.type, account=account_view(item.account))
        for item in approvals.pending()
    ]
    return ok(pending=items)


@router.post(
    "/approve-login/{account_type}/{account_id}",
    response_model=Envelope,
    response_model_exclude_unset=True,
)
def approve_login(
    account_type: str,
    account_id: str,
    approvals: ApprovalWorkflow = Depends(get_approvals),
) -> dict[str, Any]:
    account = approvals.approve(account_type, account_id)
    return ok("login approved successfully", account=account_view(account))


@router.post(
    "/reject-login/{account_type}/{account_id}",
    response_model=Envelope,
    response_model_exclude_unset=True,
)
def reject_login(
    account_type: str,
    account_id: str,
    approvals: ApprovalWorkflow = Depends(get_approvals),
) -> dict[str, Any]:
    """Revoke a previously granted approval; the account itself is kept."""
    account = approvals.reject(account_type, account_id)
    return ok("login approval revoked successfully", account=account_view(account))
