"""FastAPI dependencies wiring the gates and services into route handlers."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from ..domain.account import Role
from ..domain.approval import ApprovalWorkflow
from ..domain.management import DirectoryService
from ..domain.service import AccountService
from ..security.authentication import AuthenticationGate, Principal, bearer_token
from ..security.authorization import ensure_role


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


def get_directory(request: Request) -> DirectoryService:
    directory: DirectoryService = request.app.state.directory_service
    return directory


def get_approvals(request: Request) -> ApprovalWorkflow:
    approvals: ApprovalWorkflow = request.app.state.approval_workflow
    return approvals


def current_principal(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Principal:
    """Authenticate the request; FastAPI caches the result for the rest of the request."""
    gate: AuthenticationGate = request.app.state.authentication_gate
    return gate.authenticate(bearer_token(authorization))


def require_roles(*roles: Role) -> Callable[..., Principal]:
    """Build a dependency admitting only principals whose role is in ``roles``."""
    allowed = frozenset(roles)

    def dependency(principal: Principal = Depends(current_principal)) -> Principal:
        return ensure_role(principal, allowed)

    return dependency
