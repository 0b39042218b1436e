"""Role-based route gating."""

from __future__ import annotations

from typing import Collection

from ..domain.account import Role
from ..domain.errors import Forbidden, Unauthenticated
from .authentication import Principal


def ensure_role(principal: Principal | None, allowed: Collection[Role]) -> Principal:
    """Return ``principal`` unchanged when its role is in ``allowed``.

    Must run after authentication; a missing principal is reported as
    ``Unauthenticated``.
    """
    if principal is None:
        raise Unauthenticated("authentication required")
    if principal.role not in allowed:
        raise Forbidden("access denied, insufficient permissions")
    return principal
