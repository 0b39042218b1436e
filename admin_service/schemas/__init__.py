"""Shared schema exports."""

from .account import (
    AccountView,
    AdminView,
    ClientSummary,
    ClientView,
    OwnedUserView,
    PendingView,
    ProfileView,
    UserView,
    account_view,
    owned_user_view,
)
from .envelope import Envelope, failure, ok

__all__ = [
    "AccountView",
    "AdminView",
    "ClientSummary",
    "ClientView",
    "Envelope",
    "OwnedUserView",
    "PendingView",
    "ProfileView",
    "UserView",
    "account_view",
    "failure",
    "ok",
    "owned_user_view",
]
