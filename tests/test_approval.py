"""Tests for the login-approval state machine."""

from __future__ import annotations

import pytest

from admin_service.domain.account import AccountKind, AdminAccount, ClientAccount, Role, UserAccount
from admin_service.domain.approval import (
    ApprovalWorkflow,
    Origin,
    initial_login_approved,
    may_login,
)
from admin_service.domain.errors import InvalidOperation, NotFound


@pytest.fixture
def workflow(repository) -> ApprovalWorkflow:
    return ApprovalWorkflow(repository)


def _insert(repository, account):
    account.password_hash = "digest"
    return repository.insert(account)


@pytest.mark.parametrize(
    "kind, origin, expected",
    [
        (AccountKind.USER, Origin.SELF_REGISTRATION, False),
        (AccountKind.ADMIN, Origin.SELF_REGISTRATION, False),
        (AccountKind.CLIENT, Origin.SELF_REGISTRATION, True),
        (AccountKind.USER, Origin.PROVISIONED, True),
        (AccountKind.CLIENT, Origin.PROVISIONED, True),
        (AccountKind.ADMIN, Origin.PROVISIONED, True),
        (AccountKind.ADMIN, Origin.BOOTSTRAP, True),
    ],
)
def test_initial_state(kind, origin, expected):
    assert initial_login_approved(kind, origin) is expected


def test_may_login_axes():
    pending_user = UserAccount(account_id="u", email="u@example.com", login_approved=False)
    pending_client = ClientAccount(account_id="c", email="c@example.com", login_approved=False)
    root = AdminAccount(account_id="s", email="s@example.com", role=Role.SUPER_ADMIN, login_approved=False)

    assert not may_login(pending_user, Role.USER)
    assert may_login(pending_client, Role.CLIENT)
    assert may_login(root, Role.SUPER_ADMIN)


def test_approve_then_reject_user(workflow, repository):
    user = _insert(repository, UserAccount(account_id="", email="u@example.com"))

    assert workflow.approve("user", user.account_id).login_approved is True
    assert repository.raw(AccountKind.USER, user.account_id).login_approved is True

    assert workflow.reject("user", user.account_id).login_approved is False
    stored = repository.raw(AccountKind.USER, user.account_id)
    assert stored.login_approved is False
    assert stored.is_active is True


def test_transition_keeps_stored_credential(workflow, repository):
    user = _insert(repository, UserAccount(account_id="", email="u@example.com"))
    workflow.approve("user", user.account_id)
    assert repository.raw(AccountKind.USER, user.account_id).password_hash == "digest"


@pytest.mark.parametrize("transition", ["approve", "reject"])
def test_super_admin_target_is_refused_without_mutation(workflow, repository, transition):
    root = _insert(
        repository,
        AdminAccount(account_id="", email="s@example.com", role=Role.SUPER_ADMIN, login_approved=True),
    )
    with pytest.raises(InvalidOperation, match="cannot modify super admin permissions"):
        getattr(workflow, transition)("admin", root.account_id)
    assert repository.raw(AccountKind.ADMIN, root.account_id).login_approved is True


@pytest.mark.parametrize("transition", ["approve", "reject"])
def test_client_target_is_refused(workflow, repository, transition):
    client = _insert(repository, ClientAccount(account_id="", email="c@example.com", login_approved=True))
    with pytest.raises(InvalidOperation, match="clients do not require approval"):
        getattr(workflow, transition)("client", client.account_id)


def test_unknown_type_is_refused(workflow):
    with pytest.raises(InvalidOperation, match="invalid account type"):
        workflow.approve("owner", "x")


def test_missing_target(workflow):
    with pytest.raises(NotFound):
        workflow.approve("user", "missing")


def test_pending_lists_admins_and_users_only(workflow, repository):
    _insert(repository, AdminAccount(account_id="", email="a1@example.com", login_approved=False))
    _insert(repository, AdminAccount(account_id="", email="a2@example.com", login_approved=True))
    _insert(repository, ClientAccount(account_id="", email="c@example.com", login_approved=False))
    _insert(repository, UserAccount(account_id="", email="u@example.com", login_approved=False))

    pending = workflow.pending()

    assert [(p.type, p.account.email) for p in pending] == [
        (AccountKind.USER, "u@example.com"),
        (AccountKind.ADMIN, "a1@example.com"),
    ]
