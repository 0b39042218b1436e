"""Tests for the authentication and authorization gates."""

from __future__ import annotations

import pytest

from admin_service.domain.account import AccountKind, AdminAccount, ClientAccount, Role, UserAccount
from admin_service.domain.errors import Forbidden, Unauthenticated
from admin_service.security.authentication import AuthenticationGate, Principal, bearer_token
from admin_service.security.authorization import ensure_role


@pytest.fixture
def gate(repository, tokens) -> AuthenticationGate:
    return AuthenticationGate(repository, tokens)


def _insert(repository, account):
    account.password_hash = "digest"
    return repository.insert(account)


def test_bearer_token_parsing():
    assert bearer_token(None) is None
    assert bearer_token("") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token("bearer abc") == "abc"
    assert bearer_token("abc") == "abc"


def test_missing_token(gate):
    with pytest.raises(Unauthenticated, match="no token provided"):
        gate.authenticate(None)


def test_invalid_token(gate):
    with pytest.raises(Unauthenticated, match="invalid or expired token"):
        gate.authenticate("garbage")


@pytest.mark.parametrize(
    "account, role",
    [
        (AdminAccount(account_id="", email="a@example.com", role=Role.ADMIN), Role.ADMIN),
        (AdminAccount(account_id="", email="s@example.com", role=Role.SUPER_ADMIN), Role.SUPER_ADMIN),
        (ClientAccount(account_id="", email="c@example.com"), Role.CLIENT),
        (UserAccount(account_id="", email="u@example.com"), Role.USER),
    ],
)
def test_token_resolves_to_account_of_matching_kind(gate, repository, tokens, account, role):
    stored = _insert(repository, account)
    principal = gate.authenticate(tokens.issue(stored.account_id, role.value).token)

    assert principal.account_id == stored.account_id
    assert principal.role is role
    assert principal.account.kind is account.kind
    assert principal.account.password_hash is None


def test_role_tag_selects_the_store(gate, repository, tokens):
    user = _insert(repository, UserAccount(account_id="", email="u@example.com"))
    # the id exists, but only in the user store
    with pytest.raises(Unauthenticated, match="user not found"):
        gate.authenticate(tokens.issue(user.account_id, "client").token)


def test_unrecognised_role_tag_is_no_account(gate, repository, tokens):
    user = _insert(repository, UserAccount(account_id="", email="u@example.com"))
    with pytest.raises(Unauthenticated, match="user not found"):
        gate.authenticate(tokens.issue(user.account_id, "owner").token)


def test_unknown_account(gate, tokens):
    with pytest.raises(Unauthenticated, match="user not found"):
        gate.authenticate(tokens.issue("missing", "user").token)


def test_deactivation_applies_to_previously_issued_tokens(gate, repository, tokens):
    client = _insert(repository, ClientAccount(account_id="", email="c@example.com"))
    token = tokens.issue(client.account_id, "client").token
    assert gate.authenticate(token).account_id == client.account_id

    repository.raw(AccountKind.CLIENT, client.account_id).is_active = False

    with pytest.raises(Unauthenticated, match="account inactive"):
        gate.authenticate(token)


def test_authentication_performs_one_lookup(gate, repository, tokens):
    user = _insert(repository, UserAccount(account_id="", email="u@example.com"))
    token = tokens.issue(user.account_id, "user").token
    before = repository.lookups
    gate.authenticate(token)
    assert repository.lookups - before == 1


def _principal(role: Role) -> Principal:
    return Principal(account_id="p", role=role, account=UserAccount(account_id="p", email="p@example.com"))


def test_ensure_role_passes_allowed_principal_through():
    principal = _principal(Role.CLIENT)
    assert ensure_role(principal, {Role.CLIENT, Role.ADMIN}) is principal


def test_ensure_role_forbids_other_roles():
    with pytest.raises(Forbidden):
        ensure_role(_principal(Role.USER), {Role.ADMIN, Role.SUPER_ADMIN})


def test_ensure_role_without_principal_is_unauthenticated():
    with pytest.raises(Unauthenticated):
        ensure_role(None, {Role.ADMIN})
