from __future__ import annotations

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from admin_service.config import Settings
from admin_service.domain.account import Account, AccountKind, Role, normalize_email
from admin_service.domain.contracts import AnyOf, Present
from admin_service.domain.errors import DuplicateError
from admin_service.main import create_app
from admin_service.security.passwords import PasswordHasher
from admin_service.security.tokens import TokenService

SUPER_ADMIN_EMAIL = "root@example.com"
SUPER_ADMIN_PASSWORD = "root-password"


class FakeRepository:
    """In-memory store mimicking the Postgres repository's criteria semantics."""

    def __init__(self) -> None:
        self._rows: dict[AccountKind, dict[str, Account]] = {kind: {} for kind in AccountKind}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.lookups = 0

    def _tick(self) -> datetime:
        # strictly increasing timestamps keep "newest first" ordering deterministic
        self._clock += timedelta(seconds=1)
        return self._clock

    @staticmethod
    def _matches(account: Account, criteria: dict[str, Any]) -> bool:
        for name, expected in criteria.items():
            actual = getattr(account, name)
            if isinstance(actual, Role):
                actual = actual.value
            if isinstance(expected, Role):
                expected = expected.value
            if name == "email" and isinstance(expected, str):
                expected = normalize_email(expected)
            if isinstance(expected, Present):
                if actual is None:
                    return False
            elif isinstance(expected, AnyOf):
                if actual not in expected.values:
                    return False
            elif actual != expected:
                return False
        return True

    @staticmethod
    def _project(account: Account, with_credential: bool) -> Account:
        result = copy.deepcopy(account)
        if not with_credential:
            result.password_hash = None
        return result

    def find_one(self, kind: AccountKind, *, with_credential: bool = False, **criteria: Any):
        self.lookups += 1
        for account in self._rows[kind].values():
            if self._matches(account, criteria):
                return self._project(account, with_credential)
        return None

    def find(self, kind: AccountKind, **criteria: Any):
        rows = [a for a in self._rows[kind].values() if self._matches(a, criteria)]
        rows.sort(key=lambda a: a.created_at, reverse=True)
        return [self._project(a, False) for a in rows]

    def count(self, kind: AccountKind, **criteria: Any) -> int:
        return sum(1 for a in self._rows[kind].values() if self._matches(a, criteria))

    def insert(self, account: Account) -> Account:
        assert account.password_hash, "new accounts require a credential digest"
        account.email = normalize_email(account.email)
        if any(a.email == account.email for a in self._rows[account.kind].values()):
            raise DuplicateError()
        account.account_id = account.account_id or str(uuid.uuid4())
        account.created_at = account.updated_at = self._tick()
        self._rows[account.kind][account.account_id] = copy.deepcopy(account)
        return account

    def save(self, account: Account) -> Account:
        stored = self._rows[account.kind][account.account_id]
        account.email = normalize_email(account.email)
        if any(
            a.email == account.email and a.account_id != account.account_id
            for a in self._rows[account.kind].values()
        ):
            raise DuplicateError()
        account.updated_at = self._tick()
        updated = copy.deepcopy(account)
        if updated.password_hash is None:
            updated.password_hash = stored.password_hash
        self._rows[account.kind][account.account_id] = updated
        return account

    def raw(self, kind: AccountKind, account_id: str) -> Account:
        """Return the stored row itself, credential included."""
        return self._rows[kind][account_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret="test-secret",
        jwt_issuer="admin-service-test",
        bcrypt_rounds=4,
        super_admin_email=SUPER_ADMIN_EMAIL,
        super_admin_password=SUPER_ADMIN_PASSWORD,
        cors_origins=(),
    )


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(settings.jwt_secret, settings.jwt_issuer)


@pytest.fixture
def api_client(settings: Settings, repository: FakeRepository):
    """Provide a FastAPI test client with isolated state and a bootstrapped super admin."""
    app = create_app(settings, repository=repository)
    with TestClient(app) as client:
        yield client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def login(client: TestClient, role_path: str, email: str, password: str):
    return client.post(f"/api/auth/{role_path}/login", json={"email": email, "password": password})


def token_for(client: TestClient, role_path: str, email: str, password: str) -> str:
    response = login(client, role_path, email, password)
    assert response.status_code == 200, response.json()
    return response.json()["data"]["token"]


@pytest.fixture
def super_admin_headers(api_client: TestClient) -> dict[str, str]:
    return bearer(token_for(api_client, "super-admin", SUPER_ADMIN_EMAIL, SUPER_ADMIN_PASSWORD))
