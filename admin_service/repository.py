"""Database repository for admin, client and user accounts."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from dataclasses import asdict
from datetime import date, datetime, timezone
from typing import Any, Iterator

import psycopg
from psycopg import errors as pg_errors
from psycopg.rows import dict_row
from psycopg.types.json import Json
from psycopg_pool import ConnectionPool

from .domain.account import (
    Account,
    AccountKind,
    AdminAccount,
    ClientAccount,
    Profession,
    Role,
    UserAccount,
    UserProfile,
    normalize_email,
)
from .domain.contracts import AnyOf, Present
from .domain.errors import DuplicateError, InternalError

_TABLES: dict[AccountKind, str] = {
    AccountKind.ADMIN: "admins",
    AccountKind.CLIENT: "clients",
    AccountKind.USER: "users",
}

_COMMON_COLUMNS = (
    "account_id",
    "email",
    "is_active",
    "login_approved",
    "created_by",
    "created_at",
    "updated_at",
)

_KIND_COLUMNS: dict[AccountKind, tuple[str, ...]] = {
    AccountKind.ADMIN: ("role",),
    AccountKind.CLIENT: ("admin_id", "business_name", "business_type", "contact_number", "address"),
    AccountKind.USER: ("client_id", "profile"),
}


def _columns(kind: AccountKind) -> tuple[str, ...]:
    return _COMMON_COLUMNS + _KIND_COLUMNS[kind]


def _profile_to_json(profile: UserProfile) -> dict[str, Any]:
    data = asdict(profile)
    if profile.dob is not None:
        data["dob"] = profile.dob.isoformat()
    if profile.profession is not None:
        data["profession"] = profile.profession.value
    return data


def _profile_from_json(data: dict[str, Any] | None) -> UserProfile:
    data = data or {}
    dob = data.get("dob")
    profession = data.get("profession")
    return UserProfile(
        name=data.get("name"),
        dob=date.fromisoformat(dob) if dob else None,
        place_of_birth=data.get("place_of_birth"),
        time_of_birth=data.get("time_of_birth"),
        gowthra=data.get("gowthra"),
        profession=Profession(profession) if profession else None,
    )


class AccountRepository:
    """Postgres-backed document store for the three account kinds.

    Criteria passed to ``find_one``/``find``/``count`` are keyword arguments
    over the kind's columns: a plain value matches by equality, ``AnyOf`` by
    membership and ``Present`` by existence.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor]:
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    yield cur
                conn.commit()
        except pg_errors.UniqueViolation as exc:
            raise DuplicateError() from exc
        except psycopg.Error as exc:
            raise InternalError("record store failure") from exc

    def _where(self, kind: AccountKind, criteria: dict[str, Any]) -> tuple[str, list[Any]]:
        allowed = set(_columns(kind))
        clauses: list[str] = []
        params: list[Any] = []
        for name, value in criteria.items():
            if name not in allowed or name == "profile":
                raise ValueError(f"cannot filter {kind.value} records by {name!r}")
            if name == "email" and isinstance(value, str):
                value = normalize_email(value)
            if isinstance(value, Present):
                clauses.append(f"{name} IS NOT NULL")
            elif isinstance(value, AnyOf):
                clauses.append(f"{name} = ANY(%s)")
                params.append(list(self._param(v) for v in value.values))
            elif value is None:
                clauses.append(f"{name} IS NULL")
            else:
                clauses.append(f"{name} = %s")
                params.append(self._param(value))
        where_sql = " AND ".join(clauses) if clauses else "TRUE"
        return where_sql, params

    @staticmethod
    def _param(value: Any) -> Any:
        if isinstance(value, Role):
            return value.value
        return value

    def find_one(
        self, kind: AccountKind, *, with_credential: bool = False, **criteria: Any
    ) -> Account | None:
        """Return the first matching account; the credential digest is omitted unless requested."""
        where_sql, params = self._where(kind, criteria)
        columns = _columns(kind) + (("password_hash",) if with_credential else ())
        query = f"""
            SELECT {", ".join(columns)}
            FROM {_TABLES[kind]}
            WHERE {where_sql}
            LIMIT 1
        """
        with self._cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
        if not row:
            return None
        return self._map_record(kind, row)

    def find(self, kind: AccountKind, **criteria: Any) -> list[Account]:
        """Return matching accounts, newest first, without credential digests."""
        where_sql, params = self._where(kind, criteria)
        query = f"""
            SELECT {", ".join(_columns(kind))}
            FROM {_TABLES[kind]}
            WHERE {where_sql}
            ORDER BY created_at DESC
        """
        with self._cursor() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()
        return [self._map_record(kind, row) for row in rows]

    def count(self, kind: AccountKind, **criteria: Any) -> int:
        where_sql, params = self._where(kind, criteria)
        with self._cursor() as cur:
            cur.execute(f"SELECT COUNT(*) AS n FROM {_TABLES[kind]} WHERE {where_sql}", params)
            row = cur.fetchone()
        return int(row["n"]) if row else 0

    def insert(self, account: Account) -> Account:
        """Persist a new account, assigning its identifier and timestamps."""
        if not account.password_hash:
            raise ValueError("new accounts require a credential digest")
        now = datetime.now(timezone.utc)
        account.account_id = account.account_id or str(uuid.uuid4())
        account.email = normalize_email(account.email)
        account.created_at = now
        account.updated_at = now

        values = self._values(account)
        values["password_hash"] = account.password_hash
        names = list(values)
        query = f"""
            INSERT INTO {_TABLES[account.kind]} ({", ".join(names)})
            VALUES ({", ".join(["%s"] * len(names))})
        """
        with self._cursor() as cur:
            cur.execute(query, [values[name] for name in names])
        return account

    def save(self, account: Account) -> Account:
        """Write every mutable column of ``account`` back to its row.

        A ``None`` digest means the record was loaded without its credential;
        the stored digest is left untouched in that case.
        """
        account.email = normalize_email(account.email)
        account.updated_at = datetime.now(timezone.utc)
        values = self._values(account)
        values.pop("account_id")
        values.pop("created_at")
        if account.password_hash is not None:
            values["password_hash"] = account.password_hash
        assignments = ", ".join(f"{name} = %s" for name in values)
        query = f"UPDATE {_TABLES[account.kind]} SET {assignments} WHERE account_id = %s"
        with self._cursor() as cur:
            cur.execute(query, [*values.values(), account.account_id])
        return account

    def _values(self, account: Account) -> dict[str, Any]:
        values: dict[str, Any] = {
            "account_id": account.account_id,
            "email": account.email,
            "is_active": account.is_active,
            "login_approved": account.login_approved,
            "created_by": account.created_by,
            "created_at": account.created_at,
            "updated_at": account.updated_at,
        }
        if isinstance(account, AdminAccount):
            values["role"] = account.role.value
        elif isinstance(account, ClientAccount):
            values.update(
                admin_id=account.admin_id,
                business_name=account.business_name,
                business_type=account.business_type,
                contact_number=account.contact_number,
                address=account.address,
            )
        elif isinstance(account, UserAccount):
            values.update(client_id=account.client_id, profile=Json(_profile_to_json(account.profile)))
        return values

    def _map_record(self, kind: AccountKind, row: dict[str, Any]) -> Account:
        """Convert a raw database row into the matching account dataclass."""
        common = {name: row[name] for name in _COMMON_COLUMNS}
        common["password_hash"] = row.get("password_hash")
        if kind is AccountKind.ADMIN:
            return AdminAccount(**common, role=Role(row["role"]))
        if kind is AccountKind.CLIENT:
            return ClientAccount(
                **common,
                admin_id=row["admin_id"],
                business_name=row["business_name"] or "",
                business_type=row["business_type"] or "",
                contact_number=row["contact_number"] or "",
                address=row["address"] or "",
            )
        return UserAccount(
            **common,
            client_id=row["client_id"],
            profile=_profile_from_json(row["profile"]),
        )
