"""Prometheus collectors exported on ``/metrics``."""

from __future__ import annotations

from prometheus_client import Counter

LOGIN_ATTEMPTS = Counter(
    "admin_service_logins_total",
    "Login attempts by role and outcome",
    ["role", "outcome"],
)

ACCOUNTS_CREATED = Counter(
    "admin_service_accounts_created_total",
    "Accounts created by kind and origin",
    ["kind", "origin"],
)
