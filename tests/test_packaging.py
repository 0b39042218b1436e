from __future__ import annotations

import importlib

import pytest


@pytest.mark.parametrize(
    "name",
    ["admin_service.api", "admin_service.domain", "admin_service.schemas", "admin_service.security"],
)
def test_subpackages_are_regular_packages(name: str):
    module = importlib.import_module(name)
    assert module.__file__ is not None
    assert module.__file__.endswith("__init__.py")
