"""Uniform response envelope shared by every route."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class Envelope(BaseModel):
    success: bool
    message: str | None = None
    data: dict[str, Any] | None = None
    error: str | None = None


def ok(message: str | None = None, **data: Any) -> dict[str, Any]:
    """Return a success envelope; pydantic models in ``data`` are dumped to JSON types."""
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data:
        body["data"] = {key: _dump(value) for key, value in data.items()}
    return body


def failure(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    return body


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value
