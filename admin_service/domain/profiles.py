from __future__ import annotations

from dataclasses import fields
from typing import Any

from .account import UserProfile
from .contracts import ClientInfoInput, ProfileInput


def build_profile(data: ProfileInput | None) -> UserProfile:
    profile = UserProfile()
    if data is not None:
        apply_profile(profile, data)
    return profile


def apply_profile(profile: UserProfile, data: ProfileInput) -> UserProfile:
    """Merge the supplied profile fields into ``profile``; ``None`` leaves a field alone."""
    for f in fields(ProfileInput):
        value = getattr(data, f.name)
        if value is not None:
            setattr(profile, f.name, value.strip() if isinstance(value, str) else value)
    return profile


def client_fields(info: ClientInfoInput | None) -> dict[str, Any]:
    info = info or ClientInfoInput()
    return {f.name: (getattr(info, f.name) or "").strip() for f in fields(ClientInfoInput)}
