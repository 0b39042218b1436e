"""Salted one-way credential hashing backed by bcrypt."""

from __future__ import annotations

import bcrypt

from ..domain.errors import ValidationError

MIN_PASSWORD_LENGTH = 6
# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def validate_password(password: str) -> None:
    """Raise ``ValidationError`` when the plaintext cannot be used as a credential."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")


class PasswordHasher:
    """Hash and verify account credentials.

    Parameters
    ----------
    rounds:
        bcrypt work factor; each increment doubles the hashing cost.
    """

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds
        self._placeholder: bytes | None = None

    def hash(self, plaintext: str) -> str:
        """Return a salted digest for ``plaintext``."""
        validate_password(plaintext)
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Return ``True`` when ``plaintext`` matches ``digest``; malformed digests never match."""
        if not digest:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            return False

    def verify_missing(self, plaintext: str) -> bool:
        """Spend the same bcrypt work as ``verify`` when there is no digest to check; always ``False``."""
        if self._placeholder is None:
            self._placeholder = bcrypt.hashpw(b"placeholder", bcrypt.gensalt(rounds=self._rounds))
        bcrypt.checkpw(plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES], self._placeholder)
        return False
