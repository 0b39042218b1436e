"""Credential hashing, tokens and request gates."""
