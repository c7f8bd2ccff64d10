"""Credential hashing and the privileged credential pair check."""

from __future__ import annotations

import hmac
from typing import Optional

import bcrypt


def hash_password(password: str) -> str:
    """Hash plain text password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def verify_credential_pair(
    username: str,
    password: str,
    *,
    expected_username: str,
    password_hash: Optional[str],
) -> bool:
    """Check a username/password pair against the single configured admin pair.

    Without a configured hash every attempt is rejected.
    """
    if not password_hash:
        return False
    username_ok = hmac.compare_digest(username.strip().encode("utf-8"), expected_username.encode("utf-8"))
    password_ok = verify_password(password, password_hash)
    return username_ok and password_ok


def secrets_match(provided: str, expected: str) -> bool:
    """Constant-time comparison of a shared secret; an empty expected secret never matches."""
    if not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


__all__ = ["hash_password", "verify_password", "verify_credential_pair", "secrets_match"]
