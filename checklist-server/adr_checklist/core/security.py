"""Signed retrieval link tokens and request guards."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt

from adr_checklist.core.config import Settings, get_settings
from adr_checklist.core.crypto import secrets_match, verify_credential_pair

LINK_TOKEN_TYPE = "artifact-link"


class LinkTokenError(ValueError):
    """Raised when a retrieval link token is invalid or expired."""


def create_link_token(
    path: str,
    ttl_seconds: int,
    *,
    secret_key: str,
    algorithm: str,
    now: Optional[datetime] = None,
) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": path,
        "typ": LINK_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_link_token(token: str, *, secret_key: str, algorithm: str) -> str:
    """Return the storage path carried by a retrieval link token."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError as exc:
        raise LinkTokenError("Invalid or expired link") from exc

    path = payload.get("sub")
    if payload.get("typ") != LINK_TOKEN_TYPE or not path:
        raise LinkTokenError("Invalid or expired link")
    return str(path)


async def require_cron_secret(
    x_cron_secret: str = Header(default="", alias="x-cron-secret"),
    settings: Settings = Depends(get_settings),
) -> None:
    if not secrets_match(x_cron_secret, settings.security.cron_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def ensure_admin_credentials(username: str, password: str, settings: Settings) -> None:
    ok = verify_credential_pair(
        username,
        password,
        expected_username=settings.security.admin_username,
        password_hash=settings.security.admin_password_hash,
    )
    if not ok:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
