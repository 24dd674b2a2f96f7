"""
Token helpers for identity-provider JWTs.
Tokens are issued by the identity provider; create_access_token exists for local
development and tests, where this service signs its own tokens with the same secret.
"""
from datetime import datetime, timedelta, timezone

from jose import jwt

from prepup.app.core.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT carrying `data` (expects at least a `sub` claim)."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    if settings.identity_audience and "aud" not in to_encode:
        to_encode["aud"] = settings.identity_audience
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature, expiry and (when configured) audience. Raises jose.JWTError."""
    options = {"verify_aud": bool(settings.identity_audience)}
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.algorithm],
        audience=settings.identity_audience or None,
        options=options,
    )
