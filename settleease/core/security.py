"""Bearer token verification

Tokens are issued by the external auth provider and signed with the shared
secret; this service only verifies them.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from settleease.config import get_settings

settings = get_settings()


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT.

    Args:
        token: Encoded JWT

    Returns:
        Decoded payload

    Raises:
        JWTError: If the signature is invalid or the token has expired
    """
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token the way the auth provider does (seed script and tests).

    Args:
        data: Claims to encode; `sub` should hold the user id
        expires_delta: Lifetime (default 30 minutes)

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=30))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
