"""Dependency injection (auth, db)"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.core.security import verify_token
from settleease.database import get_db
from settleease.models.user_profile import UserProfile
from settleease.repositories.user_profile_repository import \
    UserProfileRepository

# Bearer tokens are issued by the external auth provider
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UUID:
    """
    Get the authenticated user's id from the bearer token.

    Args:
        credentials: Authorization header contents

    Returns:
        Auth-provider user id (the token's `sub` claim)

    Raises:
        HTTPException: If the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = verify_token(credentials.credentials)
        user_id_str = payload.get("sub")

        if user_id_str is None:
            raise credentials_exception

        return UUID(user_id_str)

    except (JWTError, ValueError):
        raise credentials_exception


async def get_current_profile(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Optional[UserProfile]:
    """
    Get the authenticated user's profile, if one exists.

    Args:
        user_id: Current user id
        db: Database session

    Returns:
        UserProfile or None
    """
    return await UserProfileRepository.get_by_user_id(db, user_id)
