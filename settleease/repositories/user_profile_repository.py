"""User profile data access"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.models.user_profile import UserProfile


class UserProfileRepository:
    """Repository for UserProfile database operations"""

    @staticmethod
    async def get_by_user_id(db: AsyncSession, user_id: UUID) -> Optional[UserProfile]:
        """
        Get the profile of an auth-provider user.

        Args:
            db: Database session
            user_id: Auth-provider user UUID

        Returns:
            Profile if found, None otherwise
        """
        result = await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
        return result.scalar_one_or_none()
