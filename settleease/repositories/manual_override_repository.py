"""Manual settlement override data access"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.models.manual_override import ManualSettlementOverride


class ManualOverrideRepository:
    """Repository for ManualSettlementOverride database operations"""

    @staticmethod
    async def get_active(db: AsyncSession) -> List[ManualSettlementOverride]:
        """
        Get active overrides in the order they were created.

        Args:
            db: Database session

        Returns:
            List of active overrides
        """
        result = await db.execute(
            select(ManualSettlementOverride)
            .where(ManualSettlementOverride.is_active.is_(True))
            .order_by(ManualSettlementOverride.created_at, ManualSettlementOverride.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(db: AsyncSession, override_id: UUID) -> Optional[ManualSettlementOverride]:
        """
        Get override by ID.

        Args:
            db: Database session
            override_id: Override UUID

        Returns:
            Override if found, None otherwise
        """
        result = await db.execute(
            select(ManualSettlementOverride).where(ManualSettlementOverride.id == override_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, override: ManualSettlementOverride) -> ManualSettlementOverride:
        """
        Insert an override.

        Args:
            db: Database session
            override: Override to insert

        Returns:
            Created override
        """
        db.add(override)
        await db.flush()
        await db.refresh(override)
        return override

    @staticmethod
    async def deactivate(db: AsyncSession, override: ManualSettlementOverride) -> ManualSettlementOverride:
        """
        Mark an override inactive.

        Args:
            db: Database session
            override: Override to deactivate

        Returns:
            Updated override
        """
        override.is_active = False
        await db.flush()
        await db.refresh(override)
        return override
