"""Manual settlement override logic"""
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.core.exceptions import (DatabaseError, NotFoundError,
                                        ValidationError)
from settleease.models.manual_override import ManualSettlementOverride
from settleease.models.user_profile import UserProfile
from settleease.repositories.manual_override_repository import \
    ManualOverrideRepository
from settleease.schemas.settlement import ManualOverrideCreate
from settleease.services.balance_service import BalanceService
from settleease.services.settlement_calculations import (BALANCE_OWED,
                                                         BALANCE_OWES,
                                                         balance_status,
                                                         calculate_net_balances)
from settleease.services.settlement_service import SettlementService

logger = structlog.get_logger(__name__)


class OverrideService:
    """Service for manual settlement overrides"""

    @staticmethod
    async def list_active_overrides(db: AsyncSession) -> List[ManualSettlementOverride]:
        """
        Get active overrides in application order.

        Args:
            db: Database session

        Returns:
            List of active overrides
        """
        return await ManualOverrideRepository.get_active(db)

    @staticmethod
    async def create_override(
        override_data: ManualOverrideCreate,
        profile: Optional[UserProfile],
        db: AsyncSession
    ) -> ManualSettlementOverride:
        """
        Pin a payment path from debtor to creditor (admin only).

        The debtor must currently owe money and the creditor must currently be
        owed money.

        Args:
            override_data: Override data
            profile: Caller's profile
            db: Database session

        Returns:
            Created override

        Raises:
            AuthorizationError: If the caller is not an admin
            ValidationError: If the parties are invalid for the current balances
            DatabaseError: If the store rejects the write
        """
        SettlementService.require_admin(profile, "create manual overrides")
        await SettlementService.validate_parties(
            db, override_data.debtor_id, override_data.creditor_id
        )

        inputs = await BalanceService.load_inputs(db)
        balances = calculate_net_balances(inputs.people, inputs.expenses, inputs.payments)

        debtor_balance = balances.get(override_data.debtor_id)
        if debtor_balance is None or balance_status(debtor_balance) != BALANCE_OWES:
            raise ValidationError("The selected debtor doesn't owe any money currently")

        creditor_balance = balances.get(override_data.creditor_id)
        if creditor_balance is None or balance_status(creditor_balance) != BALANCE_OWED:
            raise ValidationError("The selected creditor isn't owed any money currently")

        override = ManualSettlementOverride(
            debtor_id=override_data.debtor_id,
            creditor_id=override_data.creditor_id,
            amount=override_data.amount,
            notes=(override_data.notes or "").strip() or None,
            is_active=True,
            created_by_user_id=profile.user_id,
        )

        try:
            created = await ManualOverrideRepository.create(db, override)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("override_create_failed", error=str(e))
            raise DatabaseError.from_exception("create manual override", e)

        logger.info(
            "override_created",
            override_id=str(created.id),
            debtor_id=str(created.debtor_id),
            creditor_id=str(created.creditor_id),
            amount=str(created.amount),
        )
        return created

    @staticmethod
    async def deactivate_override(
        override_id: UUID,
        profile: Optional[UserProfile],
        db: AsyncSession
    ) -> ManualSettlementOverride:
        """
        Deactivate an override (admin only).

        Args:
            override_id: Override ID
            profile: Caller's profile
            db: Database session

        Returns:
            Deactivated override

        Raises:
            AuthorizationError: If the caller is not an admin
            NotFoundError: If override not found
            DatabaseError: If the store rejects the write
        """
        SettlementService.require_admin(profile, "deactivate manual overrides")

        override = await ManualOverrideRepository.get_by_id(db, override_id)
        if not override:
            raise NotFoundError(f"Manual override with ID {override_id} not found")

        try:
            updated = await ManualOverrideRepository.deactivate(db, override)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("override_deactivate_failed", override_id=str(override_id), error=str(e))
            raise DatabaseError.from_exception("deactivate manual override", e)

        logger.info("override_deactivated", override_id=str(override_id))
        return updated
