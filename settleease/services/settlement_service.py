"""Settlement payment recording"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.core.exceptions import (AuthorizationError, DatabaseError,
                                        NotFoundError, ValidationError)
from settleease.models.settlement_payment import SettlementPayment
from settleease.models.user_profile import UserProfile
from settleease.repositories.person_repository import PersonRepository
from settleease.repositories.settlement_payment_repository import \
    SettlementPaymentRepository
from settleease.schemas.settlement import (CalculatedTransaction,
                                           SettlementPaymentCreate,
                                           SettlementPaymentUpdate)

logger = structlog.get_logger(__name__)


class SettlementService:
    """
    Service for settlement payment mutations.

    Each operation is a single-row write. Balances are never patched here:
    readers recompute everything from the updated payment list. Two admins
    marking the same debt at the same moment produce two rows; nothing in
    this service detects that.
    """

    @staticmethod
    async def validate_parties(
        db: AsyncSession, debtor_id: UUID, creditor_id: UUID
    ) -> None:
        """
        Validate that debtor and creditor are two existing people.

        Args:
            db: Database session
            debtor_id: Paying person
            creditor_id: Receiving person

        Raises:
            ValidationError: If they are the same person or either doesn't exist
        """
        if debtor_id == creditor_id:
            raise ValidationError("Debtor and creditor must be different people")

        for person_id in (debtor_id, creditor_id):
            person = await PersonRepository.get_by_id(db, person_id)
            if not person:
                raise ValidationError(f"Person with ID {person_id} not found")

    @staticmethod
    def require_admin(profile: Optional[UserProfile], action: str) -> None:
        """
        Ensure the caller is an admin.

        Args:
            profile: Caller's profile (None when the caller has no profile)
            action: Description used in the error message

        Raises:
            AuthorizationError: If the caller is not an admin
        """
        if profile is None or not profile.is_admin:
            raise AuthorizationError(f"Only admins can {action}")

    @staticmethod
    async def record_payment(
        payment_data: SettlementPaymentCreate,
        marked_by_user_id: UUID,
        db: AsyncSession
    ) -> SettlementPayment:
        """
        Record a settlement payment.

        Args:
            payment_data: Payment data; settled_at defaults to now
            marked_by_user_id: Auth-provider id of the user recording it
            db: Database session

        Returns:
            Created payment

        Raises:
            ValidationError: If validation fails
            DatabaseError: If the store rejects the write
        """
        if payment_data.amount_settled <= 0:
            raise ValidationError("Settlement amount must be greater than zero")
        await SettlementService.validate_parties(
            db, payment_data.debtor_id, payment_data.creditor_id
        )

        payment = SettlementPayment(
            debtor_id=payment_data.debtor_id,
            creditor_id=payment_data.creditor_id,
            amount_settled=payment_data.amount_settled,
            settled_at=payment_data.settled_at or datetime.now(timezone.utc),
            notes=payment_data.notes,
            marked_by_user_id=marked_by_user_id,
        )

        try:
            created = await SettlementPaymentRepository.create(db, payment)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                "settlement_record_failed",
                debtor_id=str(payment_data.debtor_id),
                creditor_id=str(payment_data.creditor_id),
                error=str(e),
            )
            raise DatabaseError.from_exception("record settlement payment", e)

        logger.info(
            "settlement_recorded",
            payment_id=str(created.id),
            debtor_id=str(created.debtor_id),
            creditor_id=str(created.creditor_id),
            amount=str(created.amount_settled),
            custom=bool(created.notes),
        )
        return created

    @staticmethod
    async def mark_transaction_paid(
        transaction: CalculatedTransaction,
        marked_by_user_id: UUID,
        db: AsyncSession
    ) -> SettlementPayment:
        """
        Record a computed transaction as paid in full, now.

        Args:
            transaction: Suggested transaction being confirmed
            marked_by_user_id: Auth-provider id of the user confirming it
            db: Database session

        Returns:
            Created payment
        """
        payment_data = SettlementPaymentCreate(
            debtor_id=transaction.from_id,
            creditor_id=transaction.to_id,
            amount_settled=transaction.amount,
        )
        return await SettlementService.record_payment(payment_data, marked_by_user_id, db)

    @staticmethod
    async def edit_payment(
        payment_id: UUID,
        payment_data: SettlementPaymentUpdate,
        profile: Optional[UserProfile],
        db: AsyncSession
    ) -> SettlementPayment:
        """
        Edit amount, date or notes of a payment (admin only).

        Args:
            payment_id: Payment ID
            payment_data: Fields to change
            profile: Caller's profile
            db: Database session

        Returns:
            Updated payment

        Raises:
            AuthorizationError: If the caller is not an admin
            NotFoundError: If payment not found
            ValidationError: If the new amount is not positive
            DatabaseError: If the store rejects the write
        """
        SettlementService.require_admin(profile, "edit settlement payments")

        payment = await SettlementPaymentRepository.get_by_id(db, payment_id)
        if not payment:
            raise NotFoundError(f"Settlement payment with ID {payment_id} not found")

        changes = payment_data.model_dump(exclude_unset=True)
        if "amount_settled" in changes:
            if changes["amount_settled"] is None or changes["amount_settled"] <= 0:
                raise ValidationError("Settlement amount must be greater than zero")
            payment.amount_settled = changes["amount_settled"]
        if changes.get("settled_at") is not None:
            payment.settled_at = changes["settled_at"]
        if "notes" in changes:
            notes = (changes["notes"] or "").strip()
            payment.notes = notes or None

        try:
            updated = await SettlementPaymentRepository.update(db, payment)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("settlement_edit_failed", payment_id=str(payment_id), error=str(e))
            raise DatabaseError.from_exception("update settlement payment", e)

        logger.info(
            "settlement_edited",
            payment_id=str(payment_id),
            fields=sorted(changes),
            edited_by=str(profile.user_id),
        )
        return updated

    @staticmethod
    async def unmark_payment(payment_id: UUID, db: AsyncSession) -> None:
        """
        Delete a payment ("unmark as paid").

        Args:
            payment_id: Payment ID
            db: Database session

        Raises:
            NotFoundError: If payment not found
            DatabaseError: If the store rejects the delete
        """
        try:
            deleted = await SettlementPaymentRepository.delete(db, payment_id)
            if deleted:
                await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("settlement_unmark_failed", payment_id=str(payment_id), error=str(e))
            raise DatabaseError.from_exception("delete settlement payment", e)

        if not deleted:
            raise NotFoundError(f"Settlement payment with ID {payment_id} not found")

        logger.info("settlement_unmarked", payment_id=str(payment_id))

    @staticmethod
    async def list_payments(
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        person_id: Optional[UUID] = None
    ) -> Tuple[List[SettlementPayment], int]:
        """
        Get payment history with pagination.

        Args:
            db: Database session
            page: Page number (1-indexed)
            page_size: Items per page
            person_id: Optional filter on debtor or creditor

        Returns:
            Tuple of (payments list, total count)
        """
        skip = (page - 1) * page_size

        payments = await SettlementPaymentRepository.get_page(
            db, skip=skip, limit=page_size, person_id=person_id
        )
        total_count = await SettlementPaymentRepository.count(db, person_id=person_id)

        return payments, total_count
