"""Settlement payment data access"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.models.settlement_payment import SettlementPayment


class SettlementPaymentRepository:
    """Repository for SettlementPayment database operations"""

    @staticmethod
    async def get_all(db: AsyncSession) -> List[SettlementPayment]:
        """
        Get every payment, newest first.

        Args:
            db: Database session

        Returns:
            List of payments
        """
        result = await db.execute(
            select(SettlementPayment).order_by(
                SettlementPayment.settled_at.desc(), SettlementPayment.id
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_page(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 20,
        person_id: Optional[UUID] = None,
    ) -> List[SettlementPayment]:
        """
        Get a page of payments, newest first.

        Args:
            db: Database session
            skip: Number of records to skip
            limit: Maximum number of records to return
            person_id: Only payments where this person is debtor or creditor

        Returns:
            List of payments
        """
        query = select(SettlementPayment)
        if person_id:
            query = query.where(
                or_(
                    SettlementPayment.debtor_id == person_id,
                    SettlementPayment.creditor_id == person_id,
                )
            )
        query = query.order_by(
            SettlementPayment.settled_at.desc(), SettlementPayment.id
        ).offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(db: AsyncSession, person_id: Optional[UUID] = None) -> int:
        """
        Count payments.

        Args:
            db: Database session
            person_id: Only payments where this person is debtor or creditor

        Returns:
            Number of payments
        """
        query = select(func.count(SettlementPayment.id))
        if person_id:
            query = query.where(
                or_(
                    SettlementPayment.debtor_id == person_id,
                    SettlementPayment.creditor_id == person_id,
                )
            )
        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    async def get_by_id(db: AsyncSession, payment_id: UUID) -> Optional[SettlementPayment]:
        """
        Get payment by ID.

        Args:
            db: Database session
            payment_id: Payment UUID

        Returns:
            Payment if found, None otherwise
        """
        result = await db.execute(
            select(SettlementPayment).where(SettlementPayment.id == payment_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, payment: SettlementPayment) -> SettlementPayment:
        """
        Insert a payment.

        Args:
            db: Database session
            payment: Payment to insert

        Returns:
            Created payment
        """
        db.add(payment)
        await db.flush()
        await db.refresh(payment)
        return payment

    @staticmethod
    async def update(db: AsyncSession, payment: SettlementPayment) -> SettlementPayment:
        """
        Flush in-place changes to a payment.

        Args:
            db: Database session
            payment: Modified payment

        Returns:
            Refreshed payment
        """
        await db.flush()
        await db.refresh(payment)
        return payment

    @staticmethod
    async def delete(db: AsyncSession, payment_id: UUID) -> bool:
        """
        Delete a payment.

        Args:
            db: Database session
            payment_id: Payment UUID

        Returns:
            True if deleted, False if not found
        """
        payment = await SettlementPaymentRepository.get_by_id(db, payment_id)
        if not payment:
            return False

        await db.delete(payment)
        await db.flush()
        return True
