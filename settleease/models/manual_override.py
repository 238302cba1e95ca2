"""Manual settlement override model"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (Boolean, CheckConstraint, Column, DateTime,
                        ForeignKey, Numeric, Text)
from sqlalchemy.dialects.postgresql import UUID

from settleease.database import Base


class ManualSettlementOverride(Base):
    """Admin-pinned payment path applied before the greedy simplification"""

    __tablename__ = "manual_settlement_overrides"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    debtor_id = Column(UUID(as_uuid=True), ForeignKey("people.id"), nullable=False)
    creditor_id = Column(UUID(as_uuid=True), ForeignKey("people.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by_user_id = Column(UUID(as_uuid=True), nullable=False)
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint('amount > 0', name='check_override_amount_positive'),
        CheckConstraint('debtor_id <> creditor_id', name='check_override_debtor_not_creditor'),
    )

    def __repr__(self) -> str:
        return (
            f"<ManualSettlementOverride(id={self.id}, debtor_id={self.debtor_id}, "
            f"creditor_id={self.creditor_id}, amount={self.amount}, is_active={self.is_active})>"
        )
