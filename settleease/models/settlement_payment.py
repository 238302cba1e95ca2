"""Settlement payment model"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (CheckConstraint, Column, DateTime, ForeignKey,
                        Numeric, Text)
from sqlalchemy.dialects.postgresql import UUID

from settleease.database import Base


class SettlementPayment(Base):
    """A real-world payment from debtor to creditor.

    Rows without notes come from "mark as paid" on a computed debt; custom
    payments carry notes.
    """

    __tablename__ = "settlement_payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    debtor_id = Column(UUID(as_uuid=True), ForeignKey("people.id"), nullable=False, index=True)
    creditor_id = Column(UUID(as_uuid=True), ForeignKey("people.id"), nullable=False, index=True)
    amount_settled = Column(Numeric(12, 2), nullable=False)
    settled_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )
    notes = Column(Text, nullable=True)
    # Auth-provider user id; users are not stored in this database
    marked_by_user_id = Column(UUID(as_uuid=True), nullable=False)

    __table_args__ = (
        CheckConstraint('amount_settled > 0', name='check_amount_settled_positive'),
        CheckConstraint('debtor_id <> creditor_id', name='check_debtor_not_creditor'),
    )

    def __repr__(self) -> str:
        return (
            f"<SettlementPayment(id={self.id}, debtor_id={self.debtor_id}, "
            f"creditor_id={self.creditor_id}, amount_settled={self.amount_settled})>"
        )
