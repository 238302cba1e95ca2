"""Expense model"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (Boolean, CheckConstraint, Column, DateTime, Enum,
                        Numeric, String)
from sqlalchemy.dialects.postgresql import JSONB, UUID

from settleease.database import Base


class SplitMethod(str, enum.Enum):
    """How `shares` was computed when the expense was written"""
    EQUAL = "equal"
    UNEQUAL = "unequal"
    ITEMWISE = "itemwise"


class Expense(Base):
    """
    Shared expense.

    `paid_by`, `shares`, `celebration_contribution` and `items` are computed by
    the expense form and stored denormalized as JSON; settlement code reads
    them and never recomputes them.
    """

    __tablename__ = "expenses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    description = Column(String(500), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String(100), nullable=False, default="Other")
    # [{"personId": "...", "amount": 12.5}, ...]
    paid_by = Column(JSONB, nullable=False, default=list)
    split_method = Column(
        Enum(SplitMethod, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    shares = Column(JSONB, nullable=False, default=list)
    # {"personId": "...", "amount": 30}
    celebration_contribution = Column(JSONB, nullable=True)
    items = Column(JSONB, nullable=True)
    exclude_from_settlement = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint('total_amount >= 0', name='check_total_amount_non_negative'),
    )

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, description={self.description}, total_amount={self.total_amount})>"
