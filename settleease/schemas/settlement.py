"""Settlement payment, manual override and transaction schemas"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from settleease.schemas.common import PaginationMeta, lenient_amount


class CalculatedTransaction(BaseModel):
    """Derived payment suggestion; never persisted"""

    from_id: UUID = Field(..., alias="from")
    to_id: UUID = Field(..., alias="to")
    amount: Decimal
    contributing_expense_ids: Optional[List[UUID]] = Field(
        default=None, alias="contributingExpenseIds"
    )

    model_config = ConfigDict(populate_by_name=True)


class SettlementPaymentCreate(BaseModel):
    """Input for recording a payment ("mark as paid" or custom payment)"""

    debtor_id: UUID
    creditor_id: UUID
    amount_settled: Decimal = Field(..., gt=0)
    settled_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Store blank notes as NULL"""
        if v is None:
            return v
        v = v.strip()
        return v or None


class SettlementPaymentUpdate(BaseModel):
    """Admin edit of an existing payment; unset fields are left unchanged"""

    amount_settled: Optional[Decimal] = Field(default=None, gt=0)
    settled_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class SettlementPaymentResponse(BaseModel):
    """Stored payment"""

    id: UUID
    debtor_id: UUID
    creditor_id: UUID
    amount_settled: Decimal
    settled_at: datetime
    notes: Optional[str] = None
    marked_by_user_id: UUID

    model_config = ConfigDict(from_attributes=True)

    @field_validator("amount_settled", mode="before")
    @classmethod
    def convert_amount_settled(cls, v):
        """Stored amounts are read leniently"""
        return lenient_amount(v)

    @property
    def is_custom(self) -> bool:
        """Custom payments are the ones entered with notes"""
        return bool(self.notes)


class SettlementPaymentListResponse(BaseModel):
    """Paginated payment history"""

    items: List[SettlementPaymentResponse]
    pagination: PaginationMeta


class ManualOverrideCreate(BaseModel):
    """Input for pinning a settlement path"""

    debtor_id: UUID
    creditor_id: UUID
    amount: Decimal = Field(..., gt=0)
    notes: Optional[str] = Field(default=None, max_length=1000)


class ManualOverrideResponse(BaseModel):
    """Stored manual override"""

    id: UUID
    debtor_id: UUID
    creditor_id: UUID
    amount: Decimal
    notes: Optional[str] = None
    is_active: bool
    created_by_user_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        """Stored amounts are read leniently"""
        return lenient_amount(v)


class ManualOverrideListResponse(BaseModel):
    """Active overrides"""

    overrides: List[ManualOverrideResponse]
