"""Expense schemas

Expenses are written by the expense form (outside this service); these models
only read them. Amounts are parsed leniently: anything that is not a finite
number becomes 0.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from settleease.models.expense import SplitMethod
from settleease.schemas.common import lenient_amount


class PayerShare(BaseModel):
    """A person and an amount (used for both `paid_by` and `shares`)"""

    person_id: UUID = Field(..., alias="personId")
    amount: Decimal = Decimal("0")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        """Convert amount to Decimal"""
        return lenient_amount(v)


class CelebrationContribution(PayerShare):
    """Voluntary extra contribution taken off the total before splitting"""


class ExpenseItem(BaseModel):
    """Line item of an itemwise expense"""

    id: str
    name: str
    price: Decimal = Decimal("0")
    shared_by: List[UUID] = Field(default_factory=list, alias="sharedBy")
    category_name: Optional[str] = Field(default=None, alias="categoryName")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("price", mode="before")
    @classmethod
    def convert_price(cls, v):
        """Convert price to Decimal"""
        return lenient_amount(v)


class ExpenseRead(BaseModel):
    """Expense as consumed by the settlement calculations"""

    id: UUID
    description: str = ""
    total_amount: Decimal = Decimal("0")
    category: str = "Other"
    created_at: Optional[datetime] = None
    paid_by: List[PayerShare] = Field(default_factory=list)
    split_method: SplitMethod = SplitMethod.EQUAL
    shares: List[PayerShare] = Field(default_factory=list)
    celebration_contribution: Optional[CelebrationContribution] = None
    items: Optional[List[ExpenseItem]] = None
    exclude_from_settlement: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_total_amount(cls, v):
        """Convert total_amount to Decimal"""
        return lenient_amount(v)

    @field_validator("paid_by", "shares", mode="before")
    @classmethod
    def default_empty_list(cls, v):
        """Treat a missing JSON list as empty"""
        return v if v is not None else []

    @field_validator("exclude_from_settlement", mode="before")
    @classmethod
    def default_not_excluded(cls, v):
        """Rows written before the flag existed have NULL"""
        return bool(v) if v is not None else False
