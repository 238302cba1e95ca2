"""Balance and settlement view schemas"""
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from settleease.schemas.person import PersonRead
from settleease.schemas.settlement import (CalculatedTransaction,
                                           SettlementPaymentResponse)


class PersonBalance(BaseModel):
    """Net position of one person"""
    person: PersonRead
    balance: Decimal
    status: str  # "owed", "owes" or "settled"


class BalanceListResponse(BaseModel):
    """Response schema for net balances"""
    balances: List[PersonBalance]


class TransactionListResponse(BaseModel):
    """Response schema for pairwise or simplified transactions"""
    transactions: List[CalculatedTransaction]


class SettlementSnapshot(BaseModel):
    """Everything the dashboard needs, plus a hash of the input data"""
    data_hash: str
    balances: List[PersonBalance]
    pairwise_transactions: List[CalculatedTransaction]
    simplified_transactions: List[CalculatedTransaction]


class PersonSettlementDetail(BaseModel):
    """Settlement view from one person's perspective"""
    person: PersonRead
    balance: Decimal
    status: str
    total_to_pay: Decimal
    total_to_receive: Decimal
    payments_to_make: List[CalculatedTransaction]
    payments_to_receive: List[CalculatedTransaction]
    pairwise_debts: List[CalculatedTransaction]
    payment_history: List[SettlementPaymentResponse]
