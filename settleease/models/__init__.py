"""SQLAlchemy models"""
from settleease.models.person import Person
from settleease.models.expense import Expense, SplitMethod
from settleease.models.settlement_payment import SettlementPayment
from settleease.models.manual_override import ManualSettlementOverride
from settleease.models.user_profile import UserProfile, UserRole

__all__ = [
    "Person",
    "Expense",
    "SplitMethod",
    "SettlementPayment",
    "ManualSettlementOverride",
    "UserProfile",
    "UserRole",
]
