"""Main v1 router aggregator"""
from fastapi import APIRouter

from settleease.api.v1 import (balances, manual_overrides, settlement_payments,
                               transactions)

# Create v1 router
api_router = APIRouter()

# Include all v1 routers
api_router.include_router(balances.router)
api_router.include_router(transactions.router)
api_router.include_router(settlement_payments.router)
api_router.include_router(manual_overrides.router)
