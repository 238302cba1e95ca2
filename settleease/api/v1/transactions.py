"""Calculated transaction endpoints"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.api.deps import get_current_user_id
from settleease.database import get_db
from settleease.schemas.balance import TransactionListResponse
from settleease.services.balance_service import BalanceService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("/pairwise", response_model=TransactionListResponse)
async def get_pairwise_transactions(
    _: UUID = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)
):
    """
    Get who owes whom directly, with the expenses behind each debt.
    """
    transactions = await BalanceService.get_pairwise_transactions(db)
    return TransactionListResponse(transactions=transactions)


@router.get("/simplified", response_model=TransactionListResponse)
async def get_simplified_transactions(
    _: UUID = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)
):
    """
    Get the smallest set of payments that settles every balance.

    Active manual overrides are applied before the rest is simplified.
    """
    transactions = await BalanceService.get_simplified_transactions(db)
    return TransactionListResponse(transactions=transactions)
