"""Balance endpoints"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.api.deps import get_current_user_id
from settleease.database import get_db
from settleease.schemas.balance import (BalanceListResponse,
                                        PersonSettlementDetail,
                                        SettlementSnapshot)
from settleease.services.balance_service import BalanceService

router = APIRouter(prefix="/balances", tags=["Balances"])


@router.get("", response_model=BalanceListResponse)
async def get_balances(
    _: UUID = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)
):
    """
    Get every person's net balance.

    Positive balances are owed money, negative balances owe money, and
    anything within 0.01 of zero is settled. Sorted by person name.

    Returns:
        List of balances with person details and status
    """
    balances = await BalanceService.get_net_balances(db)
    return BalanceListResponse(balances=balances)


@router.get("/summary", response_model=SettlementSnapshot)
async def get_settlement_summary(
    use_cache: bool = Query(True, description="Reuse a cached snapshot of identical data"),
    _: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get balances, pairwise debts and simplified payments in one response.

    `data_hash` identifies the input data; it changes whenever an expense,
    payment or override that affects settlement changes.

    Returns:
        Settlement snapshot
    """
    return await BalanceService.get_snapshot(db, use_cache=use_cache)


@router.get("/people/{person_id}", response_model=PersonSettlementDetail)
async def get_person_settlement(
    person_id: UUID,
    _: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get one person's settlement picture.

    Includes the payments they should make and receive, the direct debts
    they are part of, and their payment history.

    Raises:
        404: If the person doesn't exist
    """
    return await BalanceService.get_person_settlement(person_id, db)
