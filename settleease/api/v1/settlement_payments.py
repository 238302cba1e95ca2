"""Settlement payment endpoints"""
import json
import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.api.deps import get_current_profile, get_current_user_id
from settleease.config import get_settings
from settleease.core.exceptions import ConflictError
from settleease.database import get_db
from settleease.models.user_profile import UserProfile
from settleease.schemas.common import PaginationMeta
from settleease.schemas.settlement import (CalculatedTransaction,
                                           SettlementPaymentCreate,
                                           SettlementPaymentListResponse,
                                           SettlementPaymentResponse,
                                           SettlementPaymentUpdate)
from settleease.services.cache_service import CacheService
from settleease.services.settlement_service import SettlementService
from settleease.utils.hash_utils import compute_json_hash

settings = get_settings()

router = APIRouter(prefix="/settlement-payments", tags=["Settlement Payments"])


def _idempotency_cache_key(idempotency_key: Optional[str], user_id: UUID) -> Optional[str]:
    if not idempotency_key:
        return None
    return f"idempotency:settlement:{idempotency_key}:{user_id}"


def _request_fingerprint(body: BaseModel) -> str:
    """Hash of a request body, stored next to the response it produced"""
    return compute_json_hash(body.model_dump(mode="json"))


async def _replayed_response(
    cache_key: Optional[str], fingerprint: str
) -> Optional[SettlementPaymentResponse]:
    """
    Look up the response recorded for an idempotency key.

    Raises:
        ConflictError: If the key was first used with a different body
    """
    if not cache_key:
        return None
    cached = await CacheService.get(cache_key)
    if not cached:
        return None

    record = json.loads(cached)
    if record.get("request") != fingerprint:
        raise ConflictError("Idempotency-Key was already used for a different request")
    return SettlementPaymentResponse.model_validate(record["response"])


async def _remember_response(
    cache_key: Optional[str], fingerprint: str, response: SettlementPaymentResponse
) -> None:
    if not cache_key:
        return
    record = {"request": fingerprint, "response": response.model_dump(mode="json")}
    await CacheService.set(cache_key, json.dumps(record), ttl=settings.idempotency_ttl)


@router.get("", response_model=SettlementPaymentListResponse)
async def list_payments(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    person_id: Optional[UUID] = Query(None, description="Only payments made or received by this person"),
    _: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Get recorded payments, newest first.

    Returns:
        Paginated list of payments
    """
    payments, total_count = await SettlementService.list_payments(
        db, page=page, page_size=page_size, person_id=person_id
    )

    total_pages = math.ceil(total_count / page_size) if total_count > 0 else 0

    return SettlementPaymentListResponse(
        items=[SettlementPaymentResponse.model_validate(p) for p in payments],
        pagination=PaginationMeta(
            page=page,
            page_size=page_size,
            total_items=total_count,
            total_pages=total_pages
        )
    )


@router.post("", response_model=SettlementPaymentResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: SettlementPaymentCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key")
):
    """
    Record a custom settlement payment.

    Without an `Idempotency-Key` header every call records a new row. With
    one, a repeat of the same key by the same user within the idempotency
    window returns the first response instead of recording again; reusing
    the key for a different body is a 409.

    Raises:
        400: If debtor and creditor are the same or don't exist
        409: If the Idempotency-Key was used for a different body
        422: If the amount is not positive
    """
    cache_key = _idempotency_cache_key(idempotency_key, user_id)
    fingerprint = _request_fingerprint(payment_data)
    replayed = await _replayed_response(cache_key, fingerprint)
    if replayed:
        return replayed

    payment = await SettlementService.record_payment(payment_data, user_id, db)
    response = SettlementPaymentResponse.model_validate(payment)

    await _remember_response(cache_key, fingerprint, response)
    return response


@router.post("/mark-paid", response_model=SettlementPaymentResponse, status_code=status.HTTP_201_CREATED)
async def mark_transaction_paid(
    transaction: CalculatedTransaction,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key")
):
    """
    Mark a suggested transaction as paid in full, now.

    Body is a transaction as returned by the transaction endpoints
    (`from`, `to`, `amount`).
    """
    cache_key = _idempotency_cache_key(idempotency_key, user_id)
    fingerprint = _request_fingerprint(transaction)
    replayed = await _replayed_response(cache_key, fingerprint)
    if replayed:
        return replayed

    payment = await SettlementService.mark_transaction_paid(transaction, user_id, db)
    response = SettlementPaymentResponse.model_validate(payment)

    await _remember_response(cache_key, fingerprint, response)
    return response


@router.patch("/{payment_id}", response_model=SettlementPaymentResponse)
async def edit_payment(
    payment_id: UUID,
    payment_data: SettlementPaymentUpdate,
    profile: Optional[UserProfile] = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Edit amount, date or notes of a payment (admin only).

    Raises:
        403: If the caller is not an admin
        404: If the payment doesn't exist
    """
    payment = await SettlementService.edit_payment(payment_id, payment_data, profile, db)
    return SettlementPaymentResponse.model_validate(payment)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unmark_payment(
    payment_id: UUID,
    _: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Unmark a payment (delete it); balances go back to what they were.

    Raises:
        404: If the payment doesn't exist
    """
    await SettlementService.unmark_payment(payment_id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
