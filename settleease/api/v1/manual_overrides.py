"""Manual settlement override endpoints"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.api.deps import get_current_profile, get_current_user_id
from settleease.database import get_db
from settleease.models.user_profile import UserProfile
from settleease.schemas.settlement import (ManualOverrideCreate,
                                           ManualOverrideListResponse,
                                           ManualOverrideResponse)
from settleease.services.override_service import OverrideService

router = APIRouter(prefix="/manual-overrides", tags=["Manual Overrides"])


@router.get("", response_model=ManualOverrideListResponse)
async def list_overrides(
    _: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Get active overrides in the order they are applied.
    """
    overrides = await OverrideService.list_active_overrides(db)
    return ManualOverrideListResponse(
        overrides=[ManualOverrideResponse.model_validate(o) for o in overrides]
    )


@router.post("", response_model=ManualOverrideResponse, status_code=status.HTTP_201_CREATED)
async def create_override(
    override_data: ManualOverrideCreate,
    profile: Optional[UserProfile] = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Pin a payment path from a debtor to a creditor (admin only).

    Raises:
        400: If the debtor doesn't owe or the creditor isn't owed right now
        403: If the caller is not an admin
    """
    override = await OverrideService.create_override(override_data, profile, db)
    return ManualOverrideResponse.model_validate(override)


@router.post("/{override_id}/deactivate", response_model=ManualOverrideResponse)
async def deactivate_override(
    override_id: UUID,
    profile: Optional[UserProfile] = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Stop applying an override (admin only).

    Raises:
        403: If the caller is not an admin
        404: If the override doesn't exist
    """
    override = await OverrideService.deactivate_override(override_id, profile, db)
    return ManualOverrideResponse.model_validate(override)
