"""
Company subscription endpoints: onboarding, current subscription, trial status.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import raise_service_http_error
from app.core.database import get_db
from app.core.dependencies import get_current_user, require_roles
from app.core.rbac import COMPANY_OWNER_ROLES
from app.models.user import User
from app.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionResponse,
    TrialStatusResponse,
)
from app.services.errors import ServiceError
from app.services.subscription_service import SubscriptionService
from app.services.trial_expiration_service import get_trial_status

router = APIRouter()


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: SubscriptionCreate,
    current_user: User = Depends(require_roles(*COMPANY_OWNER_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> SubscriptionResponse:
    """
    Subscribe the caller's company to a plan. Trial plans start the trial clock.
    """
    service = SubscriptionService(db)
    try:
        await service.create_subscription(
            company_id=current_user.company_id,
            plan_id=payload.plan_id,
            billing_period=payload.billing_period,
        )
    except ServiceError as exc:
        raise_service_http_error(exc)

    await db.commit()
    subscription = await service.get_current(current_user.company_id)
    return SubscriptionResponse.model_validate(subscription)


@router.get("/current", response_model=SubscriptionResponse)
async def get_current_subscription(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SubscriptionResponse:
    subscription = None
    if current_user.company_id is not None:
        subscription = await SubscriptionService(db).get_current(current_user.company_id)
    if subscription is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assinatura não encontrada")
    return SubscriptionResponse.model_validate(subscription)


@router.get("/trial-status", response_model=Optional[TrialStatusResponse])
async def read_trial_status(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Optional[TrialStatusResponse]:
    """
    Trial countdown for the caller's company; ``null`` when not on a trial.
    """
    if current_user.company_id is None:
        return None
    trial = await get_trial_status(db, current_user.company_id)
    if trial is None:
        return None
    return TrialStatusResponse.model_validate(trial)
