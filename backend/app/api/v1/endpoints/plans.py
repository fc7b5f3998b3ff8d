"""
Public plans endpoint: no authentication required.
Returns active plans for the pricing page and onboarding.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.subscription import PlanResponse
from app.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("", response_model=list[PlanResponse])
async def list_public_plans(
    db: AsyncSession = Depends(get_db),
) -> list[PlanResponse]:
    """List active plans (public, no auth required)."""
    plans = await SubscriptionService(db).list_active_plans()
    return [PlanResponse.model_validate(p) for p in plans]
