"""
SubscriptionService — plan catalog and company subscription onboarding.
"""
from __future__ import annotations

import calendar
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.plan import BillingPeriod, Plan
from app.models.subscription import Subscription, SubscriptionStatus
from app.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BILLING_PERIOD_MONTHS: dict[str, int] = {
    BillingPeriod.MONTHLY.value: 1,
    BillingPeriod.QUARTERLY.value: 3,
    BillingPeriod.YEARLY.value: 12,
}


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


class SubscriptionService:
    """Plans are read-only here; subscriptions are created once per company."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_active_plans(self) -> list[Plan]:
        stmt = (
            select(Plan)
            .where(Plan.active.is_(True))
            .order_by(Plan.display_order.asc(), Plan.price.asc())
        )
        return list((await self._db.execute(stmt)).scalars().all())

    async def get_current(self, company_id: UUID) -> Optional[Subscription]:
        stmt = (
            select(Subscription)
            .options(selectinload(Subscription.plan))
            .where(Subscription.company_id == company_id)
            .execution_options(populate_existing=True)
        )
        return (await self._db.execute(stmt)).scalar_one_or_none()

    async def create_subscription(
        self,
        *,
        company_id: Optional[UUID],
        plan_id: UUID,
        billing_period: BillingPeriod = BillingPeriod.MONTHLY,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Subscribe a company to an active plan.

        Trial plans end after ``trial_days`` (default from settings); paid
        plans have no end date and bill again after one billing period.

        Raises:
            ValidationError: caller has no company.
            NotFoundError: plan missing or inactive.
            ConflictError: company already has a subscription.
        """
        if company_id is None:
            raise ValidationError("Usuário não possui empresa associada", code="company_not_associated")

        plan = (
            await self._db.execute(
                select(Plan).where(Plan.id == plan_id, Plan.active.is_(True))
            )
        ).scalar_one_or_none()
        if plan is None:
            raise NotFoundError("Plano não encontrado", code="plan_not_found")

        if await self.get_current(company_id) is not None:
            raise ConflictError(
                "Empresa já possui uma assinatura",
                code="subscription_conflict",
            )

        now = now or datetime.utcnow()
        if plan.is_trial:
            trial_days = plan.trial_days or settings.DEFAULT_TRIAL_DAYS
            end_date: Optional[datetime] = now + timedelta(days=trial_days)
            next_billing_date = end_date
        else:
            end_date = None
            next_billing_date = add_months(now, BILLING_PERIOD_MONTHS[billing_period.value])

        subscription = Subscription(
            company_id=company_id,
            plan_id=plan.id,
            status=SubscriptionStatus.ACTIVE.value,
            billing_period=billing_period.value,
            start_date=now,
            end_date=end_date,
            next_billing_date=next_billing_date,
        )
        self._db.add(subscription)
        await self._db.flush()
        logger.info(
            "Assinatura criada: empresa=%s plano=%s trial=%s",
            company_id,
            plan.name,
            plan.is_trial,
        )
        return subscription
