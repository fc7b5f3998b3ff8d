"""
Trial lifecycle: daily expiry sweep, expiring-soon reminder and on-demand status.

The sweep and the reminder run inside Celery workers with a synchronous
session; ``get_trial_status`` serves the API with an async session.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, contains_eager, joinedload

from app.core.config import settings
from app.models.plan import Plan
from app.models.subscription import Subscription, SubscriptionStatus

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class TrialStatus:
    """Snapshot of a company's trial as seen at ``now``."""

    days_remaining: int
    end_date: datetime
    is_expired: bool
    status: str


def compute_trial_status(end_date: datetime, status: str, now: datetime) -> TrialStatus:
    """
    Build the trial snapshot.

    ``days_remaining`` rounds partial days up and never goes below zero;
    ``is_expired`` only flips once ``end_date`` is a full day boundary behind.
    """
    diff_days = math.ceil((end_date - now).total_seconds() / SECONDS_PER_DAY)
    return TrialStatus(
        days_remaining=max(0, diff_days),
        end_date=end_date,
        is_expired=diff_days < 0,
        status=status,
    )


def end_of_tomorrow(now: datetime, tz_name: str) -> datetime:
    """
    Last millisecond of the next calendar day in ``tz_name``.

    Args:
        now: Naive UTC reference instant.
        tz_name: IANA timezone the business day is measured in.

    Returns:
        Naive UTC datetime.
    """
    tz = ZoneInfo(tz_name)
    local_now = now.replace(tzinfo=timezone.utc).astimezone(tz)
    tomorrow = local_now.date() + timedelta(days=1)
    local_end = datetime.combine(tomorrow, time(23, 59, 59, 999000), tzinfo=tz)
    return local_end.astimezone(timezone.utc).replace(tzinfo=None)


class TrialExpirationService:
    """Scheduled trial jobs over a synchronous session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def check_expired_trials(self, now: Optional[datetime] = None) -> dict[str, int]:
        """
        Move every active trial whose ``end_date`` has passed to EXPIRED.

        Each transition runs in its own SAVEPOINT so that a failing row is
        logged and skipped without losing the rows already transitioned.
        Re-running is a no-op for rows already EXPIRED.

        Returns:
            ``{"found": n, "expired": n, "failed": n}``
        """
        now = now or datetime.utcnow()
        stmt = (
            select(Subscription)
            .join(Subscription.plan)
            .options(contains_eager(Subscription.plan), joinedload(Subscription.company))
            .where(
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Subscription.end_date <= now,
                Plan.is_trial.is_(True),
            )
        )
        subscriptions = self._db.execute(stmt).unique().scalars().all()
        logger.info("Encontradas %d assinaturas trial expiradas", len(subscriptions))

        expired = 0
        failed = 0
        for subscription in subscriptions:
            company = subscription.company
            try:
                with self._db.begin_nested():
                    result = self._db.execute(
                        update(Subscription)
                        .where(
                            Subscription.id == subscription.id,
                            Subscription.status == SubscriptionStatus.ACTIVE.value,
                        )
                        .values(status=SubscriptionStatus.EXPIRED.value)
                        .execution_options(synchronize_session=False)
                    )
            except SQLAlchemyError:
                failed += 1
                logger.exception(
                    "Falha ao expirar trial da assinatura %s (empresa %s)",
                    subscription.id,
                    subscription.company_id,
                )
                continue

            if result.rowcount != 1:
                logger.info("Assinatura %s ja expirada por outra execucao", subscription.id)
                continue
            expired += 1
            logger.info("Trial expirado para empresa: %s (%s)", company.name, company.email)

        return {"found": len(subscriptions), "expired": expired, "failed": failed}

    def notify_trial_expiring_soon(self, now: Optional[datetime] = None) -> int:
        """
        Log every active trial that ends between ``now`` and the end of tomorrow.

        Read-only. Returns the number of subscriptions found.
        """
        now = now or datetime.utcnow()
        window_end = end_of_tomorrow(now, settings.SCHEDULER_TIMEZONE)
        stmt = (
            select(Subscription)
            .join(Subscription.plan)
            .options(contains_eager(Subscription.plan), joinedload(Subscription.company))
            .where(
                Subscription.status == SubscriptionStatus.ACTIVE.value,
                Plan.is_trial.is_(True),
                Subscription.end_date >= now,
                Subscription.end_date <= window_end,
            )
        )
        subscriptions = self._db.execute(stmt).unique().scalars().all()
        for subscription in subscriptions:
            company = subscription.company
            logger.info(
                "Trial expirando em breve para empresa: %s (%s) - termina em %s",
                company.name,
                company.email,
                subscription.end_date.isoformat(),
            )
        return len(subscriptions)


async def get_trial_status(
    db: AsyncSession,
    company_id: UUID,
    now: Optional[datetime] = None,
) -> Optional[TrialStatus]:
    """
    Trial snapshot of a company, or ``None`` when it is not on a dated trial.
    """
    stmt = (
        select(Subscription)
        .options(joinedload(Subscription.plan))
        .where(Subscription.company_id == company_id)
    )
    subscription = (await db.execute(stmt)).scalar_one_or_none()
    if subscription is None or not subscription.plan.is_trial:
        return None
    if subscription.end_date is None:
        return None
    return compute_trial_status(
        subscription.end_date,
        subscription.status,
        now or datetime.utcnow(),
    )
