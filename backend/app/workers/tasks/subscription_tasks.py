"""
Tarefas agendadas do ciclo de vida de trials (Celery Beat).

- check_expired_trials: expira trials vencidos (diario, 00:00)
- notify_trial_expiring_soon: registra trials que vencem ate amanha (diario, 10:00)
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from app.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="app.workers.tasks.subscription_tasks.check_expired_trials")
def check_expired_trials() -> dict:
    """
    Move trials com end_date vencido para EXPIRED.

    Falhas de banco sao registradas e resumidas no retorno; a task nunca
    derruba o worker.
    """
    from app.core.database_sync import get_sync_db
    from app.services.trial_expiration_service import TrialExpirationService

    try:
        with get_sync_db() as db:
            summary = TrialExpirationService(db).check_expired_trials()
    except SQLAlchemyError as e:
        logger.exception("Erro ao verificar trials expirados")
        return {"found": 0, "expired": 0, "failed": 0, "error": str(e)}

    logger.info(
        "check_expired_trials: %d encontrados, %d expirados, %d falhas",
        summary["found"],
        summary["expired"],
        summary["failed"],
    )
    return summary


@celery_app.task(name="app.workers.tasks.subscription_tasks.notify_trial_expiring_soon")
def notify_trial_expiring_soon() -> dict:
    """
    Registra em log os trials que vencem entre agora e o fim de amanha.
    """
    from app.core.database_sync import get_sync_db
    from app.services.trial_expiration_service import TrialExpirationService

    try:
        with get_sync_db() as db:
            count = TrialExpirationService(db).notify_trial_expiring_soon()
    except SQLAlchemyError as e:
        logger.exception("Erro ao notificar trials expirando")
        return {"notified": 0, "error": str(e)}

    logger.info("notify_trial_expiring_soon: %d trials expirando em breve", count)
    return {"notified": count}
