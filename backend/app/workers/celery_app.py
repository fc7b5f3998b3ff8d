"""
Celery application factory.

Configura broker, backend, serialização, limites e beat schedule.
"""
from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery_app = Celery("comanda")

celery_app.conf.update(
    # Broker / Backend
    broker_url=settings.CELERY_BROKER_URL,
    result_backend=settings.CELERY_RESULT_BACKEND,
    # Serialização
    accept_content=["json"],
    task_serializer="json",
    result_serializer="json",
    # Timezone: crontab entries are evaluated in the business timezone
    timezone=settings.SCHEDULER_TIMEZONE,
    enable_utc=True,
    # Reliability
    broker_connection_retry_on_startup=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # Limites
    task_soft_time_limit=settings.CELERY_TASK_SOFT_TIME_LIMIT,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    # Resultados
    result_expires=3600,
    # Beat schedule file path (writeable in containers)
    beat_schedule_filename="/tmp/celerybeat-schedule",
)

# Registrar modulos de tasks explicitamente
celery_app.conf.include = [
    "app.workers.tasks.subscription_tasks",
    "app.workers.tasks.maintenance_tasks",
]

# Garantir que todos os models SQLAlchemy sao importados antes de qualquer task
# rodar, evitando falha de mapper initialization.
import app.models  # noqa: F401, E402

# Ciclo de vida do engine sync por processo worker
import app.workers.signals  # noqa: F401, E402

# Beat schedule: tarefas periodicas
celery_app.conf.beat_schedule = {
    "check-expired-trials": {
        "task": "app.workers.tasks.subscription_tasks.check_expired_trials",
        "schedule": crontab(
            hour=settings.TRIAL_SWEEP_HOUR,
            minute=settings.TRIAL_SWEEP_MINUTE,
        ),
    },
    "notify-trial-expiring-soon": {
        "task": "app.workers.tasks.subscription_tasks.notify_trial_expiring_soon",
        "schedule": crontab(
            hour=settings.TRIAL_REMINDER_HOUR,
            minute=settings.TRIAL_REMINDER_MINUTE,
        ),
    },
    "service-health-check": {
        "task": "app.workers.tasks.maintenance_tasks.service_health_check",
        "schedule": settings.HEALTH_CHECK_MINUTES * 60,
    },
}
