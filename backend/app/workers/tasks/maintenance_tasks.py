"""
Tarefas periodicas de manutencao (Celery Beat).

- service_health_check: verifica Redis, banco e bucket de uploads
"""
from __future__ import annotations

import logging

import redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


def _check_redis() -> str:
    try:
        with redis.Redis.from_url(settings.REDIS_URL, decode_responses=True) as client:
            client.ping()
    except RedisError as e:
        logger.warning("Health check Redis falhou: %s", e)
        return f"error: {e}"
    return "ok"


def _check_database() -> str:
    from app.core.database_sync import get_sync_db

    try:
        with get_sync_db() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check DB falhou: %s", e)
        return f"error: {e}"
    return "ok"


def _check_storage() -> str:
    from app.services.upload_service import (
        StorageError,
        StorageNotConfiguredError,
        UploadService,
    )

    try:
        UploadService.from_settings().check_bucket()
    except StorageNotConfiguredError:
        return "not_configured"
    except StorageError as e:
        logger.warning("Health check storage falhou: %s", e.detail)
        return f"error: {e.detail}"
    return "ok"


@celery_app.task(name="app.workers.tasks.maintenance_tasks.service_health_check")
def service_health_check() -> dict:
    """
    Verifica as dependencias do worker.

    Falhas viram warning no log e "error: ..." no resultado; a task nunca
    levanta excecao. Storage sem configuracao e reportado como
    "not_configured".
    """
    status = {
        "redis": _check_redis(),
        "database": _check_database(),
        "storage": _check_storage(),
    }
    logger.info("service_health_check: %s", status)
    return status
