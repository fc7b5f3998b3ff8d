"""
Celery signal handlers for the worker processes.

Imported by celery_app.py. Logging is configured with the same handlers as
the API, and each forked process owns its sync database engine.
"""
from __future__ import annotations

import logging

from celery.signals import setup_logging, worker_process_init, worker_process_shutdown

from app.core.database_sync import dispose_sync_engine, init_sync_engine
from app.core.logging_config import setup_logging as configure_logging

logger = logging.getLogger(__name__)


@setup_logging.connect
def on_setup_logging(**kwargs: object) -> None:
    """Keep Celery from replacing the root handlers."""
    configure_logging(component="worker")


@worker_process_init.connect
def on_worker_process_init(**kwargs: object) -> None:
    """Drop any engine inherited from the parent and open a fresh one."""
    dispose_sync_engine()
    init_sync_engine()
    logger.info("Engine sync inicializado no processo worker")


@worker_process_shutdown.connect
def on_worker_process_shutdown(**kwargs: object) -> None:
    dispose_sync_engine()
    logger.info("Engine sync descartado no processo worker")
