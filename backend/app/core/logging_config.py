"""
Logging configuration shared by the API process and the Celery worker.

Every record is tagged with the component that emitted it ("api" or
"worker"). In development (DEBUG=True) records also go to a rotating file
per component under backend/logs/ when that directory is writable; in
production only stdout is used.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.core.config import settings

LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 3
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | {component} | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

QUIET_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "asyncio", "sqlalchemy.engine")


def log_file_for(component: str) -> Path:
    return LOG_DIR / f"comanda-{component}.log"


def _file_handler(component: str) -> logging.Handler | None:
    path = log_file_for(component)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        logging.getLogger(__name__).warning(
            "File logging disabled: cannot write to %s (%s)", path, exc
        )
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(component: str = "api") -> None:
    """
    Configure the root logger once per process.

    Args:
        component: Tag written on every console line and used to name the
            development log file.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    # Reload (uvicorn --reload) or a worker re-run must not stack handlers
    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(
        logging.Formatter(CONSOLE_FORMAT.format(component=component), datefmt=DATE_FORMAT)
    )
    root.addHandler(console)

    if settings.DEBUG:
        handler = _file_handler(component)
        if handler is not None:
            root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
