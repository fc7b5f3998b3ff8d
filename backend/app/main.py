"""
Comanda - Multi-tenant restaurant back-office
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1 import api_router
from app.core.config import settings
from app.core.database import Database
from app.core.logging_config import setup_logging
from app.core.redis import close_redis_client

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Opens the database pool for the API process and releases pools on exit.

    Periodic jobs (trial sweep, reminders) live in the Celery beat schedule,
    never in this process.
    """
    database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    database.connect()
    app.state.database = database
    logger.info(
        "%s v%s ready (env=%s, scheduler_tz=%s)",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.ENVIRONMENT,
        settings.SCHEDULER_TIMEZONE,
    )

    yield

    await database.disconnect()
    await close_redis_client()
    logger.info("%s stopped", settings.APP_NAME)


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Back-office API for restaurants: subscriptions, stock, tables and cash registers",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if not settings.DEBUG:
        application.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

    application.include_router(api_router, prefix="/api/v1")
    return application


app = create_app()


@app.get("/", tags=["Health"])
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Reports the API status and whether the database answers.

    The database is reported as ``unavailable`` before the lifespan ran
    (for instance under an ASGI test transport).
    """
    database: Database | None = getattr(request.app.state, "database", None)
    db_status = "unavailable"
    if database is not None:
        try:
            async with database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "ok"
        except SQLAlchemyError as exc:
            logger.warning("Health check DB falhou: %s", exc)
            db_status = "error"

    return {
        "status": "healthy" if db_status != "error" else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": db_status,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.UVICORN_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
