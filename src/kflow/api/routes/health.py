from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from kflow.infrastructure.db.session import database_now, ping_database
from kflow.infrastructure.messaging.redis_connection import ping_redis

router = APIRouter()
logger = logging.getLogger(__name__)

SERVICE_BANNER = "Kitchen Flow Backend - Quinta Estación"


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    postgres_ready = ping_database(timeout_seconds=1.0)
    redis_ready = ping_redis(timeout_seconds=1.0)

    if postgres_ready and redis_ready:
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "unavailable",
        "checks": {"postgres": postgres_ready, "redis": redis_ready},
    }


@router.get("/api/health")
def api_health() -> dict[str, str]:
    return {
        "status": "OK",
        "message": SERVICE_BANNER,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/api/db-test", response_model=None)
def db_test() -> dict[str, object] | JSONResponse:
    try:
        now = database_now(timeout_seconds=2.0)
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.warning("db_test_failed", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Error al conectar con PostgreSQL",
                "error": str(exc),
            },
        )
    return {
        "success": True,
        "message": "Conexión a PostgreSQL exitosa",
        "timestamp": now.isoformat() if isinstance(now, datetime) else str(now),
    }
