from __future__ import annotations

import asyncio
import os
from contextlib import asynccontextmanager, suppress

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kflow.api.error_handling import register_exception_handlers
from kflow.api.middleware.access_log import AccessLogMiddleware
from kflow.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from kflow.api.routes.backoffice import router as backoffice_router
from kflow.api.routes.floor import router as floor_router
from kflow.api.routes.health import router as health_router
from kflow.api.routes.inventory import router as inventory_router
from kflow.api.routes.kitchen import router as kitchen_router
from kflow.api.routes.metrics import router as metrics_router
from kflow.api.routes.reservations import router as reservations_router
from kflow.api.ws.manager import ConnectionManager
from kflow.api.ws.routes import router as ws_router
from kflow.application.ports.publisher import EventPublisher
from kflow.infrastructure.memory.state import RestaurantState, build_restaurant_state
from kflow.infrastructure.messaging.redis_fanout import run_event_fanout
from kflow.infrastructure.messaging.redis_publisher import RedisEventPublisher
from kflow.infrastructure.observability.logging_config import configure_logging
from kflow.infrastructure.observability.otel import configure_otel, shutdown_otel

ROUTERS: tuple[APIRouter, ...] = (
    health_router,
    metrics_router,
    inventory_router,
    floor_router,
    kitchen_router,
    reservations_router,
    backoffice_router,
    ws_router,
)

DEFAULT_FRONTEND_URL = "http://localhost:5173"


def cors_allow_origins() -> list[str]:
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return ["*"]

    configured = os.getenv("CORS_ALLOW_ORIGINS") or os.getenv("FRONTEND_URL", DEFAULT_FRONTEND_URL)
    return [origin.strip() for origin in configured.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.event_fanout_task = asyncio.create_task(run_event_fanout(app.state))
    try:
        yield
    finally:
        app.state.event_fanout_task.cancel()
        with suppress(asyncio.CancelledError):
            await app.state.event_fanout_task
        shutdown_otel()


def create_app(
    state: RestaurantState | None = None,
    publisher: EventPublisher | None = None,
) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Kitchen Flow Backend", version="0.1.0", lifespan=lifespan)
    app.state.restaurant = state or build_restaurant_state()
    app.state.publisher = publisher or RedisEventPublisher()
    app.state.ws_manager = ConnectionManager()

    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    # Added last runs first: CORS, then request ids, then the access log.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
