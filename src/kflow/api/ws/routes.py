from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from kflow.api.ws.manager import ConnectionManager
from kflow.application.mappers.event_envelope import (
    KITCHEN_TOPIC,
    RESERVATIONS_TOPIC,
    TABLES_TOPIC,
)

router = APIRouter()
logger = logging.getLogger(__name__)

TOPICS = frozenset({KITCHEN_TOPIC, RESERVATIONS_TOPIC, TABLES_TOPIC})


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    topic = websocket.query_params.get("topic")
    role = websocket.query_params.get("role", "UNKNOWN")
    if topic not in TOPICS:
        await websocket.close(code=1008, reason="topic must be one of kitchen, reservations, tables")
        return

    manager: ConnectionManager = websocket.app.state.ws_manager
    await manager.register(websocket=websocket, topic=topic, role=role)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)
    except Exception:
        logger.exception("ws_connection_error", extra={"topic": topic})
        await manager.unregister(websocket)
