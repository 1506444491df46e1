from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from kflow.api.main import create_app
from kflow.api.ws.manager import ConnectionManager
from kflow.infrastructure.memory.state import build_restaurant_state
from kflow.infrastructure.messaging.redis_fanout import run_event_fanout, topic_from_channel


class FakeWebSocket:
    def __init__(self, fail: bool = False) -> None:
        self.accepted = False
        self.sent: list[str] = []
        self._fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, data: str) -> None:
        if self._fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.mark.parametrize(
    ("channel", "topic"),
    [
        ("events:kitchen", "kitchen"),
        ("events:reservations", "reservations"),
        ("events:", None),
        ("orders:kitchen", None),
    ],
)
def test_topic_from_channel(channel: str, topic: str | None) -> None:
    assert topic_from_channel(channel) == topic


def test_broadcast_reaches_only_subscribers_of_the_topic() -> None:
    manager = ConnectionManager()
    kitchen = FakeWebSocket()
    floor = FakeWebSocket()

    async def scenario() -> None:
        await manager.register(kitchen, topic="kitchen", role="COCINA")
        await manager.register(floor, topic="tables", role="MESERO")
        await manager.broadcast(topic="kitchen", message_json_str='{"event_type":"order.opened"}')

    asyncio.run(scenario())

    assert kitchen.accepted is True
    assert kitchen.sent == ['{"event_type":"order.opened"}']
    assert floor.sent == []


def test_broadcast_drops_sockets_that_fail() -> None:
    manager = ConnectionManager()
    broken = FakeWebSocket(fail=True)

    async def scenario() -> None:
        await manager.register(broken, topic="kitchen", role="COCINA")
        await manager.broadcast(topic="kitchen", message_json_str="{}")

    asyncio.run(scenario())

    assert manager.subscribers("kitchen") == 0


def test_fanout_does_not_start_without_redis(monkeypatch) -> None:
    monkeypatch.delenv("REDIS_URL", raising=False)
    app_state = SimpleNamespace(ws_manager=ConnectionManager())

    assert asyncio.run(run_event_fanout(app_state)) is None


def test_websocket_rejects_unknown_topic(fake_publisher) -> None:
    client = TestClient(create_app(state=build_restaurant_state(items=[]), publisher=fake_publisher))

    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/ws?topic=billing"):
            pass

    assert excinfo.value.code == 1008


def test_websocket_accepts_known_topic(fake_publisher) -> None:
    client = TestClient(create_app(state=build_restaurant_state(items=[]), publisher=fake_publisher))

    with client.websocket_connect("/ws?topic=kitchen&role=COCINA") as websocket:
        websocket.send_text("ping")
