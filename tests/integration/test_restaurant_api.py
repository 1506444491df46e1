from __future__ import annotations

import json
import threading

import pytest
from fastapi.testclient import TestClient

from kflow.api.main import create_app
from kflow.domain.common.ids import InventoryItemId
from kflow.domain.common.money import Money
from kflow.domain.inventory.entities import InventoryItem
from kflow.infrastructure.memory.state import build_restaurant_state


def _item(item_id: str, name: str, category: str, price: str) -> InventoryItem:
    return InventoryItem(
        item_id=InventoryItemId(item_id),
        name=name,
        category=category,
        price=Money.from_decimal(price),
        quantity=20,
        unit="porciones",
    )


@pytest.fixture
def client(fake_publisher) -> TestClient:
    state = build_restaurant_state(
        items=[
            _item("inv-lomo", "Lomo saltado", "Comida", "10.00"),
            _item("inv-locro", "Locro", "Comida", "5.50"),
            _item("inv-limonada", "Limonada", "Bebida", "2.75"),
        ],
        table_numbers=[1, 2],
    )
    return TestClient(create_app(state=state, publisher=fake_publisher))


def test_inventory_lists_items_and_filters_by_category(client: TestClient) -> None:
    everything = client.get("/api/inventario").json()
    assert everything["categories"] == ["Comida", "Bebida"]
    assert len(everything["items"]) == 3

    drinks = client.get("/api/inventario", params={"categoria": "Bebida"}).json()
    assert [item["itemId"] for item in drinks["items"]] == ["inv-limonada"]
    assert drinks["items"][0]["price"] == {"amountCents": 275, "currency": "USD"}


def test_order_flow_from_floor_to_kitchen_archive(client: TestClient, fake_publisher) -> None:
    opened = client.post(
        "/api/sala/mesas/1/pedido",
        json={"lines": [{"itemId": "inv-lomo", "quantity": 2}], "userId": "mesero-7"},
    )
    assert opened.status_code == 201
    order = opened.json()
    assert order["userId"] == "mesero-7"

    added = client.post("/api/sala/mesas/1/pedido/lineas", json={"itemId": "inv-locro"})
    assert added.json()["total"]["amountCents"] == 2550

    removed = client.delete(f"/api/sala/mesas/1/pedido/lineas/{order['lines'][0]['lineId']}")
    assert removed.json()["total"]["amountCents"] == 550

    tables = client.get("/api/sala/mesas").json()["tables"]
    assert {table["number"]: table["status"] for table in tables} == {1: "ocupada", 2: "disponible"}

    board = client.get("/api/cocina").json()
    assert board["stats"]["pending"] == 1

    assert client.post("/api/cocina/mesas/1/estado", json={"status": "preparing"}).status_code == 200
    dispatched = client.post("/api/cocina/mesas/1/estado", json={"status": "ready"}).json()
    assert dispatched["dispatchedAt"] is not None

    assert client.get("/api/sala/pedidos").json()["orders"] == []
    board = client.get("/api/cocina").json()
    assert board["stats"] == {"pending": 0, "preparing": 0, "dispatched": 1, "totalOrders": 1}

    resumed = client.post(f"/api/cocina/despachadas/{order['orderId']}/retomar")
    assert resumed.status_code == 200
    assert resumed.json()["kitchenStatus"] == "preparing"
    assert client.get("/api/sala/mesas/1/pedido").json()["orderId"] == order["orderId"]

    event_types = [json.loads(message)["event_type"] for _, message in fake_publisher.messages]
    assert event_types[0] == "order.opened"
    assert "order.dispatched" in event_types
    assert event_types[-1] == "order.resumed"


def test_error_envelope_shapes(client: TestClient) -> None:
    client.post("/api/sala/mesas/1/pedido", json={"lines": [{"itemId": "inv-lomo"}]})

    conflict = client.post(
        "/api/sala/mesas/1/pedido",
        json={"lines": []},
        headers={"X-Request-Id": "req-409"},
    )
    assert conflict.status_code == 409
    assert conflict.json() == {
        "error": "table 1 already has an active order",
        "code": "TABLE_ALREADY_OCCUPIED",
        "details": {},
        "requestId": "req-409",
    }

    missing = client.get("/api/sala/mesas/2/pedido")
    assert missing.status_code == 404
    assert missing.json()["code"] == "ORDER_NOT_FOUND"

    bad_quantity = client.post("/api/sala/mesas/1/pedido/lineas", json={"itemId": "inv-locro", "quantity": 0})
    assert bad_quantity.status_code == 400
    assert bad_quantity.json()["code"] == "INVALID_QUANTITY"

    bad_status = client.post("/api/cocina/mesas/1/estado", json={"status": "served"})
    assert bad_status.status_code == 400
    assert bad_status.json()["code"] == "INVALID_KITCHEN_STATUS"

    malformed = client.post("/api/cocina/mesas/1/estado", json={})
    assert malformed.status_code == 400
    assert malformed.json()["code"] == "INVALID_REQUEST"


def test_reservation_endpoints(client: TestClient) -> None:
    rejected = client.post("/api/reservas", json={"customerName": ""})
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "MISSING_CUSTOMER_NAME"

    created = client.post("/api/reservas", json={"customerName": "Ana", "date": "2026-06-01"})
    assert created.status_code == 201
    reservation = created.json()
    assert reservation["status"] == "pending"
    assert reservation["partySize"] == 2
    assert reservation["tableNumber"] is None

    reservation_id = reservation["reservationId"]
    with_line = client.post(
        f"/api/reservas/{reservation_id}/preorden",
        json={"itemId": "inv-lomo", "quantity": 3},
    ).json()
    assert with_line["preOrderTotal"]["amountCents"] == 3000

    line_id = with_line["preOrder"][0]["lineId"]
    emptied = client.delete(f"/api/reservas/{reservation_id}/preorden/{line_id}").json()
    assert emptied["preOrderTotal"]["amountCents"] == 0

    confirmed = client.patch(f"/api/reservas/{reservation_id}", json={"status": "confirmed", "tableNumber": 2})
    assert confirmed.json()["status"] == "confirmed"
    assert confirmed.json()["tableNumber"] == 2

    backwards = client.patch(f"/api/reservas/{reservation_id}", json={"status": "pending"})
    assert backwards.status_code == 409
    assert backwards.json()["code"] == "INVALID_RESERVATION_TRANSITION"

    listing = client.get("/api/reservas").json()
    assert listing["stats"] == {"pending": 0, "confirmed": 1, "seated": 0, "total": 1}

    cancelled = client.post(f"/api/reservas/{reservation_id}/cancelar")
    assert cancelled.json()["status"] == "cancelled"
    assert client.get("/api/reservas", params={"estado": "cancelled"}).json()["stats"]["total"] == 0

    assert client.delete(f"/api/reservas/{reservation_id}").status_code == 204
    assert client.get(f"/api/reservas/{reservation_id}").status_code == 404


class LockCheckingPublisher:
    """Records whether another thread could take the restaurant lock during each publish."""

    def __init__(self, lock) -> None:
        self._lock = lock
        self.lock_was_free: list[bool] = []

    def publish(self, channel: str, message: str) -> None:
        result: list[bool] = []

        def try_lock() -> None:
            acquired = self._lock.acquire(timeout=1.0)
            result.append(acquired)
            if acquired:
                self._lock.release()

        worker = threading.Thread(target=try_lock)
        worker.start()
        worker.join()
        self.lock_was_free.append(result[0])


class DownPublisher:
    def publish(self, channel: str, message: str) -> None:
        raise ConnectionError("redis is down")


def test_events_are_published_after_the_state_lock_is_released() -> None:
    state = build_restaurant_state(
        items=[_item("inv-lomo", "Lomo saltado", "Comida", "10.00")],
        table_numbers=[1],
    )
    publisher = LockCheckingPublisher(state.lock)
    client = TestClient(create_app(state=state, publisher=publisher))

    client.post("/api/sala/mesas/1/pedido", json={"lines": [{"itemId": "inv-lomo"}]})
    client.post("/api/cocina/mesas/1/estado", json={"status": "preparing"})
    client.post("/api/reservas", json={"customerName": "Ana"})

    assert len(publisher.lock_was_free) == 4
    assert all(publisher.lock_was_free)


def test_failed_publish_after_commit_keeps_the_change() -> None:
    state = build_restaurant_state(
        items=[_item("inv-lomo", "Lomo saltado", "Comida", "10.00")],
        table_numbers=[1],
    )
    client = TestClient(create_app(state=state, publisher=DownPublisher()))

    response = client.post("/api/sala/mesas/1/pedido", json={"lines": [{"itemId": "inv-lomo"}]})

    assert response.status_code == 201
    assert client.get("/api/sala/mesas/1/pedido").json()["orderId"] == response.json()["orderId"]


def test_order_table_number_ignores_client_value(client: TestClient) -> None:
    response = client.post("/api/sala/mesas/2/pedido", json={"tableNumber": 9, "lines": []})

    assert response.status_code == 201
    assert response.json()["tableNumber"] == 2
