from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from kflow.domain.comanda.entities import Comanda
from kflow.domain.order.entities import Order
from kflow.domain.reservation.entities import Reservation

KITCHEN_TOPIC = "kitchen"
RESERVATIONS_TOPIC = "reservations"
TABLES_TOPIC = "tables"


def events_channel(topic: str) -> str:
    return f"events:{topic}"


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _money(amount_cents: int, currency: str) -> dict[str, Any]:
    return {"amountCents": amount_cents, "currency": currency}


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    kitchen_status = order.kitchen_status
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "orderId": str(order.order_id),
            "tableId": str(order.table_id),
            "tableNumber": order.table_number,
            "kitchenStatus": kitchen_status.value if kitchen_status else None,
            "totalMoney": _money(order.total.amount_cents, order.total.currency),
            "createdAt": order.created_at.isoformat(),
            "dispatchedAt": order.dispatched_at.isoformat() if order.dispatched_at else None,
            "lines": [
                {
                    "lineId": str(line.line_id),
                    "itemId": str(line.item_id),
                    "name": line.name,
                    "category": line.category,
                    "quantity": line.quantity,
                    "kitchenStatus": line.kitchen_status.value if line.kitchen_status else None,
                    "lineTotal": _money(line.line_total.amount_cents, line.line_total.currency),
                    "notes": line.notes,
                }
                for line in order.lines
            ],
        },
    )


def serialize_reservation_event(
    *,
    event_type: str,
    occurred_at: datetime,
    reservation: Reservation,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    total = reservation.pre_order_total
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "reservationId": str(reservation.reservation_id),
            "customerName": reservation.customer_name,
            "partySize": reservation.party_size,
            "date": reservation.reservation_date.isoformat(),
            "time": reservation.time,
            "status": reservation.status.value,
            "tableNumber": reservation.table_number,
            "preOrderLines": len(reservation.pre_order),
            "preOrderTotal": _money(total.amount_cents, total.currency),
        },
    )


def serialize_reservation_deleted_event(
    *,
    occurred_at: datetime,
    reservation_id: str,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="reservation.deleted",
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={"reservationId": reservation_id},
    )


def serialize_table_status_event(
    *,
    occurred_at: datetime,
    table_id: str,
    table_number: int,
    status: str,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="table.status_changed",
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "tableId": table_id,
            "tableNumber": table_number,
            "status": status,
        },
    )


def serialize_comanda_event(
    *,
    event_type: str,
    occurred_at: datetime,
    comanda: Comanda,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "comandaId": int(comanda.comanda_id),
            "mesaId": int(comanda.table_id),
            "estado": comanda.status.value,
            "total": str(comanda.total.to_decimal()),
        },
    )
