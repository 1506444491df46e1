from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Gauge, Histogram

from kflow.domain.order.entities import KitchenStatus, Order
from kflow.domain.reservation.entities import ReservationStatus

ORDERS_OPENED_TOTAL = Counter(
    "kflow_orders_opened_total",
    "Total number of orders opened on a table.",
)

KITCHEN_TRANSITION_TOTAL = Counter(
    "kflow_kitchen_transition_total",
    "Total number of kitchen status transitions.",
    ["from", "to"],
)

ORDERS_DISPATCHED_TOTAL = Counter(
    "kflow_orders_dispatched_total",
    "Total number of orders dispatched by the kitchen.",
)

ORDERS_RESUMED_TOTAL = Counter(
    "kflow_orders_resumed_total",
    "Total number of dispatched orders resumed.",
)

ORDER_TIME_TO_DISPATCH_SECONDS = Histogram(
    "kflow_order_time_to_dispatch_seconds",
    "Time between opening an order and dispatching it.",
)

KITCHEN_BOARD_SIZE = Gauge(
    "kflow_kitchen_board_size",
    "Number of orders shown on the kitchen board by status.",
    ["status"],
)

TABLES_OCCUPIED_TOTAL = Counter(
    "kflow_tables_occupied_total",
    "Total number of times a table was marked occupied.",
)

RESERVATIONS_CREATED_TOTAL = Counter(
    "kflow_reservations_created_total",
    "Total number of reservations created.",
)

RESERVATION_TRANSITION_TOTAL = Counter(
    "kflow_reservation_transition_total",
    "Total number of reservation status transitions.",
    ["from", "to"],
)

COMANDAS_CREATED_TOTAL = Counter(
    "kflow_comandas_created_total",
    "Total number of comandas persisted.",
)

COMANDA_CREATE_FAILED_TOTAL = Counter(
    "kflow_comanda_create_failed_total",
    "Total number of comanda transactions rolled back.",
)


def record_order_opened() -> None:
    ORDERS_OPENED_TOTAL.inc()


def record_kitchen_transition(from_status: KitchenStatus, to_status: KitchenStatus) -> None:
    KITCHEN_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_order_dispatched(order: Order, now: datetime | None = None) -> None:
    current = now or datetime.now(timezone.utc)
    ORDERS_DISPATCHED_TOTAL.inc()
    ORDER_TIME_TO_DISPATCH_SECONDS.observe(max((current - order.created_at).total_seconds(), 0.0))


def record_order_resumed() -> None:
    ORDERS_RESUMED_TOTAL.inc()


def record_kitchen_board_size(status: str, size: int) -> None:
    KITCHEN_BOARD_SIZE.labels(status=status).set(size)


def record_table_occupied() -> None:
    TABLES_OCCUPIED_TOTAL.inc()


def record_reservation_created() -> None:
    RESERVATIONS_CREATED_TOTAL.inc()


def record_reservation_transition(
    from_status: ReservationStatus,
    to_status: ReservationStatus,
) -> None:
    RESERVATION_TRANSITION_TOTAL.labels(
        **{"from": from_status.value, "to": to_status.value}
    ).inc()


def record_comanda_created() -> None:
    COMANDAS_CREATED_TOTAL.inc()


def record_comanda_create_failed() -> None:
    COMANDA_CREATE_FAILED_TOTAL.inc()
