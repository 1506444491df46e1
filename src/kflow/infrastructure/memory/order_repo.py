from __future__ import annotations

import threading

from kflow.application.ports.repositories import OrderRepository
from kflow.domain.common.ids import OrderId, TableId
from kflow.domain.order.entities import Order, TableAlreadyOccupiedError


class InMemoryOrderRepository(OrderRepository):
    """Active orders keyed by table plus the archive of dispatched orders."""

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._active: dict[TableId, Order] = {}
        self._dispatched: dict[OrderId, Order] = {}

    def get_active(self, table_id: TableId) -> Order | None:
        with self._lock:
            return self._active.get(table_id)

    def list_active(self) -> list[Order]:
        with self._lock:
            return list(self._active.values())

    def open(self, order: Order) -> None:
        with self._lock:
            if order.table_id in self._active:
                raise TableAlreadyOccupiedError(
                    f"table {order.table_id} already has an active order"
                )
            self._active[order.table_id] = order

    def save_active(self, order: Order) -> None:
        with self._lock:
            current = self._active.get(order.table_id)
            if current is None or current.order_id != order.order_id:
                raise KeyError(f"order {order.order_id} is not active on table {order.table_id}")
            self._active[order.table_id] = order

    def close(self, table_id: TableId) -> Order | None:
        with self._lock:
            return self._active.pop(table_id, None)

    def archive(self, order: Order) -> None:
        with self._lock:
            self._dispatched[order.order_id] = order

    def get_dispatched(self, order_id: OrderId) -> Order | None:
        with self._lock:
            return self._dispatched.get(order_id)

    def list_dispatched(self) -> list[Order]:
        with self._lock:
            return list(self._dispatched.values())

    def take_dispatched(self, order_id: OrderId) -> Order | None:
        with self._lock:
            return self._dispatched.pop(order_id, None)
