from __future__ import annotations

from typing import Protocol

from kflow.domain.comanda.entities import Comanda, ComandaStatus, NewComanda
from kflow.domain.common.ids import (
    ComandaId,
    InventoryItemId,
    OrderId,
    ReservationId,
    TableId,
    UserId,
)
from kflow.domain.common.money import Money
from kflow.domain.inventory.entities import InventoryItem
from kflow.domain.order.entities import Order
from kflow.domain.product.entities import Product
from kflow.domain.reservation.entities import Reservation, ReservationStatus
from kflow.domain.table.entities import Table, TableStatus
from kflow.domain.user.entities import User, UserRole


class InventoryRepository(Protocol):
    def get(self, item_id: InventoryItemId) -> InventoryItem | None: ...

    def list(self, category: str | None = None) -> list[InventoryItem]: ...

    def categories(self) -> list[str]: ...


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def list(self) -> list[Table]: ...

    def set_status(self, table_id: TableId, status: TableStatus) -> Table: ...


class OrderRepository(Protocol):
    def get_active(self, table_id: TableId) -> Order | None: ...

    def list_active(self) -> list[Order]: ...

    def open(self, order: Order) -> None: ...

    def save_active(self, order: Order) -> None: ...

    def close(self, table_id: TableId) -> Order | None: ...

    def archive(self, order: Order) -> None: ...

    def get_dispatched(self, order_id: OrderId) -> Order | None: ...

    def list_dispatched(self) -> list[Order]: ...

    def take_dispatched(self, order_id: OrderId) -> Order | None: ...


class ReservationRepository(Protocol):
    def get(self, reservation_id: ReservationId) -> Reservation | None: ...

    def list(self, status: ReservationStatus | None = None) -> list[Reservation]: ...

    def add(self, reservation: Reservation) -> None: ...

    def update(self, reservation: Reservation) -> None: ...

    def delete(self, reservation_id: ReservationId) -> bool: ...


class UserRepository(Protocol):
    def list(self) -> list[User]: ...

    def get(self, user_id: UserId) -> User | None: ...

    def add(self, name: str, email: str, password_hash: str, role: UserRole) -> User: ...


class ProductRepository(Protocol):
    def list(self) -> list[Product]: ...

    def add(
        self,
        name: str,
        description: str | None,
        price: Money,
        category_id: int | None,
        available: bool,
        image_url: str | None,
    ) -> Product: ...


class ComandaRepository(Protocol):
    def list(self) -> list[Comanda]: ...

    def create(self, comanda: NewComanda) -> Comanda: ...

    def update_status(self, comanda_id: ComandaId, status: ComandaStatus) -> Comanda | None: ...