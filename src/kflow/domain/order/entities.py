from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from kflow.domain.common.errors import ConflictError, NotFoundError, ValidationError
from kflow.domain.common.ids import InventoryItemId, OrderId, OrderLineId, TableId
from kflow.domain.common.money import DEFAULT_CURRENCY, Money
from kflow.domain.inventory.entities import FOOD_CATEGORY


class KitchenStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"


_NEXT_KITCHEN_STATUS: dict[KitchenStatus, KitchenStatus] = {
    KitchenStatus.PENDING: KitchenStatus.PREPARING,
    KitchenStatus.PREPARING: KitchenStatus.READY,
}


@dataclass(frozen=True)
class OrderLine:
    line_id: OrderLineId
    item_id: InventoryItemId
    name: str
    category: str
    quantity: int
    unit_price: Money
    kitchen_status: KitchenStatus | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if not self.is_food and self.kitchen_status is not None:
            raise ValueError("only food lines carry a kitchen status")

    @property
    def is_food(self) -> bool:
        return self.category == FOOD_CATEGORY

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)

    def with_kitchen_status(self, status: KitchenStatus) -> OrderLine:
        if not self.is_food:
            return self
        return replace(self, kitchen_status=status)


def lines_total(lines: Iterable[OrderLine], currency: str = DEFAULT_CURRENCY) -> Money:
    total = Money.zero(currency)
    for line in lines:
        total = total + line.line_total
    return total


def aggregate_kitchen_status(lines: Iterable[OrderLine]) -> KitchenStatus | None:
    """Summarize the kitchen status of the food lines.

    Returns None when there are no food lines, READY only when every food line
    is ready, PREPARING when at least one is preparing, PENDING otherwise.
    """
    statuses = [line.kitchen_status for line in lines if line.is_food]
    if not statuses:
        return None
    if all(status == KitchenStatus.READY for status in statuses):
        return KitchenStatus.READY
    if any(status == KitchenStatus.PREPARING for status in statuses):
        return KitchenStatus.PREPARING
    return KitchenStatus.PENDING


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    table_id: TableId
    table_number: int
    created_at: datetime
    lines: tuple[OrderLine, ...] = field(default_factory=tuple)
    notes: str | None = None
    user_id: str | None = None
    dispatched_at: datetime | None = None
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if self.dispatched_at is not None and self.dispatched_at < self.created_at:
            raise ValueError("dispatched_at must not precede created_at")

    @property
    def total(self) -> Money:
        return lines_total(self.lines, self.currency)

    @property
    def kitchen_status(self) -> KitchenStatus | None:
        return aggregate_kitchen_status(self.lines)

    @property
    def has_food(self) -> bool:
        return any(line.is_food for line in self.lines)

    @property
    def is_dispatched(self) -> bool:
        return self.dispatched_at is not None

    def with_lines(self, lines: Iterable[OrderLine]) -> Order:
        return replace(self, lines=tuple(lines))

    def update_kitchen_status(self, new_status: KitchenStatus) -> Order:
        current = self.kitchen_status
        if current is None:
            raise OrderNotTrackedError(f"order {self.order_id} has no food lines")
        if all(line.kitchen_status == new_status for line in self.lines if line.is_food):
            return self
        # Legality is judged on the aggregate; the new status then applies to every food line.
        if new_status != current and _NEXT_KITCHEN_STATUS.get(current) != new_status:
            raise OrderTransitionError(
                f"cannot move kitchen status from {current.value} to {new_status.value}"
            )
        return self.with_lines(line.with_kitchen_status(new_status) for line in self.lines)

    def dispatch(self, now: datetime) -> Order:
        if self.is_dispatched:
            raise OrderTransitionError(f"order {self.order_id} is already dispatched")
        if self.kitchen_status != KitchenStatus.READY:
            raise OrderTransitionError(f"order {self.order_id} is not ready for dispatch")
        return replace(self, dispatched_at=now)

    def resume(self) -> Order:
        if not self.is_dispatched:
            raise OrderTransitionError(f"order {self.order_id} is not dispatched")
        lines = (line.with_kitchen_status(KitchenStatus.PREPARING) for line in self.lines)
        return replace(self, dispatched_at=None, lines=tuple(lines))


def create_open_order(
    order_id: OrderId,
    table_id: TableId,
    table_number: int,
    lines: Iterable[OrderLine],
    now: datetime,
    notes: str | None = None,
    user_id: str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> Order:
    return Order(
        order_id=order_id,
        table_id=table_id,
        table_number=table_number,
        created_at=now,
        lines=tuple(lines),
        notes=notes,
        user_id=user_id,
        currency=currency,
    )


class InvalidQuantityError(ValidationError):
    code = "INVALID_QUANTITY"


class InsufficientStockError(ValidationError):
    code = "INSUFFICIENT_STOCK"


class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"


class TableAlreadyOccupiedError(ConflictError):
    code = "TABLE_ALREADY_OCCUPIED"


class OrderTransitionError(ConflictError):
    code = "INVALID_ORDER_TRANSITION"


class OrderNotTrackedError(ConflictError):
    code = "ORDER_NOT_TRACKED"
