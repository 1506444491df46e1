from __future__ import annotations

from collections.abc import Iterable

from kflow.domain.common.ids import OrderLineId
from kflow.domain.inventory.entities import InventoryItem
from kflow.domain.order.entities import (
    InsufficientStockError,
    InvalidQuantityError,
    KitchenStatus,
    OrderLine,
)


def build_line(
    item: InventoryItem,
    quantity: int,
    line_id: OrderLineId,
    notes: str | None = None,
) -> OrderLine:
    if quantity < 1:
        raise InvalidQuantityError("quantity must be >= 1", details={"quantity": quantity})
    if not item.in_stock:
        raise InsufficientStockError(
            f"inventory item {item.item_id} is out of stock",
            details={"itemId": str(item.item_id)},
        )
    # Name, category and price are copied so later catalog edits never reprice the line.
    return OrderLine(
        line_id=line_id,
        item_id=item.item_id,
        name=item.name,
        category=item.category,
        quantity=quantity,
        unit_price=item.price,
        kitchen_status=KitchenStatus.PENDING if item.is_food else None,
        notes=notes,
    )


def add_line(lines: Iterable[OrderLine], line: OrderLine) -> tuple[OrderLine, ...]:
    return (*lines, line)


def remove_line(lines: Iterable[OrderLine], line_id: OrderLineId) -> tuple[OrderLine, ...]:
    return tuple(line for line in lines if line.line_id != line_id)
