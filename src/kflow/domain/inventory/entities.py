from __future__ import annotations

from dataclasses import dataclass

from kflow.domain.common.errors import NotFoundError
from kflow.domain.common.ids import InventoryItemId
from kflow.domain.common.money import Money

FOOD_CATEGORY = "Comida"


@dataclass(frozen=True)
class InventoryItem:
    item_id: InventoryItemId
    name: str
    category: str
    price: Money
    quantity: int
    unit: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.quantity < 0:
            raise ValueError("quantity must be >= 0")

    @property
    def is_food(self) -> bool:
        return self.category == FOOD_CATEGORY

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0


class InventoryItemNotFoundError(NotFoundError):
    code = "INVENTORY_ITEM_NOT_FOUND"
