from __future__ import annotations

from collections.abc import Iterable

from kflow.application.ports.repositories import InventoryRepository
from kflow.domain.common.ids import InventoryItemId
from kflow.domain.inventory.entities import InventoryItem


class InMemoryInventoryRepository(InventoryRepository):
    def __init__(self, items: Iterable[InventoryItem]) -> None:
        self._items: dict[InventoryItemId, InventoryItem] = {item.item_id: item for item in items}

    def get(self, item_id: InventoryItemId) -> InventoryItem | None:
        return self._items.get(item_id)

    def list(self, category: str | None = None) -> list[InventoryItem]:
        return [
            item for item in self._items.values() if category is None or item.category == category
        ]

    def categories(self) -> list[str]:
        seen: list[str] = []
        for item in self._items.values():
            if item.category not in seen:
                seen.append(item.category)
        return seen
