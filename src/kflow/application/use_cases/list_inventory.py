from __future__ import annotations

from kflow.application.dto.responses import InventoryResponse
from kflow.application.mappers.inventory_mapper import to_inventory_item_response
from kflow.application.ports.repositories import InventoryRepository


class ListInventory:
    def __init__(self, inventory_repository: InventoryRepository) -> None:
        self._inventory_repository = inventory_repository

    def execute(self, category: str | None = None) -> InventoryResponse:
        items = self._inventory_repository.list(category=category or None)
        return InventoryResponse(
            items=[to_inventory_item_response(item) for item in items],
            categories=self._inventory_repository.categories(),
        )
