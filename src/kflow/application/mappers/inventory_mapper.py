from __future__ import annotations

from kflow.application.dto.responses import InventoryItemResponse
from kflow.application.mappers.order_mapper import to_money_response
from kflow.domain.inventory.entities import InventoryItem


def to_inventory_item_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        itemId=str(item.item_id),
        name=item.name,
        category=item.category,
        price=to_money_response(item.price),
        quantity=item.quantity,
        unit=item.unit,
        inStock=item.in_stock,
    )
