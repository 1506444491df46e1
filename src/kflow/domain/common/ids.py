from __future__ import annotations

from typing import NewType

InventoryItemId = NewType("InventoryItemId", str)
TableId = NewType("TableId", str)
OrderId = NewType("OrderId", str)
OrderLineId = NewType("OrderLineId", str)
ReservationId = NewType("ReservationId", str)
UserId = NewType("UserId", int)
ProductId = NewType("ProductId", int)
ComandaId = NewType("ComandaId", int)
