from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kflow.domain.common.ids import InventoryItemId, TableId
from kflow.domain.common.money import Money
from kflow.domain.inventory.entities import InventoryItem
from kflow.domain.table.entities import Table
from kflow.infrastructure.memory.inventory_repo import InMemoryInventoryRepository
from kflow.infrastructure.memory.order_repo import InMemoryOrderRepository
from kflow.infrastructure.memory.reservation_repo import InMemoryReservationRepository
from kflow.infrastructure.memory.table_repo import InMemoryTableRepository

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NUMBERS = tuple(range(1, 13))

DEFAULT_INVENTORY: tuple[dict[str, Any], ...] = (
    {"id": "inv-lomo", "name": "Lomo saltado", "category": "Comida", "price": "12.50", "quantity": 40, "unit": "porciones"},
    {"id": "inv-ceviche", "name": "Ceviche clásico", "category": "Comida", "price": "11.00", "quantity": 30, "unit": "porciones"},
    {"id": "inv-locro", "name": "Locro de papa", "category": "Comida", "price": "6.75", "quantity": 25, "unit": "porciones"},
    {"id": "inv-empanada", "name": "Empanada de verde", "category": "Comida", "price": "2.50", "quantity": 60, "unit": "unidades"},
    {"id": "inv-limonada", "name": "Limonada", "category": "Bebida", "price": "2.75", "quantity": 80, "unit": "vasos"},
    {"id": "inv-cafe", "name": "Café pasado", "category": "Bebida", "price": "1.80", "quantity": 100, "unit": "tazas"},
    {"id": "inv-cerveza", "name": "Cerveza artesanal", "category": "Bebida", "price": "4.50", "quantity": 48, "unit": "botellas"},
    {"id": "inv-flan", "name": "Flan de coco", "category": "Postre", "price": "3.90", "quantity": 20, "unit": "porciones"},
)


@dataclass
class RestaurantState:
    """Live front-of-house state shared by every request of one application."""

    inventory: InMemoryInventoryRepository
    tables: InMemoryTableRepository
    orders: InMemoryOrderRepository
    reservations: InMemoryReservationRepository
    lock: threading.RLock = field(default_factory=threading.RLock)


def _inventory_item(raw: dict[str, Any]) -> InventoryItem:
    return InventoryItem(
        item_id=InventoryItemId(str(raw["id"])),
        name=str(raw["name"]),
        category=str(raw["category"]),
        price=Money.from_decimal(str(raw["price"])),
        quantity=int(raw.get("quantity", 0)),
        unit=str(raw.get("unit", "")),
    )


def _load_seed(path: str) -> tuple[list[dict[str, Any]], list[int]]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise RuntimeError(f"inventory seed {path} must be an object with an 'items' list")
    tables = payload.get("tables") or list(DEFAULT_TABLE_NUMBERS)
    return payload["items"], [int(number) for number in tables]


def build_restaurant_state(
    items: list[InventoryItem] | None = None,
    table_numbers: list[int] | None = None,
) -> RestaurantState:
    if items is None:
        seed_path = os.getenv("INVENTORY_SEED_PATH")
        if seed_path:
            raw_items, seeded_tables = _load_seed(seed_path)
            table_numbers = table_numbers or seeded_tables
            logger.info("inventory_seed_loaded", extra={"count": len(raw_items)})
        else:
            raw_items = list(DEFAULT_INVENTORY)
        items = [_inventory_item(raw) for raw in raw_items]

    numbers = table_numbers or list(DEFAULT_TABLE_NUMBERS)
    lock = threading.RLock()
    return RestaurantState(
        inventory=InMemoryInventoryRepository(items),
        tables=InMemoryTableRepository(
            [Table(table_id=TableId(str(number)), number=number) for number in numbers],
            lock=lock,
        ),
        orders=InMemoryOrderRepository(lock=lock),
        reservations=InMemoryReservationRepository(lock=lock),
        lock=lock,
    )
