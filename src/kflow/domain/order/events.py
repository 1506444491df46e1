from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from kflow.domain.common.ids import OrderId, TableId
from kflow.domain.common.money import Money


@dataclass(frozen=True)
class OrderOpened:
    order_id: OrderId
    table_id: TableId
    total: Money
    created_at: datetime


@dataclass(frozen=True)
class OrderKitchenStatusChanged:
    order_id: OrderId
    table_id: TableId
    from_status: str
    to_status: str
    occurred_at: datetime


@dataclass(frozen=True)
class OrderDispatched:
    order_id: OrderId
    table_id: TableId
    occurred_at: datetime


@dataclass(frozen=True)
class OrderResumed:
    order_id: OrderId
    table_id: TableId
    occurred_at: datetime
