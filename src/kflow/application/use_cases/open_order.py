from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from kflow.application.dto.requests import OpenOrderRequest, OrderLineRequest
from kflow.application.dto.responses import ActiveOrdersResponse, OrderResponse
from kflow.application.mappers.event_envelope import (
    KITCHEN_TOPIC,
    TABLES_TOPIC,
    serialize_order_event,
    serialize_table_status_event,
)
from kflow.application.mappers.order_mapper import to_order_response
from kflow.application.metrics.order_lifecycle import record_order_opened, record_table_occupied
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import (
    InventoryRepository,
    OrderRepository,
    TableRepository,
)
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.common.ids import InventoryItemId, OrderId, OrderLineId, TableId
from kflow.domain.inventory.entities import InventoryItemNotFoundError
from kflow.domain.order.aggregator import build_line
from kflow.domain.order.entities import (
    OrderLine,
    OrderNotFoundError,
    TableAlreadyOccupiedError,
    create_open_order,
)
from kflow.domain.order.events import OrderOpened
from kflow.domain.table.entities import TableNotFoundError, TableStatus

logger = logging.getLogger(__name__)


def new_line_id() -> OrderLineId:
    return OrderLineId(f"orl_{uuid4().hex[:12]}")


def resolve_line(inventory_repository: InventoryRepository, request_line: OrderLineRequest) -> OrderLine:
    item = inventory_repository.get(InventoryItemId(request_line.item_id))
    if item is None:
        raise InventoryItemNotFoundError(f"inventory item {request_line.item_id} does not exist")
    return build_line(
        item=item,
        quantity=request_line.quantity,
        line_id=new_line_id(),
        notes=request_line.notes,
    )


class OpenOrder:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        inventory_repository: InventoryRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repository = order_repository
        self._table_repository = table_repository
        self._inventory_repository = inventory_repository
        self._publisher = publisher

    def execute(
        self,
        table_id: TableId,
        request_dto: OpenOrderRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        table = self._table_repository.get(table_id)
        if table is None:
            raise TableNotFoundError(f"table {table_id} not found")
        if self._order_repository.get_active(table_id) is not None:
            raise TableAlreadyOccupiedError(f"table {table_id} already has an active order")

        # Every line is validated before the ledger or the table is touched.
        lines = [
            resolve_line(self._inventory_repository, request_line)
            for request_line in request_dto.lines
        ]

        now = datetime.now(timezone.utc)
        order = create_open_order(
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            table_id=table_id,
            table_number=table.number,
            lines=lines,
            now=now,
            notes=request_dto.notes,
            user_id=request_dto.user_id,
        )
        self._order_repository.open(order)
        occupied = self._table_repository.set_status(table_id, TableStatus.OCCUPIED)

        event = OrderOpened(
            order_id=order.order_id,
            table_id=order.table_id,
            total=order.total,
            created_at=order.created_at,
        )
        record_order_opened()
        record_table_occupied()
        logger.info(
            "order_opened",
            extra={"order_id": str(order.order_id), "table_id": str(table_id)},
        )
        publish_event(
            self._publisher,
            KITCHEN_TOPIC,
            serialize_order_event(
                event_type="order.opened",
                occurred_at=event.created_at,
                order=order,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        publish_event(
            self._publisher,
            TABLES_TOPIC,
            serialize_table_status_event(
                occurred_at=now,
                table_id=str(occupied.table_id),
                table_number=occupied.number,
                status=occupied.status.value,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_order_response(order)


class GetActiveOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, table_id: TableId) -> OrderResponse:
        order = self._order_repository.get_active(table_id)
        if order is None:
            raise OrderNotFoundError(f"table {table_id} has no active order")
        return to_order_response(order)


class ListActiveOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self) -> ActiveOrdersResponse:
        orders = sorted(self._order_repository.list_active(), key=lambda order: order.created_at)
        return ActiveOrdersResponse(orders=[to_order_response(order) for order in orders])
