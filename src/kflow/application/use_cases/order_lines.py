from __future__ import annotations

from datetime import datetime, timezone

from kflow.application.dto.requests import OrderLineRequest
from kflow.application.dto.responses import OrderResponse
from kflow.application.mappers.event_envelope import KITCHEN_TOPIC, serialize_order_event
from kflow.application.mappers.order_mapper import to_order_response
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import InventoryRepository, OrderRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.application.use_cases.open_order import resolve_line
from kflow.domain.common.ids import OrderLineId, TableId
from kflow.domain.order.aggregator import add_line, remove_line
from kflow.domain.order.entities import Order, OrderNotFoundError


class _ActiveOrderUseCase:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def _active_order(self, table_id: TableId) -> Order:
        order = self._order_repository.get_active(table_id)
        if order is None:
            raise OrderNotFoundError(f"table {table_id} has no active order")
        return order

    def _save(self, order: Order, trace_ctx: TraceContext) -> OrderResponse:
        self._order_repository.save_active(order)
        publish_event(
            self._publisher,
            KITCHEN_TOPIC,
            serialize_order_event(
                event_type="order.updated",
                occurred_at=datetime.now(timezone.utc),
                order=order,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_order_response(order)


class AddOrderLine(_ActiveOrderUseCase):
    def __init__(
        self,
        order_repository: OrderRepository,
        inventory_repository: InventoryRepository,
        publisher: EventPublisher,
    ) -> None:
        super().__init__(order_repository=order_repository, publisher=publisher)
        self._inventory_repository = inventory_repository

    def execute(
        self,
        table_id: TableId,
        request_dto: OrderLineRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        order = self._active_order(table_id)
        line = resolve_line(self._inventory_repository, request_dto)
        return self._save(order.with_lines(add_line(order.lines, line)), trace_ctx)


class RemoveOrderLine(_ActiveOrderUseCase):
    def execute(
        self,
        table_id: TableId,
        line_id: OrderLineId,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        order = self._active_order(table_id)
        if all(line.line_id != line_id for line in order.lines):
            # Already removed: nothing to change or announce.
            return to_order_response(order)
        return self._save(order.with_lines(remove_line(order.lines, line_id)), trace_ctx)
