from __future__ import annotations

import logging
from datetime import datetime, timezone

from kflow.application.dto.requests import KitchenStatusRequest
from kflow.application.dto.responses import OrderResponse
from kflow.application.mappers.event_envelope import KITCHEN_TOPIC, serialize_order_event
from kflow.application.mappers.order_mapper import to_order_response
from kflow.application.metrics.order_lifecycle import (
    record_kitchen_transition,
    record_order_dispatched,
)
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import OrderRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.common.errors import ValidationError
from kflow.domain.common.ids import TableId
from kflow.domain.order.entities import KitchenStatus, Order, OrderNotFoundError
from kflow.domain.order.events import OrderDispatched, OrderKitchenStatusChanged

logger = logging.getLogger(__name__)


class InvalidKitchenStatusError(ValidationError):
    code = "INVALID_KITCHEN_STATUS"


def parse_kitchen_status(value: str) -> KitchenStatus:
    try:
        return KitchenStatus(value.strip().lower())
    except ValueError as exc:
        raise InvalidKitchenStatusError(
            f"invalid kitchen status: {value}",
            details={"allowed": [status.value for status in KitchenStatus]},
        ) from exc


class UpdateOrderKitchenStatus:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        table_id: TableId,
        request_dto: KitchenStatusRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        new_status = parse_kitchen_status(request_dto.status)
        order = self._order_repository.get_active(table_id)
        if order is None:
            raise OrderNotFoundError(f"table {table_id} has no active order")

        previous_status = order.kitchen_status
        updated = order.update_kitchen_status(new_status)
        if updated is order:
            return to_order_response(order)

        now = datetime.now(timezone.utc)
        change = OrderKitchenStatusChanged(
            order_id=updated.order_id,
            table_id=updated.table_id,
            from_status=previous_status.value if previous_status else "",
            to_status=new_status.value,
            occurred_at=now,
        )
        if previous_status is not None and previous_status != new_status:
            record_kitchen_transition(previous_status, new_status)
        logger.info(
            "order_kitchen_status_changed",
            extra={
                "order_id": str(change.order_id),
                "table_id": str(change.table_id),
                "from_status": change.from_status,
                "to_status": change.to_status,
            },
        )

        if new_status != KitchenStatus.READY:
            self._order_repository.save_active(updated)
            self._publish("order.kitchen_status_changed", updated, now, trace_ctx)
            return to_order_response(updated)

        # A ready order leaves the ledger for the dispatched archive; the table stays occupied.
        dispatched = updated.dispatch(now)
        self._order_repository.close(table_id)
        self._order_repository.archive(dispatched)

        event = OrderDispatched(
            order_id=dispatched.order_id,
            table_id=dispatched.table_id,
            occurred_at=now,
        )
        record_order_dispatched(dispatched, now)
        logger.info(
            "order_dispatched",
            extra={"order_id": str(event.order_id), "table_id": str(event.table_id)},
        )
        self._publish("order.dispatched", dispatched, now, trace_ctx)
        return to_order_response(dispatched)

    def _publish(self, event_type: str, order: Order, now: datetime, trace_ctx: TraceContext) -> None:
        publish_event(
            self._publisher,
            KITCHEN_TOPIC,
            serialize_order_event(
                event_type=event_type,
                occurred_at=now,
                order=order,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
