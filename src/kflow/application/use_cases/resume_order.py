from __future__ import annotations

import logging
from datetime import datetime, timezone

from kflow.application.dto.responses import OrderResponse
from kflow.application.mappers.event_envelope import KITCHEN_TOPIC, serialize_order_event
from kflow.application.mappers.order_mapper import to_order_response
from kflow.application.metrics.order_lifecycle import record_order_resumed
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import OrderRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.common.ids import OrderId
from kflow.domain.order.entities import OrderNotFoundError, TableAlreadyOccupiedError
from kflow.domain.order.events import OrderResumed

logger = logging.getLogger(__name__)


class ResumeDispatchedOrder:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(self, order_id: OrderId, trace_ctx: TraceContext) -> OrderResponse:
        dispatched = self._order_repository.get_dispatched(order_id)
        if dispatched is None:
            raise OrderNotFoundError(f"dispatched order {order_id} not found")
        if self._order_repository.get_active(dispatched.table_id) is not None:
            raise TableAlreadyOccupiedError(
                f"table {dispatched.table_id} already has an active order",
                details={"orderId": str(order_id)},
            )

        resumed = dispatched.resume()
        self._order_repository.take_dispatched(order_id)
        self._order_repository.open(resumed)

        now = datetime.now(timezone.utc)
        event = OrderResumed(order_id=resumed.order_id, table_id=resumed.table_id, occurred_at=now)
        record_order_resumed()
        logger.info(
            "order_resumed",
            extra={"order_id": str(event.order_id), "table_id": str(event.table_id)},
        )
        publish_event(
            self._publisher,
            KITCHEN_TOPIC,
            serialize_order_event(
                event_type="order.resumed",
                occurred_at=now,
                order=resumed,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_order_response(resumed)
