from __future__ import annotations

import logging
from datetime import datetime, timezone

from kflow.application.mappers.event_envelope import (
    RESERVATIONS_TOPIC,
    serialize_reservation_deleted_event,
)
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import ReservationRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.common.ids import ReservationId
from kflow.domain.reservation.entities import ReservationNotFoundError

logger = logging.getLogger(__name__)


class DeleteReservation:
    def __init__(self, reservation_repository: ReservationRepository, publisher: EventPublisher) -> None:
        self._reservation_repository = reservation_repository
        self._publisher = publisher

    def execute(self, reservation_id: ReservationId, trace_ctx: TraceContext) -> None:
        if not self._reservation_repository.delete(reservation_id):
            raise ReservationNotFoundError(f"reservation {reservation_id} not found")
        logger.info("reservation_deleted", extra={"reservation_id": str(reservation_id)})
        publish_event(
            self._publisher,
            RESERVATIONS_TOPIC,
            serialize_reservation_deleted_event(
                occurred_at=datetime.now(timezone.utc),
                reservation_id=str(reservation_id),
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
