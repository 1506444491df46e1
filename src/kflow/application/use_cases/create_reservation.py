from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from kflow.application.dto.requests import CreateReservationRequest
from kflow.application.dto.responses import ReservationResponse
from kflow.application.mappers.event_envelope import RESERVATIONS_TOPIC, serialize_reservation_event
from kflow.application.mappers.reservation_mapper import to_reservation_response
from kflow.application.metrics.order_lifecycle import record_reservation_created
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import ReservationRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.common.ids import ReservationId
from kflow.domain.reservation.entities import create_pending_reservation

logger = logging.getLogger(__name__)


class CreateReservation:
    def __init__(self, reservation_repository: ReservationRepository, publisher: EventPublisher) -> None:
        self._reservation_repository = reservation_repository
        self._publisher = publisher

    def execute(
        self,
        request_dto: CreateReservationRequest,
        trace_ctx: TraceContext,
    ) -> ReservationResponse:
        now = datetime.now(timezone.utc)
        reservation = create_pending_reservation(
            reservation_id=ReservationId(f"res_{uuid4().hex[:12]}"),
            customer_name=request_dto.customer_name,
            now=now,
            party_size=request_dto.party_size,
            reservation_date=request_dto.reservation_date,
            time=request_dto.time,
            phone_number=request_dto.phone_number,
            notes=request_dto.notes,
        )
        self._reservation_repository.add(reservation)

        record_reservation_created()
        logger.info(
            "reservation_created",
            extra={"reservation_id": str(reservation.reservation_id)},
        )
        publish_event(
            self._publisher,
            RESERVATIONS_TOPIC,
            serialize_reservation_event(
                event_type="reservation.created",
                occurred_at=now,
                reservation=reservation,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_reservation_response(reservation)
