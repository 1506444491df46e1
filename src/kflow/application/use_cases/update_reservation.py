from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone

from kflow.application.dto.requests import UpdateReservationRequest
from kflow.application.dto.responses import ReservationResponse
from kflow.application.mappers.event_envelope import RESERVATIONS_TOPIC, serialize_reservation_event
from kflow.application.mappers.reservation_mapper import to_reservation_response
from kflow.application.metrics.order_lifecycle import record_reservation_transition
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import ReservationRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.common.errors import ValidationError
from kflow.domain.common.ids import ReservationId
from kflow.domain.reservation.entities import (
    Reservation,
    ReservationNotFoundError,
    ReservationStatus,
)

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "customer_name",
    "phone_number",
    "party_size",
    "reservation_date",
    "time",
    "notes",
    "table_number",
)


class InvalidReservationStatusError(ValidationError):
    code = "INVALID_RESERVATION_STATUS"


def parse_reservation_status(value: str) -> ReservationStatus:
    try:
        return ReservationStatus(value.strip().lower())
    except ValueError as exc:
        raise InvalidReservationStatusError(
            f"invalid reservation status: {value}",
            details={"allowed": [status.value for status in ReservationStatus]},
        ) from exc


class ReservationCommand:
    def __init__(self, reservation_repository: ReservationRepository, publisher: EventPublisher) -> None:
        self._reservation_repository = reservation_repository
        self._publisher = publisher

    def _get(self, reservation_id: ReservationId) -> Reservation:
        reservation = self._reservation_repository.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f"reservation {reservation_id} not found")
        return reservation

    def _store(
        self,
        previous: Reservation,
        updated: Reservation,
        trace_ctx: TraceContext,
    ) -> ReservationResponse:
        self._reservation_repository.update(updated)
        if previous.status != updated.status:
            record_reservation_transition(previous.status, updated.status)
            logger.info(
                "reservation_status_changed",
                extra={
                    "reservation_id": str(updated.reservation_id),
                    "from_status": previous.status.value,
                    "to_status": updated.status.value,
                },
            )
        publish_event(
            self._publisher,
            RESERVATIONS_TOPIC,
            serialize_reservation_event(
                event_type="reservation.updated",
                occurred_at=datetime.now(timezone.utc),
                reservation=updated,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_reservation_response(updated)


class UpdateReservation(ReservationCommand):
    def execute(
        self,
        reservation_id: ReservationId,
        request_dto: UpdateReservationRequest,
        trace_ctx: TraceContext,
    ) -> ReservationResponse:
        reservation = self._get(reservation_id)
        provided = request_dto.model_dump(exclude_unset=True)

        changes = {
            field_name: provided[field_name]
            for field_name in _EDITABLE_FIELDS
            if field_name in provided
        }
        # Optional text fields cleared with null are stored as empty strings.
        for field_name in ("phone_number", "time", "notes"):
            if field_name in changes and changes[field_name] is None:
                changes[field_name] = ""
        if "customer_name" in changes:
            changes["customer_name"] = (changes["customer_name"] or "").strip()
        if changes.get("party_size") is None:
            changes.pop("party_size", None)
        if changes.get("reservation_date") is None:
            changes.pop("reservation_date", None)

        # Dataclass validation re-applies the customer name and party size rules.
        updated = replace(reservation, **changes)
        if provided.get("status") is not None:
            updated = updated.transition_to(parse_reservation_status(provided["status"]))
        return self._store(reservation, updated, trace_ctx)


class CancelReservation(ReservationCommand):
    def execute(self, reservation_id: ReservationId, trace_ctx: TraceContext) -> ReservationResponse:
        reservation = self._get(reservation_id)
        return self._store(reservation, reservation.cancel(), trace_ctx)
