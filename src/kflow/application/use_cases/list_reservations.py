from __future__ import annotations

from kflow.application.dto.responses import (
    ReservationListResponse,
    ReservationResponse,
    ReservationStatsResponse,
)
from kflow.application.mappers.reservation_mapper import to_reservation_response
from kflow.application.ports.repositories import ReservationRepository
from kflow.application.use_cases.update_reservation import parse_reservation_status
from kflow.domain.common.ids import ReservationId
from kflow.domain.reservation.entities import ReservationNotFoundError, ReservationStatus


class ListReservations:
    def __init__(self, reservation_repository: ReservationRepository) -> None:
        self._reservation_repository = reservation_repository

    def execute(self, status: str | None = None) -> ReservationListResponse:
        status_filter = parse_reservation_status(status) if status else None
        everything = self._reservation_repository.list()
        selected = [
            reservation
            for reservation in everything
            if status_filter is None or reservation.status == status_filter
        ]
        selected.sort(key=lambda reservation: (reservation.reservation_date, reservation.time))

        def count(wanted: ReservationStatus) -> int:
            return sum(1 for reservation in everything if reservation.status == wanted)

        return ReservationListResponse(
            reservations=[to_reservation_response(reservation) for reservation in selected],
            stats=ReservationStatsResponse(
                pending=count(ReservationStatus.PENDING),
                confirmed=count(ReservationStatus.CONFIRMED),
                seated=count(ReservationStatus.SEATED),
                total=sum(1 for reservation in everything if not reservation.is_terminal),
            ),
        )


class GetReservation:
    def __init__(self, reservation_repository: ReservationRepository) -> None:
        self._reservation_repository = reservation_repository

    def execute(self, reservation_id: ReservationId) -> ReservationResponse:
        reservation = self._reservation_repository.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f"reservation {reservation_id} not found")
        return to_reservation_response(reservation)
