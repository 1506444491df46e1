from __future__ import annotations

from kflow.application.dto.responses import ReservationResponse
from kflow.application.mappers.order_mapper import to_money_response, to_order_line_response
from kflow.domain.reservation.entities import Reservation


def to_reservation_response(reservation: Reservation) -> ReservationResponse:
    return ReservationResponse(
        reservationId=str(reservation.reservation_id),
        customerName=reservation.customer_name,
        phoneNumber=reservation.phone_number,
        partySize=reservation.party_size,
        date=reservation.reservation_date,
        time=reservation.time,
        notes=reservation.notes,
        status=reservation.status.value,
        tableNumber=reservation.table_number,
        preOrder=[to_order_line_response(line) for line in reservation.pre_order],
        preOrderTotal=to_money_response(reservation.pre_order_total),
        createdAt=reservation.created_at,
    )
