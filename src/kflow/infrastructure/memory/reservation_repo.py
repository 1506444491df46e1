from __future__ import annotations

import threading

from kflow.application.ports.repositories import ReservationRepository
from kflow.domain.common.ids import ReservationId
from kflow.domain.reservation.entities import Reservation, ReservationStatus


class InMemoryReservationRepository(ReservationRepository):
    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._reservations: dict[ReservationId, Reservation] = {}

    def get(self, reservation_id: ReservationId) -> Reservation | None:
        with self._lock:
            return self._reservations.get(reservation_id)

    def list(self, status: ReservationStatus | None = None) -> list[Reservation]:
        with self._lock:
            return [
                reservation
                for reservation in self._reservations.values()
                if status is None or reservation.status == status
            ]

    def add(self, reservation: Reservation) -> None:
        with self._lock:
            self._reservations[reservation.reservation_id] = reservation

    def update(self, reservation: Reservation) -> None:
        with self._lock:
            if reservation.reservation_id not in self._reservations:
                raise KeyError(f"reservation {reservation.reservation_id} does not exist")
            self._reservations[reservation.reservation_id] = reservation

    def delete(self, reservation_id: ReservationId) -> bool:
        with self._lock:
            return self._reservations.pop(reservation_id, None) is not None
