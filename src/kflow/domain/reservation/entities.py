from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

from kflow.domain.common.errors import ConflictError, NotFoundError, ValidationError
from kflow.domain.common.ids import ReservationId
from kflow.domain.common.money import DEFAULT_CURRENCY, Money
from kflow.domain.order.entities import OrderLine, lines_total

DEFAULT_PARTY_SIZE = 2


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED})

_STATUS_RANK: dict[ReservationStatus, int] = {
    ReservationStatus.PENDING: 0,
    ReservationStatus.CONFIRMED: 1,
    ReservationStatus.SEATED: 2,
    ReservationStatus.COMPLETED: 3,
}


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    if current == target:
        return True
    if current in TERMINAL_STATUSES:
        return False
    if target == ReservationStatus.CANCELLED:
        return True
    return _STATUS_RANK[target] > _STATUS_RANK[current]


@dataclass(frozen=True)
class Reservation:
    reservation_id: ReservationId
    customer_name: str
    reservation_date: date
    created_at: datetime
    party_size: int = DEFAULT_PARTY_SIZE
    phone_number: str = ""
    time: str = ""
    notes: str = ""
    status: ReservationStatus = ReservationStatus.PENDING
    table_number: int | None = None
    pre_order: tuple[OrderLine, ...] = field(default_factory=tuple)
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not self.customer_name.strip():
            raise MissingCustomerNameError("customer name is required")
        if self.party_size < 1:
            raise InvalidPartySizeError(
                "party size must be >= 1", details={"partySize": self.party_size}
            )

    @property
    def pre_order_total(self) -> Money:
        return lines_total(self.pre_order, self.currency)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition_to(self, status: ReservationStatus) -> Reservation:
        if not can_transition(self.status, status):
            raise ReservationTransitionError(
                f"cannot move reservation from {self.status.value} to {status.value}"
            )
        return replace(self, status=status)

    def cancel(self) -> Reservation:
        if self.is_terminal:
            raise ReservationTransitionError(
                f"reservation {self.reservation_id} is already {self.status.value}"
            )
        return replace(self, status=ReservationStatus.CANCELLED)

    def with_pre_order(self, lines: Iterable[OrderLine]) -> Reservation:
        return replace(self, pre_order=tuple(lines))


def create_pending_reservation(
    reservation_id: ReservationId,
    customer_name: str,
    now: datetime,
    *,
    party_size: int | None = None,
    reservation_date: date | None = None,
    time: str | None = None,
    phone_number: str | None = None,
    notes: str | None = None,
) -> Reservation:
    return Reservation(
        reservation_id=reservation_id,
        customer_name=customer_name.strip(),
        reservation_date=reservation_date or now.date(),
        created_at=now,
        party_size=DEFAULT_PARTY_SIZE if party_size is None else party_size,
        phone_number=phone_number or "",
        time=time or "",
        notes=notes or "",
    )


class MissingCustomerNameError(ValidationError):
    code = "MISSING_CUSTOMER_NAME"


class InvalidPartySizeError(ValidationError):
    code = "INVALID_PARTY_SIZE"


class ReservationNotFoundError(NotFoundError):
    code = "RESERVATION_NOT_FOUND"


class ReservationTransitionError(ConflictError):
    code = "INVALID_RESERVATION_TRANSITION"
