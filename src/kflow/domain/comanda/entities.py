from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from kflow.domain.common.errors import NotFoundError, ValidationError
from kflow.domain.common.ids import ComandaId, ProductId, TableId, UserId
from kflow.domain.common.money import DEFAULT_CURRENCY, Money


class ComandaStatus(str, Enum):
    PENDING = "pendiente"
    IN_PREPARATION = "en_preparacion"
    READY = "lista"
    DELIVERED = "entregada"
    PAID = "pagada"
    CANCELLED = "cancelada"


@dataclass(frozen=True)
class ComandaItem:
    product_id: ProductId
    quantity: int
    unit_price: Money
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise InvalidComandaItemError(
                "cantidad must be >= 1", details={"productoId": self.product_id}
            )

    @property
    def subtotal(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class NewComanda:
    table_id: TableId
    user_id: UserId | None
    notes: str | None
    items: tuple[ComandaItem, ...]
    currency: str = DEFAULT_CURRENCY

    @property
    def total(self) -> Money:
        total = Money.zero(self.currency)
        for item in self.items:
            total = total + item.subtotal
        return total


@dataclass(frozen=True)
class Comanda:
    comanda_id: ComandaId
    table_id: TableId
    user_id: UserId | None
    notes: str | None
    total: Money
    status: ComandaStatus
    created_at: datetime
    updated_at: datetime | None = None
    table_number: int | None = None
    user_name: str | None = None
    items: tuple[ComandaItem, ...] = field(default_factory=tuple)


def new_comanda(
    table_id: TableId,
    user_id: UserId | None,
    items: Sequence[ComandaItem],
    notes: str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> NewComanda:
    if not items:
        raise InvalidComandaItemError("a comanda needs at least one item")
    return NewComanda(
        table_id=table_id,
        user_id=user_id,
        notes=notes,
        items=tuple(items),
        currency=currency,
    )


class ComandaNotFoundError(NotFoundError):
    code = "COMANDA_NOT_FOUND"


class InvalidComandaItemError(ValidationError):
    code = "INVALID_COMANDA_ITEM"


class InvalidComandaStatusError(ValidationError):
    code = "INVALID_COMANDA_STATUS"
