from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from kflow.domain.common.errors import NotFoundError
from kflow.domain.common.ids import TableId


class TableStatus(str, Enum):
    AVAILABLE = "disponible"
    OCCUPIED = "ocupada"
    RESERVED = "reservada"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: int
    status: TableStatus = TableStatus.AVAILABLE

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("table number must be >= 1")

    def occupy(self) -> Table:
        if self.status == TableStatus.OCCUPIED:
            return self
        return replace(self, status=TableStatus.OCCUPIED)


class TableNotFoundError(NotFoundError):
    code = "TABLE_NOT_FOUND"
