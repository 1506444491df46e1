from __future__ import annotations

from kflow.application.dto.responses import MesaResponse, TableResponse
from kflow.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        number=table.number,
        status=table.status.value,
    )


def to_mesa_response(table: Table) -> MesaResponse:
    return MesaResponse(
        id=int(table.table_id),
        numero=table.number,
        estado=table.status.value,
    )
