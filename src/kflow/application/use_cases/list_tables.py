from __future__ import annotations

from kflow.application.dto.responses import MesaResponse, TableListResponse
from kflow.application.mappers.table_mapper import to_mesa_response, to_table_response
from kflow.application.ports.repositories import TableRepository


class ListTables:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self) -> TableListResponse:
        tables = sorted(self._table_repository.list(), key=lambda table: table.number)
        return TableListResponse(tables=[to_table_response(table) for table in tables])


class ListMesas:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self) -> list[MesaResponse]:
        return [to_mesa_response(table) for table in self._table_repository.list()]
