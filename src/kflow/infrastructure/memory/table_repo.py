from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import replace

from kflow.application.ports.repositories import TableRepository
from kflow.domain.common.ids import TableId
from kflow.domain.table.entities import Table, TableNotFoundError, TableStatus


class InMemoryTableRepository(TableRepository):
    def __init__(self, tables: Iterable[Table], lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._tables: dict[TableId, Table] = {table.table_id: table for table in tables}

    def get(self, table_id: TableId) -> Table | None:
        with self._lock:
            return self._tables.get(table_id)

    def list(self) -> list[Table]:
        with self._lock:
            return list(self._tables.values())

    def set_status(self, table_id: TableId, status: TableStatus) -> Table:
        with self._lock:
            table = self._tables.get(table_id)
            if table is None:
                raise TableNotFoundError(f"table {table_id} not found")
            updated = replace(table, status=status)
            self._tables[table_id] = updated
            return updated
