from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from kflow.application.ports.repositories import TableRepository
from kflow.domain.common.ids import TableId
from kflow.domain.table.entities import Table, TableNotFoundError, TableStatus
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.session import get_engine


def _mesa_pk(table_id: TableId) -> int | None:
    try:
        return int(table_id)
    except ValueError:
        return None


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, table_id: TableId) -> Table | None:
        pk = _mesa_pk(table_id)
        if pk is None:
            return None
        with Session(self._engine) as session:
            model = session.get(MesaModel, pk)
        if model is None:
            return None
        return self._to_domain(model)

    def list(self) -> list[Table]:
        statement = select(MesaModel).order_by(MesaModel.numero)
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def set_status(self, table_id: TableId, status: TableStatus) -> Table:
        pk = _mesa_pk(table_id)
        with Session(self._engine) as session, session.begin():
            model = session.get(MesaModel, pk) if pk is not None else None
            if model is None:
                raise TableNotFoundError(f"mesa {table_id} not found")
            model.estado = status.value
            table = self._to_domain(model)
        return table

    def _to_domain(self, model: MesaModel) -> Table:
        return Table(
            table_id=TableId(str(model.id)),
            number=model.numero,
            status=TableStatus(model.estado),
        )
