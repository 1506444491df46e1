from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from kflow.application.ports.repositories import ComandaRepository
from kflow.domain.comanda.entities import Comanda, ComandaItem, ComandaStatus, NewComanda
from kflow.domain.common.errors import PersistenceError
from kflow.domain.common.ids import ComandaId, ProductId, TableId, UserId
from kflow.domain.common.money import Money
from kflow.domain.table.entities import TableNotFoundError, TableStatus
from kflow.infrastructure.db.models.comanda import ComandaItemModel, ComandaModel
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.session import get_engine


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyComandaRepository(ComandaRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list(self) -> list[Comanda]:
        statement = (
            select(ComandaModel)
            .options(
                joinedload(ComandaModel.mesa),
                joinedload(ComandaModel.usuario),
                selectinload(ComandaModel.items),
            )
            .order_by(ComandaModel.created_at.desc(), ComandaModel.id.desc())
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).unique().scalars().all())
            return [self._to_domain(model) for model in models]

    def create(self, comanda: NewComanda) -> Comanda:
        now = datetime.now(timezone.utc)
        try:
            # Comanda, items, total and table status commit together or not at all.
            with Session(self._engine) as session, session.begin():
                mesa = session.get(MesaModel, int(comanda.table_id))
                if mesa is None:
                    raise TableNotFoundError(f"mesa {comanda.table_id} not found")

                model = ComandaModel(
                    mesa_id=mesa.id,
                    usuario_id=int(comanda.user_id) if comanda.user_id is not None else None,
                    observaciones=comanda.notes,
                    total=Decimal("0"),
                    estado=ComandaStatus.PENDING.value,
                    created_at=now,
                )
                session.add(model)
                session.flush()

                for item in comanda.items:
                    session.add(
                        ComandaItemModel(
                            comanda_id=model.id,
                            producto_id=int(item.product_id),
                            cantidad=item.quantity,
                            precio_unitario=item.unit_price.to_decimal(),
                            subtotal=item.subtotal.to_decimal(),
                            observaciones=item.notes,
                        )
                    )
                session.flush()

                model.total = comanda.total.to_decimal()
                mesa.estado = TableStatus.OCCUPIED.value
                comanda_id = ComandaId(model.id)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                "Error al crear comanda",
                details={"mesaId": str(comanda.table_id)},
            ) from exc

        created = self._get(comanda_id)
        if created is None:
            raise PersistenceError("comanda vanished after commit", details={"id": int(comanda_id)})
        return created

    def update_status(self, comanda_id: ComandaId, status: ComandaStatus) -> Comanda | None:
        with Session(self._engine) as session, session.begin():
            model = session.get(ComandaModel, int(comanda_id))
            if model is None:
                return None
            model.estado = status.value
            model.updated_at = datetime.now(timezone.utc)
        return self._get(comanda_id)

    def _get(self, comanda_id: ComandaId) -> Comanda | None:
        statement = (
            select(ComandaModel)
            .options(
                joinedload(ComandaModel.mesa),
                joinedload(ComandaModel.usuario),
                selectinload(ComandaModel.items),
            )
            .where(ComandaModel.id == int(comanda_id))
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()
            if model is None:
                return None
            return self._to_domain(model)

    def _to_domain(self, model: ComandaModel) -> Comanda:
        return Comanda(
            comanda_id=ComandaId(model.id),
            table_id=TableId(str(model.mesa_id)),
            user_id=UserId(model.usuario_id) if model.usuario_id is not None else None,
            notes=model.observaciones,
            total=Money.from_decimal(model.total),
            status=ComandaStatus(model.estado),
            created_at=_as_utc(model.created_at) or datetime.now(timezone.utc),
            updated_at=_as_utc(model.updated_at),
            table_number=model.mesa.numero if model.mesa is not None else None,
            user_name=model.usuario.nombre if model.usuario is not None else None,
            items=tuple(
                ComandaItem(
                    product_id=ProductId(item.producto_id),
                    quantity=item.cantidad,
                    unit_price=Money.from_decimal(item.precio_unitario),
                    notes=item.observaciones,
                )
                for item in model.items
            ),
        )
