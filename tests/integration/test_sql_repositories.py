from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session

from kflow.domain.comanda.entities import ComandaItem, ComandaStatus, new_comanda
from kflow.domain.common.errors import PersistenceError
from kflow.domain.common.ids import ComandaId, ProductId, TableId, UserId
from kflow.domain.common.money import Money
from kflow.domain.table.entities import TableNotFoundError, TableStatus
from kflow.domain.user.entities import DuplicateEmailError, UserRole
from kflow.infrastructure.db.models.comanda import ComandaItemModel, ComandaModel
from kflow.infrastructure.db.models.product import CategoriaModel, ProductoModel
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.repositories.comanda_repo import SqlAlchemyComandaRepository
from kflow.infrastructure.db.repositories.product_repo import SqlAlchemyProductRepository
from kflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from kflow.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository


@pytest.fixture
def seeded_engine(sqlite_engine: Engine) -> Engine:
    with Session(sqlite_engine) as session:
        comida = CategoriaModel(nombre="Comida")
        session.add(comida)
        session.flush()
        session.add_all(
            [
                ProductoModel(nombre="Lomo saltado", precio=Decimal("10.00"), categoria_id=comida.id),
                ProductoModel(nombre="Locro", precio=Decimal("5.50"), categoria_id=comida.id),
                MesaModel(numero=1, estado="disponible"),
                MesaModel(numero=2, estado="disponible"),
            ]
        )
        session.commit()
    return sqlite_engine


def _items(*rows: tuple[int, int, str]) -> list[ComandaItem]:
    return [
        ComandaItem(product_id=ProductId(product_id), quantity=quantity, unit_price=Money.from_decimal(price))
        for product_id, quantity, price in rows
    ]


def test_user_repository_round_trip(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine=sqlite_engine)

    created = repository.add("Marta", "marta@quinta.ec", "hash", UserRole.WAITER)
    fetched = repository.get(created.user_id)

    assert fetched is not None
    assert fetched.name == "Marta"
    assert fetched.role == UserRole.WAITER
    assert fetched.active is True
    assert fetched.created_at is not None and fetched.created_at.tzinfo is not None
    assert [user.email for user in repository.list()] == ["marta@quinta.ec"]
    assert repository.get(UserId(99)) is None


def test_user_repository_rejects_duplicate_email(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine=sqlite_engine)
    repository.add("Marta", "marta@quinta.ec", "hash", UserRole.WAITER)

    with pytest.raises(DuplicateEmailError):
        repository.add("Otra", "marta@quinta.ec", "hash", UserRole.ADMIN)


def test_product_repository_joins_category_name(seeded_engine: Engine) -> None:
    repository = SqlAlchemyProductRepository(engine=seeded_engine)

    created = repository.add(
        name="Limonada",
        description=None,
        price=Money.from_decimal("2.75"),
        category_id=None,
        available=True,
        image_url=None,
    )
    products = repository.list()

    assert [product.name for product in products] == ["Lomo saltado", "Locro", "Limonada"]
    assert products[0].category_name == "Comida"
    assert products[0].price.amount_cents == 1000
    assert created.category_name is None


def test_table_repository_lists_and_updates(seeded_engine: Engine) -> None:
    repository = SqlAlchemyTableRepository(engine=seeded_engine)
    mesas = repository.list()

    assert [table.number for table in mesas] == [1, 2]
    updated = repository.set_status(mesas[1].table_id, TableStatus.RESERVED)
    assert updated.status == TableStatus.RESERVED
    assert repository.get(mesas[1].table_id).status == TableStatus.RESERVED
    assert repository.get(TableId("not-a-number")) is None
    with pytest.raises(TableNotFoundError):
        repository.set_status(TableId("77"), TableStatus.OCCUPIED)


def test_comanda_create_is_one_transaction(seeded_engine: Engine) -> None:
    repository = SqlAlchemyComandaRepository(engine=seeded_engine)

    comanda = repository.create(
        new_comanda(
            table_id=TableId("1"),
            user_id=None,
            items=_items((1, 2, "10.00"), (2, 1, "5.50")),
            notes="mesa de la ventana",
        )
    )

    assert comanda.total.to_decimal() == Decimal("25.50")
    assert comanda.status == ComandaStatus.PENDING
    assert comanda.table_number == 1
    assert [item.subtotal.amount_cents for item in comanda.items] == [2000, 550]
    with Session(seeded_engine) as session:
        assert session.get(MesaModel, 1).estado == "ocupada"
        stored = session.execute(select(ComandaItemModel.subtotal)).scalars().all()
    assert sorted(stored) == [Decimal("5.50"), Decimal("20.00")]


def test_comanda_create_rolls_back_on_failed_item(seeded_engine: Engine) -> None:
    repository = SqlAlchemyComandaRepository(engine=seeded_engine)

    with pytest.raises(PersistenceError):
        repository.create(
            new_comanda(
                table_id=TableId("2"),
                user_id=None,
                items=_items((1, 1, "10.00"), (999, 1, "1.00")),
            )
        )

    with Session(seeded_engine) as session:
        assert session.execute(select(func.count()).select_from(ComandaModel)).scalar_one() == 0
        assert session.execute(select(func.count()).select_from(ComandaItemModel)).scalar_one() == 0
        assert session.get(MesaModel, 2).estado == "disponible"


def test_comanda_list_and_status_update(seeded_engine: Engine) -> None:
    repository = SqlAlchemyComandaRepository(engine=seeded_engine)
    users = SqlAlchemyUserRepository(engine=seeded_engine)
    waiter = users.add("Luis", "luis@quinta.ec", "hash", UserRole.WAITER)

    first = repository.create(new_comanda(TableId("1"), waiter.user_id, _items((1, 1, "10.00"))))
    second = repository.create(new_comanda(TableId("2"), None, _items((2, 1, "5.50"))))

    listed = repository.list()
    assert [comanda.comanda_id for comanda in listed] == [second.comanda_id, first.comanda_id]
    assert listed[1].user_name == "Luis"

    updated = repository.update_status(first.comanda_id, ComandaStatus.READY)
    assert updated is not None
    assert updated.status == ComandaStatus.READY
    assert updated.updated_at is not None
    assert repository.update_status(ComandaId(404), ComandaStatus.READY) is None
