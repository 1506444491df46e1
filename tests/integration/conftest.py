from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from kflow.infrastructure.db.models.base import Base
from kflow.infrastructure.db.models.comanda import ComandaItemModel, ComandaModel
from kflow.infrastructure.db.models.product import CategoriaModel, ProductoModel
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.models.user import UsuarioModel

MODELS = (UsuarioModel, CategoriaModel, ProductoModel, MesaModel, ComandaModel, ComandaItemModel)


class FakePublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def fake_publisher() -> FakePublisher:
    return FakePublisher()
