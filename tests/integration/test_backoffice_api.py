from __future__ import annotations

from decimal import Decimal
from functools import partial

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session

import kflow.api.routes.backoffice as backoffice_routes
from kflow.api.main import create_app
from kflow.infrastructure.db.models.product import CategoriaModel
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.repositories.comanda_repo import SqlAlchemyComandaRepository
from kflow.infrastructure.db.repositories.product_repo import SqlAlchemyProductRepository
from kflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from kflow.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from kflow.infrastructure.memory.state import build_restaurant_state


@pytest.fixture
def client(sqlite_engine: Engine, fake_publisher, monkeypatch) -> TestClient:
    with Session(sqlite_engine) as session:
        session.add_all([CategoriaModel(nombre="Comida"), MesaModel(numero=5, estado="disponible")])
        session.commit()

    for name, repository_cls in (
        ("SqlAlchemyUserRepository", SqlAlchemyUserRepository),
        ("SqlAlchemyProductRepository", SqlAlchemyProductRepository),
        ("SqlAlchemyTableRepository", SqlAlchemyTableRepository),
        ("SqlAlchemyComandaRepository", SqlAlchemyComandaRepository),
    ):
        monkeypatch.setattr(backoffice_routes, name, partial(repository_cls, engine=sqlite_engine))

    app = create_app(state=build_restaurant_state(items=[]), publisher=fake_publisher)
    return TestClient(app)


def test_usuarios_endpoints(client: TestClient) -> None:
    created = client.post(
        "/api/usuarios",
        json={"nombre": "Marta", "email": "marta@quinta.ec", "password": "s3cret", "rol": "cocinero"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["rol"] == "cocinero"
    assert "password" not in body

    assert client.get(f"/api/usuarios/{body['id']}").json()["nombre"] == "Marta"
    assert [user["email"] for user in client.get("/api/usuarios").json()] == ["marta@quinta.ec"]

    duplicate = client.post(
        "/api/usuarios",
        json={"nombre": "Otra", "email": "marta@quinta.ec", "password": "x"},
    )
    assert duplicate.status_code == 409
    assert client.get("/api/usuarios/999").status_code == 404


def test_productos_and_mesas_endpoints(client: TestClient) -> None:
    created = client.post(
        "/api/productos",
        json={"nombre": "Lomo saltado", "precio": "12.50", "categoria_id": 1},
    )
    assert created.status_code == 201
    assert Decimal(created.json()["precio"]) == Decimal("12.50")

    productos = client.get("/api/productos").json()
    assert productos[0]["categoria_nombre"] == "Comida"

    assert client.get("/api/mesas").json() == [{"id": 1, "numero": 5, "estado": "disponible"}]


def test_comandas_endpoints(client: TestClient, fake_publisher) -> None:
    client.post("/api/productos", json={"nombre": "Lomo saltado", "precio": "10.00"})
    client.post("/api/productos", json={"nombre": "Locro", "precio": "5.50"})

    created = client.post(
        "/api/comandas",
        json={
            "mesa_id": 1,
            "observaciones": "sin sal",
            "items": [
                {"producto_id": 1, "cantidad": 2, "precio_unitario": "10.00"},
                {"producto_id": 2, "cantidad": 1, "precio_unitario": "5.50"},
            ],
        },
    )
    assert created.status_code == 201
    comanda = created.json()
    assert Decimal(comanda["total"]) == Decimal("25.50")
    assert comanda["mesa_numero"] == 5
    assert client.get("/api/mesas").json()[0]["estado"] == "ocupada"

    listed = client.get("/api/comandas").json()
    assert [row["id"] for row in listed] == [comanda["id"]]

    updated = client.patch(f"/api/comandas/{comanda['id']}/estado", json={"estado": "en_preparacion"})
    assert updated.json()["estado"] == "en_preparacion"
    assert updated.json()["updated_at"] is not None

    missing = client.patch("/api/comandas/404/estado", json={"estado": "lista"})
    assert missing.status_code == 404
    assert missing.json()["error"] == "Comanda no encontrada"

    invalid = client.patch(f"/api/comandas/{comanda['id']}/estado", json={"estado": "volando"})
    assert invalid.status_code == 400

    assert [channel for channel, _ in fake_publisher.messages] == ["events:kitchen", "events:kitchen"]


def test_comanda_failure_returns_500_and_persists_nothing(client: TestClient) -> None:
    response = client.post(
        "/api/comandas",
        json={"mesa_id": 1, "items": [{"producto_id": 77, "cantidad": 1, "precio_unitario": "3.00"}]},
    )

    assert response.status_code == 500
    assert response.json()["code"] == "PERSISTENCE_ERROR"
    assert client.get("/api/comandas").json() == []
    assert client.get("/api/mesas").json()[0]["estado"] == "disponible"


def test_comanda_requires_items(client: TestClient) -> None:
    response = client.post("/api/comandas", json={"mesa_id": 1, "items": []})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"
