from __future__ import annotations

from fastapi import APIRouter, Request, status

from kflow.api.dependencies import event_publisher, trace_context
from kflow.application.dto.requests import (
    CreateComandaRequest,
    CreateProductoRequest,
    CreateUsuarioRequest,
    UpdateComandaEstadoRequest,
)
from kflow.application.dto.responses import (
    ComandaResponse,
    MesaResponse,
    ProductoResponse,
    UsuarioResponse,
)
from kflow.application.ports.publisher import EventPublisher
from kflow.application.use_cases.comandas import CreateComanda, ListComandas, UpdateComandaStatus
from kflow.application.use_cases.list_tables import ListMesas
from kflow.application.use_cases.products import CreateProduct, ListProducts
from kflow.application.use_cases.users import CreateUser, GetUser, ListUsers
from kflow.domain.common.ids import ComandaId, UserId
from kflow.infrastructure.db.repositories.comanda_repo import SqlAlchemyComandaRepository
from kflow.infrastructure.db.repositories.product_repo import SqlAlchemyProductRepository
from kflow.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from kflow.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from kflow.infrastructure.security.passwords import hash_password

router = APIRouter(prefix="/api")


def _list_users_use_case() -> ListUsers:
    return ListUsers(user_repository=SqlAlchemyUserRepository())


def _get_user_use_case() -> GetUser:
    return GetUser(user_repository=SqlAlchemyUserRepository())


def _create_user_use_case() -> CreateUser:
    return CreateUser(user_repository=SqlAlchemyUserRepository(), password_hasher=hash_password)


def _list_products_use_case() -> ListProducts:
    return ListProducts(product_repository=SqlAlchemyProductRepository())


def _create_product_use_case() -> CreateProduct:
    return CreateProduct(product_repository=SqlAlchemyProductRepository())


def _list_mesas_use_case() -> ListMesas:
    return ListMesas(table_repository=SqlAlchemyTableRepository())


def _list_comandas_use_case() -> ListComandas:
    return ListComandas(comanda_repository=SqlAlchemyComandaRepository())


def _create_comanda_use_case(publisher: EventPublisher) -> CreateComanda:
    return CreateComanda(comanda_repository=SqlAlchemyComandaRepository(), publisher=publisher)


def _update_comanda_status_use_case(publisher: EventPublisher) -> UpdateComandaStatus:
    return UpdateComandaStatus(
        comanda_repository=SqlAlchemyComandaRepository(),
        publisher=publisher,
    )


@router.get("/usuarios", response_model=list[UsuarioResponse], tags=["usuarios"])
def list_users() -> list[UsuarioResponse]:
    return _list_users_use_case().execute()


@router.get("/usuarios/{user_id}", response_model=UsuarioResponse, tags=["usuarios"])
def get_user(user_id: int) -> UsuarioResponse:
    return _get_user_use_case().execute(user_id=UserId(user_id))


@router.post(
    "/usuarios",
    response_model=UsuarioResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["usuarios"],
)
def create_user(request_dto: CreateUsuarioRequest) -> UsuarioResponse:
    return _create_user_use_case().execute(request_dto=request_dto)


@router.get("/productos", response_model=list[ProductoResponse], tags=["productos"])
def list_products() -> list[ProductoResponse]:
    return _list_products_use_case().execute()


@router.post(
    "/productos",
    response_model=ProductoResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["productos"],
)
def create_product(request_dto: CreateProductoRequest) -> ProductoResponse:
    return _create_product_use_case().execute(request_dto=request_dto)


@router.get("/mesas", response_model=list[MesaResponse], tags=["mesas"])
def list_mesas() -> list[MesaResponse]:
    return _list_mesas_use_case().execute()


@router.get("/comandas", response_model=list[ComandaResponse], tags=["comandas"])
def list_comandas() -> list[ComandaResponse]:
    return _list_comandas_use_case().execute()


@router.post(
    "/comandas",
    response_model=ComandaResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["comandas"],
)
def create_comanda(request_dto: CreateComandaRequest, request: Request) -> ComandaResponse:
    return _create_comanda_use_case(event_publisher(request)).execute(
        request_dto=request_dto,
        trace_ctx=trace_context(),
    )


@router.patch("/comandas/{comanda_id}/estado", response_model=ComandaResponse, tags=["comandas"])
def update_comanda_status(
    comanda_id: int,
    request_dto: UpdateComandaEstadoRequest,
    request: Request,
) -> ComandaResponse:
    return _update_comanda_status_use_case(event_publisher(request)).execute(
        comanda_id=ComandaId(comanda_id),
        request_dto=request_dto,
        trace_ctx=trace_context(),
    )
