from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class OrderLineRequest(CamelBaseModel):
    item_id: str
    quantity: int = 1
    notes: str | None = None


class OpenOrderRequest(CamelBaseModel):
    lines: list[OrderLineRequest] = Field(default_factory=list)
    notes: str | None = None
    user_id: str | None = None


class KitchenStatusRequest(CamelBaseModel):
    status: str


class CreateReservationRequest(CamelBaseModel):
    customer_name: str = ""
    phone_number: str | None = None
    party_size: int | None = None
    reservation_date: date | None = Field(default=None, alias="date")
    time: str | None = None
    notes: str | None = None


class UpdateReservationRequest(CamelBaseModel):
    customer_name: str | None = None
    phone_number: str | None = None
    party_size: int | None = None
    reservation_date: date | None = Field(default=None, alias="date")
    time: str | None = None
    notes: str | None = None
    status: str | None = None
    table_number: int | None = None


class PreOrderLineRequest(CamelBaseModel):
    item_id: str
    quantity: int = 1


# Back-office payloads keep the column names of the relational schema.


class CreateUsuarioRequest(BaseModel):
    nombre: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    rol: str = "mesero"


class CreateProductoRequest(BaseModel):
    nombre: str = Field(min_length=1)
    descripcion: str | None = None
    precio: Decimal = Field(ge=0)
    categoria_id: int | None = None
    disponible: bool = True
    imagen_url: str | None = None


class ComandaItemRequest(BaseModel):
    producto_id: int
    cantidad: int
    precio_unitario: Decimal = Field(ge=0)
    observaciones: str | None = None


class CreateComandaRequest(BaseModel):
    mesa_id: int
    usuario_id: int | None = None
    items: list[ComandaItemRequest] = Field(min_length=1)
    observaciones: str | None = None


class UpdateComandaEstadoRequest(BaseModel):
    estado: str
