from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class InventoryItemResponse(BaseModel):
    itemId: str
    name: str
    category: str
    price: MoneyResponse
    quantity: int
    unit: str
    inStock: bool


class InventoryResponse(BaseModel):
    items: list[InventoryItemResponse] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)


class OrderLineResponse(BaseModel):
    lineId: str
    itemId: str
    name: str
    category: str
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    kitchenStatus: str | None = None
    notes: str | None = None


class OrderResponse(BaseModel):
    orderId: str
    tableId: str
    tableNumber: int
    lines: list[OrderLineResponse] = Field(default_factory=list)
    total: MoneyResponse
    kitchenStatus: str | None = None
    notes: str | None = None
    userId: str | None = None
    createdAt: datetime
    dispatchedAt: datetime | None = None


class ActiveOrdersResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)


class KitchenStatsResponse(BaseModel):
    pending: int
    preparing: int
    dispatched: int
    totalOrders: int


class KitchenBoardResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
    dispatched: list[OrderResponse] = Field(default_factory=list)
    stats: KitchenStatsResponse


class TableResponse(BaseModel):
    tableId: str
    number: int
    status: str


class TableListResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)


class ReservationResponse(BaseModel):
    reservationId: str
    customerName: str
    phoneNumber: str
    partySize: int
    date: date
    time: str
    notes: str
    status: str
    tableNumber: int | None = None
    preOrder: list[OrderLineResponse] = Field(default_factory=list)
    preOrderTotal: MoneyResponse
    createdAt: datetime


class ReservationStatsResponse(BaseModel):
    pending: int
    confirmed: int
    seated: int
    total: int


class ReservationListResponse(BaseModel):
    reservations: list[ReservationResponse] = Field(default_factory=list)
    stats: ReservationStatsResponse


# Back-office rows are returned with the column names of the relational schema.


class UsuarioResponse(BaseModel):
    id: int
    nombre: str
    email: str
    rol: str
    activo: bool
    created_at: datetime | None = None


class ProductoResponse(BaseModel):
    id: int
    nombre: str
    descripcion: str | None = None
    precio: Decimal
    categoria_id: int | None = None
    disponible: bool
    imagen_url: str | None = None
    categoria_nombre: str | None = None


class MesaResponse(BaseModel):
    id: int
    numero: int
    estado: str


class ComandaItemResponse(BaseModel):
    producto_id: int
    cantidad: int
    precio_unitario: Decimal
    subtotal: Decimal
    observaciones: str | None = None


class ComandaResponse(BaseModel):
    id: int
    mesa_id: int
    usuario_id: int | None = None
    observaciones: str | None = None
    total: Decimal
    estado: str
    created_at: datetime
    updated_at: datetime | None = None
    mesa_numero: int | None = None
    usuario_nombre: str | None = None
    items: list[ComandaItemResponse] = Field(default_factory=list)
