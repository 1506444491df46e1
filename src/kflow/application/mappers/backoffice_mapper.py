from __future__ import annotations

from kflow.application.dto.responses import (
    ComandaItemResponse,
    ComandaResponse,
    ProductoResponse,
    UsuarioResponse,
)
from kflow.domain.comanda.entities import Comanda
from kflow.domain.product.entities import Product
from kflow.domain.user.entities import User


def to_usuario_response(user: User) -> UsuarioResponse:
    return UsuarioResponse(
        id=int(user.user_id),
        nombre=user.name,
        email=user.email,
        rol=user.role.value,
        activo=user.active,
        created_at=user.created_at,
    )


def to_producto_response(product: Product) -> ProductoResponse:
    return ProductoResponse(
        id=int(product.product_id),
        nombre=product.name,
        descripcion=product.description,
        precio=product.price.to_decimal(),
        categoria_id=product.category_id,
        disponible=product.available,
        imagen_url=product.image_url,
        categoria_nombre=product.category_name,
    )


def to_comanda_response(comanda: Comanda) -> ComandaResponse:
    return ComandaResponse(
        id=int(comanda.comanda_id),
        mesa_id=int(comanda.table_id),
        usuario_id=comanda.user_id,
        observaciones=comanda.notes,
        total=comanda.total.to_decimal(),
        estado=comanda.status.value,
        created_at=comanda.created_at,
        updated_at=comanda.updated_at,
        mesa_numero=comanda.table_number,
        usuario_nombre=comanda.user_name,
        items=[
            ComandaItemResponse(
                producto_id=int(item.product_id),
                cantidad=item.quantity,
                precio_unitario=item.unit_price.to_decimal(),
                subtotal=item.subtotal.to_decimal(),
                observaciones=item.notes,
            )
            for item in comanda.items
        ],
    )
