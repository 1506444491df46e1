from __future__ import annotations

from kflow.application.dto.requests import CreateProductoRequest
from kflow.application.dto.responses import ProductoResponse
from kflow.application.mappers.backoffice_mapper import to_producto_response
from kflow.application.ports.repositories import ProductRepository
from kflow.domain.common.money import Money


class ListProducts:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._product_repository = product_repository

    def execute(self) -> list[ProductoResponse]:
        return [to_producto_response(product) for product in self._product_repository.list()]


class CreateProduct:
    def __init__(self, product_repository: ProductRepository) -> None:
        self._product_repository = product_repository

    def execute(self, request_dto: CreateProductoRequest) -> ProductoResponse:
        product = self._product_repository.add(
            name=request_dto.nombre.strip(),
            description=request_dto.descripcion,
            price=Money.from_decimal(request_dto.precio),
            category_id=request_dto.categoria_id,
            available=request_dto.disponible,
            image_url=request_dto.imagen_url,
        )
        return to_producto_response(product)
