from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session, joinedload

from kflow.application.ports.repositories import ProductRepository
from kflow.domain.common.ids import ProductId
from kflow.domain.common.money import Money
from kflow.domain.product.entities import Product
from kflow.infrastructure.db.models.product import ProductoModel
from kflow.infrastructure.db.session import get_engine


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list(self) -> list[Product]:
        statement = (
            select(ProductoModel)
            .options(joinedload(ProductoModel.categoria))
            .order_by(ProductoModel.id)
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
            return [self._to_domain(model) for model in models]

    def add(
        self,
        name: str,
        description: str | None,
        price: Money,
        category_id: int | None,
        available: bool,
        image_url: str | None,
    ) -> Product:
        with Session(self._engine) as session:
            model = ProductoModel(
                nombre=name,
                descripcion=description,
                precio=price.to_decimal(),
                categoria_id=category_id,
                disponible=available,
                imagen_url=image_url,
            )
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_domain(model)

    def _to_domain(self, model: ProductoModel) -> Product:
        return Product(
            product_id=ProductId(model.id),
            name=model.nombre,
            description=model.descripcion,
            price=Money.from_decimal(model.precio),
            category_id=model.categoria_id,
            available=model.disponible,
            image_url=model.imagen_url,
            category_name=model.categoria.nombre if model.categoria is not None else None,
        )
