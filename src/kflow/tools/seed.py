from __future__ import annotations

from decimal import Decimal

from sqlalchemy import inspect, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from kflow.infrastructure.db.models.product import CategoriaModel, ProductoModel
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.session import get_engine

CATEGORIES = ("Comida", "Bebida", "Postre")

TABLE_COUNT = 12

PRODUCTS = (
    ("Lomo saltado", "Res salteada con cebolla, tomate y papas", Decimal("12.50"), "Comida"),
    ("Ceviche clásico", "Pescado del día en leche de tigre", Decimal("11.00"), "Comida"),
    ("Locro de papa", "Sopa de papa con queso y aguacate", Decimal("6.75"), "Comida"),
    ("Limonada", "Limonada natural", Decimal("2.75"), "Bebida"),
    ("Café pasado", "Café de altura", Decimal("1.80"), "Bebida"),
    ("Flan de coco", "Flan casero", Decimal("3.90"), "Postre"),
)


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"categorias", "productos", "mesas"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    with Session(engine) as session:
        for name in CATEGORIES:
            session.execute(
                insert(CategoriaModel).values(nombre=name).on_conflict_do_nothing(
                    index_elements=[CategoriaModel.nombre]
                )
            )

        category_ids = {
            name: category_id
            for category_id, name in session.execute(
                select(CategoriaModel.id, CategoriaModel.nombre)
            ).all()
        }

        existing_products = set(session.execute(select(ProductoModel.nombre)).scalars().all())
        for name, description, price, category in PRODUCTS:
            if name in existing_products:
                continue
            session.add(
                ProductoModel(
                    nombre=name,
                    descripcion=description,
                    precio=price,
                    categoria_id=category_ids.get(category),
                    disponible=True,
                )
            )

        for number in range(1, TABLE_COUNT + 1):
            session.execute(
                insert(MesaModel)
                .values(numero=number, estado="disponible")
                .on_conflict_do_nothing(index_elements=[MesaModel.numero])
            )

        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
