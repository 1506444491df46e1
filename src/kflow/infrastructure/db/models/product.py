from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kflow.infrastructure.db.models.base import Base


class CategoriaModel(Base):
    __tablename__ = "categorias"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    productos: Mapped[list["ProductoModel"]] = relationship(back_populates="categoria")


class ProductoModel(Base):
    __tablename__ = "productos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text, nullable=True)
    precio: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    categoria_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categorias.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    disponible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    imagen_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    categoria: Mapped[CategoriaModel | None] = relationship(back_populates="productos")
