from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kflow.infrastructure.db.models.base import Base
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.models.user import UsuarioModel


class ComandaModel(Base):
    __tablename__ = "comandas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mesa_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("mesas.id"),
        nullable=False,
        index=True,
    )
    usuario_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("usuarios.id"),
        nullable=True,
    )
    observaciones: Mapped[str | None] = mapped_column(Text, nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    estado: Mapped[str] = mapped_column(String(20), nullable=False, default="pendiente")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    mesa: Mapped[MesaModel] = relationship()
    usuario: Mapped[UsuarioModel | None] = relationship()
    items: Mapped[list["ComandaItemModel"]] = relationship(
        back_populates="comanda",
        cascade="all, delete-orphan",
        order_by="ComandaItemModel.id",
    )

    __table_args__ = (Index("ix_comandas_created_at", "created_at"),)


class ComandaItemModel(Base):
    __tablename__ = "comanda_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comanda_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comandas.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    producto_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("productos.id"),
        nullable=False,
    )
    cantidad: Mapped[int] = mapped_column(Integer, nullable=False)
    precio_unitario: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    observaciones: Mapped[str | None] = mapped_column(Text, nullable=True)

    comanda: Mapped[ComandaModel] = relationship(back_populates="items")
