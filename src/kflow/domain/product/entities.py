from __future__ import annotations

from dataclasses import dataclass

from kflow.domain.common.ids import ProductId
from kflow.domain.common.money import Money


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    name: str
    description: str | None
    price: Money
    category_id: int | None
    available: bool
    image_url: str | None = None
    category_name: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
