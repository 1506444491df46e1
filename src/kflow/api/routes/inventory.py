from __future__ import annotations

from fastapi import APIRouter, Request

from kflow.api.dependencies import restaurant_state
from kflow.application.dto.responses import InventoryResponse
from kflow.application.use_cases.list_inventory import ListInventory

router = APIRouter(prefix="/api/inventario", tags=["inventario"])


@router.get("", response_model=InventoryResponse)
def list_inventory(request: Request, categoria: str | None = None) -> InventoryResponse:
    state = restaurant_state(request)
    return ListInventory(inventory_repository=state.inventory).execute(category=categoria)
