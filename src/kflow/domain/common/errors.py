from __future__ import annotations

from typing import Any


class KitchenFlowError(Exception):
    code = "KITCHEN_FLOW_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(KitchenFlowError):
    code = "VALIDATION_ERROR"


class NotFoundError(KitchenFlowError):
    code = "NOT_FOUND"


class ConflictError(KitchenFlowError):
    code = "CONFLICT"


class PersistenceError(KitchenFlowError):
    code = "PERSISTENCE_ERROR"
