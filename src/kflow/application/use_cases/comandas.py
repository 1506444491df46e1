from __future__ import annotations

import logging
from datetime import datetime, timezone

from kflow.application.dto.requests import CreateComandaRequest, UpdateComandaEstadoRequest
from kflow.application.dto.responses import ComandaResponse
from kflow.application.mappers.backoffice_mapper import to_comanda_response
from kflow.application.mappers.event_envelope import KITCHEN_TOPIC, serialize_comanda_event
from kflow.application.metrics.order_lifecycle import (
    record_comanda_create_failed,
    record_comanda_created,
)
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import ComandaRepository
from kflow.application.use_cases.context import TraceContext, publish_event
from kflow.domain.comanda.entities import (
    ComandaItem,
    ComandaNotFoundError,
    ComandaStatus,
    InvalidComandaStatusError,
    new_comanda,
)
from kflow.domain.common.errors import PersistenceError
from kflow.domain.common.ids import ComandaId, ProductId, TableId, UserId
from kflow.domain.common.money import Money

logger = logging.getLogger(__name__)


class ListComandas:
    def __init__(self, comanda_repository: ComandaRepository) -> None:
        self._comanda_repository = comanda_repository

    def execute(self) -> list[ComandaResponse]:
        return [to_comanda_response(comanda) for comanda in self._comanda_repository.list()]


class CreateComanda:
    def __init__(self, comanda_repository: ComandaRepository, publisher: EventPublisher) -> None:
        self._comanda_repository = comanda_repository
        self._publisher = publisher

    def execute(self, request_dto: CreateComandaRequest, trace_ctx: TraceContext) -> ComandaResponse:
        draft = new_comanda(
            table_id=TableId(str(request_dto.mesa_id)),
            user_id=UserId(request_dto.usuario_id) if request_dto.usuario_id is not None else None,
            notes=request_dto.observaciones,
            items=[
                ComandaItem(
                    product_id=ProductId(item.producto_id),
                    quantity=item.cantidad,
                    unit_price=Money.from_decimal(item.precio_unitario),
                    notes=item.observaciones,
                )
                for item in request_dto.items
            ],
        )
        try:
            comanda = self._comanda_repository.create(draft)
        except PersistenceError:
            record_comanda_create_failed()
            logger.error("comanda_create_failed", extra={"table_id": str(draft.table_id)})
            raise

        record_comanda_created()
        logger.info(
            "comanda_created",
            extra={"comanda_id": int(comanda.comanda_id), "table_id": str(comanda.table_id)},
        )
        publish_event(
            self._publisher,
            KITCHEN_TOPIC,
            serialize_comanda_event(
                event_type="comanda.created",
                occurred_at=comanda.created_at,
                comanda=comanda,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_comanda_response(comanda)


class UpdateComandaStatus:
    def __init__(self, comanda_repository: ComandaRepository, publisher: EventPublisher) -> None:
        self._comanda_repository = comanda_repository
        self._publisher = publisher

    def execute(
        self,
        comanda_id: ComandaId,
        request_dto: UpdateComandaEstadoRequest,
        trace_ctx: TraceContext,
    ) -> ComandaResponse:
        try:
            status = ComandaStatus(request_dto.estado)
        except ValueError as exc:
            raise InvalidComandaStatusError(
                f"invalid estado: {request_dto.estado}",
                details={"allowed": [status.value for status in ComandaStatus]},
            ) from exc

        comanda = self._comanda_repository.update_status(comanda_id, status)
        if comanda is None:
            raise ComandaNotFoundError("Comanda no encontrada", details={"id": int(comanda_id)})

        logger.info(
            "comanda_status_changed",
            extra={"comanda_id": int(comanda_id), "to_status": status.value},
        )
        publish_event(
            self._publisher,
            KITCHEN_TOPIC,
            serialize_comanda_event(
                event_type="comanda.status_changed",
                occurred_at=comanda.updated_at or datetime.now(timezone.utc),
                comanda=comanda,
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            ),
        )
        return to_comanda_response(comanda)
