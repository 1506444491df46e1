from __future__ import annotations

import logging
from collections.abc import Callable

from kflow.application.dto.requests import CreateUsuarioRequest
from kflow.application.dto.responses import UsuarioResponse
from kflow.application.mappers.backoffice_mapper import to_usuario_response
from kflow.application.ports.repositories import UserRepository
from kflow.domain.common.errors import ValidationError
from kflow.domain.common.ids import UserId
from kflow.domain.user.entities import UserNotFoundError, UserRole

logger = logging.getLogger(__name__)


class InvalidUserRoleError(ValidationError):
    code = "INVALID_USER_ROLE"


class ListUsers:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self) -> list[UsuarioResponse]:
        return [to_usuario_response(user) for user in self._user_repository.list()]


class GetUser:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, user_id: UserId) -> UsuarioResponse:
        user = self._user_repository.get(user_id)
        if user is None:
            raise UserNotFoundError(f"usuario {user_id} not found")
        return to_usuario_response(user)


class CreateUser:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: Callable[[str], str],
    ) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher

    def execute(self, request_dto: CreateUsuarioRequest) -> UsuarioResponse:
        try:
            role = UserRole(request_dto.rol)
        except ValueError as exc:
            raise InvalidUserRoleError(
                f"invalid rol: {request_dto.rol}",
                details={"allowed": [role.value for role in UserRole]},
            ) from exc
        if "@" not in request_dto.email:
            raise ValidationError("email must contain '@'", details={"email": request_dto.email})

        user = self._user_repository.add(
            name=request_dto.nombre.strip(),
            email=request_dto.email.strip().lower(),
            password_hash=self._password_hasher(request_dto.password),
            role=role,
        )
        logger.info("usuario_created", extra={"user_id": int(user.user_id), "role": role.value})
        return to_usuario_response(user)
