from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from kflow.domain.common.errors import ConflictError, NotFoundError
from kflow.domain.common.ids import UserId


class UserRole(str, Enum):
    ADMIN = "admin"
    COOK = "cocinero"
    WAITER = "mesero"


@dataclass(frozen=True)
class User:
    user_id: UserId
    name: str
    email: str
    role: UserRole
    active: bool
    created_at: datetime | None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if "@" not in self.email:
            raise ValueError("email must contain '@'")


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"


class DuplicateEmailError(ConflictError):
    code = "EMAIL_ALREADY_REGISTERED"
