from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kflow.application.ports.repositories import UserRepository
from kflow.domain.common.ids import UserId
from kflow.domain.user.entities import DuplicateEmailError, User, UserRole
from kflow.infrastructure.db.models.user import UsuarioModel
from kflow.infrastructure.db.session import get_engine


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list(self) -> list[User]:
        statement = select(UsuarioModel).order_by(UsuarioModel.id)
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def get(self, user_id: UserId) -> User | None:
        with Session(self._engine) as session:
            model = session.get(UsuarioModel, int(user_id))
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, name: str, email: str, password_hash: str, role: UserRole) -> User:
        existing = select(UsuarioModel.id).where(UsuarioModel.email == email).limit(1)
        with Session(self._engine) as session:
            if session.execute(existing).scalar_one_or_none() is not None:
                raise DuplicateEmailError(f"email {email} is already registered")
            model = UsuarioModel(
                nombre=name,
                email=email,
                password=password_hash,
                rol=role.value,
                activo=True,
                created_at=datetime.now(timezone.utc),
            )
            session.add(model)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(f"email {email} is already registered") from exc
            session.refresh(model)
            return self._to_domain(model)

    def _to_domain(self, model: UsuarioModel) -> User:
        created_at = model.created_at
        if created_at and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return User(
            user_id=UserId(model.id),
            name=model.nombre,
            email=model.email,
            role=UserRole(model.rol),
            active=model.activo,
            created_at=created_at,
        )
