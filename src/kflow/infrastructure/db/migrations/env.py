from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from kflow.infrastructure.db.models.base import Base
from kflow.infrastructure.db.models.comanda import ComandaItemModel, ComandaModel
from kflow.infrastructure.db.models.product import CategoriaModel, ProductoModel
from kflow.infrastructure.db.models.table import MesaModel
from kflow.infrastructure.db.models.user import UsuarioModel
from kflow.infrastructure.db.session import database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Importing the models registers their tables on the shared metadata.
MODELS = (UsuarioModel, CategoriaModel, ProductoModel, MesaModel, ComandaModel, ComandaItemModel)
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = database_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
