from __future__ import annotations

import os
from datetime import datetime
from functools import lru_cache

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import URL, Engine


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    # Fall back to the discrete DB_* variables used by the deployment scripts.
    host = os.getenv("DB_HOST")
    if not host:
        raise RuntimeError("DATABASE_URL or DB_HOST must be set")
    return URL.create(
        "postgresql+psycopg",
        username=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD") or None,
        host=host,
        port=int(os.getenv("DB_PORT", "5432")),
        database=os.getenv("DB_NAME", "kitchen_flow"),
    ).render_as_string(hide_password=False)


@lru_cache(maxsize=8)
def _build_engine(url: str, connect_timeout: int) -> Engine:
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"connect_timeout": connect_timeout},
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    connect_timeout = max(1, int(timeout_seconds))
    return _build_engine(database_url(), connect_timeout)


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def database_now(timeout_seconds: float = 1.0) -> datetime:
    with get_engine(timeout_seconds).connect() as connection:
        return connection.execute(select(func.current_timestamp())).scalar_one()
