# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

SQLAlchemy 2.0 async + asyncpg para el backend de la tienda.

Provee:
- engine (create_async_engine, perezoso: no conecta al importar)
- SessionLocal (async_sessionmaker, expire_on_commit=False)
- Dependencia FastAPI: get_async_session
- context manager: session_scope()
- init_models(): crea tablas y tipos ENUM (desarrollo / bootstrap)
- check_database_health()

Notas:
- Los servicios abren sus propias unidades de trabajo con
  `async with session.begin():`; por eso la sesión se entrega sin
  transacción iniciada. El statement_timeout se fija por conexión vía
  server_settings de asyncpg en lugar de un SET SESSION.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.shared.config import settings
from app.shared.database.base import Base

logger = logging.getLogger(__name__)


def _build_connect_args() -> dict:
    url = settings.database_url
    if not url.startswith("postgresql+asyncpg"):
        return {}
    return {
        "server_settings": {
            "search_path": "public",
            "statement_timeout": str(settings.db_statement_timeout_ms),
            "application_name": "arena-tienda",
        },
        "command_timeout": settings.db_command_timeout_s,
    }


engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo_sql,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_timeout=settings.db_pool_timeout,
    pool_recycle=settings.db_pool_recycle,
    pool_pre_ping=settings.db_pool_pre_ping,
    connect_args=_build_connect_args(),
)

logger.debug(
    "[DB] engine configurado → %s:%s/%s (echo=%s)",
    settings.db_host, settings.db_port, settings.db_name, settings.db_echo_sql,
)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            # Un servicio que falla a mitad de una unidad de trabajo ya hizo
            # rollback vía session.begin(); esto cubre lecturas sueltas.
            if session.in_transaction():
                await session.rollback()


# ── Context manager reutilizable en scripts/tests
@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


async def init_models() -> None:
    """Crea tablas y tipos ENUM que falten (idempotente)."""
    # Registra los modelos en Base.metadata antes de crear
    import app.modules.tienda.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[DB] esquema verificado (%d tablas)", len(Base.metadata.tables))


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (OSError, TimeoutError, SQLAlchemyError) as exc:
        logger.warning("[DB] health check falló: %s", exc)
        return False

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "session_scope",
    "init_models",
    "check_database_health",
]
# Fin del archivo backend/app/shared/database/database.py
