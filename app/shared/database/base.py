# -*- coding: utf-8 -*-
"""
backend/app/shared/database/base.py

Base declarativa común de los modelos de la tienda.

- Base: metadata con nombres de constraints estables (índices, UNIQUE, FK),
  para que create_all y los scripts SQL produzcan los mismos nombres.
- as_pg_enum(): columna ENUM nativa en PostgreSQL que persiste el `value`
  del StrEnum. En SQLite (tests) se degrada a VARCHAR.
- utcnow() / new_uuid(): defaults de columna compartidos.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Type

from sqlalchemy import MetaData
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


def as_pg_enum(
    enum_cls: Type[Enum],
    name: str | None = None,
    schema: str | None = "public",
    create_type: bool = True,
) -> PG_ENUM:
    """
    Tipo ENUM para una columna mapeada a `enum_cls`.

    El nombre del tipo sale de `name`, o de `__pg_enum_name__` en la clase.
    El tipo se crea con las tablas en `init_models()`; con create_type=False
    se asume creado por scripts SQL.
    """
    type_name = name or getattr(enum_cls, "__pg_enum_name__", None) or enum_cls.__name__.lower()
    return PG_ENUM(
        enum_cls,
        name=type_name,
        schema=schema,
        create_type=create_type,
        values_callable=lambda members: [member.value for member in members],
    )


__all__ = ["Base", "NAMING_CONVENTION", "as_pg_enum", "utcnow", "new_uuid"]

# Fin del archivo backend/app/shared/database/base.py
