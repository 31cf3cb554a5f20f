# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/service_kind_enum.py

Servicios de cuenta vendibles (solo aplican a artículos de tipo service).

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class ServiceKind(StrEnum):
    RENAME_NICKNAME = "rename_nickname"
    RECLAIM_NICKNAME = "reclaim_nickname"
    RESET_RECORD = "reset_record"
    RESET_STATS = "reset_stats"

    __pg_enum_name__ = "store_service_kind_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "store_service_kind_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["ServiceKind"]

# Fin del archivo backend/app/modules/tienda/enums/service_kind_enum.py
