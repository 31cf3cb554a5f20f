# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/support_status_enum.py

Estados de una solicitud de soporte (reclamo de nickname).

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class SupportStatus(StrEnum):
    PENDING = "pendiente"
    UNDER_REVIEW = "en_revision"
    APPROVED = "aprobado"
    REJECTED = "rechazado"

    __pg_enum_name__ = "support_request_status_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "support_request_status_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["SupportStatus"]

# Fin del archivo backend/app/modules/tienda/enums/support_status_enum.py
