# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/fulfillment_status_enum.py

Resultado de la entrega de una orden completada.
Es independiente del estado de pago: una orden puede estar COMPLETED
con entrega failed (p. ej. conflicto de nickname).

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class FulfillmentStatus(StrEnum):
    PENDING = "pending"
    APPLIED = "applied"
    DEFERRED = "deferred"
    FAILED = "failed"

    __pg_enum_name__ = "store_fulfillment_status_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "store_fulfillment_status_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["FulfillmentStatus"]

# Fin del archivo backend/app/modules/tienda/enums/fulfillment_status_enum.py
