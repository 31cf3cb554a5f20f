# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/payment_method_enum.py

Método de pago de una orden: proveedor externo (PayPal) o saldo interno.

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class PaymentMethod(StrEnum):
    PROVIDER = "provider"
    BALANCE = "balance"

    __pg_enum_name__ = "store_payment_method_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "store_payment_method_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["PaymentMethod"]

# Fin del archivo backend/app/modules/tienda/enums/payment_method_enum.py
