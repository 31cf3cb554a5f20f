# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/ledger_reason_enum.py

Motivo de un movimiento del ledger de saldo.

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class LedgerReason(StrEnum):
    PURCHASE_CREDITS = "purchase_credits"
    PURCHASE_DEBIT = "purchase_debit"
    ADJUSTMENT = "adjustment"

    __pg_enum_name__ = "balance_ledger_reason_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "balance_ledger_reason_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["LedgerReason"]

# Fin del archivo backend/app/modules/tienda/enums/ledger_reason_enum.py
