# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/ledger_models.py

Ledger inmutable de saldo (créditos) por usuario.

Cada fila representa un movimiento:
- delta          → +N abono, -N cargo
- balance_after  → saldo después de aplicar el movimiento
- idempotency_key (UNIQUE con user_id) evita asientos duplicados

Invariante: sum(delta) por usuario == wallets.balance == último balance_after.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, utcnow
from app.modules.tienda.enums import LedgerReason


class BalanceLedgerEntry(Base):
    """Asiento del ledger de saldo (append-only)."""

    __tablename__ = "balance_ledger"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    delta: Mapped[int] = mapped_column(Integer, nullable=False, doc="+N abono, -N cargo")
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[LedgerReason] = mapped_column(LedgerReason.as_pg_enum(), nullable=False)
    ref_order_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("store_orders.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    idempotency_key: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_balance_ledger_idempotency"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<BalanceLedgerEntry id={self.id} user_id={self.user_id} "
            f"delta={self.delta} balance_after={self.balance_after}>"
        )


__all__ = ["BalanceLedgerEntry"]

# Fin del archivo backend/app/modules/tienda/models/ledger_models.py
