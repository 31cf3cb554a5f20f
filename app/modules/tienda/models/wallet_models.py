# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/wallet_models.py

Modelo ORM para la tabla wallets.

Reglas de negocio:
- Una wallet por usuario (UNIQUE user_id).
- balance está denormalizado desde el ledger (balance_ledger) y solo se
  modifica en la misma unidad de trabajo que agrega el asiento.
- Es el objetivo del decremento atómico condicionado
  (UPDATE ... WHERE balance >= :n), por eso nunca queda negativo.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


class Wallet(Base):
    """Saldo en créditos de un usuario."""

    __tablename__ = "wallets"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    balance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        doc="Balance total de créditos (denormalizado desde ledger).",
    )

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_wallets_user_id"),
        CheckConstraint("balance >= 0", name="balance_non_negative"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<Wallet user_id={self.user_id} balance={self.balance}>"


__all__ = ["Wallet"]

# Fin del archivo backend/app/modules/tienda/models/wallet_models.py
