# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/membership_models.py

Membresía vigente de un usuario (una fila por usuario).
Una compra nueva extiende desde max(ahora, ends_at actual).

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


class MembershipGrant(Base):
    __tablename__ = "membership_grants"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    tier: Mapped[str] = mapped_column(String(32), nullable=False, default="premium")
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_membership_grants_user_id"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<MembershipGrant user_id={self.user_id} tier={self.tier} ends_at={self.ends_at}>"


__all__ = ["MembershipGrant"]

# Fin del archivo backend/app/modules/tienda/models/membership_models.py
