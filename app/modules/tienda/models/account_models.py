# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/account_models.py

Cuenta de usuario (propiedad del módulo de perfiles). La tienda solo
modifica el nickname.

- nickname: forma visible (respeta mayúsculas).
- nickname_key: nickname en minúsculas con UNIQUE; es la única garantía de
  unicidad bajo concurrencia.
- last_seen_at: última actividad, base del criterio de "reclamable".

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, utcnow
from app.modules.tienda.enums import UserRole


class UserAccount(Base):
    __tablename__ = "user_accounts"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    nickname: Mapped[str] = mapped_column(String(32), nullable=False)
    nickname_key: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    role: Mapped[UserRole] = mapped_column(
        UserRole.as_pg_enum(), nullable=False, default=UserRole.USER
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    last_seen_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<UserAccount user_id={self.user_id} nickname={self.nickname}>"


__all__ = ["UserAccount"]

# Fin del archivo backend/app/modules/tienda/models/account_models.py
