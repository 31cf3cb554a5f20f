# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/stats_models.py

Estadísticas competitivas por usuario y juego. La tienda solo las
reinicia (servicios reset_record / reset_stats).

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import BigInteger, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


class UserGameStats(Base):
    __tablename__ = "user_game_stats"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    game_id: Mapped[str] = mapped_column(String(64), nullable=False)

    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    draws: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    hours_played: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "game_id", name="uq_user_game_stats_user_game"),
    )


__all__ = ["UserGameStats"]

# Fin del archivo backend/app/modules/tienda/models/stats_models.py
