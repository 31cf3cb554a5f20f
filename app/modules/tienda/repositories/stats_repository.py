# -*- coding: utf-8 -*-
"""
Repositorio de estadísticas por juego.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.models.stats_models import UserGameStats


class UserGameStatsRepository(BaseRepository[UserGameStats]):
    def __init__(self):
        super().__init__(UserGameStats)

    async def list_by_user(self, session: AsyncSession, user_id: str) -> Sequence[UserGameStats]:
        stmt = select(UserGameStats).where(UserGameStats.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def reset(self, session: AsyncSession, user_id: str, **values) -> int:
        """Aplica `values` a todas las filas del usuario; devuelve filas tocadas."""
        return await self.update_where(session, UserGameStats.user_id == user_id, **values)

# Fin del archivo backend/app/modules/tienda/repositories/stats_repository.py
