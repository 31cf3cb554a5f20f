# -*- coding: utf-8 -*-
"""
Repositorio del catálogo de artículos (solo lectura).

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.models.item_models import StoreItem


class StoreItemRepository(BaseRepository[StoreItem]):
    def __init__(self):
        super().__init__(StoreItem)

    async def get_active(self, session: AsyncSession, item_id: str) -> Optional[StoreItem]:
        stmt = select(StoreItem).where(StoreItem.id == item_id, StoreItem.active.is_(True))
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_active(self, session: AsyncSession) -> Sequence[StoreItem]:
        stmt = select(StoreItem).where(StoreItem.active.is_(True)).order_by(StoreItem.price)
        result = await session.execute(stmt)
        return result.scalars().all()

# Fin del archivo backend/app/modules/tienda/repositories/item_repository.py
