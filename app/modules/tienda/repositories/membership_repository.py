# -*- coding: utf-8 -*-
"""
Repositorio de membresías.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.models.membership_models import MembershipGrant


class MembershipRepository(BaseRepository[MembershipGrant]):
    def __init__(self):
        super().__init__(MembershipGrant)

    async def get_by_user_id(self, session: AsyncSession, user_id: str) -> Optional[MembershipGrant]:
        stmt = select(MembershipGrant).where(MembershipGrant.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().first()

# Fin del archivo backend/app/modules/tienda/repositories/membership_repository.py
