# -*- coding: utf-8 -*-
"""
Repositorio de cuentas de usuario (solo nickname).

`set_nickname` deja que el UNIQUE de nickname_key decida las carreras:
la IntegrityError se propaga al servicio, que la convierte en conflicto.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.models.account_models import UserAccount


class UserAccountRepository(BaseRepository[UserAccount]):
    def __init__(self):
        super().__init__(UserAccount)

    async def get_by_nickname_key(
        self, session: AsyncSession, nickname_key: str
    ) -> Optional[UserAccount]:
        stmt = select(UserAccount).where(UserAccount.nickname_key == nickname_key)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def set_nickname(self, session: AsyncSession, user_id: str, nickname: str) -> int:
        return await self.update_where(
            session,
            UserAccount.user_id == user_id,
            nickname=nickname,
            nickname_key=nickname.lower(),
        )

# Fin del archivo backend/app/modules/tienda/repositories/account_repository.py
