# -*- coding: utf-8 -*-
"""
Repositorio para la tabla wallets.

try_debit es el decremento atómico condicionado: el UPDATE solo afecta la
fila si balance >= monto, de modo que dos débitos concurrentes no pueden
dejar el saldo negativo.

Autor: Arena
Fecha: 2026-10-19
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.models.wallet_models import Wallet

logger = logging.getLogger(__name__)


class WalletRepository(BaseRepository[Wallet]):
    def __init__(self):
        super().__init__(Wallet)

    # -----------------------------------------------------------
    # Obtener wallet por user_id (única en el sistema)
    # -----------------------------------------------------------
    async def get_by_user_id(self, session: AsyncSession, user_id: str) -> Optional[Wallet]:
        stmt = select(Wallet).where(Wallet.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_balance(self, session: AsyncSession, user_id: str) -> int:
        stmt = select(Wallet.balance).where(Wallet.user_id == user_id)
        result = await session.execute(stmt)
        return int(result.scalar() or 0)

    async def ensure_exists(self, session: AsyncSession, user_id: str) -> None:
        """Crea la wallet en 0 si no existe (savepoint: tolera carreras)."""
        if await self.get_by_user_id(session, user_id) is not None:
            return
        try:
            async with session.begin_nested():
                session.add(Wallet(user_id=user_id, balance=0))
                await session.flush()
        except IntegrityError:
            # Otra transacción la creó primero; el savepoint ya se revirtió
            logger.info("Wallet for user_id=%s created concurrently (IntegrityError)", user_id)

    # -----------------------------------------------------------
    # Movimientos atómicos
    # -----------------------------------------------------------
    async def try_debit(self, session: AsyncSession, user_id: str, amount: int) -> bool:
        touched = await self.update_where(
            session,
            Wallet.user_id == user_id,
            Wallet.balance >= amount,
            balance=Wallet.balance - amount,
        )
        return touched == 1

    async def credit(self, session: AsyncSession, user_id: str, amount: int) -> None:
        await self.update_where(session, Wallet.user_id == user_id, balance=Wallet.balance + amount)

# Fin del archivo backend/app/modules/tienda/repositories/wallet_repository.py
