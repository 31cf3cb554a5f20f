# -*- coding: utf-8 -*-
"""
Repositorio del ledger de saldo.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Optional, Sequence

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.models.ledger_models import BalanceLedgerEntry


class BalanceLedgerRepository(BaseRepository[BalanceLedgerEntry]):
    def __init__(self):
        super().__init__(BalanceLedgerEntry)

    # -----------------------------------------------------------
    # Buscar por idempotency_key (constraint único con user_id)
    # -----------------------------------------------------------
    async def get_by_idempotency_key(
        self, session: AsyncSession, user_id: str, idempotency_key: str
    ) -> Optional[BalanceLedgerEntry]:
        stmt = select(BalanceLedgerEntry).where(
            and_(
                BalanceLedgerEntry.user_id == user_id,
                BalanceLedgerEntry.idempotency_key == idempotency_key,
            )
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    # -----------------------------------------------------------
    # Ledger por user_id (orden cronológico)
    # -----------------------------------------------------------
    async def list_by_user(
        self, session: AsyncSession, user_id: str
    ) -> Sequence[BalanceLedgerEntry]:
        stmt = (
            select(BalanceLedgerEntry)
            .where(BalanceLedgerEntry.user_id == user_id)
            .order_by(BalanceLedgerEntry.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    # -----------------------------------------------------------
    # Suma de deltas (balance según ledger) por user_id
    # -----------------------------------------------------------
    async def compute_balance(self, session: AsyncSession, user_id: str) -> int:
        stmt = select(func.sum(BalanceLedgerEntry.delta)).where(
            BalanceLedgerEntry.user_id == user_id
        )
        result = await session.execute(stmt)
        return int(result.scalar() or 0)

# Fin del archivo backend/app/modules/tienda/repositories/ledger_repository.py
