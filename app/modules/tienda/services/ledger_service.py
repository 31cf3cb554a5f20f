# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/services/ledger_service.py

Ledger de saldo (créditos) por usuario.

Cada movimiento actualiza wallets.balance y agrega un asiento inmutable en
balance_ledger dentro de la unidad de trabajo del llamador; nunca abre ni
confirma transacciones por su cuenta.

- credit: abono idempotente por idempotency_key.
- debit: decremento atómico condicionado (balance >= monto); si no alcanza
  lanza InsufficientFundsError y no escribe nada.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.tienda.enums import LedgerReason
from app.modules.tienda.exceptions import InsufficientFundsError, ValidationError
from app.modules.tienda.models import BalanceLedgerEntry
from app.modules.tienda.repositories import BalanceLedgerRepository, WalletRepository

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(
        self,
        wallet_repo: Optional[WalletRepository] = None,
        ledger_repo: Optional[BalanceLedgerRepository] = None,
    ):
        self.wallet_repo = wallet_repo or WalletRepository()
        self.ledger_repo = ledger_repo or BalanceLedgerRepository()

    async def get_balance(self, session: AsyncSession, user_id: str) -> int:
        return await self.wallet_repo.get_balance(session, user_id)

    async def history(self, session: AsyncSession, user_id: str) -> Sequence[BalanceLedgerEntry]:
        return await self.ledger_repo.list_by_user(session, user_id)

    async def credit(
        self,
        session: AsyncSession,
        user_id: str,
        amount: int,
        *,
        reason: LedgerReason,
        idempotency_key: str,
        order_id: Optional[str] = None,
    ) -> BalanceLedgerEntry:
        """
        Abona `amount` créditos. Si ya existe un asiento con la misma
        idempotency_key lo devuelve sin volver a abonar.
        """
        if amount <= 0:
            raise ValidationError("Credit amount must be positive", code="invalid_amount")

        existing = await self.ledger_repo.get_by_idempotency_key(session, user_id, idempotency_key)
        if existing is not None:
            logger.info(
                "Idempotent credit: entry already exists for user=%s key=%s",
                user_id, idempotency_key,
            )
            return existing

        await self.wallet_repo.ensure_exists(session, user_id)
        await self.wallet_repo.credit(session, user_id, amount)
        balance = await self.wallet_repo.get_balance(session, user_id)

        entry = await self.ledger_repo.create(
            session,
            user_id=user_id,
            delta=amount,
            balance_after=balance,
            reason=reason,
            ref_order_id=order_id,
            idempotency_key=idempotency_key,
        )
        logger.info(
            "Credits added: user=%s credits=%+d balance=%d reason=%s",
            user_id, amount, balance, reason.value,
        )
        return entry

    async def debit(
        self,
        session: AsyncSession,
        user_id: str,
        amount: int,
        *,
        reason: LedgerReason,
        idempotency_key: str,
        order_id: Optional[str] = None,
    ) -> BalanceLedgerEntry:
        """
        Cargo con decremento condicionado. Dos débitos concurrentes sobre el
        mismo saldo no pueden dejarlo negativo: el segundo UPDATE no afecta
        filas y se reporta InsufficientFundsError.
        """
        if amount <= 0:
            raise ValidationError("Debit amount must be positive", code="invalid_amount")

        if not await self.wallet_repo.try_debit(session, user_id, amount):
            available = await self.wallet_repo.get_balance(session, user_id)
            logger.info(
                "Debit rejected: user=%s required=%d available=%d",
                user_id, amount, available,
            )
            raise InsufficientFundsError(required=amount, available=available)

        balance = await self.wallet_repo.get_balance(session, user_id)
        entry = await self.ledger_repo.create(
            session,
            user_id=user_id,
            delta=-amount,
            balance_after=balance,
            reason=reason,
            ref_order_id=order_id,
            idempotency_key=idempotency_key,
        )
        logger.info(
            "Credits deducted: user=%s credits=%d balance=%d reason=%s",
            user_id, amount, balance, reason.value,
        )
        return entry


__all__ = ["LedgerService"]

# Fin del archivo backend/app/modules/tienda/services/ledger_service.py
