# -*- coding: utf-8 -*-
"""
Repositorio de órdenes.

`transition` es la única vía para cambiar el estado: un UPDATE condicionado
a los orígenes válidos de ORDER_TRANSITIONS. Devuelve filas afectadas; 0
significa que otro proceso movió la orden primero o el origen no es válido.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.enums import OrderStatus, allowed_sources
from app.modules.tienda.models.order_models import Order


class OrderRepository(BaseRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    # -----------------------------------------------------------
    # Transición compare-and-set
    # -----------------------------------------------------------
    async def transition(
        self,
        session: AsyncSession,
        order_id: str,
        target: OrderStatus,
        *,
        sources: Optional[frozenset[OrderStatus]] = None,
        **values: Any,
    ) -> int:
        """
        Mueve la orden a `target` solo si su estado actual está en `sources`
        (por defecto, todos los orígenes válidos de la tabla de transiciones).
        """
        valid = allowed_sources(target)
        sources = valid if sources is None else (sources & valid)
        if not sources:
            return 0

        return await self.update_where(
            session,
            Order.id == order_id,
            Order.status.in_([s.value for s in sources]),
            status=target,
            **values,
        )

    # -----------------------------------------------------------
    # Actualización de campos sin cambio de estado
    # -----------------------------------------------------------
    async def update_fields(
        self,
        session: AsyncSession,
        order_id: str,
        *,
        expected_status: OrderStatus,
        **values: Any,
    ) -> int:
        return await self.update_where(
            session, Order.id == order_id, Order.status == expected_status.value, **values
        )

    # -----------------------------------------------------------
    # Consultas
    # -----------------------------------------------------------
    async def get_by_intent(self, session: AsyncSession, intent_id: str) -> Optional[Order]:
        stmt = select(Order).where(Order.provider_intent_id == intent_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_by_user(
        self, session: AsyncSession, user_id: str, *, limit: int, offset: int
    ) -> Sequence[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return await self.fetch_page(session, stmt, limit=limit, offset=offset)

    async def count_by_user(self, session: AsyncSession, user_id: str) -> int:
        return await self.count(session, Order.user_id == user_id)

# Fin del archivo backend/app/modules/tienda/repositories/order_repository.py
