# -*- coding: utf-8 -*-
"""
Repositorio de solicitudes de soporte.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.tienda.enums import SupportStatus
from app.modules.tienda.models.support_models import SupportRequest


class SupportRequestRepository(BaseRepository[SupportRequest]):
    def __init__(self):
        super().__init__(SupportRequest)

    async def transition(
        self,
        session: AsyncSession,
        request_id: str,
        *,
        sources: frozenset[SupportStatus],
        target: SupportStatus,
        **values: Any,
    ) -> int:
        return await self.update_where(
            session,
            SupportRequest.id == request_id,
            SupportRequest.status.in_([s.value for s in sources]),
            status=target,
            **values,
        )

    async def list_filtered(
        self,
        session: AsyncSession,
        *,
        status: Optional[SupportStatus],
        limit: int,
        offset: int,
    ) -> Sequence[SupportRequest]:
        stmt = select(SupportRequest)
        if status is not None:
            stmt = stmt.where(SupportRequest.status == status.value)
        stmt = stmt.order_by(SupportRequest.created_at, SupportRequest.id)
        return await self.fetch_page(session, stmt, limit=limit, offset=offset)

    async def count_filtered(self, session: AsyncSession, *, status: Optional[SupportStatus]) -> int:
        if status is None:
            return await self.count(session)
        return await self.count(session, SupportRequest.status == status.value)

    async def list_by_user(self, session: AsyncSession, user_id: str) -> Sequence[SupportRequest]:
        stmt = (
            select(SupportRequest)
            .where(SupportRequest.user_id == user_id)
            .order_by(SupportRequest.created_at.desc())
        )
        return await self.fetch_page(session, stmt)

# Fin del archivo backend/app/modules/tienda/repositories/support_repository.py
