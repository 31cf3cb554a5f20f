# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/services/support_service.py

Cola de revisión de soporte para reclamos de nickname.

Estados: pendiente → en_revision → {aprobado, rechazado}. Las solicitudes las
crea el despachador de entregas (open_request, dentro de la unidad de
trabajo de la orden); solo administradores las mueven. approved y
rejected son terminales.

Al aprobar se reclama el nickname a nombre del solicitante en la misma
unidad de trabajo que la transición: si el reclamo choca, se lanza
NicknameConflictError y la solicitud queda en su estado previo.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.tienda.enums import FulfillmentStatus, OrderStatus, ServiceKind, SupportStatus
from app.modules.tienda.exceptions import ConflictError, NicknameConflictError, NotFoundError
from app.modules.tienda.models import Order, SupportRequest
from app.modules.tienda.repositories import OrderRepository, SupportRequestRepository
from .nickname_service import NicknameService

logger = logging.getLogger(__name__)

OPEN_STATUSES: frozenset[SupportStatus] = frozenset(
    {SupportStatus.PENDING, SupportStatus.UNDER_REVIEW}
)


class SupportService:
    def __init__(
        self,
        support_repo: Optional[SupportRequestRepository] = None,
        order_repo: Optional[OrderRepository] = None,
        nickname_service: Optional[NicknameService] = None,
    ):
        self.support_repo = support_repo or SupportRequestRepository()
        self.order_repo = order_repo or OrderRepository()
        self.nickname_service = nickname_service or NicknameService()

    # ------------------------------------------------------------------
    # Alta (solo el despachador, dentro de la unidad de trabajo de la orden)
    # ------------------------------------------------------------------
    async def open_request(
        self, session: AsyncSession, order: Order, requested_nickname: str
    ) -> SupportRequest:
        request = await self.support_repo.create(
            session,
            order_id=order.id,
            user_id=order.user_id,
            kind=ServiceKind.RECLAIM_NICKNAME,
            requested_nickname=requested_nickname,
            status=SupportStatus.PENDING,
        )
        logger.info(
            "Support request %s opened for order=%s nickname=%s",
            request.id, order.id, requested_nickname,
        )
        return request

    # ------------------------------------------------------------------
    # Administración
    # ------------------------------------------------------------------
    async def _get_or_404(self, session: AsyncSession, request_id: str) -> SupportRequest:
        request = await self.support_repo.get_for_update(session, request_id)
        if request is None:
            raise NotFoundError(f"Support request {request_id} not found", code="support_request_not_found")
        return request

    async def start_review(
        self, session: AsyncSession, request_id: str, admin_id: str
    ) -> SupportRequest:
        async with session.begin():
            request = await self._get_or_404(session, request_id)
            moved = await self.support_repo.transition(
                session,
                request_id,
                sources=frozenset({SupportStatus.PENDING}),
                target=SupportStatus.UNDER_REVIEW,
                reviewed_by=admin_id,
            )
            if not moved:
                raise ConflictError(
                    f"Support request {request_id} is {request.status}, not pending",
                    code="invalid_support_transition",
                )
            request = await self.support_repo.get_for_update(session, request_id)

        logger.info("Support request %s under review by admin=%s", request_id, admin_id)
        return request

    async def resolve(
        self,
        session: AsyncSession,
        request_id: str,
        admin_id: str,
        *,
        approve: bool,
        notes: Optional[str] = None,
    ) -> SupportRequest:
        async with session.begin():
            request = await self._get_or_404(session, request_id)
            if request.status not in OPEN_STATUSES:
                raise ConflictError(
                    f"Support request {request_id} is already {request.status}",
                    code="support_request_resolved",
                )

            if approve:
                claimed = await self.nickname_service.reclaim(
                    session, request.user_id, request.requested_nickname
                )
                if not claimed:
                    raise NicknameConflictError(request.requested_nickname)
                target = SupportStatus.APPROVED
                fulfillment = FulfillmentStatus.APPLIED
                failure_code = None
            else:
                target = SupportStatus.REJECTED
                fulfillment = FulfillmentStatus.FAILED
                failure_code = "support_rejected"

            now = datetime.now(timezone.utc)
            moved = await self.support_repo.transition(
                session,
                request_id,
                sources=OPEN_STATUSES,
                target=target,
                admin_notes=notes,
                resolved_by=admin_id,
                resolved_at=now,
            )
            if not moved:
                raise ConflictError(
                    f"Support request {request_id} was resolved concurrently",
                    code="support_request_resolved",
                )

            await self.order_repo.update_fields(
                session,
                request.order_id,
                expected_status=OrderStatus.COMPLETED,
                fulfillment_status=fulfillment,
                fulfillment_result={
                    "type": ServiceKind.RECLAIM_NICKNAME.value,
                    "support_request_id": request_id,
                    "status": target.value,
                    "nickname": request.requested_nickname,
                },
                failure_code=failure_code,
                failure_reason=notes if not approve else None,
            )
            request = await self.support_repo.get_for_update(session, request_id)

        logger.info(
            "Support request %s resolved as %s by admin=%s", request_id, target.value, admin_id
        )
        return request

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    async def get_request(self, session: AsyncSession, request_id: str) -> SupportRequest:
        async with session.begin():
            return await self._get_or_404(session, request_id)

    async def list_requests(
        self,
        session: AsyncSession,
        *,
        status: Optional[SupportStatus] = None,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[SupportRequest], int]:
        async with session.begin():
            items = await self.support_repo.list_filtered(
                session, status=status, limit=limit, offset=offset
            )
            total = await self.support_repo.count_filtered(session, status=status)
        return items, total

    async def list_user_requests(
        self, session: AsyncSession, user_id: str
    ) -> Sequence[SupportRequest]:
        async with session.begin():
            return await self.support_repo.list_by_user(session, user_id)


__all__ = ["SupportService", "OPEN_STATUSES"]

# Fin del archivo backend/app/modules/tienda/services/support_service.py
