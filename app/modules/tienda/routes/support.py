# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/routes/support.py

Cola de soporte para recuperación de nicknames.

Usuario:
- GET  /tienda/soporte/mis-solicitudes

Administración (rol admin):
- GET  /tienda/admin/soporte?status=&limit=&offset=
- GET  /tienda/admin/soporte/{request_id}
- POST /tienda/admin/soporte/{request_id}/revision
- POST /tienda/admin/soporte/resolver

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Identity
from app.shared.config.settings_tienda import get_tienda_settings
from app.shared.database.database import get_async_session
from app.modules.tienda.enums import SupportStatus
from app.modules.tienda.schemas import (
    PageMeta,
    ResolveSupportRequest,
    SupportRequestList,
    SupportRequestOut,
)
from app.modules.tienda.services import SupportService
from .dependencies import get_identity, get_support_service, require_admin

router = APIRouter(tags=["tienda:support"])


def _out(request) -> SupportRequestOut:
    return SupportRequestOut.model_validate(request, from_attributes=True)


@router.get("/soporte/mis-solicitudes", response_model=list[SupportRequestOut])
async def my_support_requests(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: SupportService = Depends(get_support_service),
) -> list[SupportRequestOut]:
    requests = await service.list_user_requests(session, identity.user_id)
    return [_out(r) for r in requests]


@router.get("/admin/soporte", response_model=SupportRequestList)
async def list_support_requests(
    status: Optional[SupportStatus] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    admin: Identity = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: SupportService = Depends(get_support_service),
) -> SupportRequestList:
    cfg = get_tienda_settings()
    limit = min(limit or cfg.page_size_default, cfg.page_size_max)
    items, total = await service.list_requests(session, status=status, limit=limit, offset=offset)
    return SupportRequestList(
        items=[_out(r) for r in items],
        meta=PageMeta.build(total=total, limit=limit, offset=offset),
    )


@router.get("/admin/soporte/{request_id}", response_model=SupportRequestOut)
async def get_support_request(
    request_id: str,
    admin: Identity = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: SupportService = Depends(get_support_service),
) -> SupportRequestOut:
    return _out(await service.get_request(session, request_id))


@router.post("/admin/soporte/{request_id}/revision", response_model=SupportRequestOut)
async def start_support_review(
    request_id: str,
    admin: Identity = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: SupportService = Depends(get_support_service),
) -> SupportRequestOut:
    return _out(await service.start_review(session, request_id, admin.user_id))


@router.post("/admin/soporte/resolver", response_model=SupportRequestOut)
async def resolve_support_request(
    body: ResolveSupportRequest,
    admin: Identity = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: SupportService = Depends(get_support_service),
) -> SupportRequestOut:
    request = await service.resolve(
        session, body.request_id, admin.user_id, approve=body.approve, notes=body.notes
    )
    return _out(request)


__all__ = ["router"]

# Fin del archivo backend/app/modules/tienda/routes/support.py
