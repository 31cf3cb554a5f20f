# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/routes/nickname.py

GET /tienda/verificar-nickname/{nickname}: disponibilidad de un handle.
Es público; no requiere token.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.modules.tienda.schemas import NicknameCheckResponse
from app.modules.tienda.services import NicknameService
from .dependencies import get_nickname_service

router = APIRouter(tags=["tienda:nickname"])


@router.get("/verificar-nickname/{nickname}", response_model=NicknameCheckResponse)
async def check_nickname(
    nickname: str,
    session: AsyncSession = Depends(get_async_session),
    service: NicknameService = Depends(get_nickname_service),
) -> NicknameCheckResponse:
    async with session.begin():
        return await service.verify(session, nickname)


__all__ = ["router"]

# Fin del archivo backend/app/modules/tienda/routes/nickname.py
