# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/schemas/nickname_schemas.py

Respuesta de la verificación de disponibilidad de nickname (consultiva).

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from app.shared.utils.base_models import UTF8SafeModel

NicknameReason = Literal["available", "in_use", "reclaimable", "invalid_format"]


class NicknameCheckResponse(UTF8SafeModel):
    nickname: str
    available: bool
    reason: NicknameReason
    requires_support: bool = False
    days_inactive: Optional[int] = Field(
        default=None,
        description="Días sin actividad del titular actual (solo si reason=reclaimable).",
    )
    message: str = ""


__all__ = ["NicknameCheckResponse", "NicknameReason"]

# Fin del archivo backend/app/modules/tienda/schemas/nickname_schemas.py
