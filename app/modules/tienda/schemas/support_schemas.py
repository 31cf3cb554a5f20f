# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/schemas/support_schemas.py

Esquemas de la cola de revisión de soporte (reclamo de nickname).

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from app.shared.utils.base_models import UTF8SafeModel
from app.modules.tienda.enums import ServiceKind, SupportStatus
from .common_schemas import PageMeta


class SupportRequestOut(UTF8SafeModel):
    id: str
    order_id: str
    user_id: str
    kind: ServiceKind
    requested_nickname: str
    status: SupportStatus
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime


class SupportRequestList(UTF8SafeModel):
    items: list[SupportRequestOut]
    meta: PageMeta


class ResolveSupportRequest(UTF8SafeModel):
    request_id: str = Field(
        validation_alias=AliasChoices("request_id", "solicitud_id", "solicitudId"),
    )
    approve: bool = Field(validation_alias=AliasChoices("approve", "aprobar"))
    notes: Optional[str] = Field(
        default=None,
        max_length=2000,
        validation_alias=AliasChoices("notes", "notas"),
    )


__all__ = ["SupportRequestOut", "SupportRequestList", "ResolveSupportRequest"]

# Fin del archivo backend/app/modules/tienda/schemas/support_schemas.py
