# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/support_models.py

Solicitudes de soporte generadas por la compra del servicio
reclaim_nickname. Las crea el despachador de entregas; solo un
administrador las mueve y quedan terminales en approved/rejected.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow
from app.modules.tienda.enums import ServiceKind, SupportStatus


class SupportRequest(Base):
    __tablename__ = "support_requests"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_uuid
    )
    order_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("store_orders.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    kind: Mapped[ServiceKind] = mapped_column(
        ServiceKind.as_pg_enum(), nullable=False, default=ServiceKind.RECLAIM_NICKNAME
    )
    requested_nickname: Mapped[str] = mapped_column(String(32), nullable=False)

    status: Mapped[SupportStatus] = mapped_column(
        SupportStatus.as_pg_enum(), nullable=False, default=SupportStatus.PENDING, index=True
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    resolved_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<SupportRequest id={self.id} user_id={self.user_id} "
            f"nickname={self.requested_nickname} status={self.status}>"
        )


__all__ = ["SupportRequest"]

# Fin del archivo backend/app/modules/tienda/models/support_models.py
