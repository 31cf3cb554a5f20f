# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/order_models.py

Modelo ORM de órdenes de la tienda.

Reglas de negocio:
- El estado solo avanza por las aristas de ORDER_TRANSITIONS; toda
  escritura de estado es un UPDATE condicionado al estado de origen.
- Como máximo una transición a COMPLETED por orden (llave de idempotencia
  = id de la orden; provider_capture_id es UNIQUE como llave secundaria).
- amount está en la divisa del proveedor (provider) o en créditos (balance).
- fulfillment_result guarda el resultado devuelto a reintentos idempotentes.
- Las órdenes nunca se borran.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, new_uuid, utcnow
from app.modules.tienda.enums import (
    FulfillmentStatus,
    ItemType,
    OrderStatus,
    PaymentMethod,
    ServiceKind,
)


class Order(Base):
    """Orden de compra de un artículo del catálogo."""

    __tablename__ = "store_orders"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_uuid
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    item_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("store_items.id", ondelete="RESTRICT"), nullable=False
    )
    item_type: Mapped[ItemType] = mapped_column(ItemType.as_pg_enum(), nullable=False)
    service_kind: Mapped[Optional[ServiceKind]] = mapped_column(
        ServiceKind.as_pg_enum(), nullable=True
    )

    payment_method: Mapped[PaymentMethod] = mapped_column(
        PaymentMethod.as_pg_enum(), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)

    status: Mapped[OrderStatus] = mapped_column(
        OrderStatus.as_pg_enum(), nullable=False, default=OrderStatus.CREATED
    )

    # 👇 nombre de atributo distinto, columna sigue siendo "metadata"
    metadata_json: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONB, nullable=True
    )

    # Datos del proveedor
    provider_intent_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, unique=True
    )
    provider_capture_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, unique=True
    )
    payer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    payer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Entrega (independiente del estado de pago)
    fulfillment_status: Mapped[FulfillmentStatus] = mapped_column(
        FulfillmentStatus.as_pg_enum(),
        nullable=False,
        default=FulfillmentStatus.PENDING,
    )
    fulfillment_result: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)

    failure_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    failed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_store_orders_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return (
            f"<Order id={self.id} user_id={self.user_id} status={self.status} "
            f"method={self.payment_method} amount={self.amount}>"
        )


__all__ = ["Order"]

# Fin del archivo backend/app/modules/tienda/models/order_models.py
