# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/item_models.py

Catálogo de artículos de la tienda (solo lectura para el motor de órdenes).

- price / currency: precio con el proveedor externo.
- credit_price: costo en créditos si se paga con saldo; si es NULL el
  artículo no se puede comprar con saldo.
- credits_granted (credits), duration_days + membership_tier (membership),
  service_kind (service) describen qué se entrega.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Integer, Numeric, String, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base
from app.modules.tienda.enums import ItemType, ServiceKind


class StoreItem(Base):
    """Artículo vendible del catálogo."""

    __tablename__ = "store_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    item_type: Mapped[ItemType] = mapped_column(ItemType.as_pg_enum(), nullable=False)
    service_kind: Mapped[Optional[ServiceKind]] = mapped_column(
        ServiceKind.as_pg_enum(), nullable=True
    )

    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    credit_price: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    credits_granted: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duration_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    membership_tier: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("credit_price IS NULL OR credit_price > 0", name="credit_price_positive"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<StoreItem id={self.id} type={self.item_type} price={self.price}>"

    @property
    def payable_with_balance(self) -> bool:
        return self.credit_price is not None


__all__ = ["StoreItem"]

# Fin del archivo backend/app/modules/tienda/models/item_models.py
