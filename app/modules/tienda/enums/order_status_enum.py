# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/order_status_enum.py

Estados de una orden de la tienda y tabla de transiciones permitidas.

Flujo proveedor:  created -> awaiting_provider_approval -> captured -> completed
Flujo saldo:      created -> completed
Cancelación:      created | awaiting_provider_approval -> cancelled
Falla terminal:   cualquier estado no terminal -> failed

completed, cancelled y failed son terminales.

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class OrderStatus(StrEnum):
    """Estado de la orden en su ciclo de vida."""

    CREATED = "created"
    AWAITING_PROVIDER_APPROVAL = "awaiting_provider_approval"
    CAPTURED = "captured"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    __pg_enum_name__ = "store_order_status_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "store_order_status_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.FAILED}
)

# destino -> orígenes válidos
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.AWAITING_PROVIDER_APPROVAL: frozenset({OrderStatus.CREATED}),
    OrderStatus.CAPTURED: frozenset({OrderStatus.AWAITING_PROVIDER_APPROVAL}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.CREATED, OrderStatus.CAPTURED}),
    OrderStatus.CANCELLED: frozenset(
        {OrderStatus.CREATED, OrderStatus.AWAITING_PROVIDER_APPROVAL}
    ),
    OrderStatus.FAILED: frozenset(
        {
            OrderStatus.CREATED,
            OrderStatus.AWAITING_PROVIDER_APPROVAL,
            OrderStatus.CAPTURED,
        }
    ),
}


def allowed_sources(target: OrderStatus) -> frozenset[OrderStatus]:
    """Orígenes desde los que se puede llegar a `target` (vacío si ninguno)."""
    return ORDER_TRANSITIONS.get(OrderStatus(target), frozenset())


def can_transition(source: OrderStatus | str, target: OrderStatus | str) -> bool:
    return OrderStatus(source) in allowed_sources(OrderStatus(target))


__all__ = [
    "OrderStatus",
    "TERMINAL_STATUSES",
    "ORDER_TRANSITIONS",
    "allowed_sources",
    "can_transition",
]

# Fin del archivo backend/app/modules/tienda/enums/order_status_enum.py
