# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/__init__.py

Enums del módulo Tienda.

Autor: Arena
Fecha: 2026-10-19
"""

from .order_status_enum import (
    OrderStatus,
    TERMINAL_STATUSES,
    ORDER_TRANSITIONS,
    allowed_sources,
    can_transition,
)
from .item_type_enum import ItemType
from .service_kind_enum import ServiceKind
from .payment_method_enum import PaymentMethod
from .fulfillment_status_enum import FulfillmentStatus
from .support_status_enum import SupportStatus
from .ledger_reason_enum import LedgerReason
from .user_role_enum import UserRole

__all__ = [
    "OrderStatus",
    "TERMINAL_STATUSES",
    "ORDER_TRANSITIONS",
    "allowed_sources",
    "can_transition",
    "ItemType",
    "ServiceKind",
    "PaymentMethod",
    "FulfillmentStatus",
    "SupportStatus",
    "LedgerReason",
    "UserRole",
]

# Fin del archivo backend/app/modules/tienda/enums/__init__.py
