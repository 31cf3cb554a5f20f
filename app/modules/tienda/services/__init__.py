# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/services/__init__.py

Servicios del módulo Tienda.

Autor: Arena
Fecha: 2026-10-19
"""

from .ledger_service import LedgerService
from .nickname_service import NicknameService, is_valid_nickname
from .support_service import SupportService
from .fulfillment_service import FulfillmentOutcome, FulfillmentService
from .order_service import CompletionResult, OrderService, ProviderIntent

__all__ = [
    "LedgerService",
    "NicknameService",
    "is_valid_nickname",
    "SupportService",
    "FulfillmentService",
    "FulfillmentOutcome",
    "OrderService",
    "CompletionResult",
    "ProviderIntent",
]

# Fin del archivo backend/app/modules/tienda/services/__init__.py
