# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/schemas/__init__.py

Esquemas Pydantic del módulo Tienda.

Autor: Arena
Fecha: 2026-10-19
"""

from .common_schemas import PageMeta
from .metadata_schemas import (
    RenameNicknameMetadata,
    ReclaimNicknameMetadata,
    PurchaseMetadata,
    parse_purchase_metadata,
)
from .order_schemas import (
    CreateOrderRequest,
    CaptureOrderRequest,
    BalancePurchaseRequest,
    OrderOut,
    ProviderOrderResponse,
    OrderCompletionResponse,
    OrderHistoryResponse,
)
from .nickname_schemas import NicknameCheckResponse
from .support_schemas import SupportRequestOut, SupportRequestList, ResolveSupportRequest

__all__ = [
    "PageMeta",
    "RenameNicknameMetadata",
    "ReclaimNicknameMetadata",
    "PurchaseMetadata",
    "parse_purchase_metadata",
    "CreateOrderRequest",
    "CaptureOrderRequest",
    "BalancePurchaseRequest",
    "OrderOut",
    "ProviderOrderResponse",
    "OrderCompletionResponse",
    "OrderHistoryResponse",
    "NicknameCheckResponse",
    "SupportRequestOut",
    "SupportRequestList",
    "ResolveSupportRequest",
]

# Fin del archivo backend/app/modules/tienda/schemas/__init__.py
