# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/schemas/order_schemas.py

Esquemas de entrada/salida para órdenes de la tienda.

ANTI-FRAUDE: el cliente solo envía el artículo y su metadata; monto y
divisa siempre se resuelven desde el catálogo.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, Field, model_validator

from app.shared.utils.base_models import UTF8SafeModel
from app.modules.tienda.enums import (
    FulfillmentStatus,
    ItemType,
    OrderStatus,
    PaymentMethod,
    ServiceKind,
)
from .common_schemas import PageMeta


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CreateOrderRequest(UTF8SafeModel):
    item_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("item_id", "articulo_id", "articuloId"),
    )
    metadata: Optional[dict[str, Any]] = None
    payment_method: PaymentMethod = Field(
        default=PaymentMethod.PROVIDER,
        validation_alias=AliasChoices("payment_method", "metodo_pago"),
    )


class CaptureOrderRequest(UTF8SafeModel):
    order_id: str = Field(validation_alias=AliasChoices("order_id", "orden_id", "ordenId"))
    provider_intent_id: str = Field(
        validation_alias=AliasChoices("provider_intent_id", "paypal_order_id", "paypalOrderId"),
    )


class BalancePurchaseRequest(UTF8SafeModel):
    """
    Pago con saldo: se completa una orden existente (order_id) o se crea y
    completa en un paso (item_id + metadata). Exactamente uno de los dos.
    """

    order_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("order_id", "orden_id", "ordenId")
    )
    item_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("item_id", "articulo_id", "articuloId"),
    )
    metadata: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "BalancePurchaseRequest":
        if bool(self.order_id) == bool(self.item_id):
            raise ValueError("Provide either order_id or item_id")
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OrderOut(UTF8SafeModel):
    id: str
    user_id: str
    item_id: str
    item_type: ItemType
    service_kind: Optional[ServiceKind] = None
    payment_method: PaymentMethod
    amount: Decimal
    currency: Optional[str] = None
    status: OrderStatus
    metadata: Optional[dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("metadata_json", "metadata")
    )
    provider_intent_id: Optional[str] = None
    provider_capture_id: Optional[str] = None
    fulfillment_status: FulfillmentStatus
    fulfillment_result: Optional[dict[str, Any]] = None
    failure_code: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None


class ProviderOrderResponse(UTF8SafeModel):
    order: OrderOut
    provider_intent_id: str
    approval_url: Optional[str] = None


class OrderCompletionResponse(UTF8SafeModel):
    """Resultado de completar una orden (captura o saldo)."""

    order: OrderOut
    fulfillment: dict[str, Any] = Field(default_factory=dict)
    replayed: bool = Field(
        default=False,
        description="True si la orden ya estaba completada y se devolvió el resultado cacheado.",
    )


class OrderHistoryResponse(UTF8SafeModel):
    items: list[OrderOut]
    meta: PageMeta


__all__ = [
    "CreateOrderRequest",
    "CaptureOrderRequest",
    "BalancePurchaseRequest",
    "OrderOut",
    "ProviderOrderResponse",
    "OrderCompletionResponse",
    "OrderHistoryResponse",
]

# Fin del archivo backend/app/modules/tienda/schemas/order_schemas.py
