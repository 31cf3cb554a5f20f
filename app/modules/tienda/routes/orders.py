# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/routes/orders.py

Rutas de órdenes de la tienda.

Endpoints:
- POST /tienda/orden                   crea una orden (CREATED)
- POST /tienda/orden/paypal            crea la orden y registra el intent en PayPal
- POST /tienda/orden/paypal/capture    captura y completa (idempotente)
- POST /tienda/orden/saldo             paga con saldo (orden existente o nueva)
- POST /tienda/orden/{order_id}/cancelar
- GET  /tienda/orden/{order_id}
- GET  /tienda/historial

ANTI-FRAUDE: monto y divisa se resuelven en el servidor desde el catálogo.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Identity
from app.shared.database.database import get_async_session
from app.modules.tienda.enums import PaymentMethod
from app.modules.tienda.schemas import (
    BalancePurchaseRequest,
    CaptureOrderRequest,
    CreateOrderRequest,
    OrderCompletionResponse,
    OrderHistoryResponse,
    OrderOut,
    PageMeta,
    ProviderOrderResponse,
)
from app.modules.tienda.services import CompletionResult, OrderService
from .dependencies import get_identity, get_order_service

router = APIRouter(tags=["tienda:orders"])


def _completion_response(result: CompletionResult) -> OrderCompletionResponse:
    return OrderCompletionResponse(
        order=OrderOut.model_validate(result.order, from_attributes=True),
        fulfillment=result.fulfillment,
        replayed=result.replayed,
    )


@router.post("/orden", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> OrderOut:
    order = await service.create_order(
        session,
        identity.user_id,
        body.item_id,
        body.metadata,
        payment_method=body.payment_method,
    )
    return OrderOut.model_validate(order, from_attributes=True)


@router.post(
    "/orden/paypal",
    response_model=ProviderOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_paypal_order(
    body: CreateOrderRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> ProviderOrderResponse:
    """
    Crea la orden y el intent de pago en un paso. El cliente redirige al
    comprador a `approval_url` y al volver llama a /orden/paypal/capture.
    """
    order = await service.create_order(
        session,
        identity.user_id,
        body.item_id,
        body.metadata,
        payment_method=PaymentMethod.PROVIDER,
    )
    intent = await service.register_provider_intent(session, order.id, identity.user_id)
    return ProviderOrderResponse(
        order=OrderOut.model_validate(intent.order, from_attributes=True),
        provider_intent_id=intent.intent_id,
        approval_url=intent.approval_url,
    )


@router.post("/orden/paypal/capture", response_model=OrderCompletionResponse)
async def capture_paypal_order(
    body: CaptureOrderRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> OrderCompletionResponse:
    result = await service.capture_and_complete(
        session, body.order_id, body.provider_intent_id, identity.user_id
    )
    return _completion_response(result)


@router.post("/orden/saldo", response_model=OrderCompletionResponse)
async def pay_with_balance(
    body: BalancePurchaseRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> OrderCompletionResponse:
    if body.order_id:
        result = await service.complete_with_balance(session, body.order_id, identity.user_id)
    else:
        result = await service.purchase_with_balance(
            session, identity.user_id, body.item_id, body.metadata
        )
    return _completion_response(result)


@router.post("/orden/{order_id}/cancelar", response_model=OrderOut)
async def cancel_order(
    order_id: str,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> OrderOut:
    order = await service.cancel_order(session, order_id, identity.user_id)
    return OrderOut.model_validate(order, from_attributes=True)


@router.get("/orden/{order_id}", response_model=OrderOut)
async def get_order(
    order_id: str,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> OrderOut:
    order = await service.get_order(session, order_id, identity.user_id)
    return OrderOut.model_validate(order, from_attributes=True)


@router.get("/historial", response_model=OrderHistoryResponse)
async def order_history(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_async_session),
    service: OrderService = Depends(get_order_service),
) -> OrderHistoryResponse:
    items, total, limit, offset = await service.list_history(
        session, identity.user_id, limit=limit, offset=offset
    )
    return OrderHistoryResponse(
        items=[OrderOut.model_validate(o, from_attributes=True) for o in items],
        meta=PageMeta.build(total=total, limit=limit, offset=offset),
    )


__all__ = ["router"]

# Fin del archivo backend/app/modules/tienda/routes/orders.py
