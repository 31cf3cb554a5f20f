# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/routes/webhooks_paypal.py

Webhook endpoint para PayPal.

Endpoint:
- POST /tienda/webhook/paypal

Respuestas:
- 200 con {"outcome": ...} para eventos procesados, duplicados, ignorados
  o rechazados por reglas de negocio (PayPal no reintenta)
- 401 si la firma no es válida
- 400 si el cuerpo no es JSON
- 502 si la pasarela falla al capturar (PayPal reintenta)

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.modules.tienda.adapters import PaymentGateway
from app.modules.tienda.facades.webhooks import WebhookSignatureError, handle_paypal_webhook
from app.modules.tienda.services import OrderService
from .dependencies import get_gateway, get_order_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tienda:webhooks"])


@router.post("/webhook/paypal")
async def paypal_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    order_service: OrderService = Depends(get_order_service),
    gateway: PaymentGateway = Depends(get_gateway),
) -> Dict[str, Any]:
    raw_body = await request.body()
    try:
        return await handle_paypal_webhook(
            session,
            raw_body=raw_body,
            headers=dict(request.headers),
            order_service=order_service,
            gateway=gateway,
        )
    except WebhookSignatureError as e:
        logger.warning("PayPal webhook rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_signature", "message": str(e)},
        )


__all__ = ["router"]

# Fin del archivo backend/app/modules/tienda/routes/webhooks_paypal.py
