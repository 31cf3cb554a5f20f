# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/facades/webhooks/paypal_webhook.py

Procesa notificaciones de PayPal sobre órdenes de la tienda.

1. Verifica la firma con la pasarela (salvo ALLOW_INSECURE_WEBHOOKS fuera
   de producción).
2. Resuelve la orden por provider_intent_id.
3. CHECKOUT.ORDER.APPROVED / PAYMENT.CAPTURE.COMPLETED → capture_and_complete
   como llamador de sistema (user_id=None). Si la orden ya está completada
   es una entrega duplicada: se registra y se devuelve sin efectos.
4. PAYMENT.CAPTURE.DENIED / DECLINED → mark_failed.

Los rechazos de negocio (conflicto, validación) se responden con 200 para
que PayPal no reintente; GatewayFailedError se propaga para que sí lo haga.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config import settings as app_settings
from app.shared.config.settings_tienda import TiendaSettings, get_tienda_settings
from app.modules.tienda.adapters import PaymentGateway
from app.modules.tienda.exceptions import ConflictError, ValidationError
from app.modules.tienda.metrics import WEBHOOKS_RECEIVED_TOTAL
from app.modules.tienda.services import OrderService
from .constants import PAYPAL_EVENT_APPROVED, PAYPAL_EVENT_CAPTURED, PAYPAL_EVENT_FAILED

logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    """Firma del webhook ausente o inválida."""


def extract_intent_id(event: Mapping[str, Any]) -> Optional[str]:
    event_type = event.get("event_type", "")
    resource = event.get("resource") or {}
    if event_type in PAYPAL_EVENT_APPROVED:
        return resource.get("id")
    related = (resource.get("supplementary_data") or {}).get("related_ids") or {}
    return related.get("order_id")


def _skip_verification(tienda_settings: TiendaSettings) -> bool:
    if not tienda_settings.allow_insecure_webhooks:
        return False
    if app_settings.is_prod:
        logger.error("ALLOW_INSECURE_WEBHOOKS=true ignorado en producción; se verifica la firma")
        return False
    logger.warning("DESARROLLO: verificación de webhooks PayPal deshabilitada")
    return True


async def handle_paypal_webhook(
    session: AsyncSession,
    *,
    raw_body: bytes,
    headers: Mapping[str, str],
    order_service: OrderService,
    gateway: PaymentGateway,
    tienda_settings: Optional[TiendaSettings] = None,
) -> dict[str, Any]:
    tienda_settings = tienda_settings or get_tienda_settings()

    try:
        event = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError("Webhook payload is not valid JSON", code="invalid_payload") from e
    if not isinstance(event, dict):
        raise ValidationError("Webhook payload must be an object", code="invalid_payload")

    event_type = str(event.get("event_type", ""))
    event_id = event.get("id")

    if not _skip_verification(tienda_settings):
        if not await gateway.verify_webhook(headers, event):
            WEBHOOKS_RECEIVED_TOTAL.labels(event_type or "unknown", "invalid_signature").inc()
            raise WebhookSignatureError("Invalid PayPal webhook signature")

    result: dict[str, Any] = {"event_id": event_id, "event_type": event_type}
    handled = PAYPAL_EVENT_APPROVED | PAYPAL_EVENT_CAPTURED | PAYPAL_EVENT_FAILED
    if event_type not in handled:
        WEBHOOKS_RECEIVED_TOTAL.labels(event_type or "unknown", "ignored").inc()
        logger.debug("PayPal webhook %s ignorado (%s)", event_id, event_type)
        return {**result, "outcome": "ignored"}

    intent_id = extract_intent_id(event)
    order = await order_service.find_by_intent(session, intent_id) if intent_id else None
    if order is None:
        WEBHOOKS_RECEIVED_TOTAL.labels(event_type, "unknown_order").inc()
        logger.warning("PayPal webhook %s sin orden asociada (intent=%s)", event_id, intent_id)
        return {**result, "outcome": "unknown_order"}
    result["order_id"] = order.id

    try:
        if event_type in PAYPAL_EVENT_FAILED:
            changed = await order_service.mark_failed(
                session, order.id, code="capture_denied", reason=f"PayPal event {event_type}"
            )
            outcome = "failed" if changed else "duplicate"
        else:
            completion = await order_service.capture_and_complete(
                session, order.id, intent_id, user_id=None, source="webhook"
            )
            outcome = "duplicate" if completion.replayed else "completed"
    except (ConflictError, ValidationError) as e:
        WEBHOOKS_RECEIVED_TOTAL.labels(event_type, "rejected").inc()
        logger.warning(
            "PayPal webhook %s rechazado para order=%s: %s (%s)",
            event_id, order.id, e.code, e.message,
        )
        return {**result, "outcome": "rejected", "error": e.code}

    WEBHOOKS_RECEIVED_TOTAL.labels(event_type, outcome).inc()
    logger.info("PayPal webhook %s → order=%s outcome=%s", event_id, order.id, outcome)
    return {**result, "outcome": outcome}


__all__ = ["WebhookSignatureError", "extract_intent_id", "handle_paypal_webhook"]

# Fin del archivo backend/app/modules/tienda/facades/webhooks/paypal_webhook.py
