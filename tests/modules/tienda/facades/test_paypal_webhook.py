# -*- coding: utf-8 -*-
"""
backend/tests/modules/tienda/facades/test_paypal_webhook.py

Tests del procesamiento de webhooks de PayPal sobre la pasarela stub.

Autor: Arena
Fecha: 2026-10-19
"""

import json

import pytest

from app.shared.config.settings_tienda import TiendaSettings
from app.modules.tienda.enums import OrderStatus
from app.modules.tienda.exceptions import ValidationError
from app.modules.tienda.facades.webhooks import WebhookSignatureError, handle_paypal_webhook
from app.modules.tienda.facades.webhooks.paypal_webhook import extract_intent_id
from app.modules.tienda.models import Order


def _approved(intent_id: str) -> dict:
    return {"id": "WH-1", "event_type": "CHECKOUT.ORDER.APPROVED", "resource": {"id": intent_id}}


def _capture_event(event_type: str, intent_id: str) -> dict:
    return {
        "id": "WH-2",
        "event_type": event_type,
        "resource": {
            "id": "CAP-X",
            "supplementary_data": {"related_ids": {"order_id": intent_id}},
        },
    }


@pytest.fixture
def deliver(db, order_service, gateway):
    async def _deliver(event, *, raw: bytes = None, settings: TiendaSettings = None):
        body = raw if raw is not None else json.dumps(event).encode("utf-8")
        return await handle_paypal_webhook(
            db,
            raw_body=body,
            headers={"paypal-transmission-id": "tx"},
            order_service=order_service,
            gateway=gateway,
            tienda_settings=settings or TiendaSettings(allow_insecure_webhooks=False),
        )

    return _deliver


@pytest.fixture
def awaiting_order(seed, db, order_service):
    async def _make():
        order = await order_service.create_order(db, seed["user"], "credits-500")
        return await order_service.register_provider_intent(db, order.id, seed["user"])

    return _make


def test_extract_intent_id():
    assert extract_intent_id(_approved("I-1")) == "I-1"
    assert extract_intent_id(_capture_event("PAYMENT.CAPTURE.COMPLETED", "I-2")) == "I-2"
    assert extract_intent_id({"event_type": "PAYMENT.CAPTURE.COMPLETED", "resource": {}}) is None


class TestHandlePaypalWebhook:
    @pytest.mark.asyncio
    async def test_approved_event_completes_order(self, deliver, awaiting_order, fetch, balance_of, seed):
        intent = await awaiting_order()

        result = await deliver(_approved(intent.intent_id))

        assert result["outcome"] == "completed"
        assert result["order_id"] == intent.order.id
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.COMPLETED
        assert await balance_of(seed["user"]) == 500

    @pytest.mark.asyncio
    async def test_redelivery_is_duplicate(self, deliver, awaiting_order, balance_of, seed):
        """Test: misma notificación dos veces → una sola entrega."""
        intent = await awaiting_order()

        first = await deliver(_capture_event("PAYMENT.CAPTURE.COMPLETED", intent.intent_id))
        second = await deliver(_capture_event("PAYMENT.CAPTURE.COMPLETED", intent.intent_id))

        assert first["outcome"] == "completed"
        assert second["outcome"] == "duplicate"
        assert await balance_of(seed["user"]) == 500

    @pytest.mark.asyncio
    async def test_client_capture_then_webhook_is_duplicate(
        self, deliver, awaiting_order, db, order_service, seed
    ):
        intent = await awaiting_order()
        await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        result = await deliver(_approved(intent.intent_id))
        assert result["outcome"] == "duplicate"

    @pytest.mark.asyncio
    async def test_denied_capture_fails_order(self, deliver, awaiting_order, fetch):
        intent = await awaiting_order()

        result = await deliver(_capture_event("PAYMENT.CAPTURE.DENIED", intent.intent_id))

        assert result["outcome"] == "failed"
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.FAILED
        assert stored.failure_code == "capture_denied"

    @pytest.mark.asyncio
    async def test_denied_after_completion_is_duplicate(self, deliver, awaiting_order, fetch):
        intent = await awaiting_order()
        await deliver(_approved(intent.intent_id))

        result = await deliver(_capture_event("PAYMENT.CAPTURE.DECLINED", intent.intent_id))

        assert result["outcome"] == "duplicate"
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_not_approved_is_rejected_without_retry(self, deliver, awaiting_order, gateway, fetch):
        """Test: rechazo de negocio → outcome 'rejected' (PayPal no reintenta)."""
        gateway.require_approval = True
        intent = await awaiting_order()

        result = await deliver(_capture_event("PAYMENT.CAPTURE.COMPLETED", intent.intent_id))

        assert result["outcome"] == "rejected"
        assert result["error"] == "payment_not_approved"
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.AWAITING_PROVIDER_APPROVAL

    @pytest.mark.asyncio
    async def test_unknown_order(self, deliver, seed):
        result = await deliver(_approved("STUB-DOES-NOT-EXIST"))
        assert result["outcome"] == "unknown_order"

    @pytest.mark.asyncio
    async def test_unhandled_event_is_ignored(self, deliver, seed):
        result = await deliver({"id": "WH-9", "event_type": "BILLING.SUBSCRIPTION.CREATED"})
        assert result["outcome"] == "ignored"

    @pytest.mark.asyncio
    async def test_invalid_signature_raises(self, deliver, awaiting_order, gateway, fetch):
        intent = await awaiting_order()
        gateway.webhook_valid = False

        with pytest.raises(WebhookSignatureError):
            await deliver(_approved(intent.intent_id))

        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.AWAITING_PROVIDER_APPROVAL

    @pytest.mark.asyncio
    async def test_insecure_mode_skips_signature_outside_production(self, deliver, awaiting_order, gateway):
        intent = await awaiting_order()
        gateway.webhook_valid = False

        result = await deliver(
            _approved(intent.intent_id), settings=TiendaSettings(allow_insecure_webhooks=True)
        )
        assert result["outcome"] == "completed"

    @pytest.mark.asyncio
    async def test_invalid_json_is_validation_error(self, deliver, seed):
        with pytest.raises(ValidationError) as exc:
            await deliver(None, raw=b"{not json")
        assert exc.value.code == "invalid_payload"

    @pytest.mark.asyncio
    async def test_non_object_payload_is_validation_error(self, deliver, seed):
        with pytest.raises(ValidationError):
            await deliver(None, raw=b"[1, 2]")

# Fin del archivo backend/tests/modules/tienda/facades/test_paypal_webhook.py
