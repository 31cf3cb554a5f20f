# -*- coding: utf-8 -*-
"""
backend/tests/modules/tienda/services/test_order_service_provider.py

Tests del flujo de pago con proveedor (PayPal stub):
registro de intento, captura idempotente, carreras de captura,
validación anti-fraude de monto/divisa y fallas del proveedor.

Autor: Arena
Fecha: 2026-10-19
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.modules.tienda.enums import FulfillmentStatus, OrderStatus, PaymentMethod
from app.modules.tienda.exceptions import (
    AmountMismatchError,
    ConflictError,
    CurrencyMismatchError,
    ForbiddenError,
    GatewayFailedError,
    IntentMismatchError,
    InvalidTransitionError,
    NotFoundError,
    PaymentNotApprovedError,
    ValidationError,
)
from app.modules.tienda.models import BalanceLedgerEntry, Order
from app.modules.tienda.repositories import OrderRepository


async def _awaiting(order_service, db, user_id, item_id="credits-500", metadata=None):
    order = await order_service.create_order(db, user_id, item_id, metadata, PaymentMethod.PROVIDER)
    intent = await order_service.register_provider_intent(db, order.id, user_id)
    return intent


async def _ledger_entries(session_factory, order_id):
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(BalanceLedgerEntry).where(BalanceLedgerEntry.ref_order_id == order_id)
        )
        return int(result.scalar_one())


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_amount_and_currency_come_from_catalog(self, seed, db, order_service):
        """Test: monto y divisa se toman del catálogo."""
        order = await order_service.create_order(db, seed["user"], "credits-500")

        assert order.status == OrderStatus.CREATED
        assert order.payment_method == PaymentMethod.PROVIDER
        assert order.amount == Decimal("4.99")
        assert order.currency == "USD"
        assert order.fulfillment_status == FulfillmentStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_item_is_not_found(self, seed, db, order_service):
        with pytest.raises(NotFoundError):
            await order_service.create_order(db, seed["user"], "does-not-exist")

    @pytest.mark.asyncio
    async def test_inactive_item_is_not_found(self, seed, db, order_service):
        """Test: artículo retirado no se puede comprar."""
        with pytest.raises(NotFoundError) as exc:
            await order_service.create_order(db, seed["user"], "retired")
        assert exc.value.code == "item_not_found"

    @pytest.mark.asyncio
    async def test_unsupported_currency_is_rejected(self, seed, db, order_service):
        with pytest.raises(ValidationError) as exc:
            await order_service.create_order(db, seed["user"], "credits-eur")
        assert exc.value.code == "unsupported_currency"

    @pytest.mark.asyncio
    async def test_balance_requires_credit_price(self, seed, db, order_service):
        """Test: un artículo sin credit_price no se paga con saldo."""
        with pytest.raises(ValidationError) as exc:
            await order_service.create_order(
                db, seed["user"], "credits-500", payment_method=PaymentMethod.BALANCE
            )
        assert exc.value.code == "not_payable_with_balance"

    @pytest.mark.asyncio
    async def test_invalid_metadata_writes_nothing(self, seed, db, order_service, session_factory):
        """Test: metadata inválida se rechaza antes de escribir."""
        with pytest.raises(ValidationError):
            await order_service.create_order(db, seed["user"], "rename", {"new_nickname": "x"})

        async with session_factory() as session:
            total = (await session.execute(select(func.count()).select_from(Order))).scalar_one()
        assert total == 0


class TestRegisterProviderIntent:
    @pytest.mark.asyncio
    async def test_moves_order_to_awaiting(self, seed, db, order_service, gateway, fetch):
        intent = await _awaiting(order_service, db, seed["user"])

        assert intent.intent_id.startswith("STUB-")
        assert intent.approval_url.endswith(intent.intent_id)
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.AWAITING_PROVIDER_APPROVAL
        assert stored.provider_intent_id == intent.intent_id

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, seed, db, order_service):
        """Test: solo el dueño registra el intento."""
        order = await order_service.create_order(db, seed["user"], "credits-500")
        with pytest.raises(ForbiddenError):
            await order_service.register_provider_intent(db, order.id, seed["rival"])

    @pytest.mark.asyncio
    async def test_only_from_created(self, seed, db, order_service):
        intent = await _awaiting(order_service, db, seed["user"])
        with pytest.raises(InvalidTransitionError):
            await order_service.register_provider_intent(db, intent.order.id, seed["user"])

    @pytest.mark.asyncio
    async def test_balance_order_is_rejected(self, seed, db, order_service):
        order = await order_service.create_order(
            db, seed["user"], "reset-record", payment_method=PaymentMethod.BALANCE
        )
        with pytest.raises(ValidationError) as exc:
            await order_service.register_provider_intent(db, order.id, seed["user"])
        assert exc.value.code == "wrong_payment_method"

    @pytest.mark.asyncio
    async def test_gateway_failure_marks_order_failed(self, seed, db, order_service, gateway, fetch):
        """Test: proveedor caído → orden FAILED y GatewayFailedError."""
        gateway.fail_next_register = 1
        order = await order_service.create_order(db, seed["user"], "credits-500")

        with pytest.raises(GatewayFailedError):
            await order_service.register_provider_intent(db, order.id, seed["user"])

        stored = await fetch(Order, order.id)
        assert stored.status == OrderStatus.FAILED
        assert stored.failure_code == "gateway_failed"
        assert stored.provider_intent_id is None


class TestCaptureAndComplete:
    @pytest.mark.asyncio
    async def test_credits_purchase_completes(self, seed, db, order_service, balance_of, fetch):
        """Test: 500 créditos vía proveedor → asiento +500 y orden COMPLETED."""
        intent = await _awaiting(order_service, db, seed["user"])

        result = await order_service.capture_and_complete(
            db, intent.order.id, intent.intent_id, seed["user"]
        )

        assert result.replayed is False
        assert result.order.status == OrderStatus.COMPLETED
        assert result.order.provider_capture_id == f"CAP-{intent.intent_id}"
        assert result.fulfillment == {"type": "credits", "credits_granted": 500, "balance_after": 500}
        assert await balance_of(seed["user"]) == 500

        stored = await fetch(Order, intent.order.id)
        assert stored.fulfillment_status == FulfillmentStatus.APPLIED
        assert stored.completed_at is not None
        assert stored.payer_email == "buyer@example.com"

    @pytest.mark.asyncio
    async def test_second_capture_replays_without_side_effects(
        self, seed, db, order_service, gateway, balance_of, session_factory
    ):
        """Test: capturar dos veces devuelve el mismo resultado sin re-entregar."""
        intent = await _awaiting(order_service, db, seed["user"])
        first = await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])
        calls = gateway.capture_calls

        second = await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        assert second.replayed is True
        assert second.fulfillment == first.fulfillment
        assert gateway.capture_calls == calls
        assert await balance_of(seed["user"]) == 500
        assert await _ledger_entries(session_factory, intent.order.id) == 1

    @pytest.mark.asyncio
    async def test_concurrent_captures_fulfil_once(
        self, seed, db, order_service, session_factory, balance_of
    ):
        """Test: dos capturas simultáneas → una entrega, la otra es replay."""
        intent = await _awaiting(order_service, db, seed["user"])

        async def _capture():
            async with session_factory() as session:
                return await order_service.capture_and_complete(
                    session, intent.order.id, intent.intent_id, seed["user"]
                )

        results = await asyncio.gather(_capture(), _capture())

        assert sorted(r.replayed for r in results) == [False, True]
        assert all(r.order.status == OrderStatus.COMPLETED for r in results)
        assert await balance_of(seed["user"]) == 500
        assert await _ledger_entries(session_factory, intent.order.id) == 1

    @pytest.mark.asyncio
    async def test_webhook_caller_needs_no_user(self, seed, db, order_service):
        intent = await _awaiting(order_service, db, seed["user"])
        result = await order_service.capture_and_complete(
            db, intent.order.id, intent.intent_id, None, source="webhook"
        )
        assert result.order.status == OrderStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, seed, db, order_service, gateway):
        intent = await _awaiting(order_service, db, seed["user"])
        with pytest.raises(ForbiddenError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["rival"])
        assert gateway.capture_calls == 0

    @pytest.mark.asyncio
    async def test_intent_mismatch_is_conflict(self, seed, db, order_service, gateway):
        intent = await _awaiting(order_service, db, seed["user"])
        with pytest.raises(IntentMismatchError):
            await order_service.capture_and_complete(db, intent.order.id, "STUB-99999999", seed["user"])
        assert gateway.capture_calls == 0

    @pytest.mark.asyncio
    async def test_not_approved_leaves_order_unchanged(self, seed, db, order_service, gateway, fetch):
        """Test: pago no aprobado → Conflict y la orden sigue esperando."""
        gateway.require_approval = True
        intent = await _awaiting(order_service, db, seed["user"])

        with pytest.raises(PaymentNotApprovedError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.AWAITING_PROVIDER_APPROVAL

        gateway.approve(intent.intent_id)
        result = await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])
        assert result.order.status == OrderStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_amount_mismatch_fails_order(self, seed, db, order_service, gateway, fetch, balance_of):
        """Test: ANTI-FRAUDE monto capturado distinto → FAILED sin entrega."""
        intent = await _awaiting(order_service, db, seed["user"])
        gateway.override_capture(intent.intent_id, amount=Decimal("0.99"))

        with pytest.raises(AmountMismatchError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.FAILED
        assert stored.failure_code == "amount_mismatch"
        assert await balance_of(seed["user"]) == 0

    @pytest.mark.asyncio
    async def test_currency_mismatch_fails_order(self, seed, db, order_service, gateway, fetch):
        intent = await _awaiting(order_service, db, seed["user"])
        gateway.override_capture(intent.intent_id, currency="MXN")

        with pytest.raises(CurrencyMismatchError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.FAILED
        assert stored.failure_code == "currency_mismatch"

    @pytest.mark.asyncio
    async def test_capture_failure_is_terminal(self, seed, db, order_service, gateway, fetch, balance_of):
        """Test: falla definitiva al capturar → FAILED y nunca se entrega."""
        intent = await _awaiting(order_service, db, seed["user"])
        gateway.fail_next_capture = 1

        with pytest.raises(GatewayFailedError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.FAILED
        assert await balance_of(seed["user"]) == 0

        with pytest.raises(InvalidTransitionError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

    @pytest.mark.asyncio
    async def test_captured_order_completes_without_recapturing(
        self, seed, db, order_service, gateway, fetch, balance_of, session_factory, monkeypatch
    ):
        """Test: una caída tras CAPTURED se recupera reintentando, sin volver a cobrar."""
        intent = await _awaiting(order_service, db, seed["user"])

        async def _crash(session, order):
            raise RuntimeError("worker lost before fulfilment")

        monkeypatch.setattr(order_service, "_fulfill_completed", _crash)
        with pytest.raises(RuntimeError):
            await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])
        monkeypatch.undo()

        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.CAPTURED
        assert stored.provider_capture_id == f"CAP-{intent.intent_id}"
        assert await balance_of(seed["user"]) == 0
        calls = gateway.capture_calls

        result = await order_service.capture_and_complete(
            db, intent.order.id, intent.intent_id, None, source="webhook"
        )

        assert result.replayed is False
        assert result.order.status == OrderStatus.COMPLETED
        assert gateway.capture_calls == calls
        assert await balance_of(seed["user"]) == 500
        assert await _ledger_entries(session_factory, intent.order.id) == 1

    @pytest.mark.asyncio
    async def test_capture_error_after_concurrent_capture_does_not_fail_order(
        self, seed, db, order_service, gateway, fetch, balance_of, session_factory, monkeypatch
    ):
        """Test: el proveedor cobra pero responde con error mientras otro llamador ya movió la orden a CAPTURED."""
        intent = await _awaiting(order_service, db, seed["user"])
        real_capture = gateway.capture

        async def _captured_then_errored(intent_id):
            capture = await real_capture(intent_id)
            async with session_factory() as other:
                async with other.begin():
                    await OrderRepository().transition(
                        other,
                        intent.order.id,
                        OrderStatus.CAPTURED,
                        provider_capture_id=capture.capture_id,
                        payer_id=capture.payer_id,
                        payer_email=capture.payer_email,
                    )
            raise GatewayFailedError("Provider timed out after capturing")

        monkeypatch.setattr(gateway, "capture", _captured_then_errored)

        result = await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        assert result.order.status == OrderStatus.COMPLETED
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.COMPLETED
        assert stored.failure_code is None
        assert await balance_of(seed["user"]) == 500
        assert await _ledger_entries(session_factory, intent.order.id) == 1

    @pytest.mark.asyncio
    async def test_capture_error_after_concurrent_completion_replays(
        self, seed, db, order_service, gateway, fetch, balance_of, session_factory, monkeypatch
    ):
        """Test: si el webhook completó la orden mientras esta captura fallaba, se devuelve el replay."""
        intent = await _awaiting(order_service, db, seed["user"])
        real_capture = gateway.capture

        async def _webhook_wins(intent_id):
            monkeypatch.setattr(gateway, "capture", real_capture)
            async with session_factory() as other:
                await order_service.capture_and_complete(
                    other, intent.order.id, intent_id, None, source="webhook"
                )
            raise GatewayFailedError("Provider reports the intent as already captured")

        monkeypatch.setattr(gateway, "capture", _webhook_wins)

        result = await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        assert result.replayed is True
        assert result.fulfillment["credits_granted"] == 500
        stored = await fetch(Order, intent.order.id)
        assert stored.status == OrderStatus.COMPLETED
        assert stored.failure_code is None
        assert await balance_of(seed["user"]) == 500
        assert await _ledger_entries(session_factory, intent.order.id) == 1

    @pytest.mark.asyncio
    async def test_created_order_cannot_be_captured(self, seed, db, order_service):
        order = await order_service.create_order(db, seed["user"], "credits-500")
        with pytest.raises(ConflictError):
            await order_service.capture_and_complete(db, order.id, "STUB-00000001", seed["user"])


class TestProviderFulfilment:
    @pytest.mark.asyncio
    async def test_reclaim_completes_with_deferred_support_request(self, seed, db, order_service, fetch):
        intent = await _awaiting(
            order_service, db, seed["user"], "reclaim", {"requested_nickname": "proGamer"}
        )
        result = await order_service.capture_and_complete(db, intent.order.id, intent.intent_id, seed["user"])

        assert result.order.status == OrderStatus.COMPLETED
        assert result.order.fulfillment_status == FulfillmentStatus.DEFERRED
        assert result.fulfillment["status"] == "pendiente"
        assert result.fulfillment["nickname"] == "proGamer"


class TestHistory:
    @pytest.mark.asyncio
    async def test_history_is_paginated_newest_first(self, seed, db, order_service):
        created = []
        for _ in range(3):
            created.append(await order_service.create_order(db, seed["user"], "credits-500"))
        await order_service.create_order(db, seed["rival"], "credits-500")

        items, total, limit, offset = await order_service.list_history(db, seed["user"], limit=2, offset=0)

        assert total == 3
        assert (limit, offset) == (2, 0)
        assert len(items) == 2
        assert all(o.user_id == seed["user"] for o in items)
        assert items[0].created_at >= items[1].created_at

        rest, _, _, _ = await order_service.list_history(db, seed["user"], limit=2, offset=2)
        assert len(rest) == 1
        ids = {o.id for o in items} | {o.id for o in rest}
        assert ids == {o.id for o in created}

    def test_page_bounds_are_clamped(self, order_service):
        assert order_service.page_bounds(None, None) == (20, 0)
        assert order_service.page_bounds(10_000, -5) == (100, 0)

    @pytest.mark.asyncio
    async def test_get_order_is_owner_only(self, seed, db, order_service):
        order = await order_service.create_order(db, seed["user"], "credits-500")

        fetched = await order_service.get_order(db, order.id, seed["user"])
        assert fetched.id == order.id
        with pytest.raises(ForbiddenError):
            await order_service.get_order(db, order.id, seed["rival"])
        with pytest.raises(NotFoundError):
            await order_service.get_order(db, "missing", seed["user"])

# Fin del archivo backend/tests/modules/tienda/services/test_order_service_provider.py
