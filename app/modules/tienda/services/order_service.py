# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/services/order_service.py

Gestor de órdenes de la tienda (motor de liquidación).

Cada operación es un guion transaccional explícito: recibe la sesión y el
user_id verificado, y abre sus propias unidades de trabajo con
`async with session.begin():`. Las llamadas al proveedor de pagos quedan
siempre FUERA de las transacciones.

Garantías:
- Toda escritura de estado es un UPDATE compare-and-set sobre los orígenes
  válidos de ORDER_TRANSITIONS.
- La transición a COMPLETED, el cargo/abono en el ledger y la entrega se
  confirman juntos o no se confirma nada.
- capture_and_complete es idempotente: si la orden ya está COMPLETED con el
  mismo intento, se devuelve el resultado guardado sin efectos.
- Un error tardío de captura solo falla órdenes que siguen esperando al
  proveedor; nunca mueve a FAILED una orden ya cobrada.
- Validación, NotFound y Forbidden se lanzan antes de cualquier escritura.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_tienda import TiendaSettings, get_tienda_settings
from app.modules.tienda.adapters import CaptureResult, PaymentGateway, get_payment_gateway
from app.modules.tienda.enums import LedgerReason, OrderStatus, PaymentMethod
from app.modules.tienda.exceptions import (
    AmountMismatchError,
    ConflictError,
    CurrencyMismatchError,
    ForbiddenError,
    GatewayFailedError,
    IntentMismatchError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.modules.tienda.metrics import (
    DUPLICATE_DELIVERIES_TOTAL,
    ORDERS_CANCELLED_TOTAL,
    ORDERS_COMPLETED_TOTAL,
    ORDERS_CREATED_TOTAL,
    ORDERS_FAILED_TOTAL,
)
from app.modules.tienda.models import Order
from app.modules.tienda.repositories import OrderRepository, StoreItemRepository
from app.modules.tienda.schemas.metadata_schemas import dump_metadata, parse_purchase_metadata
from .fulfillment_service import FulfillmentOutcome, FulfillmentService
from .ledger_service import LedgerService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CompletionResult:
    order: Order
    fulfillment: dict[str, Any] = field(default_factory=dict)
    replayed: bool = False


@dataclass
class ProviderIntent:
    order: Order
    intent_id: str
    approval_url: Optional[str]


class OrderService:
    def __init__(
        self,
        *,
        gateway: Optional[PaymentGateway] = None,
        settings: Optional[TiendaSettings] = None,
        order_repo: Optional[OrderRepository] = None,
        item_repo: Optional[StoreItemRepository] = None,
        ledger_service: Optional[LedgerService] = None,
        fulfillment_service: Optional[FulfillmentService] = None,
    ):
        self._gateway = gateway
        self.settings = settings or get_tienda_settings()
        self.order_repo = order_repo or OrderRepository()
        self.item_repo = item_repo or StoreItemRepository()
        self.ledger = ledger_service or LedgerService()
        self.fulfillment = fulfillment_service or FulfillmentService(ledger_service=self.ledger)

    @property
    def gateway(self) -> PaymentGateway:
        if self._gateway is None:
            self._gateway = get_payment_gateway()
        return self._gateway

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _load(
        self, session: AsyncSession, order_id: str, user_id: Optional[str]
    ) -> Order:
        """Relee la orden; user_id=None es un llamador de sistema (webhook)."""
        order = await self.order_repo.get_for_update(session, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found", code="order_not_found")
        if user_id is not None and order.user_id != user_id:
            raise ForbiddenError("Order does not belong to this user")
        return order

    @staticmethod
    def _replay(order: Order) -> CompletionResult:
        return CompletionResult(order=order, fulfillment=dict(order.fulfillment_result or {}), replayed=True)

    async def _fulfill_completed(self, session: AsyncSession, order: Order) -> FulfillmentOutcome:
        """Aplica la entrega de una orden que esta misma transacción movió a COMPLETED."""
        item = await self.item_repo.get(session, order.item_id)
        if item is None:
            raise NotFoundError(f"Item {order.item_id} not found", code="item_not_found")

        outcome = await self.fulfillment.apply(session, order, item)
        await self.order_repo.update_fields(
            session,
            order.id,
            expected_status=OrderStatus.COMPLETED,
            fulfillment_status=outcome.status,
            fulfillment_result=outcome.result,
            failure_code=outcome.failure_code,
            failure_reason=outcome.failure_reason,
        )
        return outcome

    # ------------------------------------------------------------------
    # Alta
    # ------------------------------------------------------------------
    async def create_order(
        self,
        session: AsyncSession,
        user_id: str,
        item_id: str,
        metadata: Optional[dict[str, Any]] = None,
        payment_method: PaymentMethod = PaymentMethod.PROVIDER,
    ) -> Order:
        """
        Crea la orden en CREATED. Monto y divisa salen del catálogo, nunca
        del cliente: provider → price/currency; balance → credit_price en
        créditos (sin divisa).
        """
        payment_method = PaymentMethod(payment_method)
        async with session.begin():
            item = await self.item_repo.get_active(session, item_id)
            if item is None:
                raise NotFoundError(f"Item {item_id} not found or inactive", code="item_not_found")

            parsed = parse_purchase_metadata(item.item_type, item.service_kind, metadata)

            if payment_method == PaymentMethod.BALANCE:
                if not item.payable_with_balance:
                    raise ValidationError(
                        f"Item {item_id} cannot be paid with balance", code="not_payable_with_balance"
                    )
                amount = Decimal(item.credit_price)
                currency = None
            else:
                if item.currency != self.settings.default_currency:
                    raise ValidationError(
                        f"Currency {item.currency} is not supported", code="unsupported_currency"
                    )
                amount = Decimal(item.price).quantize(CENTS)
                currency = item.currency

            order = await self.order_repo.create(
                session,
                user_id=user_id,
                item_id=item.id,
                item_type=item.item_type,
                service_kind=item.service_kind,
                payment_method=payment_method,
                amount=amount,
                currency=currency,
                status=OrderStatus.CREATED,
                metadata_json=dump_metadata(parsed),
            )

        ORDERS_CREATED_TOTAL.labels(payment_method.value, str(order.item_type)).inc()
        logger.info(
            "Order created: id=%s user=%s item=%s method=%s amount=%s",
            order.id, user_id, item_id, payment_method.value, amount,
        )
        return order

    # ------------------------------------------------------------------
    # Flujo proveedor
    # ------------------------------------------------------------------
    async def register_provider_intent(
        self, session: AsyncSession, order_id: str, user_id: str
    ) -> ProviderIntent:
        async with session.begin():
            order = await self._load(session, order_id, user_id)
            if order.payment_method != PaymentMethod.PROVIDER:
                raise ValidationError("Order is not payable through the provider", code="wrong_payment_method")
            if order.status != OrderStatus.CREATED:
                raise InvalidTransitionError(order.id, order.status, OrderStatus.AWAITING_PROVIDER_APPROVAL)
            item = await self.item_repo.get(session, order.item_id)
            description = item.name if item else order.item_id

        try:
            intent = await self.gateway.register_intent(
                amount=order.amount,
                currency=order.currency,
                reference_id=order.id,
                description=description,
            )
        except GatewayFailedError as e:
            await self.mark_failed(session, order.id, code=e.code, reason=e.message)
            raise

        async with session.begin():
            moved = await self.order_repo.transition(
                session,
                order.id,
                OrderStatus.AWAITING_PROVIDER_APPROVAL,
                provider_intent_id=intent.intent_id,
            )
            order = await self._load(session, order.id, None)
            if not moved:
                raise InvalidTransitionError(order.id, order.status, OrderStatus.AWAITING_PROVIDER_APPROVAL)

        logger.info("Order %s awaiting provider approval (intent=%s)", order.id, intent.intent_id)
        return ProviderIntent(order=order, intent_id=intent.intent_id, approval_url=intent.approval_url)

    def _check_capture(self, order: Order, capture: CaptureResult) -> None:
        if (capture.currency or "").upper() != (order.currency or "").upper():
            raise CurrencyMismatchError(order.currency, capture.currency)
        if Decimal(capture.amount).quantize(CENTS) != Decimal(order.amount).quantize(CENTS):
            raise AmountMismatchError(order.amount, capture.amount)

    async def capture_and_complete(
        self,
        session: AsyncSession,
        order_id: str,
        provider_intent_id: str,
        user_id: Optional[str] = None,
        *,
        source: str = "client",
    ) -> CompletionResult:
        """
        Captura el pago y completa la orden (idempotente).

        Fases:
        1. lectura y validación (dueño, intento)
        2. captura con el proveedor, fuera de transacción
        3. AWAITING → CAPTURED con el capture_id
        4. CAPTURED → COMPLETED + entrega en UNA unidad de trabajo
        """
        async with session.begin():
            order = await self._load(session, order_id, user_id)
            if order.payment_method != PaymentMethod.PROVIDER:
                raise ValidationError("Order is not payable through the provider", code="wrong_payment_method")
            if not order.provider_intent_id or order.provider_intent_id != provider_intent_id:
                raise IntentMismatchError(order.id)
            status = OrderStatus(order.status)

        if status == OrderStatus.COMPLETED:
            DUPLICATE_DELIVERIES_TOTAL.labels(source).inc()
            logger.info("Duplicate capture for completed order=%s (source=%s)", order.id, source)
            return self._replay(order)
        if status not in (OrderStatus.AWAITING_PROVIDER_APPROVAL, OrderStatus.CAPTURED):
            raise InvalidTransitionError(order.id, status, OrderStatus.COMPLETED)

        if status == OrderStatus.AWAITING_PROVIDER_APPROVAL:
            try:
                capture = await self.gateway.capture(provider_intent_id)
            except GatewayFailedError as e:
                if await self._fail_awaiting(session, order.id, code=e.code, reason=e.message):
                    raise
                capture = None

            if capture is not None and not capture.is_completed:
                if capture.status.upper() not in ("DECLINED", "FAILED"):
                    raise ConflictError(
                        f"Provider capture is {capture.status}; retry later", code="capture_pending"
                    )
                if await self._fail_awaiting(
                    session, order.id, code="capture_declined",
                    reason=f"Provider capture status {capture.status}",
                ):
                    raise GatewayFailedError(f"Provider declined the capture ({capture.status})", code="capture_declined")
                capture = None

            if capture is not None:
                try:
                    self._check_capture(order, capture)
                except (AmountMismatchError, CurrencyMismatchError) as e:
                    logger.error(
                        "Capture mismatch on order=%s intent=%s: %s",
                        order.id, provider_intent_id, e.message,
                    )
                    if await self._fail_awaiting(session, order.id, code=e.code, reason=e.message):
                        raise
                    capture = None

            if capture is not None:
                async with session.begin():
                    captured = await self.order_repo.transition(
                        session,
                        order.id,
                        OrderStatus.CAPTURED,
                        provider_capture_id=capture.capture_id,
                        payer_id=capture.payer_id,
                        payer_email=capture.payer_email,
                    )
                if not captured:
                    # otro llamador ya la movió; la fase siguiente decide con el estado real
                    logger.info("Order %s left awaiting state during capture (capture=%s)", order.id, capture.capture_id)

        async with session.begin():
            order = await self._load(session, order.id, None)
            if order.status == OrderStatus.COMPLETED:
                replay = True
            elif order.status != OrderStatus.CAPTURED:
                raise InvalidTransitionError(order.id, order.status, OrderStatus.COMPLETED)
            else:
                replay = not await self.order_repo.transition(
                    session,
                    order.id,
                    OrderStatus.COMPLETED,
                    sources=frozenset({OrderStatus.CAPTURED}),
                    completed_at=_utcnow(),
                )
                if not replay:
                    await self._fulfill_completed(session, order)
            order = await self._load(session, order.id, None)

        if replay:
            DUPLICATE_DELIVERIES_TOTAL.labels(source).inc()
            logger.info("Concurrent capture lost the race for order=%s (source=%s)", order.id, source)
            return self._replay(order)

        ORDERS_COMPLETED_TOTAL.labels(PaymentMethod.PROVIDER.value).inc()
        logger.info("Order %s completed via provider (capture=%s)", order.id, order.provider_capture_id)
        return CompletionResult(order=order, fulfillment=dict(order.fulfillment_result or {}))

    # ------------------------------------------------------------------
    # Flujo saldo
    # ------------------------------------------------------------------
    async def complete_with_balance(
        self, session: AsyncSession, order_id: str, user_id: str
    ) -> CompletionResult:
        """
        CREATED → COMPLETED pagando con saldo, en una sola unidad de trabajo:
        transición compare-and-set, débito condicionado, asiento y entrega.
        Con saldo insuficiente todo se revierte y la orden queda en CREATED.
        """
        async with session.begin():
            order = await self._load(session, order_id, user_id)
            if order.payment_method != PaymentMethod.BALANCE:
                raise ValidationError("Order is not payable with balance", code="wrong_payment_method")

            if order.status == OrderStatus.COMPLETED:
                replay = True
            elif order.status != OrderStatus.CREATED:
                raise InvalidTransitionError(order.id, order.status, OrderStatus.COMPLETED)
            else:
                replay = not await self.order_repo.transition(
                    session,
                    order.id,
                    OrderStatus.COMPLETED,
                    sources=frozenset({OrderStatus.CREATED}),
                    completed_at=_utcnow(),
                )
                if not replay:
                    await self.ledger.debit(
                        session,
                        user_id,
                        int(order.amount),
                        reason=LedgerReason.PURCHASE_DEBIT,
                        idempotency_key=f"order:{order.id}:debit",
                        order_id=order.id,
                    )
                    await self._fulfill_completed(session, order)
            order = await self._load(session, order.id, None)

        if replay:
            if order.status != OrderStatus.COMPLETED:
                raise InvalidTransitionError(order.id, order.status, OrderStatus.COMPLETED)
            DUPLICATE_DELIVERIES_TOTAL.labels("balance").inc()
            logger.info("Duplicate balance completion for order=%s", order.id)
            return self._replay(order)

        ORDERS_COMPLETED_TOTAL.labels(PaymentMethod.BALANCE.value).inc()
        logger.info("Order %s completed with balance (%s credits)", order.id, order.amount)
        return CompletionResult(order=order, fulfillment=dict(order.fulfillment_result or {}))

    async def purchase_with_balance(
        self,
        session: AsyncSession,
        user_id: str,
        item_id: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> CompletionResult:
        order = await self.create_order(
            session, user_id, item_id, metadata, payment_method=PaymentMethod.BALANCE
        )
        return await self.complete_with_balance(session, order.id, user_id)

    # ------------------------------------------------------------------
    # Cancelación / falla
    # ------------------------------------------------------------------
    async def cancel_order(self, session: AsyncSession, order_id: str, user_id: str) -> Order:
        async with session.begin():
            order = await self._load(session, order_id, user_id)
            moved = await self.order_repo.transition(
                session, order.id, OrderStatus.CANCELLED, cancelled_at=_utcnow()
            )
            if not moved:
                raise InvalidTransitionError(order.id, order.status, OrderStatus.CANCELLED)
            order = await self._load(session, order.id, None)

        ORDERS_CANCELLED_TOTAL.labels(str(order.payment_method)).inc()
        logger.info("Order %s cancelled by user=%s", order.id, user_id)
        return order

    async def mark_failed(
        self,
        session: AsyncSession,
        order_id: str,
        *,
        code: str,
        reason: str,
        sources: Optional[frozenset[OrderStatus]] = None,
    ) -> bool:
        """
        Falla terminal. Con `sources` solo se aplica si la orden sigue en
        alguno de esos estados. Devuelve False si no se movió.
        """
        async with session.begin():
            moved = await self.order_repo.transition(
                session,
                order_id,
                OrderStatus.FAILED,
                sources=sources,
                failure_code=code,
                failure_reason=reason,
                failed_at=_utcnow(),
            )
            order = await self.order_repo.get_for_update(session, order_id)

        if moved:
            ORDERS_FAILED_TOTAL.labels(str(order.payment_method), code).inc()
            logger.warning("Order %s failed: %s (%s)", order_id, code, reason)
        else:
            logger.info("Order %s not marked failed (%s): status is %s", order_id, code, order.status)
        return bool(moved)

    async def _fail_awaiting(
        self, session: AsyncSession, order_id: str, *, code: str, reason: str
    ) -> bool:
        """
        Falla una orden que aún espera al proveedor. Devuelve False cuando
        otro llamador ya la capturó o completó: el error de pasarela se
        descarta y la captura sigue con el estado real.
        """
        if await self.mark_failed(
            session, order_id, code=code, reason=reason,
            sources=frozenset({OrderStatus.AWAITING_PROVIDER_APPROVAL}),
        ):
            return True
        async with session.begin():
            current = await self._load(session, order_id, None)
        if current.status in (OrderStatus.CAPTURED, OrderStatus.COMPLETED):
            logger.warning(
                "Capture error on order=%s ignored (%s): already %s by another caller",
                order_id, code, current.status,
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    async def get_order(self, session: AsyncSession, order_id: str, user_id: str) -> Order:
        async with session.begin():
            return await self._load(session, order_id, user_id)

    async def find_by_intent(self, session: AsyncSession, intent_id: str) -> Optional[Order]:
        async with session.begin():
            return await self.order_repo.get_by_intent(session, intent_id)

    def page_bounds(self, limit: Optional[int], offset: Optional[int]) -> tuple[int, int]:
        limit = limit or self.settings.page_size_default
        return max(1, min(limit, self.settings.page_size_max)), max(0, offset or 0)

    async def list_history(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> tuple[Sequence[Order], int, int, int]:
        """Historial paginado, más recientes primero: (items, total, limit, offset)."""
        limit, offset = self.page_bounds(limit, offset)
        async with session.begin():
            items = await self.order_repo.list_by_user(session, user_id, limit=limit, offset=offset)
            total = await self.order_repo.count_by_user(session, user_id)
        return items, total, limit, offset


__all__ = ["OrderService", "CompletionResult", "ProviderIntent"]

# Fin del archivo backend/app/modules/tienda/services/order_service.py
