# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/adapters/stub_gateway.py

Pasarela en memoria para desarrollo y pruebas (USE_PAYMENT_STUBS=true).

No realiza llamadas de red. Es determinista y expone ganchos para simular
los casos que interesan al gestor de órdenes:
- fallas definitivas al registrar o capturar (fail_next_register / fail_next_capture)
- pago aún no aprobado por el comprador (require_approval + approve())
- monto o divisa capturados distintos a los de la orden (capture_overrides)
- captura repetida: devuelve la misma captura (idempotente)

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from app.modules.tienda.exceptions import GatewayFailedError, PaymentNotApprovedError
from .base import CaptureResult, IntentResult, PaymentGateway

logger = logging.getLogger(__name__)


@dataclass
class _StubIntent:
    intent_id: str
    reference_id: str
    amount: Decimal
    currency: str
    approved: bool
    capture: Optional[CaptureResult] = None


class StubGateway(PaymentGateway):
    name = "stub"

    def __init__(self, *, require_approval: bool = False, webhook_valid: bool = True) -> None:
        self.require_approval = require_approval
        self.webhook_valid = webhook_valid
        self.fail_next_register = 0
        self.fail_next_capture = 0
        self.capture_overrides: dict[str, dict[str, Any]] = {}
        self.capture_calls = 0
        self._intents: dict[str, _StubIntent] = {}
        self._seq = itertools.count(1)

    # ------------------------------------------------------------------
    # Ganchos de prueba
    # ------------------------------------------------------------------
    def approve(self, intent_id: str) -> None:
        self._intents[intent_id].approved = True

    def override_capture(
        self,
        intent_id: str,
        *,
        amount: Optional[Decimal] = None,
        currency: Optional[str] = None,
    ) -> None:
        override: dict[str, Any] = {}
        if amount is not None:
            override["amount"] = Decimal(amount)
        if currency is not None:
            override["currency"] = currency
        self.capture_overrides[intent_id] = override

    def intent(self, intent_id: str) -> Optional[_StubIntent]:
        return self._intents.get(intent_id)

    # ------------------------------------------------------------------
    # PaymentGateway
    # ------------------------------------------------------------------
    async def register_intent(
        self,
        *,
        amount: Decimal,
        currency: str,
        reference_id: str,
        description: str,
    ) -> IntentResult:
        if self.fail_next_register > 0:
            self.fail_next_register -= 1
            raise GatewayFailedError("Stub gateway: simulated provider outage")

        intent_id = f"STUB-{next(self._seq):08d}"
        self._intents[intent_id] = _StubIntent(
            intent_id=intent_id,
            reference_id=reference_id,
            amount=Decimal(amount),
            currency=currency,
            approved=not self.require_approval,
        )
        logger.warning("STUB: intent %s registrado para reference=%s", intent_id, reference_id)
        return IntentResult(
            intent_id=intent_id,
            approval_url=f"https://paypal.example/checkoutnow?token={intent_id}",
        )

    async def capture(self, intent_id: str) -> CaptureResult:
        self.capture_calls += 1
        if self.fail_next_capture > 0:
            self.fail_next_capture -= 1
            raise GatewayFailedError("Stub gateway: simulated capture failure")

        intent = self._intents.get(intent_id)
        if intent is None:
            raise GatewayFailedError(f"Stub gateway: unknown intent {intent_id}")
        if intent.capture is not None:
            return intent.capture
        if not intent.approved:
            raise PaymentNotApprovedError()

        override = self.capture_overrides.get(intent_id, {})
        intent.capture = CaptureResult(
            intent_id=intent_id,
            capture_id=f"CAP-{intent_id}",
            status="COMPLETED",
            amount=override.get("amount", intent.amount),
            currency=override.get("currency", intent.currency),
            payer_id="STUBPAYER",
            payer_email="buyer@example.com",
        )
        logger.warning("STUB: intent %s capturado", intent_id)
        return intent.capture

    async def get_capture_status(self, intent_id: str) -> Optional[CaptureResult]:
        intent = self._intents.get(intent_id)
        return intent.capture if intent else None

    async def verify_webhook(
        self, headers: Mapping[str, str], event: Mapping[str, Any]
    ) -> bool:
        return self.webhook_valid


__all__ = ["StubGateway"]

# Fin del archivo backend/app/modules/tienda/adapters/stub_gateway.py
