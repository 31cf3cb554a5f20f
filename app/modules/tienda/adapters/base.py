# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/adapters/base.py

Contrato de la pasarela de pagos que consume el gestor de órdenes.

Los resultados se normalizan a dataclasses para que el servicio de órdenes
no dependa de la forma del JSON de cada proveedor.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class IntentResult:
    intent_id: str
    approval_url: Optional[str]
    status: str = "CREATED"


@dataclass(frozen=True)
class CaptureResult:
    """Captura confirmada (o ya existente) de un intento de pago."""

    intent_id: str
    capture_id: str
    status: str
    amount: Decimal
    currency: str
    payer_id: Optional[str] = None
    payer_email: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_completed(self) -> bool:
        return self.status.upper() == "COMPLETED"


class PaymentGateway(ABC):
    """
    Pasarela de pagos externa.

    `capture` debe ser idempotente del lado del proveedor: capturar dos veces
    el mismo intento devuelve la captura existente en lugar de cobrar otra vez.
    """

    name: str = "gateway"

    @abstractmethod
    async def register_intent(
        self,
        *,
        amount: Decimal,
        currency: str,
        reference_id: str,
        description: str,
    ) -> IntentResult:
        ...

    @abstractmethod
    async def capture(self, intent_id: str) -> CaptureResult:
        ...

    @abstractmethod
    async def get_capture_status(self, intent_id: str) -> Optional[CaptureResult]:
        ...

    @abstractmethod
    async def verify_webhook(
        self, headers: Mapping[str, str], event: Mapping[str, Any]
    ) -> bool:
        ...

    async def aclose(self) -> None:
        """Libera recursos (clientes HTTP); por defecto no hace nada."""
        return None


__all__ = ["IntentResult", "CaptureResult", "PaymentGateway"]

# Fin del archivo backend/app/modules/tienda/adapters/base.py
