# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/adapters/__init__.py

Adaptadores de la pasarela de pagos y selección de implementación:
USE_PAYMENT_STUBS=true → StubGateway; en otro caso PayPalGateway.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Optional

from app.shared.config.settings_tienda import get_tienda_settings
from app.modules.tienda.metrics import gateway_retry_hook
from .base import CaptureResult, IntentResult, PaymentGateway
from .paypal_gateway import PayPalGateway, parse_capture
from .stub_gateway import StubGateway

_gateway: Optional[PaymentGateway] = None


def get_payment_gateway() -> PaymentGateway:
    """Singleton de proceso (el cliente httpx y el token se reutilizan)."""
    global _gateway
    if _gateway is None:
        settings = get_tienda_settings()
        if settings.use_payment_stubs:
            _gateway = StubGateway()
        else:
            _gateway = PayPalGateway(settings, on_retry=gateway_retry_hook("paypal"))
    return _gateway


def set_payment_gateway(gateway: Optional[PaymentGateway]) -> None:
    """Inyecta una pasarela (tests) o limpia el singleton con None."""
    global _gateway
    _gateway = gateway


async def close_payment_gateway() -> None:
    global _gateway
    if _gateway is not None:
        await _gateway.aclose()
        _gateway = None


__all__ = [
    "PaymentGateway",
    "IntentResult",
    "CaptureResult",
    "PayPalGateway",
    "StubGateway",
    "parse_capture",
    "get_payment_gateway",
    "set_payment_gateway",
    "close_payment_gateway",
]

# Fin del archivo backend/app/modules/tienda/adapters/__init__.py
