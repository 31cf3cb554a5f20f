# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/exceptions.py

Errores de dominio del módulo Tienda.

Objetivo:
- Excepciones semánticas que lanzan servicios, adaptadores y fachadas.
- Cada una lleva un `code` estable; los ruteadores las traducen a HTTP
  (ver routes/dependencies.py) sin que los servicios dependan de FastAPI.

Validación, NotFound y Forbidden se lanzan siempre antes de cualquier
escritura. GatewayFailedError es terminal para la orden.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional


class TiendaError(Exception):
    """
    Error base para el módulo Tienda.
    """

    code: str = "tienda_error"

    def __init__(self, message: str = "Store operation failed", *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


# ---------------------------------------------------------------------------
# Validación (400)
# ---------------------------------------------------------------------------
class ValidationError(TiendaError):
    """Entrada mal formada, metadata incorrecta o artículo no pagable por ese medio."""

    code = "validation_error"

    def __init__(self, message: str = "Invalid request", *, code: Optional[str] = None) -> None:
        super().__init__(message, code=code)


class AmountMismatchError(ValidationError):
    """
    ANTI-FRAUDE: el monto capturado por el proveedor no coincide con la orden.
    """

    code = "amount_mismatch"

    def __init__(self, expected: Decimal, actual: Decimal) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Captured amount {actual} does not match order amount {expected}")


class CurrencyMismatchError(ValidationError):
    """
    ANTI-FRAUDE: la divisa capturada no coincide con la de la orden.
    """

    code = "currency_mismatch"

    def __init__(self, expected: Optional[str], actual: Optional[str]) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Captured currency {actual} does not match order currency {expected}")


# ---------------------------------------------------------------------------
# NotFound (404) / Forbidden (403)
# ---------------------------------------------------------------------------
class NotFoundError(TiendaError):
    code = "not_found"

    def __init__(self, message: str = "Resource not found", *, code: Optional[str] = None) -> None:
        super().__init__(message, code=code)


class ForbiddenError(TiendaError):
    code = "forbidden"

    def __init__(self, message: str = "Operation not allowed for this user", *, code: Optional[str] = None) -> None:
        super().__init__(message, code=code)


# ---------------------------------------------------------------------------
# Conflict (409)
# ---------------------------------------------------------------------------
class ConflictError(TiendaError):
    """La operación choca con el estado actual (orden, nickname, solicitud)."""

    code = "conflict"

    def __init__(self, message: str = "Operation conflicts with current state", *, code: Optional[str] = None) -> None:
        super().__init__(message, code=code)


class InvalidTransitionError(ConflictError):
    code = "invalid_transition"

    def __init__(self, order_id: str, current: str, target: str) -> None:
        self.order_id = order_id
        self.current = current
        self.target = target
        super().__init__(f"Order {order_id} cannot move from {current} to {target}")


class IntentMismatchError(ConflictError):
    code = "intent_mismatch"

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Provider intent does not belong to order {order_id}")


class PaymentNotApprovedError(ConflictError):
    """El comprador aún no aprueba el pago en el proveedor (reintentable por el cliente)."""

    code = "payment_not_approved"

    def __init__(self, message: str = "Payment has not been approved by the payer yet") -> None:
        super().__init__(message)


class NicknameConflictError(ConflictError):
    code = "nickname_conflict"

    def __init__(self, nickname: str) -> None:
        self.nickname = nickname
        super().__init__(f"Nickname '{nickname}' is already taken")


# ---------------------------------------------------------------------------
# Saldo (402)
# ---------------------------------------------------------------------------
class InsufficientFundsError(TiendaError):
    code = "insufficient_funds"

    def __init__(self, required: int, available: Optional[int] = None) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Insufficient balance (required={required}, available={available})")


# ---------------------------------------------------------------------------
# Proveedor de pagos (502)
# ---------------------------------------------------------------------------
class GatewayFailedError(TiendaError):
    """El proveedor falló de forma definitiva o se agotaron los reintentos."""

    code = "gateway_failed"

    def __init__(self, message: str = "Payment provider request failed", *, code: Optional[str] = None) -> None:
        super().__init__(message, code=code)


__all__ = [
    "TiendaError",
    "ValidationError",
    "AmountMismatchError",
    "CurrencyMismatchError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "InvalidTransitionError",
    "IntentMismatchError",
    "PaymentNotApprovedError",
    "NicknameConflictError",
    "InsufficientFundsError",
    "GatewayFailedError",
]

# Fin del archivo backend/app/modules/tienda/exceptions.py
