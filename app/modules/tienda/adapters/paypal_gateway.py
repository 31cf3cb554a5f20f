# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/adapters/paypal_gateway.py

Integración con la REST API de PayPal (Orders v2) sobre httpx.

- OAuth2 client-credentials con cache del token hasta 60s antes de expirar.
- Reintentos acotados (retry_with_backoff) ante red, timeouts, 429 y 5xx.
- Al agotar reintentos se lanza GatewayFailedError.
- 422 ORDER_ALREADY_CAPTURED: se relee la orden y se devuelve la captura
  existente (captura idempotente).
- 422 ORDER_NOT_APPROVED: PaymentNotApprovedError (la orden no cambia).
- Cualquier otro 4xx: GatewayFailedError.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

import httpx

from app.shared.config.settings_tienda import TiendaSettings, get_tienda_settings
from app.shared.core.http_retry_utils import RetryHook, retry_with_backoff
from app.modules.tienda.exceptions import GatewayFailedError, PaymentNotApprovedError
from .base import CaptureResult, IntentResult, PaymentGateway

logger = logging.getLogger(__name__)

PAYPAL_SANDBOX_URL = "https://api-m.sandbox.paypal.com"
PAYPAL_LIVE_URL = "https://api-m.paypal.com"

TOKEN_EXPIRY_MARGIN_SECONDS = 60

# Headers de PayPal necesarios para verify-webhook-signature
WEBHOOK_HEADERS = {
    "auth_algo": "paypal-auth-algo",
    "cert_url": "paypal-cert-url",
    "transmission_id": "paypal-transmission-id",
    "transmission_sig": "paypal-transmission-sig",
    "transmission_time": "paypal-transmission-time",
}


def _format_amount(amount: Decimal) -> str:
    return str(Decimal(amount).quantize(Decimal("0.01")))


def _issue_of(response: httpx.Response) -> Optional[str]:
    """Extrae details[0].issue de un error 4xx de PayPal."""
    try:
        body = response.json()
    except ValueError:
        return None
    details = body.get("details") or []
    if details and isinstance(details[0], dict):
        return details[0].get("issue")
    return body.get("name")


def parse_capture(data: Mapping[str, Any]) -> CaptureResult:
    """
    Normaliza la respuesta de captura (o el detalle de una orden capturada)
    tomando purchase_units[0].payments.captures[0].
    """
    try:
        unit = (data.get("purchase_units") or [])[0]
        capture = ((unit.get("payments") or {}).get("captures") or [])[0]
        amount = capture["amount"]
        value = Decimal(str(amount["value"]))
    except (IndexError, KeyError, TypeError, InvalidOperation) as e:
        raise GatewayFailedError(
            f"PayPal response has no capture data for order {data.get('id')}"
        ) from e

    payer = data.get("payer") or {}
    return CaptureResult(
        intent_id=str(data.get("id")),
        capture_id=str(capture["id"]),
        status=str(capture.get("status", "")),
        amount=value,
        currency=str(amount.get("currency_code", "")),
        payer_id=payer.get("payer_id"),
        payer_email=payer.get("email_address"),
        raw=dict(data),
    )


class PayPalGateway(PaymentGateway):
    """Pasarela PayPal real (Orders v2)."""

    name = "paypal"

    def __init__(
        self,
        settings: Optional[TiendaSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        on_retry: Optional[RetryHook] = None,
    ) -> None:
        self.settings = settings or get_tienda_settings()
        self.base_url = (
            PAYPAL_LIVE_URL if self.settings.paypal_mode == "live" else PAYPAL_SANDBOX_URL
        )
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.paypal_timeout_seconds),
        )
        self._on_retry = on_retry
        self._token: Optional[str] = None
        self._token_expires_at: float = 0.0

    # ------------------------------------------------------------------
    # Infra
    # ------------------------------------------------------------------
    @property
    def is_configured(self) -> bool:
        return bool(self.settings.paypal_client_id and self.settings.paypal_client_secret)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Llamada HTTP con la política de reintentos de la tienda."""
        func = getattr(self._client, method)
        try:
            return await retry_with_backoff(
                func,
                f"{self.base_url}{path}",
                max_retries=self.settings.gateway_max_retries,
                base_delay=self.settings.gateway_base_delay_seconds,
                max_delay=self.settings.gateway_max_delay_seconds,
                on_retry=self._on_retry,
                **kwargs,
            )
        except httpx.HTTPStatusError as e:
            raise GatewayFailedError(
                f"PayPal {method.upper()} {path} failed with HTTP {e.response.status_code} after retries"
            ) from e
        except (httpx.TransportError, httpx.TimeoutException) as e:
            raise GatewayFailedError(
                f"PayPal {method.upper()} {path} unreachable after retries: {type(e).__name__}"
            ) from e

    async def _access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        if not self.is_configured:
            raise GatewayFailedError("PayPal is not configured (PAYPAL_CLIENT_ID / PAYPAL_CLIENT_SECRET)")

        response = await self._send(
            "post",
            "/v1/oauth2/token",
            auth=(self.settings.paypal_client_id, self.settings.paypal_client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            logger.error("PayPal token request failed: %s - %s", response.status_code, response.text[:200])
            raise GatewayFailedError("Could not authenticate with PayPal")

        data = response.json()
        expires_in = int(data.get("expires_in", 3600))
        self._token = data["access_token"]
        self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        logger.debug("PayPal access token cacheado (TTL=%ss)", expires_in)
        return self._token

    async def _authorized(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        token = await self._access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            **kwargs.pop("headers", {}),
        }
        response = await self._send(method, path, headers=headers, **kwargs)
        if response.status_code == 401:
            # token revocado antes de tiempo: se renueva una sola vez
            self._token = None
            headers["Authorization"] = f"Bearer {await self._access_token()}"
            response = await self._send(method, path, headers=headers, **kwargs)
        return response

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
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": reference_id,
                    "description": description[:127],
                    "amount": {"currency_code": currency, "value": _format_amount(amount)},
                }
            ],
            "application_context": {
                "brand_name": self.settings.paypal_brand_name,
                "landing_page": "NO_PREFERENCE",
                "user_action": "PAY_NOW",
                "return_url": self.settings.return_url,
                "cancel_url": self.settings.cancel_url,
            },
        }
        response = await self._authorized(
            "post",
            "/v2/checkout/orders",
            json=payload,
            headers={"PayPal-Request-Id": f"intent-{reference_id}"},
        )
        if response.status_code not in (200, 201):
            logger.error(
                "PayPal create order failed for reference=%s: %s - %s",
                reference_id, response.status_code, response.text[:200],
            )
            raise GatewayFailedError(f"PayPal rejected order creation (HTTP {response.status_code})")

        data = response.json()
        approval_url = next(
            (
                link.get("href")
                for link in data.get("links", [])
                if link.get("rel") in ("approve", "payer-action")
            ),
            None,
        )
        if not approval_url:
            raise GatewayFailedError("PayPal response has no approval link")

        logger.info("Orden PayPal creada: %s (reference=%s)", data["id"], reference_id)
        return IntentResult(intent_id=data["id"], approval_url=approval_url, status=data.get("status", "CREATED"))

    async def capture(self, intent_id: str) -> CaptureResult:
        response = await self._authorized(
            "post",
            f"/v2/checkout/orders/{intent_id}/capture",
            json={},
            headers={"PayPal-Request-Id": f"capture-{intent_id}"},
        )

        if response.status_code in (200, 201):
            result = parse_capture(response.json())
            logger.info("Orden PayPal capturada: %s capture=%s", intent_id, result.capture_id)
            return result

        if response.status_code == 422:
            issue = _issue_of(response)
            if issue == "ORDER_ALREADY_CAPTURED":
                logger.info("PayPal order %s already captured; reading existing capture", intent_id)
                existing = await self.get_capture_status(intent_id)
                if existing is None:
                    raise GatewayFailedError(f"PayPal order {intent_id} reported captured but has no capture")
                return existing
            if issue == "ORDER_NOT_APPROVED":
                raise PaymentNotApprovedError()
            raise GatewayFailedError(f"PayPal capture rejected: {issue or 'UNPROCESSABLE_ENTITY'}")

        logger.error(
            "PayPal capture failed for %s: %s - %s",
            intent_id, response.status_code, response.text[:200],
        )
        raise GatewayFailedError(f"PayPal capture failed (HTTP {response.status_code})")

    async def get_capture_status(self, intent_id: str) -> Optional[CaptureResult]:
        response = await self._authorized("get", f"/v2/checkout/orders/{intent_id}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise GatewayFailedError(f"PayPal order lookup failed (HTTP {response.status_code})")

        data = response.json()
        if data.get("status") != "COMPLETED":
            return None
        return parse_capture(data)

    async def verify_webhook(
        self, headers: Mapping[str, str], event: Mapping[str, Any]
    ) -> bool:
        """
        Verifica la firma vía /v1/notifications/verify-webhook-signature.
        Fail-closed: faltantes o errores del proveedor devuelven False.
        """
        lowered = {k.lower(): v for k, v in headers.items()}
        values = {field: lowered.get(header) for field, header in WEBHOOK_HEADERS.items()}
        missing = [header for field, header in WEBHOOK_HEADERS.items() if not values[field]]
        if missing:
            logger.warning("PayPal webhook rechazado: faltan headers %s", missing)
            return False
        if not self.settings.paypal_webhook_id:
            logger.error("PayPal webhook rechazado: PAYPAL_WEBHOOK_ID no configurado")
            return False

        payload = {**values, "webhook_id": self.settings.paypal_webhook_id, "webhook_event": dict(event)}
        try:
            response = await self._authorized(
                "post", "/v1/notifications/verify-webhook-signature", json=payload
            )
        except GatewayFailedError as e:
            logger.error("PayPal webhook rechazado: verify API no disponible (%s)", e.message)
            return False

        if response.status_code != 200:
            logger.warning(
                "PayPal verify-webhook-signature failed: %s - %s",
                response.status_code, response.text[:200],
            )
            return False

        status = response.json().get("verification_status", "")
        if status != "SUCCESS":
            logger.warning("PayPal webhook rechazado: verification_status=%s", status)
            return False
        return True


__all__ = ["PayPalGateway", "parse_capture", "PAYPAL_SANDBOX_URL", "PAYPAL_LIVE_URL"]

# Fin del archivo backend/app/modules/tienda/adapters/paypal_gateway.py
