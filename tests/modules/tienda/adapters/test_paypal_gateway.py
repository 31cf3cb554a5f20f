# -*- coding: utf-8 -*-
"""
backend/tests/modules/tienda/adapters/test_paypal_gateway.py

Tests de PayPalGateway contra un transporte httpx simulado (MockTransport):
token OAuth2 cacheado, reintentos acotados, captura idempotente y
verificación de webhooks fail-closed.

Autor: Arena
Fecha: 2026-10-19
"""

from decimal import Decimal

import httpx
import pytest

from app.shared.config.settings_tienda import TiendaSettings
from app.modules.tienda.adapters.paypal_gateway import PAYPAL_LIVE_URL, PAYPAL_SANDBOX_URL, PayPalGateway
from app.modules.tienda.exceptions import GatewayFailedError, PaymentNotApprovedError

INTENT = "5O190127TN364715T"

WEBHOOK_HEADERS = {
    "PAYPAL-AUTH-ALGO": "SHA256withRSA",
    "PAYPAL-CERT-URL": "https://api.paypal.com/cert.pem",
    "PAYPAL-TRANSMISSION-ID": "tx-1",
    "PAYPAL-TRANSMISSION-SIG": "sig",
    "PAYPAL-TRANSMISSION-TIME": "2026-10-19T00:00:00Z",
}


def _settings(**overrides) -> TiendaSettings:
    values = dict(
        paypal_client_id="client",
        paypal_client_secret="secret",
        paypal_mode="sandbox",
        paypal_webhook_id="WH-1",
        gateway_max_retries=2,
        gateway_base_delay_seconds=0.001,
        gateway_max_delay_seconds=0.01,
    )
    values.update(overrides)
    return TiendaSettings(**values)


def _captured_order(amount="4.99", currency="USD", status="COMPLETED"):
    return {
        "id": INTENT,
        "status": "COMPLETED",
        "payer": {"payer_id": "PAYER1", "email_address": "buyer@example.com"},
        "purchase_units": [
            {
                "reference_id": "order-1",
                "payments": {
                    "captures": [
                        {
                            "id": "CAP-1",
                            "status": status,
                            "amount": {"currency_code": currency, "value": amount},
                        }
                    ]
                },
            }
        ],
    }


class FakePayPal:
    """Handler para httpx.MockTransport que registra llamadas por ruta."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []
        self.routes: dict[tuple[str, str], list[httpx.Response]] = {}
        self.token_requests = 0

    def on(self, method: str, path: str, *responses: httpx.Response) -> None:
        self.routes[(method, path)] = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        self.calls.append(key)
        if key == ("POST", "/v1/oauth2/token"):
            self.token_requests += 1
            if key not in self.routes:
                return httpx.Response(
                    200, json={"access_token": f"token-{self.token_requests}", "expires_in": 3600}
                )
        queue = self.routes.get(key)
        if not queue:
            return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})
        return queue.pop(0) if len(queue) > 1 else queue[0]


@pytest.fixture
def fake():
    return FakePayPal()


@pytest.fixture
async def gateway(fake):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
    gw = PayPalGateway(_settings(), client=client)
    try:
        yield gw
    finally:
        await client.aclose()


class TestConfiguration:
    @pytest.mark.asyncio
    async def test_base_url_follows_mode(self):
        sandbox = PayPalGateway(_settings())
        live = PayPalGateway(_settings(paypal_mode="live"))
        assert sandbox.base_url == PAYPAL_SANDBOX_URL
        assert live.base_url == PAYPAL_LIVE_URL
        await sandbox.aclose()
        await live.aclose()

    @pytest.mark.asyncio
    async def test_missing_credentials_fail_without_network(self, fake):
        client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        gw = PayPalGateway(_settings(paypal_client_id=None), client=client)
        with pytest.raises(GatewayFailedError):
            await gw.capture(INTENT)
        assert fake.calls == []
        await client.aclose()


class TestRegisterIntent:
    @pytest.mark.asyncio
    async def test_returns_intent_and_approval_url(self, gateway, fake):
        fake.on(
            "POST", "/v2/checkout/orders",
            httpx.Response(201, json={
                "id": INTENT,
                "status": "CREATED",
                "links": [
                    {"rel": "self", "href": "https://api/self"},
                    {"rel": "approve", "href": "https://paypal/approve"},
                ],
            }),
        )
        intent = await gateway.register_intent(
            amount=Decimal("4.99"), currency="USD", reference_id="order-1", description="500 créditos"
        )
        assert intent.intent_id == INTENT
        assert intent.approval_url == "https://paypal/approve"

    @pytest.mark.asyncio
    async def test_retries_transient_errors_then_succeeds(self, gateway, fake):
        """Test: 503 y 429 se reintentan; luego éxito."""
        fake.on(
            "POST", "/v2/checkout/orders",
            httpx.Response(503),
            httpx.Response(429),
            httpx.Response(201, json={"id": INTENT, "links": [{"rel": "payer-action", "href": "https://p/a"}]}),
        )
        intent = await gateway.register_intent(
            amount=Decimal("1"), currency="USD", reference_id="order-1", description="x"
        )
        assert intent.approval_url == "https://p/a"
        assert fake.calls.count(("POST", "/v2/checkout/orders")) == 3

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_gateway_failed(self, gateway, fake):
        fake.on("POST", "/v2/checkout/orders", httpx.Response(500))
        with pytest.raises(GatewayFailedError):
            await gateway.register_intent(
                amount=Decimal("1"), currency="USD", reference_id="order-1", description="x"
            )
        # 1 intento + gateway_max_retries
        assert fake.calls.count(("POST", "/v2/checkout/orders")) == 3

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, gateway, fake):
        fake.on("POST", "/v2/checkout/orders", httpx.Response(400, json={"name": "INVALID_REQUEST"}))
        with pytest.raises(GatewayFailedError):
            await gateway.register_intent(
                amount=Decimal("1"), currency="USD", reference_id="order-1", description="x"
            )
        assert fake.calls.count(("POST", "/v2/checkout/orders")) == 1


class TestCapture:
    @pytest.mark.asyncio
    async def test_parses_capture(self, gateway, fake):
        fake.on("POST", f"/v2/checkout/orders/{INTENT}/capture", httpx.Response(201, json=_captured_order()))
        result = await gateway.capture(INTENT)

        assert result.capture_id == "CAP-1"
        assert result.is_completed
        assert result.amount == Decimal("4.99")
        assert result.currency == "USD"
        assert result.payer_email == "buyer@example.com"

    @pytest.mark.asyncio
    async def test_already_captured_reads_existing_capture(self, gateway, fake):
        """Test: ORDER_ALREADY_CAPTURED → se devuelve la captura existente."""
        fake.on(
            "POST", f"/v2/checkout/orders/{INTENT}/capture",
            httpx.Response(422, json={"name": "UNPROCESSABLE_ENTITY", "details": [{"issue": "ORDER_ALREADY_CAPTURED"}]}),
        )
        fake.on("GET", f"/v2/checkout/orders/{INTENT}", httpx.Response(200, json=_captured_order()))

        result = await gateway.capture(INTENT)
        assert result.capture_id == "CAP-1"

    @pytest.mark.asyncio
    async def test_not_approved_is_conflict(self, gateway, fake):
        fake.on(
            "POST", f"/v2/checkout/orders/{INTENT}/capture",
            httpx.Response(422, json={"details": [{"issue": "ORDER_NOT_APPROVED"}]}),
        )
        with pytest.raises(PaymentNotApprovedError):
            await gateway.capture(INTENT)

    @pytest.mark.asyncio
    async def test_transport_errors_exhaust_to_gateway_failed(self, gateway, fake):
        def _boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway._client = httpx.AsyncClient(transport=httpx.MockTransport(_boom))
        try:
            with pytest.raises(GatewayFailedError):
                await gateway.capture(INTENT)
        finally:
            await gateway._client.aclose()

    @pytest.mark.asyncio
    async def test_get_capture_status_for_uncaptured_order(self, gateway, fake):
        fake.on("GET", f"/v2/checkout/orders/{INTENT}", httpx.Response(200, json={"id": INTENT, "status": "APPROVED"}))
        assert await gateway.get_capture_status(INTENT) is None

    @pytest.mark.asyncio
    async def test_get_capture_status_for_unknown_order(self, gateway, fake):
        assert await gateway.get_capture_status("UNKNOWN") is None


class TestToken:
    @pytest.mark.asyncio
    async def test_token_is_cached_between_calls(self, gateway, fake):
        fake.on("GET", f"/v2/checkout/orders/{INTENT}", httpx.Response(200, json=_captured_order()))
        await gateway.get_capture_status(INTENT)
        await gateway.get_capture_status(INTENT)
        assert fake.token_requests == 1

    @pytest.mark.asyncio
    async def test_unauthorized_response_refreshes_token_once(self, gateway, fake):
        """Test: 401 con token cacheado → se renueva y se repite la llamada."""
        fake.on(
            "GET", f"/v2/checkout/orders/{INTENT}",
            httpx.Response(401),
            httpx.Response(200, json=_captured_order()),
        )
        result = await gateway.get_capture_status(INTENT)
        assert result.capture_id == "CAP-1"
        assert fake.token_requests == 2

    @pytest.mark.asyncio
    async def test_rejected_credentials_raise(self, gateway, fake):
        fake.on("POST", "/v1/oauth2/token", httpx.Response(401, json={"error": "invalid_client"}))
        with pytest.raises(GatewayFailedError):
            await gateway.get_capture_status(INTENT)


class TestVerifyWebhook:
    @pytest.mark.asyncio
    async def test_success(self, gateway, fake):
        fake.on(
            "POST", "/v1/notifications/verify-webhook-signature",
            httpx.Response(200, json={"verification_status": "SUCCESS"}),
        )
        assert await gateway.verify_webhook(WEBHOOK_HEADERS, {"id": "WH-EVT"}) is True

    @pytest.mark.asyncio
    async def test_failure_status(self, gateway, fake):
        fake.on(
            "POST", "/v1/notifications/verify-webhook-signature",
            httpx.Response(200, json={"verification_status": "FAILURE"}),
        )
        assert await gateway.verify_webhook(WEBHOOK_HEADERS, {"id": "WH-EVT"}) is False

    @pytest.mark.asyncio
    async def test_missing_headers_fail_closed(self, gateway, fake):
        headers = dict(WEBHOOK_HEADERS)
        headers.pop("PAYPAL-TRANSMISSION-SIG")
        assert await gateway.verify_webhook(headers, {"id": "WH-EVT"}) is False
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_missing_webhook_id_fails_closed(self, fake):
        client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        gw = PayPalGateway(_settings(paypal_webhook_id=None), client=client)
        assert await gw.verify_webhook(WEBHOOK_HEADERS, {"id": "WH-EVT"}) is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_provider_outage_fails_closed(self, gateway, fake):
        fake.on("POST", "/v1/notifications/verify-webhook-signature", httpx.Response(503))
        assert await gateway.verify_webhook(WEBHOOK_HEADERS, {"id": "WH-EVT"}) is False

# Fin del archivo backend/tests/modules/tienda/adapters/test_paypal_gateway.py
